"""
Argroute faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain (resolution, flags, configuration warnings).
- CommandException / CommandWarning: base types that carry a message plus options
  and know how to render themselves with rich.
- ResolutionError family: the fault counterpart of a failed resolution outcome.
  The resolution engine never raises these; Outcome.fault() builds them for
  callers that want the "print usage and exit" behavior.
- FlagError family: raised by FlagSet.parse for malformed or unknown flags.
- trigger(): central entry point to surface any fault (raise, or print and exit in shell mode).

Integration
- In non-shell mode exceptions are raised and warnings go through warnings.warn.
- In shell mode they are printed to stderr via rich and exceptions terminate the
  process with their exit status (1 for resolution faults, 2 for flag faults).
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across argroute (stable identifiers).

    grouping (by high-level domain)
    - resolution (1110x)
      • MISSING_PREARG, MISSING_COMMAND, UNKNOWN_COMMAND, MISSING_REQUIRED_FLAGS,
        TOO_FEW_ARGUMENTS, TOO_MANY_ARGUMENTS
    - flags (1111x)
      • BAD_FLAG_SYNTAX, UNKNOWN_FLAG, FLAG_VALUE_REQUIRED, INVALID_FLAG_VALUE,
        HELP_REQUESTED
    - configuration warnings (1211x)
      • UNREACHABLE_SLOT
    """
    # --- resolution errors (11xxx) ---
    MISSING_PREARG          = 11101
    MISSING_COMMAND         = 11102
    UNKNOWN_COMMAND         = 11103
    MISSING_REQUIRED_FLAGS  = 11104
    TOO_FEW_ARGUMENTS       = 11105
    TOO_MANY_ARGUMENTS      = 11106

    # --- flag errors (11xxx) ---
    BAD_FLAG_SYNTAX         = 11111
    UNKNOWN_FLAG            = 11112
    FLAG_VALUE_REQUIRED     = 11113
    INVALID_FLAG_VALUE      = 11114
    HELP_REQUESTED          = 11115

    # --- warnings (12xxx) ---
    UNREACHABLE_SLOT        = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(fault, styles, title_style, message_style):
    """
    shared rich rendering for exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the message, then " → hint" when a hint is present, then docs if any.
    - fancy: the body is wrapped in a panel titled with the header.
    """
    options = fault.options
    colorful = options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment if colorful else Text(fragment.plain)
        return Text(str(fragment), style if colorful else "")

    code = options.get("code", fault.code)
    header = Text.assemble(
        "[ ",
        text(options.get("prog") or "argroute", styles["prog-name"]),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-----", styles["code"]),
        " | ",
        text(options.get("title", fault.title).title(), styles[title_style]),
        " ]"
    )
    renders = [text(fault.message, styles[message_style])]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styles["hint-arrow"]), text(hint, styles["hint"])))
    if docs := getdoc(code):
        renders.append(text(docs, styles["docs"]))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class CommandException(Exception):
    """
    Base class for every argroute error.

    Subclasses set the class-level defaults `code`, `title` and `status`; any of
    them can be overridden per instance through options. Recognized options:
    prog, command, hint, colorful, fancy, shell, console, status, plus any
    fault-specific payload (flag, value, outcome, ...).
    """
    code = Unset
    title = "command error"
    status = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def command(self):
        """
        Name of the command this fault relates to, or None for program-level faults.
        """
        return self.options.get("command")

    def __rich__(self):
        return _render(self, _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
            "docs": "underline #00E5FF dim",
        }), "error-title", "error-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(self.options.get("status", self.status))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ResolutionError(CommandException):
    """
    Fault form of a failed resolution; options["outcome"] holds the Outcome.
    """
    title = "resolution error"

    @property
    def outcome(self):
        return self.options.get("outcome")


class MissingPreArgError(ResolutionError):
    code = FaultCode.MISSING_PREARG
    title = "missing pre-argument"


class MissingCommandError(ResolutionError):
    code = FaultCode.MISSING_COMMAND
    title = "missing command"


class UnknownCommandError(ResolutionError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"


class MissingRequiredFlagsError(ResolutionError):
    code = FaultCode.MISSING_REQUIRED_FLAGS
    title = "missing required flags"


class TooFewArgumentsError(ResolutionError):
    code = FaultCode.TOO_FEW_ARGUMENTS
    title = "too few arguments"


class TooManyArgumentsError(ResolutionError):
    code = FaultCode.TOO_MANY_ARGUMENTS
    title = "too many arguments"


class FlagError(CommandException):
    """
    Raised by FlagSet.parse; options["command"] is the owning command (None for globals).
    """
    title = "flag error"
    status = 2

    @property
    def flag(self):
        return self.options.get("flag")


class BadFlagSyntaxError(FlagError):
    code = FaultCode.BAD_FLAG_SYNTAX
    title = "bad flag syntax"


class UnknownFlagError(FlagError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"


class FlagValueRequiredError(FlagError):
    code = FaultCode.FLAG_VALUE_REQUIRED
    title = "flag value required"


class InvalidFlagValueError(FlagError):
    code = FaultCode.INVALID_FLAG_VALUE
    title = "invalid flag value"


class HelpRequestedError(FlagError):
    """
    Undeclared -h or -help; shell mode prints the scoped usage and exits with 0.
    """
    code = FaultCode.HELP_REQUESTED
    title = "help requested"
    status = 0


class CommandWarning(Warning):
    """
    Base class for non-fatal argroute diagnostics (configuration hazards).
    """
    code = Unset
    title = "command warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
            "docs": "underline #FFB400 dim",
        }), "warning-title", "warning-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnreachableSlotWarning(CommandWarning):
    code = FaultCode.UNREACHABLE_SLOT
    title = "unreachable argument slot"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via a rich console; otherwise exceptions are
      raised and warnings are emitted through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation lookup for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys are
    FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        return None
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "ResolutionError",
    "MissingPreArgError",
    "MissingCommandError",
    "UnknownCommandError",
    "MissingRequiredFlagsError",
    "TooFewArgumentsError",
    "TooManyArgumentsError",
    "FlagError",
    "BadFlagSyntaxError",
    "UnknownFlagError",
    "FlagValueRequiredError",
    "InvalidFlagValueError",
    "HelpRequestedError",
    "CommandWarning",
    "UnreachableSlotWarning",
    "trigger",
    "getdoc",
)

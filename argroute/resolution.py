"""
Argroute resolution engine: turn an argument vector into a command invocation.

Pipeline (strictly ordered, fails fast)
1. global flags      → the program FlagSet parses the vector; leftovers are the residue.
2. pre-arguments     → skipped only when the registry lets "help" bypass them and the
                       first residue token is exactly "help"; otherwise the first
                       len(preargs) residue tokens are taken, in declaration order.
3. command name      → the next residue token, looked up in the registry.
4. command flags     → a fresh FlagSet named after the command receives the handler's
                       declarations (plus the reserved -h/-help flag while reserved)
                       and parses the tokens after the command name.
5. required flags    → every required name must have been explicitly set.
6. arity             → when the command declares slots, validate() the leftovers.

Result taxonomy (Reason)
- OK               everything above succeeded.
- NO_PREARG        fewer residue tokens than declared pre-arguments.
- NO_COMMAND       pre-arguments satisfied, no token left for the command name.
- INVALID_COMMAND  unknown command name, or a required flag was not given.
- ARG_ERROR        positional arity failed (Outcome.arity is TOO_FEW or TOO_MANY).

The reason alone tells how far parsing progressed; Outcome.code refines it with the
FaultCode used when the outcome is surfaced as a fault.

Flag syntax errors are not part of the taxonomy: FlagSet.parse raises a FlagError
(carrying the owning command, if any) and resolve() lets it propagate.
"""
import difflib
import logging
from enum import Enum

from .arguments import Arity, capacity, validate
from .faults import *
from .flags import FlagSet
from .utils import *

logger = logging.getLogger(__name__)

# Literal token that may bypass pre-arguments (see Registry.help_ignores_preargs).
HELP = "help"


class Reason(Enum):
    """
    Discriminant of a resolution Outcome.
    """
    OK = "ok"
    NO_PREARG = "no-prearg"
    NO_COMMAND = "no-command"
    INVALID_COMMAND = "invalid-command"
    ARG_ERROR = "arg-error"


_FAULTS = {
    FaultCode.MISSING_PREARG: MissingPreArgError,
    FaultCode.MISSING_COMMAND: MissingCommandError,
    FaultCode.UNKNOWN_COMMAND: UnknownCommandError,
    FaultCode.MISSING_REQUIRED_FLAGS: MissingRequiredFlagsError,
    FaultCode.TOO_FEW_ARGUMENTS: TooFewArgumentsError,
    FaultCode.TOO_MANY_ARGUMENTS: TooManyArgumentsError,
}


class Outcome(metaclass=Introspectable):
    """
    Discriminated result of resolve(); truthy only when reason is OK.

    Properties
    - reason: Reason.
    - code: FaultCode detailing a failure (None for OK).
    - command: name of the identified command (None when none was identified,
      including unknown names).
    - matched: the registered Command descriptor, when identified.
    - message: short failure description (None for OK).
    - hint: actionable suggestion for failures, when one exists.
    - arity: Arity of the positional check (OK unless reason is ARG_ERROR).
    - missing: sorted tuple of required flag names that were not given.
    - preargs: mapping pre-argument name → value. None means the value was never read:
      the help bypass skipped pre-arguments, or resolution failed before reaching them.
    - args: positional arguments left after command-flag parsing (the global
      residue when no command is registered at all).
    - flags: the command FlagSet, once command flags were parsed.
    - help: True when the reserved help flag was given.
    """

    __introspectable__ = (
        "reason",
        "code",
        "command",
        "matched",
        "message",
        "hint",
        "arity",
        "missing",
        "preargs",
        "args",
        "flags",
        "help",
    )

    __displayable__ = (
        "reason",
        "command",
        "message",
        "preargs",
        "args",
    )

    def __new__(
            cls,
            reason,
            /,
            code=None,
            command=None,
            matched=None,
            message=None,
            hint=None,
            arity=Arity.OK,
            missing=(),
            preargs=Unset,
            args=(),
            flags=None,
            help=False,
    ):
        if not isinstance(reason, Reason):
            raise TypeError(f"{cls.__typename__} 'reason' must be a reason")
        if (reason is Reason.OK) != (code is None):
            raise ValueError(f"{cls.__typename__} 'code' must be given exactly for failures")

        self = super().__new__(cls)
        self._reason = reason
        self._code = code
        self._command = command
        self._matched = matched
        self._message = message
        self._hint = hint
        self._arity = arity
        self._missing = tuple(missing)
        self._preargs = dict(coalesce(preargs, {}))
        self._args = tuple(args)
        self._flags = flags
        self._help = bool(help)
        return self

    def __bool__(self):
        return self._reason is Reason.OK

    def fault(self, **options):
        """
        Build the ResolutionError matching this outcome (None for OK).

        options are merged into the fault (e.g. prog, colorful, shell).
        """
        if self._reason is Reason.OK:
            return None
        return _FAULTS[self._code](
            self._message,
            **{"command": self._command, "hint": self._hint, "outcome": self} | options
        )


class State(metaclass=Introspectable):
    """
    Result of the latest successful resolution, read by the dispatcher.

    Cleared at the start of every resolution; recorded only for OK outcomes that
    identified a command.
    """

    __introspectable__ = (
        "matched",
        "preargs",
        "args",
        "flags",
        "help",
    )

    def __init__(self):
        self.clear()

    def clear(self):
        self._matched = None
        self._preargs = {}
        self._args = ()
        self._flags = None
        self._help = False

    def record(self, outcome, /):
        self.clear()
        if outcome and outcome.matched is not None:
            self._matched = outcome.matched
            self._preargs = outcome.preargs
            self._args = outcome.args
            self._flags = outcome.flags
            self._help = outcome.help


def declare(registry, command, /, handler=Unset):
    """
    Build the FlagSet of command: the handler's declarations plus, while the registry
    reserves it, a boolean -h/-help flag on whichever of the two names is still free.

    handler defaults to command.handler; pass a copy to declare without rebinding the
    flags the registered handler keeps.

    Returns (flagset, help_flag_or_None).
    """
    flags = FlagSet(command.name, command=command.name)
    if isinstance(declared := coalesce(handler, command.handler).flags(flags), FlagSet):
        flags = declared
    help = None
    if registry.reserve_help_flag and (names := [each for each in ("h", "help") if each not in flags]):
        help = flags.boolean(*names, descr="show usage for this command")
    return flags, help


def _arity_hint(slots):
    minimum, maximum = capacity(slots)
    usage = " ".join(map(str, slots)) or "no arguments"
    if maximum is None:
        return "expects at least %d argument(s): %s" % (minimum, usage)
    if minimum == maximum:
        return "expects exactly %d argument(s): %s" % (minimum, usage)
    return "expects %d to %d argument(s): %s" % (minimum, maximum, usage)


def resolve(registry, flagset, tokens, /):
    """
    Resolve tokens against registry, parsing global flags with flagset.

    Returns an Outcome; never raises for resolution failures. FlagError from either
    flag parse propagates unchanged.
    """
    residue = flagset.parse(list(tokens))
    preargs = dict.fromkeys((each.name for each in registry.preargs), None)
    logger.debug("global flags parsed; residue=%r", residue)

    if not len(registry):
        logger.debug("no commands registered; nothing to resolve")
        return Outcome(Reason.OK, preargs=preargs, args=residue)

    index = 0
    if not (registry.help_bypasses_preargs and residue and residue[0] == HELP):
        index = len(preargs)
        if len(residue) < index:
            logger.debug("expected %d pre-argument(s), got %d", index, len(residue))
            return Outcome(
                Reason.NO_PREARG,
                code=FaultCode.MISSING_PREARG,
                message="expected %d argument(s) before command" % index,
                hint="provide %s before the command" % " ".join("<%s>" % name for name in preargs),
                preargs=preargs,
            )
        preargs.update(zip(preargs, residue))
        logger.debug("pre-arguments read: %r", preargs)
    else:
        logger.debug("pre-arguments bypassed for %r", HELP)

    if len(residue) <= index:
        return Outcome(
            Reason.NO_COMMAND,
            code=FaultCode.MISSING_COMMAND,
            message="missing command",
            hint="add one of: %s" % ", ".join(registry),
            preargs=preargs,
        )

    name = residue[index]
    if (command := registry.lookup(name)) is None:
        logger.debug("command %r is not registered", name)
        suggestions = difflib.get_close_matches(name, list(registry), 3)
        return Outcome(
            Reason.INVALID_COMMAND,
            code=FaultCode.UNKNOWN_COMMAND,
            message="invalid command: %s" % name,
            hint="did you mean %s?" % " or ".join(map(repr, suggestions)) if suggestions else None,
            preargs=preargs,
        )

    flags, help = declare(registry, command)
    args = flags.parse(residue[index + 1:])
    logger.debug("command %r flags parsed; args=%r", name, args)

    if missing := sorted(each for each in command.required if not flags.isset(each)):
        return Outcome(
            Reason.INVALID_COMMAND,
            code=FaultCode.MISSING_REQUIRED_FLAGS,
            command=name,
            matched=command,
            message="%s: missing required flags" % name,
            hint="add %s" % ", ".join("-" + each for each in missing),
            missing=missing,
            preargs=preargs,
            args=args,
            flags=flags,
        )

    if command.slots is not None and not (arity := validate(command.slots, args)):
        return Outcome(
            Reason.ARG_ERROR,
            code=FaultCode.TOO_FEW_ARGUMENTS if arity is Arity.TOO_FEW else FaultCode.TOO_MANY_ARGUMENTS,
            command=name,
            matched=command,
            message="%s: %s" % (name, arity.message),
            hint="%s %s" % (name, _arity_hint(command.slots)),
            arity=arity,
            preargs=preargs,
            args=args,
            flags=flags,
        )

    logger.debug("resolved command %r", name)
    return Outcome(
        Reason.OK,
        command=name,
        matched=command,
        preargs=preargs,
        args=args,
        flags=flags,
        help=help is not None and help.value,
    )


__all__ = (
    "Reason",
    "Outcome",
    "State",
    "declare",
    "resolve",
)

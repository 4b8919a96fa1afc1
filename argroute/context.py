"""
Argroute context: one self-contained command-line program.

A Context owns everything a program needs to route its argument vector:
- registry: the Registry of commands and pre-arguments.
- flags: the program-wide FlagSet (global flags parsed before anything else).
- state: the State of the latest resolution, read by dispatch().

Separate contexts share nothing, so tests and embedded programs can build as many
as they need.

Operations
- resolve(prompt): run the resolution engine; never raises for resolution failures.
- dispatch(): run the matched command's handler (or show its usage when -h was given).
- parse(prompt): resolve, and trigger the matching fault on failure.
- run(prompt): parse then dispatch.
- usage(name): render program usage, or the usage of one command.

Runtime options
- prog: program name used in usage and faults (falls back to __prog__ in __main__,
  then to the basename of sys.argv[0]).
- shell: when True, faults are printed with the scoped usage and the process exits
  (status 1 for resolution faults, 2 for flag faults); otherwise they are raised.
- colorful: enable the rich styles of usage and faults.
- fancy: wrap usage and faults in panels.
- console: rich Console used for usage and faults (stderr by default).

Quick example:
    >>> context = Context("vcs", shell=True)
    >>> @context.command("push", "push a branch")
    ... def push(args):
    ...     print("pushing", args)
    >>> builder = push.builder.arguments("branch", "...")
    >>> context.run(["push", "main", "a", "b"])
    pushing ['main', 'a', 'b']
"""
import logging
import os
import shlex
import sys
from collections.abc import Iterable

from rich.panel import Panel
from rich.text import Text

from . import usage
from .faults import *
from .faults import console as stderr
from .flags import FlagSet
from .registry import Handler, Registry
from .resolution import HELP, State, resolve
from .utils import *

logger = logging.getLogger(__name__)


class _Help(Handler):
    """
    Built-in handler of the "help" command (see Context.help_command).
    """

    def __init__(self, context, /):
        self._context = context

    def run(self, args, /):
        context = self._context
        if len(args) != 1:
            return context.usage()
        if args[0] in context.registry:
            return context.usage(args[0])
        context.trigger(UnknownCommandError(
            "invalid command: %s" % args[0],
            hint="run '%s %s' to list commands" % (context.prog, HELP),
        ))

    def __repr__(self):
        return "help()"


class Context(metaclass=Introspectable):
    """
    A command-line program: registry, global flags, resolution state and the
    options used to surface usage and faults.
    """

    __introspectable__ = (
        "registry",
        "flags",
        "state",
        "shell",
        "colorful",
        "fancy",
    )

    __displayable__ = (
        "prog",
        "registry",
        "shell",
    )

    def __init__(self, prog=Unset, /, *, shell=False, colorful=False, fancy=False, console=Unset):
        if not isinstance(prog, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'prog' must be a string")
        self._prog = prog
        self._registry = Registry()
        self._flags = FlagSet(coalesce(prog, "global"))
        self._state = State()
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._console = console

    @property
    def prog(self):
        """
        Program name: the explicit one, else __prog__ in __main__, else argv[0]'s basename.
        """
        if self._prog is not Unset:
            return self._prog
        if isinstance(name := getattr(__import__("__main__"), "__prog__", None), str):
            return name
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argroute"

    @property
    def console(self):
        return coalesce(self._console, stderr)

    # Registry delegation

    def on(self, name, descr, handler, /):
        return self._registry.on(name, descr, handler)

    def command(self, name=Unset, descr=Unset, /):
        return self._registry.command(name, descr)

    def prearg(self, name, descr="", /):
        return self._registry.prearg(name, descr)

    def help_command(self):
        """
        Register the built-in "help" command; -h is no longer injected into commands.
        """
        return self._registry.help_command(_Help(self))

    def help_ignores_preargs(self):
        self._registry.help_ignores_preargs()

    def clear_preargs(self):
        self._registry.clear_preargs()

    # Operations

    def resolve(self, prompt=Unset, /):
        """
        Resolve prompt and record the result in state.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim.

        Returns the Outcome; FlagError raised by flag parsing propagates.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("resolve() argument must be a string or an iterable of strings")
        else:
            raise TypeError("resolve() argument must be a string or an iterable of strings")

        self._state.clear()
        outcome = resolve(self._registry, self._flags, tokens)
        self._state.record(outcome)
        logger.debug("resolved %r: %s", tokens, outcome.reason.name)
        return outcome

    def dispatch(self):
        """
        Run the command matched by the latest successful resolution.

        Does nothing when no command was matched. When the reserved help flag was
        given the command's usage is shown instead. Handler errors propagate.
        """
        state = self._state
        if state.matched is None:
            return None
        if state.help:
            logger.debug("help flag given for %r", state.matched.name)
            return self.usage(state.matched.name)
        logger.debug("dispatching %r with %r", state.matched.name, state.args)
        return state.matched.handler.run(list(state.args))

    def parse(self, prompt=Unset, /):
        """
        Resolve prompt, triggering the matching fault when resolution fails.

        Flag errors are triggered the same way, scoped to the command they belong to.
        An undeclared -h/-help prints that scoped usage and exits with 0 in shell mode.
        Outside shell mode the fault is raised; in shell mode the process exits.
        Returns the successful Outcome.
        """
        try:
            outcome = self.resolve(prompt)
        except HelpRequestedError as error:
            if not self._shell:
                raise
            self.usage(error.command if error.command in self._registry else Unset)
            sys.exit(0)
        except FlagError as error:
            self.trigger(error)
        if not outcome:
            self.trigger(outcome.fault())
        return outcome

    def run(self, prompt=Unset, /):
        """
        parse() then dispatch(); returns what the handler returned.
        """
        self.parse(prompt)
        return self.dispatch()

    def usage(self, name=Unset, /):
        """
        Print the program usage, or the usage of the command called name.

        Raises KeyError when name is not a registered command.
        """
        if name is Unset:
            renderable = usage.program(self._registry, self._flags, self.prog, colorful=self._colorful)
        else:
            renderable = usage.command(
                self._registry, self._registry[name], self.prog, colorful=self._colorful
            )
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self.prog} help".upper(), " ]"),
                title_align="left",
            )
        self.console.print(renderable)

    def trigger(self, fault, /):
        """
        Surface fault with this context's options.

        In shell mode the usage scoped to the fault is printed first: the usage of
        the command it names when that command is registered, the program usage
        otherwise.
        """
        if self._shell and isinstance(fault, CommandException):
            self.usage(fault.command if fault.command in self._registry else Unset)
        trigger(
            fault,
            prog=self.prog,
            shell=self._shell,
            colorful=self._colorful,
            fancy=self._fancy,
            console=self.console,
        )


__all__ = (
    "Context",
)

"""
Argroute command registry: commands, pre-arguments and help-related switches.

What this module provides
- Handler: base class for command handlers. A handler declares its flags into a
  FlagSet (flags) and executes with its positional arguments (run). Any object with
  those two callables is accepted; subclassing is a convenience.
- Callback: Handler adapter around a plain function (used by Registry.command).
- Command: the registered descriptor (name, descr, handler, required flag names,
  positional slots or None for "no arity checking").
- Builder: fluent configuration scoped to one Command (arguments, requires).
- PreArg: one declared pre-argument (a positional read before the command name).
- Registry: name → Command mapping plus the ordered pre-argument declarations and
  the two help switches (reserve_help_flag, help_bypasses_preargs).

Registration semantics
- Registering a name twice overwrites the first command (last wins). Any string is
  accepted as a name, including "help".
- help_command() registers "help" and frees the per-command -h flag.
- help_ignores_preargs() skips pre-argument consumption when the first residue
  token is exactly "help".

Quick example:
    >>> registry = Registry()
    >>> registry.on("push", "push a branch", handler).arguments("branch", "...").requires("remote")
    >>> registry.prearg("org", "organization")
"""
import inspect

from .arguments import Kind, slot, unreachable
from .faults import UnreachableSlotWarning, trigger
from .utils import *


class Handler:
    """
    Base class for command handlers.

    Subclasses override run(args) and, when the command has flags, flags(flagset),
    keeping the returned Flag handles to read their values in run().
    """

    def flags(self, flagset, /):
        """
        Declare this command's flags into flagset; return the flagset.
        """
        return flagset

    def run(self, args, /):
        raise NotImplementedError


class Callback(Handler):
    """
    Handler built from a plain function taking the positional arguments list.

    Calling the Callback forwards to the wrapped function unchanged.
    """

    def __init__(self, callback, /, declare=Unset):
        if not callable(callback):
            raise TypeError("callback must be callable")
        if declare is not Unset and not callable(declare):
            raise TypeError("callback 'declare' must be callable")
        self._callback = callback
        self._declare = declare
        self.__wrapped__ = callback

    def declare(self, declare, /):
        """
        Register the flag declarer; usable as a decorator.

        The declarer receives the command's FlagSet. Can be set only once.
        """
        if not callable(declare):
            raise TypeError("callback declarer must be callable")
        if self._declare is not Unset:
            raise TypeError("callback declarer cannot be overridden")
        self._declare = declare
        return declare

    def flags(self, flagset, /):
        if self._declare is not Unset:
            self._declare(flagset)
        return flagset

    def run(self, args, /):
        return self._callback(args)

    def __call__(self, *args, **kwargs):
        return self._callback(*args, **kwargs)

    def __repr__(self):
        return f"callback({getattr(self._callback, '__qualname__', self._callback)!s})"


def _is_handler(handler):
    return all(callable(getattr(handler, name, None)) for name in ("flags", "run"))


class Command(metaclass=Introspectable):
    """
    Registered descriptor of one subcommand.

    Properties
    - name: registry key.
    - descr: free text for usage output.
    - handler: the Handler (or duck-typed equivalent).
    - required: frozenset of flag names that must be explicitly given.
    - slots: tuple of Slot, or None when arity is not checked.
    """

    __introspectable__ = (
        "name",
        "descr",
        "handler",
        "required",
        "slots",
    )

    def __new__(cls, name, descr, handler, /):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        if not _is_handler(handler):
            raise TypeError(f"{cls.__typename__} 'handler' must provide flags() and run() methods")

        self = super().__new__(cls)
        self._name = name
        self._descr = descr
        self._handler = handler
        self._required = frozenset()
        self._slots = None
        return self


class Builder:
    """
    Fluent configuration handle returned by Registry.on for one Command.
    """

    def __init__(self, command, /):
        self._command = command

    @property
    def command(self):
        return self._command

    def arguments(self, *patterns):
        """
        Append positional slots parsed from patterns ("name", "[name]", "...").

        Calling it, even without patterns, enables arity checking for the command.
        Unreachable slot orderings are accepted but reported with an
        UnreachableSlotWarning.
        """
        command = self._command
        command._slots = (command._slots or ()) + tuple(map(slot, patterns))

        if indices := unreachable(command._slots):
            names = ", ".join(str(command._slots[index]) for index in indices)
            after = "a variadic" if any(
                each.kind is Kind.VARIADIC for each in command._slots[:indices[0]]
            ) else "an optional"
            trigger(
                UnreachableSlotWarning(
                    "%s: argument(s) %s follow %s slot and cannot be matched reliably" % (command.name, names, after),
                    command=command.name,
                    hint="move variadic and optional slots after mandatory ones",
                ),
                stacklevel=4,
            )
        return self

    def requires(self, *names):
        """
        Add flag names that must be explicitly given for the command to resolve.
        """
        for name in names:
            if not isinstance(name, str):
                raise TypeError("requires() arguments must be strings")
        self._command._required |= frozenset(names)
        return self

    def __repr__(self):
        return f"builder({self._command!r})"


class PreArg(metaclass=Introspectable):
    """
    One positional argument read before the command name.
    """

    __introspectable__ = (
        "name",
        "descr",
    )

    def __new__(cls, name, descr, /):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        self = super().__new__(cls)
        self._name = name
        self._descr = descr
        return self


class Registry(metaclass=Introspectable):
    """
    Commands keyed by name, ordered pre-argument declarations and help switches.

    Properties
    - commands: mapping name → Command (copy).
    - preargs: list of PreArg in declaration order (copy).
    - reserve_help_flag: True until help_command() is called; while True every
      command gets an injected -h/-help flag.
    - help_bypasses_preargs: set by help_ignores_preargs().
    """

    __introspectable__ = (
        "commands",
        "preargs",
        "reserve_help_flag",
        "help_bypasses_preargs",
    )

    def __init__(self):
        self._commands = {}
        self._preargs = []
        self._reserve_help_flag = True
        self._help_bypasses_preargs = False

    def on(self, name, descr, handler, /):
        """
        Register (or overwrite) the command called name and return its Builder.
        """
        self._commands[name] = command = Command(name, descr, handler)
        return Builder(command)

    def command(self, name=Unset, descr=Unset, /):
        """
        Decorator form of on(): register a function taking the arguments list.

        name defaults to the function's __name__ and descr to its docstring. The
        decorated name is bound to the resulting Callback, whose declare() method
        registers a flag declarer and whose builder attribute configures arity.
        """
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@command() must be applied to a callable")
            handler = Callback(callback)
            handler.builder = self.on(
                coalesce(name, getattr(callback, "__name__", None)),
                coalesce(descr, inspect.getdoc(callback) or ""),
                handler,
            )
            return handler

        # Allow bare @registry.command usage.
        if callable(name) and not isinstance(name, str):
            callback, name = name, Unset
            return wrapper(callback)
        return rename(wrapper, "command")

    def help_command(self, handler, /):
        """
        Register the "help" command and stop reserving the per-command -h flag.
        """
        self._reserve_help_flag = False
        return self.on("help", "Displays usage string of commands", handler)

    def help_ignores_preargs(self):
        """
        Skip pre-arguments when the first residue token is exactly "help".
        """
        self._help_bypasses_preargs = True

    def prearg(self, name, descr="", /):
        """
        Declare the next pre-argument; names must be unique.
        """
        prearg = PreArg(name, descr)
        if any(each.name == prearg.name for each in self._preargs):
            raise ValueError(f"{self.__typename__} pre-argument name {prearg.name!r} is already in use")
        self._preargs.append(prearg)
        return prearg

    def clear_preargs(self):
        self._preargs.clear()

    def lookup(self, name, /):
        """
        Return the Command registered under name, or None.
        """
        return self._commands.get(name)

    def __contains__(self, name, /):
        return name in self._commands

    def __getitem__(self, name, /):
        return self._commands[name]

    def __iter__(self):
        """
        Iterate over command names in lexicographical order.
        """
        return iter(sorted(self._commands))

    def __len__(self):
        return len(self._commands)


__all__ = (
    "Handler",
    "Callback",
    "Command",
    "Builder",
    "PreArg",
    "Registry",
)

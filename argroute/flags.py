r"""
Argroute flag context: declare, parse and introspect named flags.

Overview
- Flag: one declared flag (one or more alias names, a converter, a default and a
  current value). Handlers keep the returned Flag and read `.value` when they run.
- FlagSet: an ordered collection of flags scoped to the program (global flags) or to
  one command. It parses a token list, stops at the first non-flag token and leaves
  the rest as positional residue.

Syntax (compatible with the classic single-dash convention)
- '-name' and '--name' are equivalent; '-name=value' and '--name=value' carry an
  inline value.
- Boolean flags never consume the next token. An inline value must be one of
  1 t T TRUE true True 0 f F FALSE false False.
- Value flags take the inline value, otherwise the next token (even when it starts
  with a dash).
- '--' is consumed and terminates flag parsing; '-' alone or any token not starting
  with a dash terminates it without being consumed.

Errors (raised from parse, see argroute.faults)
- BadFlagSyntaxError: '---x', '-=x'.
- UnknownFlagError: name not declared (with close-match suggestions).
- FlagValueRequiredError: value flag at the end of the input.
- InvalidFlagValueError: the converter rejected the value (ValueError/TypeError).
- HelpRequestedError: undeclared '-h' or '-help' (a FlagError with status 0).

Quick example:
    >>> flags = FlagSet("deploy")
    >>> force = flags.boolean("force", "f", descr="skip confirmation")
    >>> replicas = flags.integer("replicas", default=1)
    >>> flags.parse(["-force", "--replicas=3", "prod"])
    ['prod']
    >>> force.value, replicas.value, flags.isset("f")
    (True, 3, True)
"""
import copy
import difflib
import re
from collections import deque

from .faults import *
from .utils import *

_TRUTHS = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSES = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def boolean(text, /):
    """
    Convert a boolean literal into a bool; raise ValueError on anything else.
    """
    if text in _TRUTHS:
        return True
    if text in _FALSES:
        return False
    raise ValueError("parse error")


# Zero values per converter, used when no default is declared and by usage
# rendering to decide whether "(default ...)" is worth showing.
_ZEROS = {boolean: False, str: "", int: 0, float: 0.0}

# Placeholder shown after a value flag's name in usage listings.
_METAVARS = {str: "string", int: "int", float: "float"}


class Flag(metaclass=Introspectable):
    """
    One named flag declared in a FlagSet.

    Properties
    - names: tuple of alias names without dashes; names[0] is the canonical name.
    - type: converter applied to the raw string (boolean for presence-only flags).
    - default: value restored before each parse.
    - descr: help text (None when not given).
    - metavar: value placeholder for usage (None for boolean flags).
    - value: current value, set by FlagSet.parse.
    """

    __introspectable__ = (
        "names",
        "type",
        "default",
        "descr",
        "metavar",
        "value",
    )

    __displayable__ = (
        "names",
        "default",
        "value",
    )

    def __new__(cls, *names, type=str, default=Unset, descr=Unset, metavar=Unset):
        if not names:
            raise TypeError(f"{cls.__typename__} requires at least one name")
        for name in names:
            if not isinstance(name, str):
                raise TypeError(f"{cls.__typename__} names must be strings")
            if not re.fullmatch(r"[^-=\s][^=\s]*", name):
                raise ValueError(f"{cls.__typename__} name {name!r} is not valid (no leading dash, no '=')")
        if len(set(names)) != len(names):
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")

        if type is bool:
            type = boolean
        if not callable(type):
            raise TypeError(f"{cls.__typename__} 'type' must be callable")
        if not isinstance(descr, str | Unset):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")
        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")

        self = super().__new__(cls)
        self._names = tuple(names)
        self._type = type
        self._default = coalesce(default, _ZEROS.get(type))
        self._descr = coalesce(descr) or None
        self._metavar = None if type is boolean else coalesce(metavar, _METAVARS.get(type, "value"))
        self._value = self._default
        return self

    @property
    def name(self):
        """
        Canonical (first declared) name.
        """
        return self._names[0]

    @property
    def boolean(self):
        """
        True for presence-only flags that never consume the following token.
        """
        return self._type is boolean

    @property
    def zero(self):
        """
        True when the default equals the converter's zero value (or there is none).
        """
        return self._default is None or self._default == _ZEROS.get(self._type, None)

    def set(self, text, /):
        """
        Convert text with the flag's converter and store it as the current value.
        """
        self._value = self._type(text)

    def reset(self):
        self._value = self._default


class FlagSet(metaclass=Introspectable):
    """
    A set of flags parsed together, either program-wide or for a single command.

    Parameters
    - name: label used in messages (the program or command name).
    - command: owning command name, None for the program-wide set. Copied into
      every FlagError raised by parse so callers can scope usage output.
    """

    __introspectable__ = (
        "name",
        "command",
        "args",
    )

    def __init__(self, name=Unset, /, command=None):
        if not isinstance(name, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        self._name = coalesce(name)
        self._command = command
        self._flags = {}
        self._actual = set()
        self._args = []

    def option(self, *names, type=str, default=Unset, descr=Unset, metavar=Unset):
        """
        Declare a flag under one or more names and return its Flag handle.

        Raises ValueError when any of the names is already declared in this set.
        """
        flag = Flag(*names, type=type, default=default, descr=descr, metavar=metavar)
        for name in flag.names:
            if name in self._flags:
                raise ValueError(f"{self.__typename__} flag name {name!r} is already in use")
        self._flags.update(dict.fromkeys(flag.names, flag))
        return flag

    def boolean(self, *names, default=False, descr=Unset):
        return self.option(*names, type=boolean, default=default, descr=descr)

    def string(self, *names, default="", descr=Unset, metavar=Unset):
        return self.option(*names, type=str, default=default, descr=descr, metavar=metavar)

    def integer(self, *names, default=0, descr=Unset, metavar=Unset):
        return self.option(*names, type=int, default=default, descr=descr, metavar=metavar)

    def number(self, *names, default=0.0, descr=Unset, metavar=Unset):
        return self.option(*names, type=float, default=default, descr=descr, metavar=metavar)

    def lookup(self, name, /):
        """
        Return the Flag declared under name (any alias), or None.
        """
        return self._flags.get(name)

    def isset(self, name, /):
        """
        True when the flag known as name was explicitly given in the last parse.
        """
        return (flag := self._flags.get(name)) is not None and flag in self._actual

    def visit(self):
        """
        Flags explicitly set by the last parse, in lexicographical order of their names.
        """
        return tuple(sorted(self._actual, key=lambda flag: flag.name))

    def visit_all(self):
        """
        Every declared flag, in lexicographical order of their names.
        """
        return tuple(sorted(set(self._flags.values()), key=lambda flag: flag.name))

    def _fault(self, fault, name, token, suggestions=()):
        hint = Unset
        if suggestions:
            hint = "did you mean %s?" % " or ".join("'-%s'" % suggestion for suggestion in suggestions)
        return copy.replace(fault, command=self._command, flag=name, token=token, hint=coalesce(hint))

    def parse(self, tokens, /):
        """
        Parse tokens against the declared flags and return the leftover tokens.

        Every flag is reset to its default first, so a set can be parsed again.
        """
        for flag in set(self._flags.values()):
            flag.reset()
        self._actual.clear()

        tokens = deque(tokens)
        while tokens:
            token = tokens[0]
            if len(token) < 2 or token[0] != "-":
                break
            tokens.popleft()
            if token == "--":
                break

            name = token[2:] if token[1] == "-" else token[1:]
            if not name or name[0] in "-=":
                raise self._fault(BadFlagSyntaxError("bad flag syntax: %s" % token), name, token)

            name, separator, value = name.partition("=")
            if (flag := self._flags.get(name)) is None:
                if name in ("h", "help"):
                    raise self._fault(HelpRequestedError("help requested"), name, token)
                suggestions = difflib.get_close_matches(name, self._flags.keys(), 3)
                raise self._fault(
                    UnknownFlagError("flag provided but not defined: -%s" % name), name, token, suggestions
                )

            if not separator and flag.boolean:
                value = "true"
            elif not separator:
                if not tokens:
                    raise self._fault(FlagValueRequiredError("flag needs an argument: -%s" % name), name, token)
                value = tokens.popleft()

            try:
                flag.set(value)
            except (ValueError, TypeError) as error:
                kind = "boolean value" if flag.boolean else "value"
                raise self._fault(
                    InvalidFlagValueError("invalid %s %r for flag -%s: %s" % (kind, value, name, error)),
                    name,
                    token,
                ) from None
            self._actual.add(flag)

        self._args = list(tokens)
        return list(self._args)

    def __getitem__(self, name, /):
        try:
            return self._flags[name].value
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name, /):
        return name in self._flags

    def __iter__(self):
        return iter(self.visit_all())

    def __len__(self):
        return len(set(self._flags.values()))


__all__ = (
    "Flag",
    "FlagSet",
    "boolean",
)

r"""
Argroute positional argument slots and arity checks.

Overview
- Kind: how a slot consumes tokens (MANDATORY, OPTIONAL, VARIADIC).
- Slot: one positional rule with a display name and a kind fixed at construction.
- slot(pattern): classify a declaration pattern into a Slot.
    • "..."     → VARIADIC, displayed as "..."
    • "[name]"  → OPTIONAL, displayed as "[name]"
    • "name"    → MANDATORY, displayed as "<name>"
- validate(slots, supplied): walk the slots left to right against the supplied
  tokens and report an Arity (OK, TOO_FEW, TOO_MANY). Pure; never mutates input.
- capacity(slots): (minimum, maximum) token counts accepted by a slot sequence.

Matching rules
- MANDATORY consumes exactly one token; a missing token is TOO_FEW.
- OPTIONAL consumes one token only when any remain (greedy).
- VARIADIC consumes everything that remains.
- Tokens left after the last slot are TOO_MANY.

Ordering hazard
- A VARIADIC slot before other slots, or an OPTIONAL slot before a MANDATORY one,
  is accepted: matching stays greedy, so the later slots are unreachable or
  shadowed. unreachable(slots) reports the offending indices so registration can
  warn about it.

Quick example:
    >>> slots = [slot("branch"), slot("...")]
    >>> [str(each) for each in slots]
    ['<branch>', '...']
    >>> validate(slots, ["main", "a", "b"])
    <Arity.OK: 0>
"""
from enum import Enum, IntEnum

from .utils import *


class Kind(Enum):
    """
    Consumption behavior of a positional slot.
    """
    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    VARIADIC = "variadic"


class Arity(IntEnum):
    """
    Outcome of validate(); truthy only for OK.
    """
    OK = 0
    TOO_FEW = 1
    TOO_MANY = 2

    def __bool__(self):
        return self is Arity.OK

    @property
    def message(self):
        """
        Short user-facing description ("too few arguments", ...); None for OK.
        """
        return {
            Arity.OK: None,
            Arity.TOO_FEW: "too few arguments",
            Arity.TOO_MANY: "too many arguments",
        }[self]


class Slot(metaclass=Introspectable):
    """
    One positional argument rule.

    Properties
    - name: display form used in usage text ("<env>", "[target]", "...").
    - key: bare name without decoration ("env", "target", "...").
    - kind: Kind, derived once from the declared pattern.
    """

    __introspectable__ = (
        "name",
        "key",
        "kind",
    )

    def __new__(cls, key, kind, /):
        if not isinstance(key, str):
            raise TypeError(f"{cls.__typename__} 'key' must be a string")
        if not (key := key.strip()):
            raise ValueError(f"{cls.__typename__} 'key' cannot be empty")
        if not isinstance(kind, Kind):
            raise TypeError(f"{cls.__typename__} 'kind' must be a kind")

        self = super().__new__(cls)
        self._key = key
        self._kind = kind
        self._name = {
            Kind.MANDATORY: "<%s>",
            Kind.OPTIONAL: "[%s]",
            Kind.VARIADIC: "%s",
        }[kind] % key
        return self

    def __str__(self):
        return self._name

    def __eq__(self, other):
        if not isinstance(other, Slot):
            return NotImplemented
        return (self._key, self._kind) == (other._key, other._kind)

    def __hash__(self):
        return hash((self._key, self._kind))


def slot(pattern, /):
    """
    Classify a declaration pattern into a Slot.

    Rules, in priority order: "..." is VARIADIC; "[x]" is OPTIONAL (brackets are
    stripped into Slot.key and kept in Slot.name); anything else is MANDATORY.

    Raises
    - TypeError: pattern is not a string.
    - ValueError: pattern is empty/blank, or an optional pattern has an empty name.
    """
    if not isinstance(pattern, str):
        raise TypeError("slot() argument must be a string")
    if not (pattern := pattern.strip()):
        raise ValueError("slot() argument cannot be empty")

    if pattern == "...":
        return Slot(pattern, Kind.VARIADIC)
    if len(pattern) > 1 and pattern[0] == "[" and pattern[-1] == "]":
        return Slot(pattern[1:-1], Kind.OPTIONAL)
    return Slot(pattern, Kind.MANDATORY)


def validate(slots, supplied, /):
    """
    Match supplied tokens against slots, left to right, and report the Arity.
    """
    remaining = len(supplied)
    for each in slots:
        match each.kind:
            case Kind.MANDATORY:
                if not remaining:
                    return Arity.TOO_FEW
                remaining -= 1
            case Kind.OPTIONAL:
                if remaining:
                    remaining -= 1
            case Kind.VARIADIC:
                remaining = 0
    return Arity.TOO_MANY if remaining else Arity.OK


def capacity(slots, /):
    """
    Return (minimum, maximum) accepted token counts; maximum is None when unbounded.
    """
    minimum = sum(each.kind is Kind.MANDATORY for each in slots)
    if any(each.kind is Kind.VARIADIC for each in slots):
        return minimum, None
    return minimum, len(slots)


def unreachable(slots, /):
    """
    Indices of slots that greedy matching can never (or only ambiguously) reach.

    Every slot after a VARIADIC one is unreachable; a MANDATORY slot after an
    OPTIONAL one is shadowed because the optional slot consumes first.
    """
    indices = []
    variadic = optional = False
    for index, each in enumerate(slots):
        if variadic or (optional and each.kind is Kind.MANDATORY):
            indices.append(index)
        variadic |= each.kind is Kind.VARIADIC
        optional |= each.kind is Kind.OPTIONAL
    return tuple(indices)


__all__ = (
    "Kind",
    "Arity",
    "Slot",
    "slot",
    "validate",
    "capacity",
    "unreachable",
)

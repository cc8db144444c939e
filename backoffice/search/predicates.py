"""
Predicate tree handed from the search engine to a record store.

The engine decides *what* to match; a record store decides *how* to run it.
Field names are always names the entity configuration declared, never raw
request input.
"""

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Eq:
    """field == value"""
    field: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match of ``term`` within ``field``."""
    field: str
    term: str


@dataclass(frozen=True)
class In:
    """field is one of ``values``; an empty tuple matches nothing."""
    field: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class AnyOf:
    """OR of the child predicates; no children matches nothing."""
    predicates: Tuple["Predicate", ...]


@dataclass(frozen=True)
class AllOf:
    """AND of the child predicates; no children matches everything."""
    predicates: Tuple["Predicate", ...]


@dataclass(frozen=True)
class Nothing:
    """Matches no record."""


NOTHING = Nothing()
EVERYTHING = AllOf(())

Predicate = Union[Eq, Contains, In, AnyOf, AllOf, Nothing]


def all_of(*predicates: Predicate) -> Predicate:
    """AND the given predicates, dropping no-op members and collapsing on NOTHING."""
    flat = []
    for predicate in predicates:
        if predicate == EVERYTHING:
            continue
        if isinstance(predicate, Nothing):
            return NOTHING
        flat.append(predicate)
    if len(flat) == 1:
        return flat[0]
    return AllOf(tuple(flat))


def any_of(*predicates: Predicate) -> Predicate:
    flat = [p for p in predicates if not isinstance(p, Nothing)]
    if not flat:
        return NOTHING
    if len(flat) == 1:
        return flat[0]
    return AnyOf(tuple(flat))

"""Typed predicate expressions for catalog queries.

These express filter intent independent of storage. The SQLite adapter in
db/repos/companies_repo.py translates them into parameterised WHERE clauses.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Gte:
    field: str
    value: Any


@dataclass(frozen=True)
class Lte:
    field: str
    value: Any


@dataclass(frozen=True)
class ILike:
    """Case-insensitive substring match; `text` is literal, not a pattern."""

    field: str
    text: str


@dataclass(frozen=True)
class Contains:
    """Array-valued `field` contains `value`."""

    field: str
    value: str


@dataclass(frozen=True)
class InTenant:
    """Company is part of the tenant's catalog."""

    tenant_id: str


@dataclass(frozen=True)
class InList:
    """Company is a member of the tenant's list."""

    list_id: str
    tenant_id: str


@dataclass(frozen=True)
class Or:
    items: Tuple["Predicate", ...]


@dataclass(frozen=True)
class And:
    items: Tuple["Predicate", ...]


Predicate = Union[Eq, In, Gte, Lte, ILike, Contains, InTenant, InList, Or, And]


def describe(pred: Predicate) -> str:
    """Readable one-line rendering for logs and query traces."""
    if isinstance(pred, Eq):
        return f"{pred.field} = {pred.value!r}"
    if isinstance(pred, In):
        return f"{pred.field} IN ({', '.join(repr(v) for v in pred.values)})"
    if isinstance(pred, Gte):
        return f"{pred.field} >= {pred.value!r}"
    if isinstance(pred, Lte):
        return f"{pred.field} <= {pred.value!r}"
    if isinstance(pred, ILike):
        return f"{pred.field} ILIKE %{pred.text}%"
    if isinstance(pred, Contains):
        return f"{pred.field} @> {{{pred.value}}}"
    if isinstance(pred, InTenant):
        return f"tenant = {pred.tenant_id!r}"
    if isinstance(pred, InList):
        return f"list = {pred.list_id!r}"
    if isinstance(pred, Or):
        return "(" + " OR ".join(describe(p) for p in pred.items) + ")"
    if isinstance(pred, And):
        return " AND ".join(describe(p) for p in pred.items)
    raise TypeError(f"Unknown predicate: {pred!r}")

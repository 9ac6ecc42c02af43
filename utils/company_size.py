from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from models.size_range import SizeRange


# Ordered bucket labels offered by the company size filter
COMPANY_SIZE_OPTIONS: Tuple[str, ...] = (
    "1-10 employees",
    "11-50 employees",
    "51-200 employees",
    "201-500 employees",
    "501-1000 employees",
    "1001-5000 employees",
    "5001-10,000 employees",
    "10,001+ employees",
)

_NUMBER = r"\d+(?:,\d{3})*"
_RANGE_RE = re.compile(rf"^({_NUMBER})\s*-\s*({_NUMBER})$")
_PLUS_RE = re.compile(rf"^({_NUMBER})\+$")
_SINGLE_RE = re.compile(rf"^({_NUMBER})$")
_EMPLOYEES_RE = re.compile(r"employees", re.IGNORECASE)


def _to_int(text: str) -> int:
    return int(text.replace(",", ""))


def parse_size_range(text: Optional[str]) -> SizeRange:
    """Parse bucket strings like '1-10 employees' or '10,001+' into a SizeRange.

    Total: malformed input yields the match-everything range {0, unbounded}.
    """
    if not text:
        return SizeRange(min=0, max=None)
    cleaned = _EMPLOYEES_RE.sub("", str(text)).strip()

    m = _RANGE_RE.match(cleaned)
    if m:
        low, high = _to_int(m.group(1)), _to_int(m.group(2))
        if low > high:
            low, high = high, low
        return SizeRange(min=low, max=high)

    m = _PLUS_RE.match(cleaned)
    if m:
        return SizeRange(min=_to_int(m.group(1)), max=None)

    m = _SINGLE_RE.match(cleaned)
    if m:
        num = _to_int(m.group(1))
        return SizeRange(min=num, max=num)

    return SizeRange(min=0, max=None)


def union_size_ranges(ranges: Iterable[SizeRange]) -> Optional[SizeRange]:
    """Smallest single range covering every input range; None for no input."""
    items = list(ranges)
    if not items:
        return None
    low = min(r.min for r in items)
    if any(r.unbounded for r in items):
        return SizeRange(min=low, max=None)
    return SizeRange(min=low, max=max(r.max for r in items))  # type: ignore[type-var]


def _format_number(value: int) -> str:
    return f"{value:,}"


def format_employees_from_selections(selections: List[str]) -> str:
    """Collapse selected bucket labels into one range label.

    ["1-10 employees", "11-50 employees"] -> "1-50 employees"
    Any unbounded selection yields "<min>+ employees".
    """
    if not selections:
        return ""
    if len(selections) == 1:
        return selections[0]

    ranges = [parse_size_range(s) for s in selections if s in COMPANY_SIZE_OPTIONS]
    ranges = [r for r in ranges if r.min > 0]
    combined = union_size_ranges(ranges)
    if combined is None:
        return ""
    if combined.unbounded:
        return f"{_format_number(combined.min)}+ employees"
    return f"{_format_number(combined.min)}-{_format_number(combined.max)} employees"  # type: ignore[arg-type]


def parse_employees_range_to_selections(employees: Optional[str]) -> List[str]:
    """Expand a range label back into the bucket labels it covers.

    "501-10,000 employees" -> ["501-1000 employees", "1001-5000 employees", "5001-10,000 employees"]
    """
    if not employees or not employees.strip():
        return []
    trimmed = employees.strip()
    if trimmed in COMPANY_SIZE_OPTIONS:
        return [trimmed]

    cleaned = _EMPLOYEES_RE.sub("", trimmed).strip()
    if not (_PLUS_RE.match(cleaned) or _RANGE_RE.match(cleaned)):
        return [employees]

    wanted = parse_size_range(cleaned)
    result: List[str] = []
    for option in COMPANY_SIZE_OPTIONS:
        bucket = parse_size_range(option)
        if wanted.unbounded:
            if bucket.min >= wanted.min:
                result.append(option)
        elif bucket.unbounded:
            if bucket.min <= wanted.max:  # type: ignore[operator]
                result.append(option)
        elif bucket.min >= wanted.min and bucket.max <= wanted.max:  # type: ignore[operator]
            result.append(option)
    return result or [trimmed]

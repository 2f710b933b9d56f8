from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

R = TypeVar("R")

Derive = Callable[[R], Optional[int]]


def select_changed(
    records: Iterable[R],
    derive: Derive,
    *,
    cancelled: Optional[Callable[[], bool]] = None,
) -> List[R]:
    """
    Keep the first record and every record whose derived value differs from
    the record right before it. ``records`` must already be in time order.

    None is a value like any other here: None -> None is no change,
    None -> 50 and 50 -> None are changes.

    When ``cancelled`` returns True the scan stops and whatever was kept so far
    is returned.
    """
    out: List[R] = []
    first = True
    previous: Optional[int] = None

    for record in records:
        if cancelled is not None and cancelled():
            break
        value = derive(record)
        if first or value != previous:
            out.append(record)
        previous = value
        first = False

    return out

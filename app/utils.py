from collections.abc import Iterable
from itertools import chain, zip_longest
from typing import TypeVar

T = TypeVar("T")

_MISSING = object()


def parse_year(date: str | None) -> int | None:
    """
    Year from a date string as returned by the providers.

    Accepts "2021-03-04" as well as "2021-03-04T00:00:00+00:00"; returns None
    for empty or unparseable values.
    """
    if not date:
        return None
    try:
        return int(date[:4])
    except ValueError:
        return None


def interleave(*sources: Iterable[T]) -> list[T]:
    """Round-robin merge: first of each source, then second of each, and so on."""
    merged = chain.from_iterable(zip_longest(*sources, fillvalue=_MISSING))
    return [item for item in merged if item is not _MISSING]

"""Small helpers for comparing collections of names."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any


def in_array(elem: Any, arr: Iterable[Any]) -> bool:
    """Return True if ``elem`` is one of the items of ``arr``."""
    return any(e == elem for e in arr)


def has_all_elements(arr1: Sequence[Any], arr2: Iterable[Any]) -> bool:
    """Return True if ``arr1`` holds every element of ``arr2``."""
    return all(in_array(e, arr1) for e in arr2)


def sub(arr1: Iterable[str], arr2: Sequence[str]) -> list[str]:
    """Return the elements of ``arr1`` that are not in ``arr2``, keeping order."""
    return [s for s in arr1 if s not in arr2]


def is_same_string_array(arr1: Sequence[str], arr2: Sequence[str]) -> bool:
    """Return True if both sequences have the same length and every item of
    ``arr1`` appears in ``arr2``, regardless of order."""
    if len(arr1) != len(arr2):
        return False
    return all(s in arr2 for s in arr1)
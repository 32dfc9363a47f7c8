"""Fresh variable allocation for reified facts."""

from __future__ import annotations

import itertools
from typing import Iterable

from veritrace.pattern.model import Variable


class FreshVariableAllocator:
    """Hands out variable names never used before within one reconstruction.

    Names are ``<prefix><n>`` with n counting up from ``start``. Names in
    ``reserved`` (typically every variable already present in the answer
    tree) are skipped so a fresh fact can never alias a query variable.
    One allocator lives for exactly one top-level reconstruction.
    """

    def __init__(self, prefix: str = "f", start: int = 0, reserved: Iterable[str] = ()) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)
        self._reserved = set(reserved)
        self._issued = 0

    def next(self) -> Variable:
        while True:
            name = f"{self._prefix}{next(self._counter)}"
            if name not in self._reserved:
                break
        self._reserved.add(name)
        self._issued += 1
        return Variable(name)

    def reserve(self, names: Iterable[str]) -> None:
        self._reserved.update(names)

    @property
    def issued(self) -> int:
        return self._issued

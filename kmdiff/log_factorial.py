"""Natural logarithm of factorials, with a precomputed table."""

from __future__ import annotations

import math


def log_factorial(k: int) -> float:
    """Return log(k!) by summing logarithms from k down to 2."""
    result = 0.0
    while k > 1:
        result += math.log(k)
        k -= 1
    return result


class LogFactorialTable:
    """Table of log(k!) for k in [0, size); larger k are computed on demand."""

    def __init__(self, size: int) -> None:
        self._table = [log_factorial(k) for k in range(size)]

    def __getitem__(self, k: int) -> float:
        if k < 0:
            raise IndexError(f"negative index {k}")
        if k < len(self._table):
            return self._table[k]
        return log_factorial(k)

    def __len__(self) -> int:
        return len(self._table)
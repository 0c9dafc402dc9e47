"""Multiple-testing corrections applied to k-mer p-values."""

from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod

_SIZE_T_MODULUS = 2**64


class CorrectionType(enum.IntEnum):
    """Kinds of significance correction."""

    NOTHING = 0
    BONFERRONI = 1
    BENJAMINI = 2
    SIDAK = 3
    HOLM = 4


def correction_type_str(correction_type: CorrectionType) -> str:
    """Return the upper-case name of a correction type, or "" if unknown."""
    try:
        return CorrectionType(correction_type).name
    except ValueError:
        return ""


def _fdiv(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics for a zero denominator."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        sign = math.copysign(1.0, numerator) * math.copysign(1.0, denominator)
        return math.copysign(math.inf, sign)
    return numerator / denominator


class Corrector(ABC):
    """Decides, one p-value at a time, whether a k-mer stays significant."""

    correction_type: CorrectionType = CorrectionType.NOTHING
    name: str = ""

    @abstractmethod
    def apply(self, pvalue: float) -> bool:
        """Return True when the p-value passes the corrected threshold."""


class Bonferroni(Corrector):
    """Keeps p-values below threshold / total."""

    correction_type = CorrectionType.BONFERRONI
    name = "bonferroni"

    def __init__(self, threshold: float, total: int) -> None:
        self.threshold = threshold
        self.total = total

    def apply(self, pvalue: float) -> bool:
        return pvalue < _fdiv(self.threshold, self.total)


class Benjamini(Corrector):
    """Benjamini-Hochberg step-up; expects p-values in increasing order."""

    correction_type = CorrectionType.BENJAMINI
    name = "benjamini"

    def __init__(self, fdr: float, total: int) -> None:
        self.fdr = fdr
        self.total = total
        self.rank = 1

    def apply(self, pvalue: float) -> bool:
        if pvalue < _fdiv(self.rank, float(self.total)) * self.fdr:
            self.rank += 1
            return True
        return False


class Sidak(Corrector):
    """Keeps p-values below 1 - (1 - threshold) ** (1 / total)."""

    correction_type = CorrectionType.SIDAK
    name = "sidak"

    def __init__(self, threshold: float, total: int) -> None:
        self.threshold = threshold
        self.total = total

    def apply(self, pvalue: float) -> bool:
        exponent = _fdiv(1.0, self.total)
        try:
            limit = 1 - math.pow(1 - self.threshold, exponent)
        except (OverflowError, ValueError):
            limit = math.nan
        return pvalue < limit


class Holm(Corrector):
    """Holm step-down; expects p-values in increasing order."""

    correction_type = CorrectionType.HOLM
    name = "holm"

    def __init__(self, threshold: float, total: int) -> None:
        self.threshold = threshold
        self.total = total

    def apply(self, pvalue: float) -> bool:
        limit = _fdiv(self.threshold, self.total)
        self.total = (self.total - 1) % _SIZE_T_MODULUS
        return pvalue < limit


class BasicThreshold(Corrector):
    """Keeps p-values below a fixed threshold."""

    correction_type = CorrectionType.NOTHING
    name = "threshold"

    def __init__(self, threshold: float) -> None:
        self.threshold = threshold

    def apply(self, pvalue: float) -> bool:
        return pvalue < self.threshold


def make_corrector(correction_type: CorrectionType, threshold: float, kmers: int) -> Corrector:
    """Build the corrector matching a correction type."""
    if correction_type == CorrectionType.BONFERRONI:
        return Bonferroni(threshold, kmers)
    if correction_type == CorrectionType.SIDAK:
        return Sidak(threshold, kmers)
    if correction_type == CorrectionType.BENJAMINI:
        return Benjamini(threshold, kmers)
    if correction_type == CorrectionType.HOLM:
        return Holm(threshold, kmers)
    return BasicThreshold(threshold)
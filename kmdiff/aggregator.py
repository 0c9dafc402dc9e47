"""Gather per-partition test results, correct them and write significant k-mers."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from .accumulator import Accumulator
from .correction import CorrectionType, Corrector
from .model import Significance

CONTROL_OUTPUT = "control_kmers.fasta"
CASE_OUTPUT = "case_kmers.fasta"


@dataclass(frozen=True)
class SignificantKmer:
    """A k-mer with the outcome of its statistical test."""

    kmer: str
    pvalue: float
    sign: Significance
    mean_control: float = 0.0
    mean_case: float = 0.0
    counts_ratio: tuple[float, ...] = field(default=(), compare=False)


def _format_number(value: float) -> str:
    """Shortest text for a number, without a trailing ".0" on whole values."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        if abs(value) < 1e16:
            return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def write_kmers(records: Iterable[SignificantKmer], out_path: str | Path) -> int:
    """Write k-mers as FASTA records and return how many were written."""
    count = 0
    with open(out_path, "w", encoding="ascii") as out:
        for record in records:
            name = (
                f"{count}_pval={record.pvalue:g}"
                f"_control={int(record.mean_control)}"
                f"_case={_format_number(record.mean_case)}"
            )
            out.write(f">{name}\n{record.kmer}\n")
            count += 1
    return count


def _split_by_sign(
    records: Iterable[SignificantKmer],
) -> tuple[list[SignificantKmer], list[SignificantKmer]]:
    controls: list[SignificantKmer] = []
    cases: list[SignificantKmer] = []
    for record in records:
        (controls if record.sign == Significance.CONTROL else cases).append(record)
    return controls, cases


class Aggregator:
    """Keeps k-mers that pass a stateless corrector, partition by partition."""

    def __init__(
        self,
        accumulators: Sequence[Accumulator[SignificantKmer]],
        corrector: Corrector,
        nb_partitions: int,
        output_dir: str | Path,
        nb_threads: int = 1,
        progress: Callable[[], None] | None = None,
    ) -> None:
        self.accumulators = accumulators
        self.corrector = corrector
        self.nb_partitions = nb_partitions
        self.output_dir = Path(output_dir)
        self.nb_threads = nb_threads if nb_threads >= 2 else 1
        self.progress = progress
        self.control_count = 0
        self.case_count = 0

    @property
    def control_path(self) -> Path:
        return self.output_dir / CONTROL_OUTPUT

    @property
    def case_path(self) -> Path:
        return self.output_dir / CASE_OUTPUT

    def _tick(self) -> None:
        if self.progress is not None:
            self.progress()

    def _filter_partition(
        self, accumulator: Accumulator[SignificantKmer]
    ) -> tuple[list[SignificantKmer], list[SignificantKmer]]:
        result = _split_by_sign(k for k in accumulator if self.corrector.apply(k.pvalue))
        self._tick()
        return result

    def _write(
        self, controls: Iterable[SignificantKmer], cases: Iterable[SignificantKmer]
    ) -> None:
        self.control_count = write_kmers(controls, self.control_path)
        self.case_count = write_kmers(cases, self.case_path)

    def run(self) -> None:
        """Filter every partition and write the control and case outputs."""
        partitions = list(self.accumulators[: self.nb_partitions])
        with ThreadPoolExecutor(max_workers=self.nb_threads) as pool:
            results = list(pool.map(self._filter_partition, partitions))
        self._write(
            (k for controls, _ in results for k in controls),
            (k for _, cases in results for k in cases),
        )

    def counts(self) -> tuple[int, int]:
        """Number of control and case k-mers written by the last run."""
        return self.control_count, self.case_count


class SortedAggregator(Aggregator):
    """Applies an order-dependent corrector to all k-mers by increasing p-value."""

    def _collect_partition(
        self, accumulator: Accumulator[SignificantKmer]
    ) -> list[SignificantKmer]:
        result = list(accumulator)
        self._tick()
        return result

    def run(self) -> None:
        """Sort all k-mers by p-value, keep them until the corrector rejects one."""
        partitions = list(self.accumulators[: self.nb_partitions])
        with ThreadPoolExecutor(max_workers=self.nb_threads) as pool:
            collected = [k for part in pool.map(self._collect_partition, partitions) for k in part]
        collected.sort(key=lambda k: k.pvalue)

        kept: list[SignificantKmer] = []
        for record in collected:
            if not self.corrector.apply(record.pvalue):
                break
            kept.append(record)
        self._write(*_split_by_sign(kept))


def make_aggregator(
    accumulators: Sequence[Accumulator[SignificantKmer]],
    corrector: Corrector,
    nb_partitions: int,
    output_dir: str | Path,
    nb_threads: int,
) -> Aggregator:
    """Pick the aggregator suited to the corrector's correction type."""
    kind = corrector.correction_type
    if kind in (CorrectionType.NOTHING, CorrectionType.BONFERRONI, CorrectionType.SIDAK):
        return Aggregator(accumulators, corrector, nb_partitions, output_dir, nb_threads)
    if kind in (CorrectionType.BENJAMINI, CorrectionType.HOLM):
        return SortedAggregator(accumulators, corrector, nb_partitions, output_dir, nb_threads)
    raise ValueError(f"unsupported correction type: {kind!r}")
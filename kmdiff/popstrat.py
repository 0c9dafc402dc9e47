"""Sampling of k-mer presence profiles into EIGENSTRAT input files."""

from __future__ import annotations

import os
import random
import threading
from collections.abc import Iterable


def _open_for_writing(path: str | os.PathLike[str]):
    try:
        return open(path, "w", encoding="ascii")
    except OSError as exc:
        raise OSError(f"Unable to write at {path}.") from exc


class EigGenoFile:
    """Genotype file: one line per k-mer, one presence flag per sample."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        self._out = _open_for_writing(path)

    def push(self, controls: Iterable[int], cases: Iterable[int]) -> None:
        """Write the presence profile of one k-mer."""
        flags = [*controls, *cases]
        self._out.write("".join("1\t" if c > 0 else "0\t" for c in flags) + "\n")

    def close(self) -> None:
        self._out.close()

    def __enter__(self) -> EigGenoFile:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EigSnpFile:
    """SNP file: one numbered pseudo-marker per sampled k-mer."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = path
        self._out = _open_for_writing(path)
        self.count = 0

    def push(self) -> None:
        """Write the next marker line."""
        self._out.write(f"{self.count}\t1\t0.0\t0\n")
        self.count += 1

    def close(self) -> None:
        self._out.close()

    def __enter__(self) -> EigSnpFile:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class Sampler:
    """Keeps a random fraction of k-mers for the population PCA.

    A seed of 0 means the generator's default seed, so runs stay reproducible.
    """

    _DEFAULT_SEED = 1

    def __init__(
        self, geno: EigGenoFile, snp: EigSnpFile, fraction: float, seed: int = 0
    ) -> None:
        self.geno = geno
        self.snp = snp
        self.fraction = fraction
        self._rng = random.Random(seed if seed else self._DEFAULT_SEED)
        self._lock = threading.Lock()

    def should_sample(self) -> bool:
        """Draw once; True with probability equal to the fraction."""
        return self._rng.random() < self.fraction

    def sample(self, controls: Iterable[int], cases: Iterable[int]) -> bool:
        """Record the k-mer if it is drawn; return whether it was."""
        with self._lock:
            if not self.should_sample():
                return False
            self.geno.push(controls, cases)
            self.snp.push()
            return True
"""Options of the count and diff commands and their persistence."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

from .correction import CorrectionType, correction_type_str

# threshold, cutoff, correction, pop_correction, kmer_pca, npc
_OPT_LAYOUT = struct.Struct("<ddi?dQ")


class Command(enum.Enum):
    """Sub-commands of the program."""

    DIFF = 0
    COUNT = 1
    INFOS = 2
    POPSIM = 3
    CALL = 4


def _fmt(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _records(pairs) -> str:
    return "".join(f"{name}={_fmt(value)}," for name, value in pairs)


@dataclass
class KmdiffOptions:
    """Options shared by every command."""

    verbosity: str = ""
    nb_threads: int = 1

    def global_display(self) -> str:
        return "Options: " + _records(
            [("verbosity", self.verbosity), ("nb_threads", self.nb_threads)]
        )


@dataclass
class CountOptions(KmdiffOptions):
    """Options of the count command."""

    file: str = ""
    dir: str = ""
    kmer_size: int = 0
    abundance_min: int = 0
    recurrence_min: int = 0
    memory: int = 0
    minimizer_type: int = 0
    minimizer_size: int = 0
    repartition_type: int = 0
    nb_partitions: int = 0

    def display(self) -> str:
        names = (
            "file", "dir", "kmer_size", "abundance_min", "recurrence_min",
            "memory", "minimizer_type", "minimizer_size", "repartition_type",
            "nb_partitions",
        )
        return self.global_display() + _records(
            (name, getattr(self, name)) for name in names
        )


@dataclass
class DiffOptions(KmdiffOptions):
    """Options of the diff command."""

    kmtricks_dir: str = ""
    output_directory: str = ""
    nb_controls: int = 0
    nb_cases: int = 0
    threshold: float = 0.0
    cutoff: float = 0.0
    correction: CorrectionType = CorrectionType.NOTHING
    in_memory: bool = False
    cpr: bool = False
    kff: bool = False

    model_lib_path: str = ""
    model_config: str = ""

    pop_correction: bool = False
    kmer_pca: float = 0.0
    ploidy: int = 0
    is_diploid: bool = False
    npc: int = 0
    covariates: str = ""
    gender: str = ""

    learning_rate: float = 0.0
    max_iteration: int = 0
    epsilon: float = 0.0
    stand: bool = False
    irls: bool = False

    keep_tmp: bool = False

    seed: int = 0
    log_size: int = 0

    total_kmers: int = 0

    def display(self) -> str:
        pairs = [
            ("kmtricks_dir", self.kmtricks_dir),
            ("output_directory", self.output_directory),
            ("nb_controls", self.nb_controls),
            ("nb_cases", self.nb_cases),
            ("threshold", float(self.threshold)),
            ("cutoff", float(self.cutoff)),
            ("correction_type_str(correction)", correction_type_str(self.correction)),
            ("in_memory", self.in_memory),
            ("kff", self.kff),
            ("pop_correction", self.pop_correction),
            ("kmer_pca", float(self.kmer_pca)),
            ("ploidy", self.ploidy),
            ("is_diploid", self.is_diploid),
            ("npc", self.npc),
            ("covariates", self.covariates),
            ("gender", self.gender),
            ("learning_rate", float(self.learning_rate)),
            ("max_iteration", self.max_iteration),
            ("epsilon", float(self.epsilon)),
            ("stand", self.stand),
            ("seed", self.seed),
        ]
        return self.global_display() + _records(pairs)


def dump_opt(opt: DiffOptions, path: str) -> None:
    """Write the options that decide which steps must be redone."""
    data = _OPT_LAYOUT.pack(
        float(opt.threshold),
        float(opt.cutoff),
        int(opt.correction),
        bool(opt.pop_correction),
        float(opt.kmer_pca),
        int(opt.npc),
    )
    with open(path, "wb") as stream:
        stream.write(data)


def load_opt(path: str) -> DiffOptions:
    """Read options written by dump_opt."""
    with open(path, "rb") as stream:
        data = stream.read(_OPT_LAYOUT.size)
    if len(data) != _OPT_LAYOUT.size:
        raise ValueError(f"{path}: truncated options file")
    threshold, cutoff, correction, pop_correction, kmer_pca, npc = _OPT_LAYOUT.unpack(data)
    return DiffOptions(
        threshold=threshold,
        cutoff=cutoff,
        correction=CorrectionType(correction),
        pop_correction=pop_correction,
        kmer_pca=kmer_pca,
        npc=npc,
    )


def compare_opt(opt: DiffOptions, prev: DiffOptions) -> int:
    """Return a bit mask of the steps to redo.

    Bit 0: statistical test, bit 1: population correction,
    bit 2: significance correction.
    """
    r = 0
    if opt.threshold != prev.threshold or opt.cutoff != prev.cutoff:
        r |= 0b1
    if prev.pop_correction and opt.pop_correction:
        if opt.kmer_pca != prev.kmer_pca:
            r |= 0b11
        if opt.npc != prev.npc:
            r |= 0b10
    if not prev.pop_correction and opt.pop_correction:
        r |= 0b11
    if opt.correction != prev.correction:
        r |= 0b100
    if prev.pop_correction and not opt.pop_correction:
        r |= 0b100
    return r
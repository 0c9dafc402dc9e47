"""Command-line interface: parse sub-commands into option objects."""

from __future__ import annotations

import argparse
import logging
import os
import platform
import re
import sys
from collections.abc import Callable, Sequence

from .correction import CorrectionType
from .options import Command, CountOptions, DiffOptions, KmdiffOptions

VERSION = "1.1.0"
PROGRAM = "kmdiff"
DESCRIPTION = "Differential k-mer analysis."

MIN_KMER_SIZE = 8
MAX_KMER_SIZE = 127

_VERBOSITY = ("debug", "info", "warning", "error")
_CORRECTIONS = {
    "bonferroni": CorrectionType.BONFERRONI,
    "benjamini": CorrectionType.BENJAMINI,
    "sidak": CorrectionType.SIDAK,
    "holm": CorrectionType.HOLM,
}
_CUTOFF_HELP = (
    "Divide the significance threshold by N. Since a large number of k-mers "
    "are tested, k-mers with p-values too close to the significance threshold "
    "will not pass the last steps of correction. It allows to discard some "
    "k-mers a bit earlier and thus save space and time."
)

_log = logging.getLogger(__name__)


class _Parser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _number(value: str) -> int:
    if not re.fullmatch(r"\d+", value.strip()):
        raise argparse.ArgumentTypeError(f"{value}: not a number")
    return int(value)


def _int_range(low: int, high: int) -> Callable[[str], int]:
    def check(value: str) -> int:
        try:
            number = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{value}: not a number") from None
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"{value}: not in range [{low}, {high}]")
        return number

    return check


def _float_range(low: float, high: float) -> Callable[[str], float]:
    def check(value: str) -> float:
        try:
            number = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"{value}: not a number") from None
        if not low <= number <= high:
            raise argparse.ArgumentTypeError(f"Not in range [{low}, {high}]")
        return number

    return check


def _existing_file(value: str) -> str:
    if not os.path.isfile(value):
        raise argparse.ArgumentTypeError(f"{value}: file not found")
    return value


def _kmtricks_dir(value: str) -> str:
    if not os.path.isdir(value):
        raise argparse.ArgumentTypeError(f"{value}: directory not found")
    if not os.path.exists(os.path.join(value, "kmtricks.fof")):
        raise argparse.ArgumentTypeError(
            f"-d/--km-run {value} : Not a kmtricks runtime directory."
        )
    return value


def _significance(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"-s/--significance {value}: Not a number!"
        ) from None
    if number < 0.0 or number > 0.5:
        raise argparse.ArgumentTypeError("Not in range [0.0, 0.5]")
    return number


def _add_common(cmd: argparse.ArgumentParser) -> None:
    group = cmd.add_argument_group("common")
    group.add_argument(
        "-t", "--threads", type=_number, default=os.cpu_count() or 1,
        metavar="INT", help="number of threads.",
    )
    group.add_argument(
        "--version", action="version", version=f"{PROGRAM} {VERSION}",
        help="show version and exit.",
    )
    group.add_argument(
        "-v", "--verbose", choices=_VERBOSITY, default="info", metavar="STR",
        help="Verbosity level [debug|info|warning|error].",
    )


def _add_count(subparsers) -> None:
    cmd = subparsers.add_parser("count", help="Count k-mers with kmtricks.")
    cmd.add_argument(
        "-f", "--file", type=_existing_file, required=True, metavar="FILE",
        help="fof that contains path of read files",
    )
    cmd.add_argument("-d", "--run-dir", required=True, metavar="DIR", help="output directory.")
    cmd.add_argument(
        "-k", "--kmer-size", type=_int_range(MIN_KMER_SIZE, MAX_KMER_SIZE), default=31,
        metavar="INT", help=f"size of k-mers [{MIN_KMER_SIZE}, {MAX_KMER_SIZE}]",
    )
    cmd.add_argument(
        "-c", "--hard-min", type=_number, default=1, metavar="INT",
        help="min abundance to keep a k-mer",
    )
    cmd.add_argument(
        "-r", "--recurrence-min", type=_number, default=1, metavar="INT",
        help="min recurrence to keep a k-mer",
    )
    tweaks = cmd.add_argument_group("advanced performance tweaks")
    tweaks.add_argument(
        "--minimizer-type", type=_int_range(0, 1), default=0, metavar="INT",
        help="minimizer type (0=lexi, 1=freq)",
    )
    tweaks.add_argument(
        "--minimizer-size", type=_number, default=10, metavar="INT", help="size of minimizer"
    )
    tweaks.add_argument(
        "--repartition-type", type=_int_range(0, 1), default=0, metavar="INT",
        help="minimizer repartition (0=unordered, 1=ordered)",
    )
    tweaks.add_argument(
        "--nb-partitions", type=_number, default=0, metavar="INT",
        help="number of partitions (0=auto)",
    )
    _add_common(cmd)


def _add_diff(subparsers) -> None:
    cmd = subparsers.add_parser("diff", help="Differential k-mers analysis.")
    cmd.add_argument(
        "-d", "--km-run", type=_kmtricks_dir, required=True, metavar="DIR",
        help="kmtricks run directory.",
    )
    cmd.add_argument(
        "-o", "--output-dir", default="./kmdiff_output", metavar="DIR", help="output directory."
    )
    cmd.add_argument(
        "-1", "--nb-controls", type=_number, required=True, metavar="INT",
        help="number of controls.",
    )
    cmd.add_argument(
        "-2", "--nb-cases", type=_number, required=True, metavar="INT", help="number of cases."
    )
    cmd.add_argument(
        "-s", "--significance", type=_significance, default=0.05, metavar="FLOAT",
        help="significance threshold.",
    )
    cmd.add_argument("-u", "--cutoff", type=_number, default=100000, metavar="INT", help=_CUTOFF_HELP)
    cmd.add_argument(
        "-c", "--correction", choices=[*_CORRECTIONS, "disabled"], default="bonferroni",
        metavar="STR", help="significance correction. (bonferroni|benjamini|sidak|holm|disabled)",
    )
    cmd.add_argument(
        "-f", "--kff-output", action="store_true", help="output significant k-mers in kff format."
    )
    cmd.add_argument("-m", "--in-memory", action="store_true", help="in-memory correction.")
    cmd.add_argument("-r", "--cpr", action="store_true", help=argparse.SUPPRESS)
    cmd.add_argument("--keep-tmp", action="store_true", help="keep tmp files.")

    pop = cmd.add_argument_group("population stratification")
    pop.add_argument(
        "--pop-correction", action="store_true",
        help="apply correction for population stratification.",
    )
    pop.add_argument(
        "--gender", type=_existing_file, default=None, metavar="FILE",
        help="gender file, one sample per line with the id and the gender (M,F,U), space-separated.",
    )
    pop.add_argument(
        "--kmer-pca", type=_float_range(0.0, 0.05), default=0.001, metavar="FLOAT",
        help="proportion of k-mers used for PCA (in [0.0, 0.05]).",
    )
    pop.add_argument("--ploidy", type=_number, default=2, metavar="INT", help="ploidy level.")
    pop.add_argument(
        "--n-pc", type=_int_range(2, 10), default=2, metavar="INT",
        help="number of principal components (in [2, 10]).",
    )
    pop.add_argument(
        "--covariates", type=_existing_file, default=None, metavar="FILE",
        help=argparse.SUPPRESS,
    )

    hidden = argparse.SUPPRESS
    cmd.add_argument("--learning-rate", type=_float_range(0.0, 1.0), default=0.0, help=hidden)
    cmd.add_argument("--max-iteration", type=_number, default=0, help=hidden)
    cmd.add_argument("--epsilon", type=float, default=0.0, help=hidden)
    cmd.add_argument("--stand", action="store_true", help=hidden)
    cmd.add_argument("--irls", action="store_true", help=hidden)
    cmd.add_argument("--random-seed", type=int, default=0, help=hidden)
    cmd.add_argument("--log-factorial", type=int, default=10000, help=hidden)
    _add_common(cmd)


def build_parser() -> argparse.ArgumentParser:
    """Build the parser with the count, diff and infos sub-commands."""
    parser = _Parser(prog=PROGRAM, description=DESCRIPTION)
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.add_parser("infos", help="Show build infos.")
    _add_count(subparsers)
    _add_diff(subparsers)
    return parser


def _count_options(ns: argparse.Namespace) -> CountOptions:
    return CountOptions(
        verbosity=ns.verbose,
        nb_threads=ns.threads,
        file=ns.file,
        dir=ns.run_dir,
        kmer_size=ns.kmer_size,
        abundance_min=ns.hard_min,
        recurrence_min=ns.recurrence_min,
        minimizer_type=ns.minimizer_type,
        minimizer_size=ns.minimizer_size,
        repartition_type=ns.repartition_type,
        nb_partitions=ns.nb_partitions,
    )


def _diff_options(ns: argparse.Namespace) -> DiffOptions:
    if ns.correction in ("benjamini", "holm"):
        _log.warning(
            "-c/--correction %s: all significants k-mers will live in memory.", ns.correction
        )
    if ns.in_memory:
        _log.warning("-m/--in-memory: all significants k-mers will live in memory.")
    return DiffOptions(
        verbosity=ns.verbose,
        nb_threads=ns.threads,
        kmtricks_dir=ns.km_run,
        output_directory=ns.output_dir,
        nb_controls=ns.nb_controls,
        nb_cases=ns.nb_cases,
        threshold=ns.significance,
        cutoff=float(ns.cutoff),
        correction=_CORRECTIONS.get(ns.correction, CorrectionType.NOTHING),
        in_memory=ns.in_memory,
        cpr=ns.cpr,
        kff=ns.kff_output,
        pop_correction=ns.pop_correction,
        kmer_pca=ns.kmer_pca,
        ploidy=ns.ploidy,
        is_diploid=ns.ploidy == 2,
        npc=ns.n_pc,
        covariates=ns.covariates or "",
        gender=ns.gender or "",
        learning_rate=ns.learning_rate,
        max_iteration=ns.max_iteration,
        epsilon=ns.epsilon,
        stand=ns.stand,
        irls=ns.irls,
        keep_tmp=ns.keep_tmp,
        seed=ns.random_seed,
        log_size=ns.log_factorial,
    )


def parse_args(argv: Sequence[str] | None = None) -> tuple[Command, KmdiffOptions]:
    """Parse arguments (without the program name) into a command and its options.

    A leading help or version request, and any parse error, exits with status 1.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if args and args[0] in ("--help", "-h"):
        parser.print_help(sys.stderr)
        raise SystemExit(1)
    if args and args[0] in ("--version", "-v"):
        print(f"{PROGRAM} {VERSION}", file=sys.stderr)
        raise SystemExit(1)

    ns = parser.parse_args(args)
    if ns.command == "diff":
        return Command.DIFF, _diff_options(ns)
    if ns.command == "count":
        return Command.COUNT, _count_options(ns)
    return Command.INFOS, CountOptions()


def _infos() -> str:
    lines = [
        "- HOST -",
        f"run host: {platform.system()} {platform.release()}",
        "- BUILD -",
        f"python: {platform.python_version()}",
        f"max kmer size: {MAX_KMER_SIZE}",
        "",
        "- VERSION -",
        f"{PROGRAM}: {VERSION}",
    ]
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse the command line and report the resulting settings."""
    command, options = parse_args(argv)
    level = (options.verbosity or "info").upper()
    logging.basicConfig(level=getattr(logging, level), format="[%(levelname)s] %(message)s")

    if command is Command.INFOS:
        print(_infos(), file=sys.stderr)
    else:
        print(options.display())
    return 0
"""Reading the settings of a k-mer counting run directory."""

from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigError(Exception):
    """Raised when a run directory does not hold a usable configuration."""


@dataclass
class KmtricksConfig:
    """Settings of a counting run."""

    kmer_size: int = 0
    abundance_min: int = 0
    nb_partitions: int = 0


def get_kmtricks_config(run_dir: str) -> KmtricksConfig:
    """Load k-mer size and abundance from the count options file and the
    number of partitions from the ``counts`` directory."""
    config = KmtricksConfig()
    config_path = f"{run_dir}/kmdiff-count.opt"

    try:
        with open(config_path, encoding="utf-8") as stream:
            lines = stream.read().splitlines()
    except OSError:
        lines = []

    for line in lines:
        if "kmer_size" not in line:
            continue
        for option in line.split(","):
            if "kmer_size" in option:
                config.kmer_size = int(option.split("=")[1])
            if "abundance_min" in option:
                config.abundance_min = int(option.split("=")[1])

    with os.scandir(f"{run_dir}/counts") as entries:
        config.nb_partitions = sum(1 for _ in entries)

    if not config.kmer_size or not config.nb_partitions:
        raise ConfigError(f"Unable to load config from {config_path}.")

    return config
import os

import pytest

from kmdiff.correction import CorrectionType
from kmdiff.options import (
    CountOptions,
    DiffOptions,
    KmdiffOptions,
    compare_opt,
    dump_opt,
    load_opt,
)


def test_global_display():
    opt = KmdiffOptions(verbosity="debug", nb_threads=4)
    assert opt.global_display() == "Options: verbosity=debug,nb_threads=4,"


def test_count_display_fields():
    opt = CountOptions(verbosity="info", nb_threads=2, file="reads.fof", dir="run", kmer_size=31)
    text = opt.display()
    assert text.startswith("Options: verbosity=info,nb_threads=2,file=reads.fof,dir=run,")
    assert "kmer_size=31," in text
    assert text.endswith("nb_partitions=0,")


def test_diff_display_fields():
    opt = DiffOptions(threshold=0.05, cutoff=100000, correction=CorrectionType.BONFERRONI, kff=True)
    text = opt.display()
    assert "threshold=0.05," in text
    assert "cutoff=100000," in text
    assert "correction_type_str(correction)=BONFERRONI," in text
    assert "kff=1," in text


def test_dump_load_round_trip(tmp_path):
    path = str(tmp_path / "options.bin")
    opt = DiffOptions(
        threshold=0.01,
        cutoff=1000.0,
        correction=CorrectionType.HOLM,
        pop_correction=True,
        kmer_pca=0.002,
        npc=5,
    )
    dump_opt(opt, path)
    assert os.path.getsize(path) == 37
    loaded = load_opt(path)
    assert loaded.threshold == opt.threshold
    assert loaded.cutoff == opt.cutoff
    assert loaded.correction is CorrectionType.HOLM
    assert loaded.pop_correction is True
    assert loaded.kmer_pca == opt.kmer_pca
    assert loaded.npc == 5
    assert compare_opt(opt, loaded) == 0


def test_load_truncated_raises(tmp_path):
    path = tmp_path / "options.bin"
    path.write_bytes(b"\x00" * 5)
    with pytest.raises(ValueError):
        load_opt(str(path))


def _base(**kwargs):
    values = dict(threshold=0.05, cutoff=100000.0, correction=CorrectionType.BONFERRONI)
    values.update(kwargs)
    return DiffOptions(**values)


@pytest.mark.parametrize(
    "new, prev, expected",
    [
        (_base(), _base(), 0b0),
        (_base(threshold=0.01), _base(), 0b1),
        (_base(cutoff=10.0), _base(), 0b1),
        (_base(correction=CorrectionType.SIDAK), _base(), 0b100),
        (_base(pop_correction=True), _base(), 0b11),
        (_base(), _base(pop_correction=True), 0b100),
        (_base(pop_correction=True, npc=3), _base(pop_correction=True, npc=2), 0b10),
        (
            _base(pop_correction=True, kmer_pca=0.01),
            _base(pop_correction=True, kmer_pca=0.001),
            0b11,
        ),
    ],
)
def test_compare_opt(new, prev, expected):
    assert compare_opt(new, prev) == expected
import pytest

from kmdiff.accumulator import FileAccumulator, VectorAccumulator
from kmdiff.aggregator import (
    Aggregator,
    SignificantKmer,
    SortedAggregator,
    make_aggregator,
    write_kmers,
)
from kmdiff.correction import BasicThreshold, Benjamini, Bonferroni, Holm, Sidak
from kmdiff.model import Significance


def _read_fasta(path):
    lines = path.read_text().splitlines()
    return list(zip(lines[0::2], lines[1::2]))


def _accumulator(records):
    acc = VectorAccumulator()
    for record in records:
        acc.push(record)
    acc.finish()
    return acc


def test_write_kmers_format(tmp_path):
    out = tmp_path / "out.fasta"
    records = [SignificantKmer("ACGT", 1e-10, Significance.CONTROL, 3.7, 4.0)]
    assert write_kmers(records, out) == 1
    assert _read_fasta(out) == [(">0_pval=1e-10_control=3_case=4", "ACGT")]


def test_write_kmers_numbers_records_in_order(tmp_path):
    out = tmp_path / "out.fasta"
    records = [
        SignificantKmer(seq, 0.5, Significance.CASE, 1.0, 2.0)
        for seq in ("AAAA", "CCCC", "GGGG")
    ]
    assert write_kmers(records, out) == 3
    entries = _read_fasta(out)
    assert [seq for _, seq in entries] == ["AAAA", "CCCC", "GGGG"]
    assert [name.split("_")[0] for name, _ in entries] == [">0", ">1", ">2"]


def test_aggregator_splits_by_sign(tmp_path):
    part0 = [
        SignificantKmer("AAAA", 0.01, Significance.CONTROL),
        SignificantKmer("CCCC", 0.2, Significance.CASE),
    ]
    part1 = [
        SignificantKmer("GGGG", 0.03, Significance.CASE),
        SignificantKmer("TTTT", 0.04, Significance.NO),
    ]
    agg = Aggregator(
        [_accumulator(part0), _accumulator(part1)], BasicThreshold(0.05), 2, tmp_path, 2
    )
    agg.run()
    assert agg.counts() == (1, 2)
    assert [s for _, s in _read_fasta(tmp_path / "control_kmers.fasta")] == ["AAAA"]
    assert [s for _, s in _read_fasta(tmp_path / "case_kmers.fasta")] == ["GGGG", "TTTT"]


def test_aggregator_progress_ticks_per_partition(tmp_path):
    ticks = []
    accs = [_accumulator([]) for _ in range(4)]
    agg = Aggregator(accs, BasicThreshold(0.05), 4, tmp_path, 1, progress=lambda: ticks.append(1))
    agg.run()
    assert len(ticks) == 4
    assert agg.counts() == (0, 0)


def test_sorted_aggregator_holm_stops_at_first_rejection(tmp_path):
    part0 = [
        SignificantKmer("AAAA", 0.03, Significance.CONTROL),
        SignificantKmer("CCCC", 0.001, Significance.CASE),
    ]
    part1 = [
        SignificantKmer("GGGG", 0.015, Significance.CONTROL),
        SignificantKmer("TTTT", 0.04, Significance.CASE),
    ]
    agg = SortedAggregator(
        [_accumulator(part0), _accumulator(part1)], Holm(0.05, 4), 2, tmp_path, 2
    )
    agg.run()
    assert agg.counts() == (1, 1)
    assert [s for _, s in _read_fasta(tmp_path / "control_kmers.fasta")] == ["GGGG"]
    assert [s for _, s in _read_fasta(tmp_path / "case_kmers.fasta")] == ["CCCC"]


def test_sorted_aggregator_outputs_increasing_pvalues(tmp_path):
    records = [
        SignificantKmer(f"K{i}", p, Significance.CASE)
        for i, p in enumerate([0.0004, 0.0001, 0.0003, 0.0002])
    ]
    agg = SortedAggregator([_accumulator(records)], Benjamini(0.05, 4), 1, tmp_path, 1)
    agg.run()
    names = [n for n, _ in _read_fasta(tmp_path / "case_kmers.fasta")]
    pvalues = [float(n.split("pval=")[1].split("_")[0]) for n in names]
    assert pvalues == sorted(pvalues)
    assert len(pvalues) == 4


@pytest.mark.parametrize(
    "corrector, expected",
    [
        (BasicThreshold(0.05), Aggregator),
        (Bonferroni(0.05, 10), Aggregator),
        (Sidak(0.05, 10), Aggregator),
        (Benjamini(0.05, 10), SortedAggregator),
        (Holm(0.05, 10), SortedAggregator),
    ],
)
def test_make_aggregator_picks_type(tmp_path, corrector, expected):
    agg = make_aggregator([], corrector, 0, tmp_path, 1)
    assert type(agg) is expected
    assert agg.corrector is corrector
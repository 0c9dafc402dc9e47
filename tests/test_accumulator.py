import pytest

from kmdiff.accumulator import (
    FileAccumulator,
    SetAccumulator,
    VectorAccumulator,
    partitions_exist,
)


def test_vector_keeps_order_and_duplicates():
    acc = VectorAccumulator()
    for item in ["b", "a", "b"]:
        acc.push(item)
    acc.finish()
    assert len(acc) == 3
    assert [acc.get(), acc.get(), acc.get()] == ["b", "a", "b"]
    assert acc.get() is None


def test_vector_iteration_and_destroy():
    acc = VectorAccumulator()
    for i in range(5):
        acc.push(i + 1)
    acc.finish()
    assert list(acc) == [1, 2, 3, 4, 5]
    acc.destroy()
    assert len(acc) == 0


def test_set_removes_duplicates():
    acc = SetAccumulator()
    for item in [3, 1, 3, 2, 1]:
        acc.push(item)
    acc.finish()
    assert len(acc) == 3
    assert sorted(acc) == [1, 2, 3]
    assert acc.get() is None


def test_set_destroy_empties():
    acc = SetAccumulator()
    acc.push("x")
    acc.destroy()
    assert len(acc) == 0
    assert acc.get() is None


def test_file_round_trip(tmp_path):
    path = tmp_path / "p0_uncorrected"
    items = [("ACGT", 0.01), ("TTGA", 0.5), ("ACGT", 0.01)]
    acc = FileAccumulator(path, kmer_size=4)
    for item in items:
        acc.push(item)
    assert len(acc) == len(items)
    acc.finish()
    assert list(acc) == items
    acc.destroy()
    assert path.exists()


def test_file_delete_on_destroy(tmp_path):
    path = tmp_path / "p1"
    with FileAccumulator(path, delete=True) as acc:
        acc.push({"k": 1})
        acc.finish()
        assert acc.get() == {"k": 1}
    assert not path.exists()


def test_file_reopen_for_reading(tmp_path):
    path = tmp_path / "p2"
    writer = FileAccumulator(path)
    writer.push(10)
    writer.push(20)
    writer.finish()
    writer.destroy()

    reader = FileAccumulator(path, read=True)
    assert list(reader) == [10, 20]
    reader.destroy()


def test_file_push_in_read_mode_raises(tmp_path):
    path = tmp_path / "p3"
    FileAccumulator(path).destroy()
    reader = FileAccumulator(path, read=True)
    with pytest.raises(RuntimeError):
        reader.push(1)
    reader.destroy()


def test_partitions_exist(tmp_path):
    for i in range(3):
        (tmp_path / f"p{i}_uncorrected").touch()
    assert partitions_exist("{}/p{}_uncorrected", 3, str(tmp_path))
    assert not partitions_exist("{}/p{}_uncorrected", 4, str(tmp_path))
    assert not partitions_exist("{}/p{}_popstrat_uncorrected", 1, str(tmp_path))
"""Containers that collect items during one pass and replay them later."""

from __future__ import annotations

import gzip
import os
import pickle
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Generic, TypeVar

T = TypeVar("T")


def partitions_exist(prefix: str, nb_partitions: int, directory: str) -> bool:
    """Return True if every partition path built from prefix exists.

    ``prefix`` is a format string taking the directory and the partition
    index, such as ``"{}/p{}_uncorrected"``.
    """
    return all(
        os.path.exists(prefix.format(directory, i)) for i in range(nb_partitions)
    )


class Accumulator(ABC, Generic[T]):
    """Collects items with push, then replays them with get after finish."""

    @abstractmethod
    def push(self, item: T) -> None:
        """Store one item."""

    @abstractmethod
    def finish(self) -> None:
        """Stop collecting and rewind for reading."""

    @abstractmethod
    def get(self) -> T | None:
        """Return the next stored item, or None when all have been read."""

    @abstractmethod
    def destroy(self) -> None:
        """Release what the accumulator holds."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of items stored."""

    def __iter__(self) -> Iterator[T]:
        while (item := self.get()) is not None:
            yield item


class VectorAccumulator(Accumulator[T]):
    """Keeps items in insertion order, duplicates included."""

    def __init__(self) -> None:
        self._data: list[T] = []
        self._pos = 0

    def push(self, item: T) -> None:
        self._data.append(item)

    def finish(self) -> None:
        self._pos = 0

    def get(self) -> T | None:
        if self._pos < len(self._data):
            item = self._data[self._pos]
            self._pos += 1
            return item
        return None

    def destroy(self) -> None:
        self._data = []
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data)


class SetAccumulator(Accumulator[T]):
    """Keeps each distinct item once."""

    def __init__(self) -> None:
        self._data: dict[T, None] = {}
        self._it: Iterator[T] | None = None

    def push(self, item: T) -> None:
        self._data[item] = None

    def finish(self) -> None:
        self._it = iter(list(self._data))

    def get(self) -> T | None:
        if self._it is None:
            return None
        return next(self._it, None)

    def destroy(self) -> None:
        self._data = {}
        self._it = None

    def __len__(self) -> int:
        return len(self._data)


class FileAccumulator(Accumulator[T]):
    """Streams items to a compressed file and reads them back.

    With ``read`` set, an existing file is opened for reading straight away.
    With ``delete`` set, the file is removed by destroy.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        kmer_size: int = 0,
        read: bool = False,
        delete: bool = False,
    ) -> None:
        self.path = Path(path)
        self.kmer_size = kmer_size
        self.reading = read
        self.delete = delete
        self._size = 0
        self._read = 0
        self._out = None
        self._in = None
        if read:
            self._in = gzip.open(self.path, "rb")
        else:
            self._out = gzip.open(self.path, "wb")

    def push(self, item: T) -> None:
        if self._out is None:
            raise RuntimeError(f"{self.path} is not open for writing")
        pickle.dump(item, self._out, protocol=pickle.HIGHEST_PROTOCOL)
        self._size += 1

    def finish(self) -> None:
        if self._out is not None:
            self._out.close()
            self._out = None
        self._in = gzip.open(self.path, "rb")

    def get(self) -> T | None:
        if self._in is None:
            raise RuntimeError(f"{self.path} is not open for reading")
        try:
            item = pickle.load(self._in)
        except EOFError:
            return None
        self._read += 1
        return item

    def destroy(self) -> None:
        if self._out is not None:
            self._out.close()
            self._out = None
        if self._in is not None:
            self._in.close()
            self._in = None
        if self.delete:
            self.path.unlink(missing_ok=True)

    def __len__(self) -> int:
        return self._size

    def __enter__(self) -> FileAccumulator[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.destroy()
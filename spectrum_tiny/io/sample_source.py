"""Sample sources feed the channel driver with (name, samples) pairs.

A source only has to provide `channels()`. The ones here read tabular data through
pandas (one channel per column) or audio files through librosa (one channel per file).
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, Optional

import librosa
import numpy as np
import pandas as pd
from numpy.typing import NDArray


Channel = tuple[str, NDArray[np.float64]]


def leading_numeric_run(values) -> NDArray[np.float64]:
    """Numeric values from the start of `values` up to the first blank or non-numeric one."""
    numeric = pd.to_numeric(pd.Series(values, dtype=object), errors="coerce").to_numpy(dtype=np.float64)
    invalid = np.flatnonzero(~np.isfinite(numeric))
    if invalid.size:
        numeric = numeric[:invalid[0]]
    return numeric


class SampleSource(ABC):

    @abstractmethod
    def channels(self) -> Iterator[Channel]:
        ...


class DataFrameSampleSource(SampleSource):

    def __init__(self, frame: pd.DataFrame, columns: Optional[list[str]] = None):
        self.frame = frame
        self.columns = list(frame.columns) if columns is None else list(columns)
        missing = [c for c in self.columns if c not in frame.columns]
        if missing:
            raise KeyError(f"Columns not found in samples: {missing}")

    def channels(self) -> Iterator[Channel]:
        for column in self.columns:
            yield str(column), leading_numeric_run(self.frame[column].to_list())


class CsvSampleSource(DataFrameSampleSource):

    def __init__(self, path: Path, columns: Optional[list[str]] = None, **read_kwargs):
        self.path = Path(path)
        # keep blanks and stray text as-is, leading_numeric_run decides where a channel ends
        frame = pd.read_csv(self.path, dtype=object, skip_blank_lines=False, **read_kwargs)
        super().__init__(frame, columns)


class ParquetSampleSource(DataFrameSampleSource):

    def __init__(self, path: Path, columns: Optional[list[str]] = None):
        self.path = Path(path)
        super().__init__(pd.read_parquet(self.path, columns=columns), columns)


class AudioSampleSource(SampleSource):
    """One mono channel per audio file.

    Channels are named by the path relative to `root` without suffix (e.g. "a/x"),
    or by the file stem when no root is given.
    """

    def __init__(self, paths: Iterable[Path], sample_rate: Optional[int] = None, root: Optional[Path] = None):
        self.paths = sorted(Path(p) for p in paths)
        self.sample_rate = sample_rate
        self.root = None if root is None else Path(root)

    @classmethod
    def from_folder(cls, folder: Path, pattern: str = "*.wav", sample_rate: Optional[int] = None):
        return cls(Path(folder).rglob(pattern), sample_rate=sample_rate, root=folder)

    def channel_name(self, path: Path) -> str:
        if self.root is None:
            return path.stem
        return path.relative_to(self.root).with_suffix("").as_posix()

    def channels(self) -> Iterator[Channel]:
        for path in self.paths:
            audio_array, _ = librosa.load(path, sr=self.sample_rate, mono=True)
            yield self.channel_name(path), audio_array.astype(np.float64)

from pathlib import Path

import numpy as np
import pandas as pd
import pyarrow as pa
from numpy.typing import NDArray


class ResultSink:
    """Collects per-channel magnitude spectra. Subclasses persist them in close()."""

    def __init__(self):
        self.records: list[tuple[str, NDArray[np.float64]]] = []
        self.closed = False

    def write(self, channel: str, magnitudes):
        if self.closed:
            raise RuntimeError("Cannot write to a closed result sink")
        self.records.append((channel, np.asarray(magnitudes, dtype=np.float64)))

    def close(self):
        self.closed = True


class DataFrameResultSink(ResultSink):

    def to_frame(self) -> pd.DataFrame:
        """Wide layout: one column per channel, one row per frequency bin."""
        return pd.DataFrame({channel: pd.Series(mags) for channel, mags in self.records})

    def to_records(self) -> pd.DataFrame:
        """Long layout: one row per channel."""
        return pd.DataFrame({
            "channel": pd.Series([c for c, _ in self.records], dtype="string"),
            "magnitudes": pd.Series([m for _, m in self.records], dtype=object),
        })


class CsvResultSink(DataFrameResultSink):

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def close(self):
        super().close()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.to_frame().to_csv(self.path, index=False)


class ParquetResultSink(DataFrameResultSink):

    SCHEMA = pa.schema([
        ("channel", pa.string()),
        ("magnitudes", pa.list_(pa.float64())),
    ])

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def close(self):
        super().close()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.to_records().to_parquet(
            self.path,
            index=False,
            schema=self.SCHEMA,  # make sure arrays are serialized as lists
        )

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from paths import PIPELINE_CONFIG_FILE, SAMPLES_CSV_PATH, SPECTRA_PRQ_PATH, SPECTRA_SAMPLE_PLOT_PATH


class SampleSource(BaseModel):
    kind: Literal["csv", "parquet", "audio"] = "csv"
    path: Path = SAMPLES_CSV_PATH
    columns: Optional[list[str]] = None
    sample_rate: Optional[int] = None  # audio only, None keeps the native rate


class Transform(BaseModel):
    length: Optional[int] = None  # None: longest channel rounded up to a power of 2
    apply_window: bool = False
    magnitude: Literal["abs_real", "modulus"] = "abs_real"

    @field_validator('length')
    @classmethod
    def validate_length(cls, v):
        if v is not None and (v < 2 or v & (v - 1) != 0):
            raise ValueError(f'length must be a power of 2 and at least 2')
        return v


class ResultSink(BaseModel):
    kind: Literal["csv", "parquet"] = "parquet"
    path: Path = SPECTRA_PRQ_PATH
    plot_path: Optional[Path] = SPECTRA_SAMPLE_PLOT_PATH


class Benchmark(BaseModel):
    enabled: bool = False
    n_iter: int = Field(default=10, ge=1)


class Config(BaseModel):
    sample_source: SampleSource = SampleSource()
    transform: Transform = Transform()
    result_sink: ResultSink = ResultSink()
    benchmark: Benchmark = Benchmark()


def load_config(config_path: Path = PIPELINE_CONFIG_FILE) -> Config:
    with config_path.open("r") as file:
        yaml_data = yaml.safe_load(file)
    return Config(**(yaml_data or {}))

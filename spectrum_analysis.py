import logging
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from config import load_config, Config
from paths import PIPELINE_CONFIG_FILE
from spectrum_tiny.analysis.driver import analyze_channels
from spectrum_tiny.analysis.spectrum import benchmark_transform
from spectrum_tiny.io.result_sink import CsvResultSink, DataFrameResultSink, ParquetResultSink
from spectrum_tiny.io.sample_source import AudioSampleSource, CsvSampleSource, ParquetSampleSource, SampleSource

logger = logging.getLogger("spectrum_tiny")

_N_PLOTTED_CHANNELS = 10


def _resolve(path: Path) -> Path:
    # relative paths in the pipeline config are relative to the config file
    return path if path.is_absolute() else PIPELINE_CONFIG_FILE.parent / path


def make_sample_source(config: Config) -> SampleSource:
    sc = config.sample_source
    path = _resolve(sc.path)
    if sc.kind == "csv":
        return CsvSampleSource(path, columns=sc.columns)
    if sc.kind == "parquet":
        return ParquetSampleSource(path, columns=sc.columns)
    if path.is_dir():
        return AudioSampleSource.from_folder(path, sample_rate=sc.sample_rate)
    return AudioSampleSource([path], sample_rate=sc.sample_rate)


def make_result_sink(config: Config) -> DataFrameResultSink:
    rc = config.result_sink
    path = _resolve(rc.path)
    if rc.kind == "csv":
        return CsvResultSink(path)
    return ParquetResultSink(path)


def plot_spectra_sample(spectra: pd.DataFrame):
    """Plot magnitude spectra of the first few channels, one row each."""
    sample = spectra.iloc[:, :_N_PLOTTED_CHANNELS]
    fig = make_subplots(
        rows=max(len(sample.columns), 1),
        cols=1,
        vertical_spacing=0.05,
        subplot_titles=[str(c) for c in sample.columns],
    )
    for i, channel in enumerate(sample.columns):
        mags = sample[channel].to_numpy()
        fig.add_trace(
            go.Scatter(
                x=np.arange(mags.shape[0]),
                y=mags,
                mode="lines",
                name=str(channel),
                showlegend=False,
            ),
            row=i + 1,
            col=1,
        )
    fig.update_layout(height=300 * max(len(sample.columns), 1), title_text="Magnitude spectra")
    return fig


def run_spectrum_analysis(config: Config):
    source = make_sample_source(config)
    sink = make_result_sink(config)
    tc = config.transform
    context = analyze_channels(
        source,
        sink,
        length=tc.length,
        apply_window=tc.apply_window,
        mode=tc.magnitude,
    )
    logger.info("Wrote %d spectra to %s", len(sink.records), sink.path)

    if config.result_sink.plot_path is not None:
        plot_path = _resolve(config.result_sink.plot_path)
        plot_path.parent.mkdir(parents=True, exist_ok=True)
        plot_spectra_sample(sink.to_frame()).write_html(plot_path)

    if config.benchmark.enabled:
        benchmark_transform(context, n_iter=config.benchmark.n_iter)
    return context


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    config = load_config()
    run_spectrum_analysis(config)

import logging
from functools import partial
from typing import Optional

import dask.bag as db
from tqdm.dask import TqdmCallback

from spectrum_tiny.analysis.spectrum import MagnitudeMode, next_power_of_two, process_channel
from spectrum_tiny.io.result_sink import ResultSink
from spectrum_tiny.io.sample_source import SampleSource
from spectrum_tiny.transform.nb_fft import TransformContext, create_context

logger = logging.getLogger("spectrum_tiny")


def analyze_channels(
        source: SampleSource,
        sink: ResultSink,
        length: Optional[int] = None,
        apply_window: bool = False,
        mode: MagnitudeMode = "abs_real",
        scheduler: str = "threads",
) -> TransformContext:
    """Transform every channel of `source` with one shared context and hand the
    first N/2 magnitudes of each to `sink`.

    If `length` is None the frame length is the longest channel rounded up to a
    power of two. An explicit length goes to create_context untouched.
    """
    channels = list(source.channels())
    if not channels:
        raise ValueError("Sample source yielded no channels")
    names = [name for name, _ in channels]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate channel names: {duplicates}")

    if length is None:
        length = next_power_of_two(max(len(samples) for _, samples in channels))
    context = create_context(length)
    logger.info("Transforming %d channels with N=%d", len(channels), context.length)

    for name, samples in channels:
        if len(samples) > context.length:
            logger.warning(
                "Channel %s has %d samples, only the first %d are transformed",
                name, len(samples), context.length,
            )

    # the context is read-only, so all threads can share it
    do_channel_fn = partial(process_channel, context=context, apply_window=apply_window, mode=mode)
    with TqdmCallback(desc="Transforming channels"):
        spectra = (
            db.from_sequence([samples for _, samples in channels], partition_size=1)
            .map(do_channel_fn)
            .compute(scheduler=scheduler)
        )

    for (name, _), mags in zip(channels, spectra):
        sink.write(name, mags)
    sink.close()
    return context

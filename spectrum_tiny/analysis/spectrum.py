import logging
import time
from typing import Literal, Optional

import numpy as np
from numpy.typing import NDArray

from spectrum_tiny.transform.nb_fft import TransformContext, transform
from spectrum_tiny.transform.nb_window import apply_window

logger = logging.getLogger("spectrum_tiny")

MagnitudeMode = Literal["abs_real", "modulus"]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n, never below 2."""
    p = 2
    while p < n:
        p += p
    return p


def prepare_frame(samples, length: int, window: Optional[NDArray[np.float64]] = None):
    """Zero-pad or truncate samples to `length`, optionally window them.

    Returns (real, imag) float64 buffers ready for transform(), imag all zeros.
    """
    samples = np.asarray(samples, dtype=np.float64)
    real = np.zeros(length, dtype=np.float64)
    n = min(length, samples.shape[0])
    real[:n] = samples[:n]
    if window is not None:
        real = apply_window(real, window)
    imag = np.zeros(length, dtype=np.float64)
    return real, imag


def magnitudes(real, imag, mode: MagnitudeMode = "abs_real") -> NDArray[np.float64]:
    half = len(real) // 2
    if mode == "abs_real":
        return np.abs(np.asarray(real[:half], dtype=np.float64))
    if mode == "modulus":
        return np.hypot(real[:half], imag[:half])
    raise ValueError(f"Unknown magnitude mode: {mode}")


def format_frame(real, imag) -> str:
    """Render a frame with values truncated (not rounded) to three decimals."""
    re = " ".join(str(v) for v in np.trunc(np.asarray(real) * 1000) / 1000)
    im = " ".join(str(v) for v in np.trunc(np.asarray(imag) * 1000) / 1000)
    return f"Re: [{re}]\nIm: [{im}]"


def process_channel(
        samples,
        context: TransformContext,
        apply_window: bool = False,
        mode: MagnitudeMode = "abs_real",
) -> NDArray[np.float64]:
    window = context.window() if apply_window else None
    real, imag = prepare_frame(samples, context.length, window)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Before:\n%s", format_frame(real, imag))
    transform(context, real, imag)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("After:\n%s", format_frame(real, imag))
    return magnitudes(real, imag, mode)


def benchmark_transform(context: TransformContext, n_iter: int = 10, seed: int = 0) -> float:
    """Average wall time of one transform call, in milliseconds."""
    if n_iter < 1:
        raise ValueError(f"n_iter must be at least 1, got {n_iter}")
    rng = np.random.default_rng(seed)
    frame = rng.standard_normal(context.length)
    real = frame.copy()
    imag = np.zeros(context.length, dtype=np.float64)
    transform(context, real, imag)  # first call pays for jit compilation

    elapsed = 0.0
    for _ in range(n_iter):
        real[:] = frame
        imag[:] = 0.0
        start = time.perf_counter()
        transform(context, real, imag)
        elapsed += time.perf_counter() - start
    avg_ms = elapsed / n_iter * 1000
    logger.info("Averaged %.4f ms per iteration (N=%d, %d iterations)", avg_ms, context.length, n_iter)
    return avg_ms

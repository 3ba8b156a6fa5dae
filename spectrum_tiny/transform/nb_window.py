import numpy as np
import numba as nb
from numpy.typing import NDArray

from spectrum_tiny.transform.errors import LengthMismatch

# w(n) = 0.42 - 0.5 cos(2 pi n / (N-1)) + 0.08 cos(4 pi n / (N-1))
BLACKMAN_A0 = 0.42
BLACKMAN_A1 = 0.5
BLACKMAN_A2 = 0.08


@nb.njit()
def gen_blackman_f64(window, N):
    """Fill `window` with N Blackman coefficients. N must be >= 2."""
    for i in range(N):
        window[i] = (BLACKMAN_A0
                     - BLACKMAN_A1 * np.cos(2.0 * np.pi * i / (N - 1))
                     + BLACKMAN_A2 * np.cos(4.0 * np.pi * i / (N - 1)))


def blackman(n) -> NDArray[np.float64]:
    window = np.zeros(n, dtype=np.float64)
    gen_blackman_f64(window, n)
    return window


def apply_window(samples, window) -> NDArray[np.float64]:
    """Multiply raw samples by window coefficients, elementwise.

    Returns a new float64 array; neither input is modified.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if samples.shape[0] != len(window):
        raise LengthMismatch(len(window), samples.shape[0], what="samples")
    return np.multiply(samples, window, dtype=np.float64)

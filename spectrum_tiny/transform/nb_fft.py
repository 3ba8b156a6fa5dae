"""In-place radix-2 decimation-in-time FFT on split real/imaginary float64 buffers.

Twiddle tables and the Blackman window are computed once per length and kept in a
TransformContext, the kernels only read them. Kernels are compiled nogil so that
several threads can transform their own buffers against one shared context.
"""
import logging
import numbers
from dataclasses import dataclass

import numpy as np
import numba as nb
from numpy.typing import NDArray

from spectrum_tiny.transform.errors import InvalidLength, LengthMismatch
from spectrum_tiny.transform.nb_window import blackman


logger = logging.getLogger("spectrum_tiny")


def is_power_of_two(x):
    # python ints, no int64 overflow for huge lengths
    return x > 0 and (x & (x - 1)) == 0


@nb.njit()
def gen_w_r2_f64(cos_table, sin_table, N):
    """Twiddle factors for a forward transform: angles -2*pi*i/N, i < N/2."""
    e = -2.0 * np.pi / N
    for i in range(N >> 1):
        cos_table[i] = np.cos(i * e)
        sin_table[i] = np.sin(i * e)


@nb.njit(nogil=True)
def bit_rev_f64(re, im, N):
    """Bit reversal permutation of both buffers, in place."""
    j = 0
    for i in range(1, N - 1):
        k = N >> 1
        while k <= j:
            j -= k
            k >>= 1
        j += k
        if i < j:
            tmp = re[i]
            re[i] = re[j]
            re[j] = tmp
            tmp = im[i]
            im[i] = im[j]
            im[j] = tmp


@nb.njit(nogil=True)
def fft2r_f64(re, im, N, order, cos_table, sin_table):
    """Butterfly stages over bit-reversed input.

    Parameters:
    -----------
    re, im :
        float64 buffers of length N, bit-reversed on entry, spectrum on exit
    N :
        Number of complex points
    order :
        log2(N)
    cos_table, sin_table :
        Twiddle tables of length N/2 from gen_w_r2_f64
    """
    half = 1
    for stage in range(order):
        step = half + half
        stride = 1 << (order - stage - 1)
        a = 0
        for j in range(half):
            c = cos_table[a]
            s = sin_table[a]
            a += stride
            for k in range(j, N, step):
                m = k + half
                t1 = c * re[m] - s * im[m]
                t2 = s * re[m] + c * im[m]
                re[m] = re[k] - t1
                im[m] = im[k] - t2
                re[k] = re[k] + t1
                im[k] = im[k] + t2
        half = step


@nb.njit(nogil=True)
def fft_f64(re, im, N, order, cos_table, sin_table):
    bit_rev_f64(re, im, N)
    fft2r_f64(re, im, N, order, cos_table, sin_table)


@dataclass(frozen=True)
class TransformContext:
    length: int
    stages: int
    cos_table: NDArray[np.float64]
    sin_table: NDArray[np.float64]
    window_coefficients: NDArray[np.float64]

    def window(self) -> NDArray[np.float64]:
        return self.window_coefficients


def _readonly(arr):
    arr.flags.writeable = False
    return arr


def create_context(length) -> TransformContext:
    if isinstance(length, bool) or not isinstance(length, numbers.Integral):
        raise InvalidLength(length)
    n = int(length)
    # n == 1 passes the power of two check but makes the window divide by zero
    if n < 2 or not is_power_of_two(n):
        raise InvalidLength(length)
    order = n.bit_length() - 1

    cos_table = np.zeros(n // 2, dtype=np.float64)
    sin_table = np.zeros(n // 2, dtype=np.float64)
    gen_w_r2_f64(cos_table, sin_table, n)
    window = blackman(n)

    logger.debug("Created transform context N=%d, m=%d", n, order)
    return TransformContext(
        length=n,
        stages=order,
        cos_table=_readonly(cos_table),
        sin_table=_readonly(sin_table),
        window_coefficients=_readonly(window),
    )


def _is_kernel_buffer(buf):
    return (
        isinstance(buf, np.ndarray)
        and buf.dtype == np.float64
        and buf.ndim == 1
        and buf.flags.writeable
    )


def _write_back(dst, src):
    if isinstance(dst, np.ndarray):
        dst[...] = src
    else:
        dst[:] = src.tolist()


def transform(context: TransformContext, real, imag):
    """Forward DFT of (real, imag), in place.

    Both buffers must hold exactly context.length values, otherwise LengthMismatch
    is raised and neither buffer is touched. Writeable 1-D float64 numpy arrays,
    strided views included, are handed to the kernel directly; any other mutable
    sequence goes through a float64 copy that is written back afterwards.
    """
    n = context.length
    if len(real) != n:
        raise LengthMismatch(n, len(real), what="real")
    if len(imag) != n:
        raise LengthMismatch(n, len(imag), what="imag")

    if _is_kernel_buffer(real) and _is_kernel_buffer(imag):
        fft_f64(real, imag, n, context.stages, context.cos_table, context.sin_table)
        return

    re = np.array(real, dtype=np.float64)
    im = np.array(imag, dtype=np.float64)
    fft_f64(re, im, n, context.stages, context.cos_table, context.sin_table)
    _write_back(real, re)
    _write_back(imag, im)

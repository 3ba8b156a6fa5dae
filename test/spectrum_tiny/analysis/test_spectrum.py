import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from spectrum_tiny.analysis.spectrum import (
    benchmark_transform, format_frame, magnitudes, next_power_of_two, prepare_frame, process_channel
)
from spectrum_tiny.transform.nb_fft import create_context


class TestFraming:

    @pytest.mark.parametrize("n, expected", [(0, 2), (1, 2), (2, 2), (3, 4), (8, 8), (9, 16), (1000, 1024)])
    def test_next_power_of_two(self, n, expected):
        assert next_power_of_two(n) == expected

    def test_zero_pad(self):
        real, imag = prepare_frame([1, 2, 3], 8)
        assert_array_equal(real, [1, 2, 3, 0, 0, 0, 0, 0])
        assert_array_equal(imag, np.zeros(8))

    def test_truncate(self):
        real, _ = prepare_frame(np.arange(10), 4)
        assert_array_equal(real, [0, 1, 2, 3])

    def test_window_applies_after_padding(self):
        window = create_context(8).window()
        real, _ = prepare_frame(np.ones(8), 8, window)
        assert_allclose(real, window)

    def test_input_not_modified(self):
        samples = np.ones(8)
        prepare_frame(samples, 8, create_context(8).window())
        assert_array_equal(samples, 1.0)


class TestMagnitudes:

    def test_abs_real_takes_first_half(self):
        mags = magnitudes(np.array([-4.0, 3.0, -2.0, 1.0]), np.array([0.0, 4.0, 0.0, -4.0]))
        assert_array_equal(mags, [4.0, 3.0])

    def test_modulus(self):
        mags = magnitudes(np.array([-4.0, 3.0, -2.0, 1.0]), np.array([0.0, 4.0, 0.0, -4.0]), mode="modulus")
        assert_allclose(mags, [4.0, 5.0])

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            magnitudes(np.zeros(4), np.zeros(4), mode="power")


class TestProcessChannel:

    def test_cosine_channel(self):
        ctx = create_context(64)
        samples = np.cos(2 * np.pi * 5 * np.arange(64) / 64)
        mags = process_channel(samples, ctx)
        assert mags.shape == (32,)
        assert np.argmax(mags) == 5
        assert mags[5] == pytest.approx(32.0)

    def test_short_channel_is_zero_padded(self):
        ctx = create_context(8)
        mags = process_channel([1.0], ctx)
        assert_allclose(mags, np.ones(4), atol=1e-12)

    def test_window_is_opt_in(self):
        ctx = create_context(16)
        samples = np.ones(16)
        plain = process_channel(samples, ctx)
        windowed = process_channel(samples, ctx, apply_window=True)
        assert plain[0] == pytest.approx(16.0)
        assert windowed[0] == pytest.approx(np.blackman(16).sum())

    def test_debug_logging(self, caplog):
        ctx = create_context(4)
        with caplog.at_level(logging.DEBUG, logger="spectrum_tiny"):
            process_channel([1, 1, 1, 1], ctx)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("Before:") for m in messages)
        assert any(m.startswith("After:") and "4.0" in m for m in messages)

    def test_format_frame_truncates(self):
        text = format_frame([1.23456, -0.9999], [0.0, 2.0])
        assert text == "Re: [1.234 -0.999]\nIm: [0.0 2.0]"


class TestBenchmark:

    def test_returns_positive_average(self, caplog):
        ctx = create_context(256)
        with caplog.at_level(logging.INFO, logger="spectrum_tiny"):
            avg_ms = benchmark_transform(ctx, n_iter=3)
        assert avg_ms > 0
        assert "ms per iteration" in caplog.text

    @pytest.mark.parametrize("n_iter", [0, -1])
    def test_rejects_non_positive_iterations(self, n_iter):
        with pytest.raises(ValueError, match="n_iter"):
            benchmark_transform(create_context(8), n_iter=n_iter)

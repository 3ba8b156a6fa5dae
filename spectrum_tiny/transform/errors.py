class TransformError(ValueError):
    """Base class for errors raised by the transform core."""


class InvalidLength(TransformError):
    """Requested transform length is not a power of two (or is smaller than 2)."""

    def __init__(self, length):
        self.length = length
        super().__init__(f"FFT length must be a power of 2 and at least 2, got {length!r}")


class LengthMismatch(TransformError):
    """A buffer handed to the kernel does not match the context length."""

    def __init__(self, expected, actual, what="buffer"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} has {actual} elements, expected {expected}")

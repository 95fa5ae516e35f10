"""
Fractus errors.

Every failure of the sharing core is a ShamirError. They all subclass
ValueError so callers can keep a single ``except ValueError`` around
split/recover, the same way they would for bad input anywhere else.
"""


class ShamirError(ValueError):
    """Base class for secret-sharing failures."""


class InvalidThreshold(ShamirError):
    def __init__(self, threshold=None):
        self.threshold = threshold
        super().__init__("Threshold must be between 1 and 255")


class EmptyInput(ShamirError):
    def __init__(self):
        super().__init__("Cannot process empty input")


class InsufficientShares(ShamirError):
    """Fewer shares than the threshold were supplied."""

    def __init__(self, required: int, provided: int):
        self.required = required
        self.provided = provided
        super().__init__(
            f"Need at least {required} shares, but only {provided} provided"
        )


class InconsistentShareLength(ShamirError):
    def __init__(self):
        super().__init__("All shares must have the same length")


class DuplicateShares(ShamirError):
    """Two shares carry the same x-coordinate."""

    def __init__(self, x: int):
        self.x = x
        super().__init__(f"Duplicate share with x-coordinate: {x}")


class ChecksumMismatch(ShamirError):
    def __init__(self):
        super().__init__("Checksum verification failed - data may be corrupted")


class DecodeError(ShamirError):
    """A share could not be decoded from bytes or text."""


class ConfigError(ValueError):
    """Configuration file is unreadable or holds invalid values."""

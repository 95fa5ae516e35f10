"""
Share value type and its binary encoding.

Wire format: [x, y_0, y_1, ...] with no length prefix and no escaping.
The y-length is whatever is left of the buffer after the x byte.
"""

from .errors import DecodeError
from .gf256 import GF256


class Share:
    """One point per secret byte, all evaluated at the same x."""

    __slots__ = ('x', 'y')

    def __init__(self, x: GF256, y: tuple):
        self.x = x
        self.y = tuple(y)

    @classmethod
    def new(cls, x, y) -> 'Share':
        """Build a share from raw ints or GF256 values."""
        return cls(GF256(x), tuple(GF256(v) for v in y))

    def to_bytes(self) -> bytes:
        return bytes([int(self.x)] + [int(v) for v in self.y])

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Share':
        """
        Decode a share.

        Raises:
            DecodeError: Fewer than 2 bytes (a share needs at least one y)
        """
        if len(data) < 2:
            raise DecodeError("A Share must be at least 2 bytes long")
        return cls(GF256(data[0]), tuple(GF256(b) for b in data[1:]))

    def __len__(self):
        return len(self.y) + 1

    def __eq__(self, other):
        if not isinstance(other, Share):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Share(x={self.x}, y=[{', '.join(str(v) for v in self.y)}])"

"""
GF(256) arithmetic.

Every byte is a field element. Addition and subtraction are XOR;
multiplication and division go through logarithm/exponential tables for
the Rijndael reduction polynomial x^8 + x^4 + x^3 + x + 1 (0x11B) with
generator 3.

The tables are built once at import and stored as tuples, so they are
read-only for the life of the process.
"""

from functools import reduce, total_ordering

REDUCTION_POLY = 0x11B
GENERATOR = 3


def _xtime_mul(a: int, b: int) -> int:
    """Carry-less multiply of two bytes, reduced by REDUCTION_POLY."""
    result = 0
    for _ in range(8):
        if b & 1:
            result ^= a
        carry = a & 0x80
        a = (a << 1) & 0xFF
        if carry:
            a ^= REDUCTION_POLY & 0xFF
        b >>= 1
    return result


def _build_tables() -> tuple:
    exp = [0] * 510
    log = [0] * 256
    # log(0) is undefined; 0xff keeps the slot a valid byte
    log[0] = 0xFF

    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x = _xtime_mul(x, GENERATOR)

    # Doubled so LOG[a] + LOG[b] (at most 508) never needs a modulo
    for i in range(255, 510):
        exp[i] = exp[i - 255]

    return tuple(exp), tuple(log)


EXP, LOG = _build_tables()


@total_ordering
class GF256:
    """An element of GF(256). Immutable and hashable."""

    __slots__ = ('_value',)

    def __init__(self, value: int = 0):
        if isinstance(value, GF256):
            value = value._value
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"GF256 element must be an int, got {type(value).__name__}")
        if not 0 <= value <= 255:
            raise ValueError(f"GF256 element must be a byte (0-255), got {value}")
        object.__setattr__(self, '_value', int(value))

    def __setattr__(self, name, value):
        raise AttributeError("GF256 elements are immutable")

    @property
    def value(self) -> int:
        return self._value

    def is_zero(self) -> bool:
        return self._value == 0

    def is_one(self) -> bool:
        return self._value == 1

    def inverse(self) -> 'GF256':
        """Multiplicative inverse. Zero has none."""
        if self._value == 0:
            raise ZeroDivisionError("Zero element has no multiplicative inverse")
        return GF256(EXP[255 - LOG[self._value]])

    def __add__(self, other):
        if not isinstance(other, GF256):
            return NotImplemented
        return GF256(self._value ^ other._value)

    # In characteristic 2, a - b == a + b
    __sub__ = __add__

    def __mul__(self, other):
        if not isinstance(other, GF256):
            return NotImplemented
        if self._value == 0 or other._value == 0:
            return ZERO
        return GF256(EXP[LOG[self._value] + LOG[other._value]])

    def __truediv__(self, other):
        if not isinstance(other, GF256):
            return NotImplemented
        if other._value == 0:
            raise ZeroDivisionError("Division by zero in GF(256)")
        return self * other.inverse()

    def __eq__(self, other):
        if not isinstance(other, GF256):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if not isinstance(other, GF256):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash(self._value)

    def __int__(self):
        return self._value

    __index__ = __int__

    def __repr__(self):
        return f"GF256({self._value})"

    def __str__(self):
        return str(self._value)


ZERO = GF256(0)
ONE = GF256(1)
GF256.ZERO = ZERO
GF256.ONE = ONE


def add(a: GF256, b: GF256) -> GF256:
    return a + b


def sub(a: GF256, b: GF256) -> GF256:
    return a - b


def mul(a: GF256, b: GF256) -> GF256:
    return a * b


def div(a: GF256, b: GF256) -> GF256:
    return a / b


def inverse(a: GF256) -> GF256:
    return a.inverse()


def sum_gf(values) -> GF256:
    """Field sum of an iterable of elements (ZERO when empty)."""
    return reduce(add, values, ZERO)


def product_gf(values) -> GF256:
    """Field product of an iterable of elements (ONE when empty)."""
    return reduce(mul, values, ONE)

"""
Polynomial operations over GF(256).

A polynomial is a list of GF256 coefficients in descending order of
degree: [a_{k-1}, ..., a_1, a_0]. The last coefficient a_0 is the
secret byte the polynomial hides.
"""

from typing import Iterator, List

from .gf256 import GF256, ZERO, product_gf, sum_gf
from .share import Share

MAX_X = 255


def random_polynomial(secret_byte: GF256, threshold: int, rng) -> List[GF256]:
    """
    Build a random polynomial of degree ``threshold - 1`` hiding ``secret_byte``.

    Args:
        secret_byte: Constant term of the polynomial
        threshold: Number of coefficients (K)
        rng: Any object with ``randint(a, b)``, e.g. random.SystemRandom
             or a seeded fractus.crypto.ChaChaRandom

    Returns:
        K coefficients, highest degree first. The K-1 random coefficients
        are drawn from [1, 255] so the polynomial keeps its nominal degree.
    """
    coefficients = [GF256(rng.randint(1, 255)) for _ in range(threshold - 1)]
    coefficients.append(GF256(secret_byte))
    return coefficients


def evaluate_polynomial(coefficients: List[GF256], x: GF256) -> GF256:
    """Evaluate at ``x`` with Horner's method: ((a_n*x + a_{n-1})*x + ...) + a_0."""
    accumulator = ZERO
    for coefficient in coefficients:
        accumulator = accumulator * x + coefficient
    return accumulator


def evaluator(polys: List[List[GF256]]) -> Iterator[Share]:
    """
    Lazily evaluate every polynomial at x = 1, 2, ..., 255.

    Each yielded Share holds one y-value per polynomial, all taken at the
    same x. The generator is finite and single-use; bound it with
    itertools.islice to pick how many shares to hand out.
    """
    for x_value in range(1, MAX_X + 1):
        x = GF256(x_value)
        yield Share(x, tuple(evaluate_polynomial(p, x) for p in polys))


def interpolate(shares: List[Share]) -> bytes:
    """
    Recover f(0) for every byte position by Lagrange interpolation.

    Callers must pass shares with distinct x-coordinates and equal
    y-lengths; nothing is validated here. With fewer points than the
    original threshold the result is garbage, not an error.
    """
    if not shares:
        return b''

    return bytes(
        int(_lagrange_at_zero(shares, index))
        for index in range(len(shares[0].y))
    )


def _lagrange_at_zero(shares: List[Share], index: int) -> GF256:
    # Basis at zero: prod over m != j of (0 - x_m) / (x_j - x_m),
    # which in characteristic 2 is x_m / (x_j + x_m).
    terms = []
    for share_j in shares:
        basis = product_gf(
            share_m.x / (share_j.x + share_m.x)
            for share_m in shares
            if share_m.x != share_j.x
        )
        terms.append(basis * share_j.y[index])
    return sum_gf(terms)


def validate_polynomials(polys: List[List[GF256]], threshold: int) -> None:
    """
    Check that a set of polynomials is usable for sharing.

    Raises:
        ValueError: No polynomials, a length other than ``threshold``, or
                    a zero leading coefficient on a non-constant polynomial
    """
    if not polys:
        raise ValueError("No polynomials provided")

    for i, poly in enumerate(polys):
        if len(poly) != threshold:
            raise ValueError(
                f"Polynomial {i} has {len(poly)} coefficients, expected {threshold}"
            )
        if len(poly) > 1 and poly[0].is_zero():
            raise ValueError(f"Polynomial {i} has zero leading coefficient")

"""
Shamir's Secret Sharing over GF(256) with CRC-32 integrity.

Splits a secret into up to 255 shares where any K reconstruct it and
K-1 reveal nothing about it. Each secret byte gets its own random
polynomial; a share is the value of all those polynomials at one x.

Before splitting, a 4-byte big-endian CRC-32 of the secret is appended,
so the checksum is secret-shared along with the data. recover() strips
and verifies it, turning wrong, corrupted or too few shares into a
ChecksumMismatch instead of a silently wrong secret.
"""

import binascii
import struct
from typing import Iterable, Iterator

from . import poly
from .crypto import system_rng
from .errors import (
    ChecksumMismatch,
    DuplicateShares,
    EmptyInput,
    InconsistentShareLength,
    InsufficientShares,
    InvalidThreshold,
)
from .gf256 import GF256
from .share import Share

CHECKSUM_SIZE = 4


def checksum(data: bytes) -> bytes:
    """CRC-32 of ``data`` as 4 big-endian bytes."""
    return struct.pack('>I', binascii.crc32(data) & 0xFFFFFFFF)


class Shamir:
    """A K-of-N sharing scheme. Holds nothing but the threshold."""

    MAX_SHARES = 255

    def __init__(self, threshold: int):
        if not 1 <= threshold <= self.MAX_SHARES:
            raise InvalidThreshold(threshold)
        self._threshold = threshold

    @property
    def threshold(self) -> int:
        return self._threshold

    def __repr__(self):
        return f"Shamir(threshold={self._threshold})"

    def split(self, secret: bytes, rng=None) -> Iterator[Share]:
        """
        Split a secret into shares.

        Args:
            secret: Non-empty secret bytes
            rng: Object with ``randint(a, b)``. Defaults to the system
                 CSPRNG; pass a seeded ChaChaRandom for reproducible shares.

        Returns:
            Lazy iterator of up to 255 shares with x = 1, 2, ... in order.
            Take as many as needed with itertools.islice.

        Raises:
            EmptyInput: If the secret is empty
        """
        if not secret:
            raise EmptyInput()
        if rng is None:
            rng = system_rng()

        secret_with_checksum = bytes(secret) + checksum(bytes(secret))

        polys = [
            poly.random_polynomial(GF256(byte), self._threshold, rng)
            for byte in secret_with_checksum
        ]
        poly.validate_polynomials(polys, self._threshold)

        return poly.evaluator(polys)

    def recover(self, shares: Iterable[Share]) -> bytes:
        """
        Recover the secret from at least ``threshold`` shares.

        Only the first ``threshold`` shares (in input order) are
        interpolated; extra shares are checked for consistency but not used.

        Raises:
            InsufficientShares: Empty input, or fewer shares than the threshold
            InconsistentShareLength: Shares disagree on y-length
            DuplicateShares: Two shares have the same x (never deduplicated)
            ChecksumMismatch: Recovered data fails the CRC-32 check
        """
        shares = list(shares)

        if not shares:
            raise InsufficientShares(self._threshold, 0)

        expected_len = len(shares[0].y)
        seen_x = set()
        for share in shares:
            if len(share.y) != expected_len:
                raise InconsistentShareLength()
            if share.x in seen_x:
                raise DuplicateShares(int(share.x))
            seen_x.add(share.x)

        if len(shares) < self._threshold:
            raise InsufficientShares(self._threshold, len(shares))

        recovered = poly.interpolate(shares[:self._threshold])

        if len(recovered) < CHECKSUM_SIZE:
            raise ChecksumMismatch()

        secret = recovered[:-CHECKSUM_SIZE]
        stored = recovered[-CHECKSUM_SIZE:]

        if checksum(secret) != stored:
            raise ChecksumMismatch()

        return secret

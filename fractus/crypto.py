"""
Fractus randomness sources.

split() takes any object with ``randint``. Two are provided:

- system_rng(): the OS CSPRNG, for normal use.
- ChaChaRandom(seed): a random.Random driven by the ChaCha20 keystream
  from the cryptography library. The same 32-byte seed always yields the
  same stream, which makes share generation reproducible (offline
  ceremonies, test vectors).
"""

import random

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

SEED_SIZE = 32

# 128-bit ChaCha20 nonce (counter + nonce); fixed because the seed is the key
_NONCE = b'\x00' * 16
_RECIP_BPF = 2 ** -53


class ChaChaRandom(random.Random):
    """Deterministic random.Random backed by a ChaCha20 keystream."""

    def __init__(self, seed: bytes):
        self._stream = None
        super().__init__(seed)

    def seed(self, a=None, version=2):
        if not isinstance(a, (bytes, bytearray)) or len(a) != SEED_SIZE:
            raise ValueError(f"Seed must be exactly {SEED_SIZE} bytes")
        cipher = Cipher(algorithms.ChaCha20(bytes(a), _NONCE), mode=None)
        self._stream = cipher.encryptor()

    def _keystream(self, n: int) -> bytes:
        return self._stream.update(b'\x00' * n)

    def random(self) -> float:
        return (int.from_bytes(self._keystream(7), 'big') >> 3) * _RECIP_BPF

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        numbytes = (k + 7) // 8
        x = int.from_bytes(self._keystream(numbytes), 'big')
        return x >> (numbytes * 8 - k)

    def getstate(self):
        raise NotImplementedError("ChaChaRandom state cannot be saved")

    def setstate(self, state):
        raise NotImplementedError("ChaChaRandom state cannot be restored")


def system_rng() -> random.SystemRandom:
    """Cryptographically secure RNG backed by os.urandom."""
    return random.SystemRandom()


def rng_from_seed(seed_hex: str) -> ChaChaRandom:
    """
    Build a deterministic RNG from a hex-encoded 32-byte seed.

    Raises:
        ValueError: Not hex, or not exactly 64 hex characters
    """
    try:
        seed = bytes.fromhex(seed_hex.strip())
    except ValueError:
        raise ValueError("Invalid hex seed")
    if len(seed) != SEED_SIZE:
        raise ValueError(
            f"Seed must be exactly {SEED_SIZE} bytes ({SEED_SIZE * 2} hex characters)"
        )
    return ChaChaRandom(seed)

"""Fractus — Shamir's Secret Sharing over GF(256) with CRC-32 integrity."""

from .shamir import Shamir, checksum
from .share import Share
from .gf256 import GF256
from .crypto import ChaChaRandom, rng_from_seed, system_rng
from .errors import (
    ShamirError, InvalidThreshold, EmptyInput, InsufficientShares,
    InconsistentShareLength, DuplicateShares, ChecksumMismatch, DecodeError,
    ConfigError,
)

__version__ = '1.0.0'

__all__ = [
    'Shamir', 'Share', 'GF256', 'checksum',
    'ChaChaRandom', 'rng_from_seed', 'system_rng',
    'ShamirError', 'InvalidThreshold', 'EmptyInput', 'InsufficientShares',
    'InconsistentShareLength', 'DuplicateShares', 'ChecksumMismatch',
    'DecodeError', 'ConfigError',
]

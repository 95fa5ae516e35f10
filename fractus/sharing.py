"""
Fractus — high-level share handling.

Split, recover, inspect, save and load shares in their portable
ShareData form. The CLI and the web API are thin layers over these
functions; the algebra lives in fractus.shamir.
"""

import logging
from collections import Counter
from itertools import islice
from pathlib import Path
from typing import List, Optional

from .crypto import rng_from_seed
from .errors import InsufficientShares, InvalidThreshold
from .formats import EXTENSIONS, ShareData, encode_share, parse_share
from .shamir import CHECKSUM_SIZE, Shamir

log = logging.getLogger(__name__)


def validate_params(n: int, k: int) -> None:
    """
    Check share count and threshold before splitting.

    Raises:
        InvalidThreshold: k outside 1..255
        ValueError: n below k or above 255
    """
    if not 1 <= k <= Shamir.MAX_SHARES:
        raise InvalidThreshold(k)
    if n < k:
        raise ValueError(f"Number of shares ({n}) must be at least the threshold ({k})")
    if n > Shamir.MAX_SHARES:
        raise ValueError(f"Number of shares must be <= {Shamir.MAX_SHARES}")


def split(secret: bytes, n: int, k: int, seed: Optional[str] = None,
          include_metadata: bool = False) -> List[ShareData]:
    """
    Split a secret into n shares, any k of which recover it.

    Args:
        secret: The secret bytes (non-empty)
        n: Total number of shares
        k: Threshold
        seed: Optional 64-char hex seed for reproducible shares
        include_metadata: Attach id/threshold/total/timestamp (JSON only)

    Returns:
        List of ShareData with x = 1..n
    """
    validate_params(n, k)
    rng = rng_from_seed(seed) if seed else None

    shamir = Shamir(k)
    shares = list(islice(shamir.split(secret, rng), n))
    log.debug("Split %d bytes into %d shares (threshold %d, seeded=%s)",
              len(secret), len(shares), k, bool(seed))

    return [
        ShareData.from_share(share, id=i, total_shares=n, threshold=k,
                             include_metadata=include_metadata)
        for i, share in enumerate(shares, 1)
    ]


def infer_threshold(shares: List[ShareData]) -> int:
    """Threshold from share metadata, else the number of shares given."""
    for data in shares:
        if data.threshold is not None:
            return data.threshold
    return len(shares)


def recover(shares: List[ShareData], threshold: Optional[int] = None,
            verify: bool = False) -> bytes:
    """
    Recover the secret from shares.

    Args:
        shares: Parsed shares (at least the threshold)
        threshold: K; inferred from metadata or share count when None
        verify: Re-split the result and recover it again as a self-check

    Raises:
        ShamirError subclasses from Shamir.recover
    """
    if not shares:
        raise InsufficientShares(threshold or 0, 0)
    if threshold is None:
        threshold = infer_threshold(shares)

    shamir = Shamir(threshold)
    secret = shamir.recover([data.to_share() for data in shares])
    log.debug("Recovered %d bytes from %d shares (threshold %d)",
              len(secret), len(shares), threshold)

    if verify:
        verify_recovery(secret, threshold)

    return secret


def verify_recovery(secret: bytes, threshold: int) -> None:
    """
    Re-split ``secret`` with fresh randomness and recover it again.

    Raises:
        ValueError: If the round trip does not give back the same secret
    """
    shamir = Shamir(threshold)
    fresh = list(islice(shamir.split(secret), threshold))
    if shamir.recover(fresh) != secret:
        raise ValueError("Verification failed: re-splitting produced different secret")
    log.info("Verification successful")


def inspect_shares(shares: List[ShareData], sources: Optional[list] = None) -> dict:
    """
    Describe a set of shares without recovering anything.

    Returns dict with:
        - total_shares, unique_x_coordinates
        - y_length: common y-length, None if empty or inconsistent
        - secret_size: y_length minus the checksum, when known
        - inferred_threshold, sufficient
        - shares: per-share details
        - consistency_issues: human-readable problems found
    """
    sources = sources or [None] * len(shares)
    issues = []

    lengths = {len(data.y) for data in shares}
    y_length = None
    if len(lengths) == 1:
        y_length = lengths.pop()
    elif len(lengths) > 1:
        issues.append("Shares have different y-vector lengths")

    counts = Counter(data.x for data in shares)
    for x, count in sorted(counts.items()):
        if count > 1:
            issues.append(f"Duplicate x-coordinate: {x} (appears {count} times)")

    threshold = infer_threshold(shares) if shares else None

    return {
        'total_shares': len(shares),
        'unique_x_coordinates': len(counts),
        'y_length': y_length,
        'secret_size': y_length - CHECKSUM_SIZE if y_length and y_length >= CHECKSUM_SIZE else None,
        'inferred_threshold': threshold,
        'sufficient': len(counts) >= threshold if threshold else False,
        'shares': [
            {
                'id': data.id,
                'x_coordinate': data.x,
                'y_length': len(data.y),
                'threshold': data.threshold,
                'total_shares': data.total_shares,
                'source': source,
            }
            for data, source in zip(shares, sources)
        ],
        'consistency_issues': issues,
    }


def save_shares(shares: List[ShareData], output_dir: str, fmt: str = 'json',
                base_name: str = 'share') -> List[str]:
    """
    Write each share to its own file.

    Creates: <output_dir>/<base_name>-001.<ext>, -002, etc.

    Returns list of file paths.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, data in enumerate(shares, 1):
        path = out / f"{base_name}-{i:03d}.{EXTENSIONS[fmt]}"
        encoded = encode_share(data, fmt)
        if isinstance(encoded, bytes):
            path.write_bytes(encoded)
        else:
            path.write_text(encoded + '\n')
        paths.append(str(path))

    return paths


def read_share_file(path, fmt: Optional[str] = None) -> ShareData:
    """Load one share file. ``.bin`` files are read as binary unless fmt says otherwise."""
    path = Path(path)
    if fmt is None and path.suffix == '.bin':
        fmt = 'binary'
    if fmt == 'binary':
        return ShareData.from_bytes(path.read_bytes())
    return parse_share(path.read_text(), fmt)


def load_shares(paths: list, fmt: Optional[str] = None) -> tuple:
    """
    Load shares from files and directories.

    Files inside a directory that do not parse as shares are skipped;
    explicitly named files must parse.

    Returns (shares, sources) where sources are the matching file paths.
    """
    shares = []
    sources = []
    for p in paths:
        p = Path(p)
        if p.is_dir():
            for entry in sorted(p.iterdir()):
                if not entry.is_file():
                    continue
                try:
                    shares.append(read_share_file(entry, fmt))
                    sources.append(str(entry))
                except (ValueError, OSError) as e:
                    log.debug("Skipping %s: %s", entry, e)
        else:
            shares.append(read_share_file(p, fmt))
            sources.append(str(p))
    return shares, sources

"""
Share encodings for files, terminals and HTTP.

Every format wraps the same binary share (see fractus.share):

    json    {"x": 1, "y": [..], "id": 1, "threshold": 3, ...}
    hex     lowercase hex of the binary share
    base64  standard base64 of the binary share
    binary  the raw bytes

JSON may carry optional metadata (id, threshold, total_shares,
created_at, description); the other formats carry only x and y.
"""

import base64
import binascii
import json
import string
from datetime import datetime, timezone
from typing import Optional, Union

from .errors import DecodeError
from .share import Share

FORMATS = ('json', 'hex', 'base64', 'binary')

EXTENSIONS = {
    'json': 'json',
    'hex': 'hex',
    'base64': 'b64',
    'binary': 'bin',
}

_METADATA_FIELDS = ('threshold', 'total_shares', 'created_at', 'description')
_BASE64_CHARS = set(string.ascii_letters + string.digits + '+/=')


class ShareData:
    """A share plus the optional metadata written alongside it."""

    def __init__(self, x: int, y: list, id: Optional[int] = None,
                 threshold: Optional[int] = None,
                 total_shares: Optional[int] = None,
                 created_at: Optional[str] = None,
                 description: Optional[str] = None):
        self.x = x
        self.y = list(y)
        self.id = id
        self.threshold = threshold
        self.total_shares = total_shares
        self.created_at = created_at
        self.description = description

    @classmethod
    def from_share(cls, share: Share, id: int = None, total_shares: int = None,
                   threshold: int = None, include_metadata: bool = False) -> 'ShareData':
        data = cls(int(share.x), [int(v) for v in share.y])
        if include_metadata:
            data.id = id
            data.threshold = threshold
            data.total_shares = total_shares
            data.created_at = datetime.now(timezone.utc).isoformat()
        return data

    def to_share(self) -> Share:
        if not self.y:
            raise DecodeError("A share must carry at least one y value")
        try:
            return Share.new(self.x, self.y)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid share values: {e}")

    def to_bytes(self) -> bytes:
        return self.to_share().to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'ShareData':
        share = Share.from_bytes(data)
        return cls.from_share(share)

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, text: str) -> 'ShareData':
        try:
            data = bytes.fromhex(''.join(text.split()))
        except ValueError:
            raise DecodeError("Invalid hex encoding")
        return cls.from_bytes(data)

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode('ascii')

    @classmethod
    def from_base64(cls, text: str) -> 'ShareData':
        try:
            data = base64.b64decode(''.join(text.split()), validate=True)
        except binascii.Error:
            raise DecodeError("Invalid base64 encoding")
        return cls.from_bytes(data)

    def to_dict(self) -> dict:
        d = {'x': self.x, 'y': self.y}
        if self.id is not None:
            d['id'] = self.id
        for field in _METADATA_FIELDS:
            value = getattr(self, field)
            if value is not None:
                d[field] = value
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> 'ShareData':
        try:
            d = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Invalid JSON: {e}")
        if not isinstance(d, dict) or 'x' not in d or not isinstance(d.get('y'), list):
            raise DecodeError("JSON share must be an object with 'x' and a 'y' list")

        data = cls(
            d['x'], d['y'],
            id=d.get('id'),
            threshold=d.get('threshold'),
            total_shares=d.get('total_shares'),
            created_at=d.get('created_at'),
            description=d.get('description'),
        )
        # Surface bad x/y values now rather than at recovery time
        data.to_share()
        return data


def detect_format(text: str) -> str:
    """
    Guess the text format of a share.

    Raises:
        DecodeError: If the content matches none of json/hex/base64
    """
    content = text.strip()
    if not content:
        raise DecodeError("Cannot detect format from empty content")

    if content.startswith('{') and content.endswith('}'):
        return 'json'
    if all(c in string.hexdigits or c.isspace() for c in content):
        return 'hex'
    if all(c in _BASE64_CHARS or c.isspace() for c in content):
        try:
            base64.b64decode(''.join(content.split()), validate=True)
            return 'base64'
        except binascii.Error:
            pass
    raise DecodeError("Cannot detect format from content")


def parse_share(text: str, fmt: Optional[str] = None) -> ShareData:
    """Parse a share from text in ``fmt``, or a detected format if None."""
    content = text.strip()
    fmt = fmt or detect_format(content)

    if fmt == 'json':
        return ShareData.from_json(content)
    if fmt == 'hex':
        return ShareData.from_hex(content)
    if fmt == 'base64':
        return ShareData.from_base64(content)
    if fmt == 'binary':
        raise DecodeError("Binary format requires byte input, not text")
    raise DecodeError(f"Unknown share format: {fmt}")


def encode_share(data: ShareData, fmt: str) -> Union[str, bytes]:
    """Encode a share; text formats return str, binary returns bytes."""
    if fmt == 'json':
        return data.to_json()
    if fmt == 'hex':
        return data.to_hex()
    if fmt == 'base64':
        return data.to_base64()
    if fmt == 'binary':
        return data.to_bytes()
    raise ValueError(f"Unknown share format: {fmt}")

"""Share encodings and TOML configuration."""

import json

import pytest

from fractus.config import Config, Defaults, default_paths, load_config
from fractus.errors import ConfigError, DecodeError
from fractus.formats import ShareData, detect_format, encode_share, parse_share
from fractus.share import Share


def _data(**meta):
    return ShareData(1, [1, 2, 255], **meta)


# ==========================================================================
# Formats
# ==========================================================================

def test_hex_encoding():
    data = _data()
    assert data.to_hex() == "010102ff"
    back = ShareData.from_hex("010102ff")
    assert (back.x, back.y) == (1, [1, 2, 255])
    assert ShareData.from_hex("01 01\n02 ff").y == [1, 2, 255]


def test_base64_encoding():
    data = _data()
    text = data.to_base64()
    assert text == "AQEC/w=="
    back = ShareData.from_base64(text)
    assert (back.x, back.y) == (1, [1, 2, 255])


def test_json_encoding_without_metadata():
    d = json.loads(_data().to_json())
    assert d == {"x": 1, "y": [1, 2, 255]}


def test_json_encoding_with_metadata():
    share = Share.new(2, [9, 8, 7])
    data = ShareData.from_share(share, id=2, total_shares=5, threshold=3, include_metadata=True)
    d = json.loads(data.to_json())
    assert list(d)[:3] == ["x", "y", "id"]
    assert d["threshold"] == 3
    assert d["total_shares"] == 5
    assert "created_at" in d

    back = ShareData.from_json(data.to_json())
    assert back.threshold == 3
    assert back.to_share() == share


def test_from_share_without_metadata():
    data = ShareData.from_share(Share.new(2, [9]), id=2, total_shares=5, threshold=3)
    assert data.id is None
    assert data.threshold is None
    assert data.created_at is None


def test_binary_encoding():
    data = _data()
    assert encode_share(data, "binary") == b"\x01\x01\x02\xff"
    assert ShareData.from_bytes(b"\x01\x01\x02\xff").y == [1, 2, 255]


@pytest.mark.parametrize("text, fmt", [
    ('{"x": 1, "y": [2]}', "json"),
    ("0102", "hex"),
    ("AQL/", "base64"),
    ("  0102\n", "hex"),
])
def test_detect_format(text, fmt):
    assert detect_format(text) == fmt


@pytest.mark.parametrize("text", ["", "   ", "not a share!"])
def test_detect_format_rejects(text):
    with pytest.raises(DecodeError):
        detect_format(text)


def test_parse_share_autodetect():
    for fmt in ("json", "hex", "base64"):
        parsed = parse_share(encode_share(_data(), fmt))
        assert (parsed.x, parsed.y) == (1, [1, 2, 255])


@pytest.mark.parametrize("text, fmt", [
    ("zz", None),
    ("01", "hex"),
    ("0g", "hex"),
    ("@@@@", "base64"),
    ('{"x": 1, "y": []}', "json"),
    ('{"x": 300, "y": [1]}', "json"),
    ('{"x": 1}', "json"),
    ('[1, 2]', "json"),
    ("{not json}", "json"),
    ("0102", "binary"),
])
def test_parse_share_rejects(text, fmt):
    with pytest.raises(DecodeError):
        parse_share(text, fmt)


@pytest.mark.parametrize("text", [
    '{"x": 1.9, "y": [1, 2]}',
    '{"x": true, "y": [1, 2]}',
    '{"x": 1, "y": [1.5, 2]}',
    '{"x": 1, "y": [false, 2]}',
    '{"x": "1", "y": [1, 2]}',
])
def test_json_non_integer_values_rejected(text):
    with pytest.raises(DecodeError):
        parse_share(text, "json")


def test_share_data_to_share_rejects_non_integers():
    with pytest.raises(DecodeError):
        ShareData(2.0, [1, 2]).to_share()
    with pytest.raises(DecodeError):
        ShareData(1, [True]).to_share()


def test_decode_errors_are_value_errors():
    with pytest.raises(ValueError):
        parse_share("01", "hex")


# ==========================================================================
# Config
# ==========================================================================

def test_config_defaults(workdir):
    config = load_config()
    assert config.path is None
    assert config.defaults.threshold == 3
    assert config.defaults.shares == 5
    assert config.defaults.format == "json"


def test_config_explicit_path(workdir):
    path = workdir / "custom.toml"
    path.write_text('[defaults]\nthreshold = 2\nshares = 4\nformat = "hex"\n')
    config = load_config(str(path))
    assert config.path == path
    assert (config.defaults.threshold, config.defaults.shares, config.defaults.format) == (2, 4, "hex")


def test_config_partial_section(workdir):
    path = workdir / "partial.toml"
    path.write_text("[defaults]\nshares = 7\n")
    config = load_config(str(path))
    assert config.defaults.shares == 7
    assert config.defaults.threshold == 3


def test_config_search_order(workdir):
    (workdir / ".fractus.toml").write_text("[defaults]\nshares = 9\n")
    assert load_config().defaults.shares == 9

    (workdir / "fractus.toml").write_text("[defaults]\nshares = 8\n")
    assert load_config().defaults.shares == 8

    xdg = workdir / "xdg" / "fractus"
    xdg.mkdir(parents=True)
    (xdg / "config.toml").write_text("[defaults]\nshares = 6\n")
    assert load_config().defaults.shares == 6


def test_default_paths(workdir):
    paths = default_paths()
    assert paths[0] == workdir / "xdg" / "fractus" / "config.toml"
    assert [p.name for p in paths[1:]] == ["fractus.toml", ".fractus.toml"]


@pytest.mark.parametrize("body", [
    "[defaults]\nthreshold = 0\n",
    "[defaults]\nshares = 256\n",
    "[defaults]\nthreshold = true\n",
    '[defaults]\nthreshold = "3"\n',
    '[defaults]\nformat = "xml"\n',
    'defaults = 3\n',
    "[defaults\n",
])
def test_config_invalid(workdir, body):
    path = workdir / "bad.toml"
    path.write_text(body)
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_config_missing_explicit_path(workdir):
    with pytest.raises(ConfigError):
        load_config(str(workdir / "missing.toml"))


def test_config_from_dict():
    config = Config.from_dict({"defaults": {"format": "base64"}})
    assert config.defaults.format == "base64"
    with pytest.raises(ConfigError):
        Defaults(shares=0).validate()

"""Command-line interface, driven through main(argv)."""

import io
import json
import sys

import pytest

from fractus.cli import build_parser, main

SEED = "90" * 32
SECRET = b"launch codes: 0000"


@pytest.fixture
def secret_file(workdir):
    path = workdir / "secret.txt"
    path.write_bytes(SECRET)
    return path


def _split_to_dir(secret_file, *extra):
    out = secret_file.parent / "shares"
    rc = main(["split", "-n", "5", "-k", "3", "-i", str(secret_file), "-o", str(out), *extra])
    assert rc == 0
    return out


def test_split_then_recover(secret_file, capsys):
    out = _split_to_dir(secret_file)
    files = sorted(p.name for p in out.iterdir())
    assert files == [f"share-00{i}.json" for i in range(1, 6)]
    assert "Successfully generated 5 shares with threshold 3" in capsys.readouterr().err

    recovered = secret_file.parent / "recovered.txt"
    rc = main(["recover", str(out / "share-002.json"), str(out / "share-004.json"),
               str(out / "share-005.json"), "-o", str(recovered)])
    assert rc == 0
    assert recovered.read_bytes() == SECRET


def test_recover_from_directory_with_metadata(secret_file):
    out = _split_to_dir(secret_file, "--include-metadata")
    recovered = secret_file.parent / "recovered.bin"
    assert main(["recover", str(out), "-o", str(recovered), "--verify"]) == 0
    assert recovered.read_bytes() == SECRET


def test_recover_to_stdout(secret_file, capsysbinary):
    out = _split_to_dir(secret_file)
    capsysbinary.readouterr()
    assert main(["recover", str(out), "-t", "3"]) == 0
    assert capsysbinary.readouterr().out == SECRET


def test_split_stdout_seeded(secret_file, capsys):
    args = ["split", "-n", "3", "-k", "2", "-i", str(secret_file),
            "--stdout", "-f", "hex", "--seed", SEED]
    assert main(args) == 0
    first = capsys.readouterr().out.split()
    assert main(args) == 0
    second = capsys.readouterr().out.split()
    assert len(first) == 3
    assert first == second
    assert [line[:2] for line in first] == ["01", "02", "03"]


def test_recover_from_stdin(secret_file, capsys, monkeypatch):
    assert main(["split", "-n", "3", "-k", "2", "-i", str(secret_file),
                 "--stdout", "-f", "base64"]) == 0
    lines = capsys.readouterr().out

    monkeypatch.setattr(sys, "stdin", io.StringIO(lines))
    recovered = secret_file.parent / "out.txt"
    assert main(["recover", "--stdin", "-t", "2", "-o", str(recovered)]) == 0
    assert recovered.read_bytes() == SECRET


def test_split_from_stdin(workdir, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(SECRET)))
    assert main(["split", "-n", "2", "-k", "2", "-o", str(workdir / "s"), "-f", "binary"]) == 0
    assert main(["recover", str(workdir / "s"), "-o", str(workdir / "r")]) == 0
    assert (workdir / "r").read_bytes() == SECRET


def test_split_from_env_var(workdir, monkeypatch):
    monkeypatch.setenv("FRACTUS_SECRET", "hunter2")
    assert main(["split", "-n", "3", "-k", "2", "--env-var", "FRACTUS_SECRET",
                 "-o", str(workdir / "s"), "-f", "hex"]) == 0
    assert main(["recover", str(workdir / "s" / "share-001.hex"),
                 str(workdir / "s" / "share-003.hex"), "-o", str(workdir / "r")]) == 0
    assert (workdir / "r").read_bytes() == b"hunter2"


def test_split_uses_config_defaults(secret_file):
    (secret_file.parent / "fractus.toml").write_text(
        '[defaults]\nthreshold = 2\nshares = 4\nformat = "base64"\n'
    )
    out = secret_file.parent / "shares"
    assert main(["split", "-i", str(secret_file), "-o", str(out)]) == 0
    assert sorted(p.name for p in out.iterdir()) == [f"share-00{i}.b64" for i in range(1, 5)]


def test_split_explicit_config(secret_file):
    config = secret_file.parent / "alt.toml"
    config.write_text("[defaults]\nshares = 2\nthreshold = 2\n")
    out = secret_file.parent / "shares"
    assert main(["-c", str(config), "split", "-i", str(secret_file), "-o", str(out)]) == 0
    assert len(list(out.iterdir())) == 2


@pytest.mark.parametrize("argv, message", [
    (["split", "-n", "2", "-k", "3"], "must be at least the threshold"),
    (["split", "-n", "5", "-k", "0"], "Threshold must be between 1 and 255"),
    (["split", "--env-var", "X", "-i", "secret.txt"], "Only one input method"),
    (["split", "--env-var", "FRACTUS_MISSING_VAR"], "not found"),
    (["split", "--seed", "abcd", "-i", "secret.txt"], "Seed must be exactly 32 bytes"),
    (["recover"], "No share files given"),
    (["recover", "missing.json"], "Error:"),
    (["recover", "--stdin", "-f", "binary"], "binary shares"),
    (["-c", "missing.toml", "split"], "Failed to read config file"),
])
def test_errors_are_reported(secret_file, capsys, argv, message):
    assert main(argv) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:")
    assert message in err


def test_empty_secret_rejected(workdir, capsys):
    (workdir / "empty.txt").write_bytes(b"")
    assert main(["split", "-i", str(workdir / "empty.txt")]) == 1
    assert "Secret cannot be empty" in capsys.readouterr().err


def test_recover_insufficient(secret_file, capsys):
    out = _split_to_dir(secret_file)
    capsys.readouterr()
    rc = main(["recover", str(out / "share-001.json"), str(out / "share-002.json"), "-t", "3"])
    assert rc == 1
    assert "Need at least 3 shares, but only 2 provided" in capsys.readouterr().err


def test_info_json(secret_file, capsys):
    out = _split_to_dir(secret_file, "--include-metadata")
    capsys.readouterr()
    assert main(["info", str(out), "--output-format", "json"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["total_shares"] == 5
    assert info["inferred_threshold"] == 3
    assert info["secret_size"] == len(SECRET)
    assert info["sufficient"] is True
    assert info["shares"][0]["source"].endswith("share-001.json")


def test_info_table(secret_file, capsys):
    out = _split_to_dir(secret_file)
    capsys.readouterr()
    assert main(["info", str(out / "share-001.json"), "--detailed"]) == 0
    text = capsys.readouterr().out
    assert "Share Set Information" in text
    assert "Individual Shares:" in text
    assert "Sufficient shares for recovery (1 >= 1)" in text


def test_info_reports_inconsistency(secret_file, capsys):
    out = _split_to_dir(secret_file)
    capsys.readouterr()
    share = out / "share-001.json"
    assert main(["info", str(share), str(share)]) == 1
    assert "Duplicate x-coordinate: 1 (appears 2 times)" in capsys.readouterr().out


def test_quiet_suppresses_info(secret_file, capsys):
    out = secret_file.parent / "shares"
    assert main(["-q", "split", "-n", "3", "-k", "2", "-i", str(secret_file), "-o", str(out)]) == 0
    assert capsys.readouterr().err == ""


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: fractus" in capsys.readouterr().out


def test_parser_defaults():
    args = build_parser().parse_args(["split"])
    assert args.shares is None
    assert args.threshold is None
    assert args.input == "-"
    assert args.base_name == "share"

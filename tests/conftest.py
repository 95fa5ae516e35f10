import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run in an empty directory with no user config visible."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers the CLI installs on the package logger."""
    yield
    logger = logging.getLogger("fractus")
    logger.handlers[:] = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

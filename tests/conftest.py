import logging
import shutil
from pathlib import Path

import pytest

from patgen.paths import DATA_DIR

SAMPLES_DIR = DATA_DIR / "node_Structure"


@pytest.fixture
def samples_dir() -> Path:
    return SAMPLES_DIR


@pytest.fixture
def patterns_dir(tmp_path: Path) -> Path:
    """Writable copy of the bundled sample patterns."""
    target = tmp_path / "patterns"
    shutil.copytree(SAMPLES_DIR, target)
    return target


@pytest.fixture
def write_xml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def restore_root_logging():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)

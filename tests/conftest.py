"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("unfurl"):
        del sys.modules[module_name]


@pytest.fixture
def write_files(tmp_path: Path):
    """Write ``{relative_path: text}`` under tmp_path and return tmp_path."""

    def _write(files: dict[str, str]) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(text.encode("utf-8"))
        return tmp_path

    return _write

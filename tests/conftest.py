import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

SRC_ROOT = Path(__file__).resolve().parent.parent / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture(autouse=True)
def configure_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("CVM_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("CVM_CAPACITY", "1000")
    monkeypatch.setenv("CVM_KEY_STRATEGY", "builtin")
    monkeypatch.setenv("CVM_SEED", "0x123456789")
    monkeypatch.setenv("CVM_LOG_LEVEL", "WARNING")
    yield

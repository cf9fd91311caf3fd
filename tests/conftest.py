import sys
from pathlib import Path

import json5
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from modproxy.app.config import resetConfig
from modproxy.app.context import PROCESS_REGISTRY



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture(autouse=True)
def _cleanProcessRegistry():
    """Every test starts without booted config or registered services."""
    resetConfig()
    yield
    resetConfig()
    PROCESS_REGISTRY.unregister("resources.resolver")
    PROCESS_REGISTRY.unregister("mods.registry")



@pytest.fixture()
def writeModsConfig(tmp_path):
    """Write a mods config file and return its path."""
    def _write(entries, name: str = "mods.json") -> Path:
        path = tmp_path / name
        path.write_text(json5.dumps(entries, indent=2), encoding="utf-8")
        return path
    return _write



@pytest.fixture()
def writeFile():
    def _write(path: Path, data: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return _write

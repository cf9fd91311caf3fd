from pathlib import Path

import pytest

from modproxy.config.providers import DefaultsProvider, FileProvider, OverrideProvider
from modproxy.config.service import DEFAULTS_FILE


# ----------------------------
# OverrideProvider tests
# ----------------------------

def test_overrideProvider_reads_nested_keys() -> None:
    provider = OverrideProvider({"proxy": {"remoteDomain": "https://a.example", "xorKey": 7}})

    assert provider.get("proxy.remoteDomain") == "https://a.example"
    assert provider.get("proxy.xorKey") == 7
    assert provider.get("proxy.userAgent") is None


def test_overrideProvider_empty() -> None:
    assert OverrideProvider().to_dict() == {}
    assert OverrideProvider(None).get("a") is None


def test_overrideProvider_is_isolated_from_caller_data() -> None:
    base = {"http": {"timeoutMs": 5}}
    provider = OverrideProvider(base)
    base["http"]["timeoutMs"] = 10
    provider.to_dict()["http"]["timeoutMs"] = 20

    assert provider.get("http.timeoutMs") == 5


# ----------------------------
# DefaultsProvider tests
# ----------------------------

def test_defaultsProvider_loads_shipped_defaults() -> None:
    provider = DefaultsProvider(path=DEFAULTS_FILE)

    assert isinstance(provider.get("proxy.xorKey"), int)
    assert provider.get("mods.configPath") == "mods.json"
    assert provider.get("http.timeoutMs") > 0


def test_defaultsProvider_to_dict_is_a_copy() -> None:
    base = {"proxy": {"xorKey": 1}}
    snapshot = DefaultsProvider(data=base).to_dict()
    snapshot["proxy"]["xorKey"] = 99
    assert base["proxy"]["xorKey"] == 1


def test_defaultsProvider_requires_exactly_one_source(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        DefaultsProvider()
    with pytest.raises(ValueError):
        DefaultsProvider(data={}, path=tmp_path / "x.json5")


def test_defaultsProvider_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        DefaultsProvider(path=tmp_path / "missing.json5")


def test_defaultsProvider_non_object_file(tmp_path: Path) -> None:
    path = tmp_path / "list.json5"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(TypeError):
        DefaultsProvider(path=path)


def test_defaultsProvider_syntax_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json5"
    path.write_text("{ proxy: ", encoding="utf-8")
    with pytest.raises(ValueError):
        DefaultsProvider(path=path)


# ----------------------------
# FileProvider tests
# ----------------------------

def test_fileProvider_missing_file_starts_empty(tmp_path: Path) -> None:
    provider = FileProvider(tmp_path / "global.json5")
    assert provider.to_dict() == {}


def test_fileProvider_reads_json5(tmp_path: Path) -> None:
    path = tmp_path / "global.json5"
    path.write_text("{\n  // user cache\n  proxy: {localDir: '/var/cache/modproxy',},\n}", encoding="utf-8")

    assert FileProvider(path).get("proxy.localDir") == "/var/cache/modproxy"


def test_fileProvider_parse_error_starts_empty(tmp_path: Path, caplog) -> None:
    path = tmp_path / "global.json5"
    path.write_text("{ broken", encoding="utf-8")

    provider = FileProvider(path)

    assert provider.to_dict() == {}
    assert "parse failed" in caplog.text


def test_fileProvider_non_object_raises(tmp_path: Path) -> None:
    path = tmp_path / "global.json5"
    path.write_text('"just a string"', encoding="utf-8")
    with pytest.raises(TypeError):
        FileProvider(path)


def test_fileProvider_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError):
        FileProvider(tmp_path)

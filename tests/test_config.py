"""
Settings loading: defaults, YAML/JSON files and environment overrides.
"""

import json
from pathlib import Path

import pytest

from patgen.config_manager import _ENV_KEYS, GeneratorSettings, load_settings
from patgen.errors import ResourceError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = load_settings(use_env=False)
    assert settings.first_refinement_index == 0
    assert settings.service_first_refinement_index == 1
    assert settings.write_grammar is True
    assert settings.port == 8080
    assert settings.log_file is None


def test_yaml_file_with_patgen_section(tmp_path):
    config = tmp_path / "settings.yaml"
    config.write_text(
        "patgen:\n"
        f"  workspace_dir: {tmp_path / 'ws'}\n"
        "  port: '9090'\n"
        "  write_grammar: 'no'\n"
        "  host: changeme\n"
        "  first_refinement_index: 2\n"
        "  unknown_key: 1\n",
        encoding="utf-8",
    )
    settings = load_settings(config)
    assert settings.workspace_dir == tmp_path / "ws"
    assert settings.port == 9090
    assert settings.write_grammar is False
    assert settings.host == GeneratorSettings().host
    assert settings.first_refinement_index == 2


def test_json_file(tmp_path):
    config = tmp_path / "settings.json"
    config.write_text(json.dumps({"patterns_dir": "~/patterns", "log_level": "debug"}), encoding="utf-8")
    settings = load_settings(config)
    assert settings.patterns_dir == Path("~/patterns").expanduser()
    assert settings.log_level == "debug"


def test_environment_overrides_file(tmp_path, monkeypatch):
    config = tmp_path / "settings.yaml"
    config.write_text("port: 9090\nfirst_refinement_index: 1\n", encoding="utf-8")
    monkeypatch.setenv("PATGEN_PORT", "7000")
    monkeypatch.setenv("PATGEN_WRITE_GRAMMAR", "false")
    monkeypatch.setenv("PATGEN_SERVICE_FIRST_REFINEMENT", "3")
    settings = load_settings(config)
    assert settings.port == 7000
    assert settings.write_grammar is False
    assert settings.first_refinement_index == 1
    assert settings.service_first_refinement_index == 3
    assert load_settings(config, use_env=False).port == 9090


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ResourceError):
        load_settings(tmp_path / "nope.yaml")


@pytest.mark.parametrize("content", ["patgen: [unclosed", "- a\n- b\n"])
def test_invalid_file(tmp_path, content):
    config = tmp_path / "settings.yaml"
    config.write_text(content, encoding="utf-8")
    with pytest.raises(ResourceError):
        load_settings(config)


def test_negative_first_refinement(monkeypatch):
    monkeypatch.setenv("PATGEN_FIRST_REFINEMENT", "-1")
    with pytest.raises(ValueError):
        load_settings()


def test_negative_service_first_refinement(monkeypatch):
    monkeypatch.setenv("PATGEN_SERVICE_FIRST_REFINEMENT", "-2")
    with pytest.raises(ValueError):
        load_settings()

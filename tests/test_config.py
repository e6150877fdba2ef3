import json
import os
import tempfile

import pytest
from jsonschema import ValidationError

from emotion_backend.utils.config import DEFAULT_CONFIG, load_config, validate_config


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)
    return str(path)


def test_load_default_config(monkeypatch):
    # Ensure no config exists
    with tempfile.TemporaryDirectory() as td:
        monkeypatch.setenv("EMOTION_BACKEND_CONFIG", os.path.join(td, "nope.json"))
        cfg = load_config(os.path.join(td, "missing.json"))
        assert cfg["analysis_method"] == "rule"
        assert cfg["cache"] == {"max_size": 100, "ttl_seconds": 86400}


def test_defaults_are_not_shared(monkeypatch, tmp_path):
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", str(tmp_path / "nope.json"))
    cfg = load_config(str(tmp_path / "missing.json"))
    cfg["cache"]["max_size"] = 1
    assert DEFAULT_CONFIG["cache"]["max_size"] == 100


def test_load_from_env(monkeypatch, tmp_path):
    path = _write(tmp_path / "config.json", {"analysis_method": "llm", "llm": {"provider": "deepseek"}})
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", path)

    cfg = load_config()

    assert cfg["analysis_method"] == "llm"
    assert cfg["llm"]["provider"] == "deepseek"
    # Missing keys completed from defaults
    assert cfg["llm"]["timeout"] == 30
    assert cfg["batch"]["max_workers"] == 8


def test_explicit_path_wins(monkeypatch, tmp_path):
    env_path = _write(tmp_path / "env.json", {"analysis_method": "local"})
    explicit = _write(tmp_path / "explicit.json", {"analysis_method": "llm"})
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", env_path)

    assert load_config(explicit)["analysis_method"] == "llm"


def test_invalid_file_is_skipped(monkeypatch, tmp_path):
    bad = _write(tmp_path / "bad.json", {"analysis_method": "magic"})
    good = _write(tmp_path / "good.json", {"analysis_method": "llm"})
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", good)

    assert load_config(bad)["analysis_method"] == "llm"


def test_malformed_json_is_skipped(monkeypatch, tmp_path):
    broken = _write(tmp_path / "broken.json", "{not json")
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", str(tmp_path / "nope.json"))

    assert load_config(broken)["analysis_method"] == "rule"


def test_config_is_read_fresh(monkeypatch, tmp_path):
    path = tmp_path / "config.json"
    monkeypatch.setenv("EMOTION_BACKEND_CONFIG", str(tmp_path / "nope.json"))

    _write(path, {"analysis_method": "rule"})
    assert load_config(str(path))["analysis_method"] == "rule"
    _write(path, {"analysis_method": "llm"})
    assert load_config(str(path))["analysis_method"] == "llm"


def test_validate_good_config():
    cfg = {
        "analysis_method": "llm",
        "llm": {"provider": "siliconflow", "model": "Qwen/Qwen3-14B", "timeout": 20},
        "cache": {"max_size": 50, "ttl_seconds": 3600},
        "batch": {"max_workers": 4},
        "log_level": "DEBUG",
    }
    # Should not raise
    validate_config(cfg)


@pytest.mark.parametrize(
    "cfg",
    [
        {"analysis_method": "invalid"},
        {"llm": {"provider": "siliconflow"}},
        {"analysis_method": "rule", "cache": {"max_size": 0}},
        {"analysis_method": "rule", "batch": {"max_workers": 0}},
        {"analysis_method": "rule", "llm": {"unknown": True}},
        {"analysis_method": "rule", "log_level": "LOUD"},
    ],
)
def test_validate_bad_config(cfg):
    with pytest.raises(ValidationError):
        validate_config(cfg)


def test_validate_non_dict():
    with pytest.raises(ValueError):
        validate_config(["analysis_method", "rule"])

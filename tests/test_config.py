from __future__ import annotations

import pytest

from problemDetails.config import ClientConfig, ConfigError, load_config


def test_defaults_without_file(tmp_path):
    cfg = load_config(tmp_path / "missing.yml")
    assert cfg == ClientConfig()
    assert cfg.user_agent.startswith("problemDetails/")


def test_yaml_values_are_coerced(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text(
        "client:\n"
        "  timeout_seconds: '2.5'\n"
        "  max_attempts: 0\n"
        "  user_agent: probe/1.0\n"
        "logging:\n"
        "  sample_rate: 4\n"
        "  max_details_bytes: not-a-number\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.timeout_seconds == 2.5
    assert cfg.max_attempts == 1
    assert cfg.user_agent == "probe/1.0"
    assert cfg.log_sample_rate == 1.0
    assert cfg.log_max_details_bytes == 4096


def test_env_path_and_overrides(monkeypatch, tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("client:\n  timeout_seconds: 3\n  max_attempts: 2\n", encoding="utf-8")
    monkeypatch.setenv("PROBLEM_DETAILS_CONFIG", str(path))
    monkeypatch.setenv("PROBLEM_DETAILS_MAX_ATTEMPTS", "6")
    cfg = load_config()
    assert cfg.timeout_seconds == 3.0
    assert cfg.max_attempts == 6


def test_invalid_env_override_keeps_file_value(monkeypatch, tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("client:\n  timeout_seconds: 3\n", encoding="utf-8")
    monkeypatch.setenv("PROBLEM_DETAILS_TIMEOUT", "soon")
    assert load_config(path).timeout_seconds == 3.0


def test_empty_file_yields_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ClientConfig()


@pytest.mark.parametrize("text", ["- a\n- b\n", "client: [1, 2]\n", "client: {unclosed\n"])
def test_malformed_files_raise(tmp_path, text):
    path = tmp_path / "config.yml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("value", ["0", "-2", "nan"])
def test_non_positive_env_timeout_keeps_file_value(monkeypatch, tmp_path, value):
    path = tmp_path / "config.yml"
    path.write_text("client:\n  timeout_seconds: 3\n", encoding="utf-8")
    monkeypatch.setenv("PROBLEM_DETAILS_TIMEOUT", value)
    assert load_config(path).timeout_seconds == 3.0


def test_non_positive_file_timeout_uses_default(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("client:\n  timeout_seconds: -1\n", encoding="utf-8")
    assert load_config(path).timeout_seconds == ClientConfig().timeout_seconds


def test_zero_env_attempts_keeps_file_value(monkeypatch, tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("client:\n  max_attempts: 4\n", encoding="utf-8")
    monkeypatch.setenv("PROBLEM_DETAILS_MAX_ATTEMPTS", "0")
    assert load_config(path).max_attempts == 4

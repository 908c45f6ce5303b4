# tests/config/test_config_loader.py
from pathlib import Path

import pytest

from cmdprofile.config import ConfigLoader, ProfilerConfig
from cmdprofile.exceptions import ConfigError, SetupError


def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path):
    config = ConfigLoader(cwd=tmp_path).config_data

    assert config == ProfilerConfig()
    assert config.interval == 0.25
    assert config.log_file == Path("cmdprofile.log")
    assert config.baseline_window == pytest.approx(1.0 + 0.25 + 0.001)


def test_default_file_in_cwd_is_loaded(tmp_path):
    write(tmp_path / "cmdprofile.yaml", "interval: 0.5\nbaseline: 2\nlog_file: logs/run.log\ngpu_enabled: false\n")

    config = ConfigLoader(cwd=tmp_path).config_data

    assert config.interval == 0.5
    assert config.baseline == 2.0
    assert isinstance(config.baseline, float)
    assert config.log_file == Path("logs/run.log")
    assert config.gpu_enabled is False


def test_env_file_overrides_base(tmp_path):
    base = write(tmp_path / "profile.yaml", "interval: 0.5\nbaseline: 2\n")
    write(tmp_path / "profile_ci.yaml", "baseline: 0\n")

    config = ConfigLoader(base, env="ci").config_data

    assert config.interval == 0.5
    assert config.baseline == 0.0


def test_cli_overrides_win_and_none_is_ignored(tmp_path):
    base = write(tmp_path / "profile.yaml", "interval: 0.5\ngpu_enabled: true\n")

    config = ConfigLoader(base, overrides={"interval": 1.0, "baseline": None, "gpu_enabled": False}).config_data

    assert config.interval == 1.0
    assert config.baseline == 1.0
    assert config.gpu_enabled is False


def test_empty_file_means_defaults(tmp_path):
    base = write(tmp_path / "profile.yaml", "")

    assert ConfigLoader(base).config_data == ProfilerConfig()


@pytest.mark.parametrize("text,match", [
    ("interval: 0.01\n", "interval"),
    ("baseline: -1\n", "baseline"),
    ("guard: -0.5\n", "guard"),
    ("gpu_timeout: 0\n", "gpu_timeout"),
    ("interval: fast\n", "number"),
    ("interval: true\n", "number"),
    ("gpu_enabled: maybe\n", "gpu_enabled"),
    ("colour: blue\n", "Unknown config keys: colour"),
    ("- just\n- a list\n", "mapping"),
    ("interval: [unclosed\n", "Failed to load"),
])
def test_invalid_config_raises(tmp_path, text, match):
    base = write(tmp_path / "profile.yaml", text)

    with pytest.raises(ConfigError, match=match):
        ConfigLoader(base)


def test_missing_explicit_files_raise(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        ConfigLoader(tmp_path / "nope.yaml")

    base = write(tmp_path / "profile.yaml", "interval: 0.5\n")
    with pytest.raises(ConfigError, match="Environment config file not found"):
        ConfigLoader(base, env="prod")


def test_config_error_is_a_setup_error():
    assert issubclass(ConfigError, SetupError)

import pytest
from pydantic import ValidationError

from config import Config

ENV_NAMES = ["LOG_LEVEL", "COMMIT_POLICY", "INPUT_PATH", "OUTPUT_PATH", "DEBUG"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(f"TO_SCHEDULER_{name}", raising=False)


def test_defaults():
    config = Config(_env_file=None)
    assert config.log_level == "INFO"
    assert config.commit_policy == "noop"
    assert config.input_path == "data/in.txt"
    assert config.output_path == "data/out"
    assert config.debug is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TO_SCHEDULER_LOG_LEVEL", "debug")
    monkeypatch.setenv("TO_SCHEDULER_COMMIT_POLICY", "RESET")
    monkeypatch.setenv("TO_SCHEDULER_INPUT_PATH", "in.txt")
    monkeypatch.setenv("TO_SCHEDULER_OUTPUT_PATH", "out")
    monkeypatch.setenv("TO_SCHEDULER_DEBUG", "on")

    config = Config(_env_file=None)
    assert config.log_level == "DEBUG"
    assert config.commit_policy == "reset"
    assert (config.input_path, config.output_path) == ("in.txt", "out")
    assert config.debug is True


@pytest.mark.parametrize("name,value", [
    ("COMMIT_POLICY", "bogus"),
    ("LOG_LEVEL", "loud"),
    ("DEBUG", "maybe"),
])
def test_invalid_environment_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(f"TO_SCHEDULER_{name}", value)
    with pytest.raises(ValidationError):
        Config(_env_file=None)

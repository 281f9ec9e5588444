# tests/unit/test_config.py

import pytest

from s3_uploader.config import get_config
from s3_uploader.exceptions import ConfigurationError

_ALL_VARS = (
    "SERVICE_NAME",
    "LOG_LEVEL",
    "METRICS_NAMESPACE",
    "FAILURE_DELAY_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "SCRATCH_DIR",
    "SUBSTITUTE_RESOLUTION_ERRORS",
)


@pytest.fixture(autouse=True)
def clear_config_cache():
    """
    Clear the lru_cache for get_config before and after each test so every
    test sees a configuration built from its own monkeypatched environment.
    """
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ALL_VARS:
        monkeypatch.delenv(name, raising=False)


def test_get_config_happy_path(clean_env, monkeypatch):
    """Tests that configuration loads correctly when all env vars are set."""
    monkeypatch.setenv("SERVICE_NAME", "uploader")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("METRICS_NAMESPACE", "Uploads")
    monkeypatch.setenv("FAILURE_DELAY_SECONDS", "2.5")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("SCRATCH_DIR", "/var/scratch")
    monkeypatch.setenv("SUBSTITUTE_RESOLUTION_ERRORS", "yes")

    config = get_config()

    assert config.service_name == "uploader"
    assert config.log_level == "DEBUG"
    assert config.metrics_namespace == "Uploads"
    assert config.failure_delay_seconds == 2.5
    assert config.http_timeout_seconds == 5.0
    assert config.scratch_dir == "/var/scratch"
    assert config.substitute_resolution_errors is True


def test_get_config_uses_defaults(clean_env):
    """Tests that every variable falls back to its default value."""
    config = get_config()

    assert config.service_name == "s3-file-uploader"
    assert config.log_level == "INFO"
    assert config.metrics_namespace == "S3FileUploader"
    assert config.failure_delay_seconds == 10.0
    assert config.http_timeout_seconds == 30.0
    assert config.scratch_dir == "/tmp"
    assert config.substitute_resolution_errors is False


def test_failure_delay_may_be_zero(clean_env, monkeypatch):
    monkeypatch.setenv("FAILURE_DELAY_SECONDS", "0")
    assert get_config().failure_delay_seconds == 0.0


@pytest.mark.parametrize(
    "name, value",
    [
        ("FAILURE_DELAY_SECONDS", "-1"),
        ("FAILURE_DELAY_SECONDS", "ten"),
        ("FAILURE_DELAY_SECONDS", "nan"),
        ("FAILURE_DELAY_SECONDS", "inf"),
        ("HTTP_TIMEOUT_SECONDS", "inf"),
        ("HTTP_TIMEOUT_SECONDS", "0"),
        ("LOG_LEVEL", "VERBOSE"),
        ("SERVICE_NAME", "   "),
    ],
)
def test_get_config_invalid_values(clean_env, monkeypatch, name, value):
    """Tests that ConfigurationError is raised for invalid values."""
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_config()


def test_get_config_caching(clean_env):
    """Tests that get_config returns the same instance when called multiple times."""
    assert get_config() is get_config()

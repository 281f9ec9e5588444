import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration loaded from environment variables."""

    # --- Observability ---
    service_name: str
    log_level: str
    metrics_namespace: str

    # --- Behaviour ---
    failure_delay_seconds: float
    http_timeout_seconds: float
    scratch_dir: str
    substitute_resolution_errors: bool

    @classmethod
    def load_from_env(cls) -> "AppConfig":
        """
        Loads configuration from environment variables, performing validation and type casting.
        Fails fast with a ConfigurationError if anything is invalid.
        """
        try:
            service_name = os.getenv("SERVICE_NAME", "s3-file-uploader").strip()
            if not service_name:
                raise ValueError("SERVICE_NAME must not be empty.")

            metrics_namespace = os.getenv("METRICS_NAMESPACE", "S3FileUploader").strip()
            if not metrics_namespace:
                raise ValueError("METRICS_NAMESPACE must not be empty.")

            log_level = os.getenv("LOG_LEVEL", "INFO").upper()
            allowed_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            if log_level not in allowed_log_levels:
                raise ValueError(
                    f"LOG_LEVEL must be one of {allowed_log_levels}, not '{log_level}'"
                )

            # Throttles CloudFormation before a FAILED response; no retry happens.
            failure_delay_seconds = float(os.getenv("FAILURE_DELAY_SECONDS", "10"))
            if not math.isfinite(failure_delay_seconds) or failure_delay_seconds < 0:
                raise ValueError("FAILURE_DELAY_SECONDS must be a finite, non-negative number.")

            http_timeout_seconds = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
            if not math.isfinite(http_timeout_seconds) or http_timeout_seconds <= 0:
                raise ValueError("HTTP_TIMEOUT_SECONDS must be a finite, positive number.")

            scratch_dir = os.getenv("SCRATCH_DIR", "/tmp")

            substitute_resolution_errors = os.getenv(
                "SUBSTITUTE_RESOLUTION_ERRORS", "false"
            ).lower() in _TRUE_VALUES

        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Invalid value for an environment variable: {e}"
            ) from e

        return cls(
            service_name=service_name,
            log_level=log_level,
            metrics_namespace=metrics_namespace,
            failure_delay_seconds=failure_delay_seconds,
            http_timeout_seconds=http_timeout_seconds,
            scratch_dir=scratch_dir,
            substitute_resolution_errors=substitute_resolution_errors,
        )


# --- Singleton Factory Function (Lazy-loaded and Cached) ---
@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Loads the application configuration from environment variables.
    The result is cached using lru_cache, so the environment is only read once
    on the first call. This avoids import-time side effects.
    """
    logger.info("Loading application configuration from environment...")
    return AppConfig.load_from_env()

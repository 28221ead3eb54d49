"""
DeepWitness Configuration
=========================

Everything comes from the environment (optionally a local .env file).
The only required value is the OpenAI credential, and it is only required
once a session is actually started.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


# =============================================================================
# DEFAULTS
# =============================================================================

MODEL_NAME = "gpt-4o"
TEMPERATURE = 0.7
REPORT_TEMPERATURE = 0.2
REQUEST_TIMEOUT = 60.0
LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the simulator."""
    openai_api_key: Optional[str] = None
    model_name: str = MODEL_NAME
    temperature: float = TEMPERATURE
    report_temperature: float = REPORT_TEMPERATURE
    request_timeout: float = REQUEST_TIMEOUT
    log_level: str = LOG_LEVEL
    log_file: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.openai_api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings(dotenv: bool = True) -> Settings:
    """Load settings from the environment."""
    if dotenv:
        load_dotenv()

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        model_name=os.getenv("DEEPWITNESS_MODEL") or MODEL_NAME,
        temperature=_float_env("DEEPWITNESS_TEMPERATURE", TEMPERATURE),
        report_temperature=_float_env("DEEPWITNESS_REPORT_TEMPERATURE", REPORT_TEMPERATURE),
        request_timeout=_float_env("DEEPWITNESS_REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        log_level=(os.getenv("DEEPWITNESS_LOG_LEVEL") or LOG_LEVEL).upper(),
        log_file=os.getenv("DEEPWITNESS_LOG_FILE") or None,
    )

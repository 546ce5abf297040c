"""Centralized configuration management for the trade-off referee."""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .schema import ProviderKind


class ExplanationConfig(BaseModel):
    """Score thresholds used when wording explanations.

    These only change the text produced, never the scores themselves.
    """
    close_match_margin: int = Field(
        10,
        description="Score difference below which two options are 'closely matched'"
    )
    good_fit_score: int = Field(
        70,
        description="Minimum score for the generic 'good fit' reason"
    )
    moderate_fit_score: int = Field(
        50,
        description="Minimum score for the 'moderate fit' reason"
    )


class ProviderConfig(BaseModel):
    """A text-generation provider used for optional AI enhancement."""
    name: str
    kind: ProviderKind = ProviderKind.OPENAI_COMPATIBLE
    url: str
    model: str
    api_key_env: str = Field(
        ...,
        description="Environment variable holding the API key (keys are never read from this file)"
    )

    def api_key(self) -> Optional[str]:
        return os.environ.get(self.api_key_env) or None


def _default_providers() -> list[ProviderConfig]:
    return [
        ProviderConfig(
            name="groq",
            kind=ProviderKind.OPENAI_COMPATIBLE,
            url="https://api.groq.com/openai/v1/chat/completions",
            model="llama-3.3-70b-versatile",
            api_key_env="GROQ_API_KEY",
        ),
        ProviderConfig(
            name="gemini",
            kind=ProviderKind.GEMINI,
            url="https://generativelanguage.googleapis.com/v1beta/models",
            model="gemini-2.0-flash",
            api_key_env="GEMINI_API_KEY",
        ),
    ]


class EnhancementConfig(BaseModel):
    """Configuration for the optional AI enhancement layer."""
    enabled: bool = Field(
        False,
        description="Use AI enhancement by default (the CLI --ai flag also enables it)"
    )
    timeout_seconds: float = Field(30.0, description="Per-provider request timeout")
    temperature: float = Field(0.7, description="Sampling temperature")
    max_tokens: int = Field(4096, description="Maximum tokens to generate")
    providers: list[ProviderConfig] = Field(
        default_factory=_default_providers,
        description="Providers tried in order until one returns a usable answer"
    )


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "WARNING",
        description="Root log level for the CLI"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value):
        return value.upper() if isinstance(value, str) else value


class RefereeConfig(BaseModel):
    """Complete configuration for the trade-off referee."""
    explanation: ExplanationConfig = Field(default_factory=ExplanationConfig)
    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Global config instance
_config: Optional[RefereeConfig] = None


def get_config() -> RefereeConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = RefereeConfig()
    return _config


def load_config(path: Path) -> RefereeConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded RefereeConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = RefereeConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = RefereeConfig()


def find_config_file() -> Optional[Path]:
    """Find a referee configuration file.

    Looks in (order of priority):
    1. REFEREE_CONFIG environment variable
    2. ./referee-config.yaml
    3. ./referee-config.yml
    4. ~/.config/referee/config.yaml
    """
    env_path = os.environ.get("REFEREE_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["referee-config.yaml", "referee-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "referee" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    data = RefereeConfig().model_dump(mode="json")

    yaml_content = """# Trade-off Referee Configuration
# ===============================
#
# This file configures explanation wording thresholds, the optional
# AI enhancement providers, and logging.
#
# API keys are read from the environment variables named by api_key_env,
# never from this file.
#
# Copy this file to one of these locations:
#   - ./referee-config.yaml (current directory)
#   - ~/.config/referee/config.yaml (user config)
#
# Or set the REFEREE_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)

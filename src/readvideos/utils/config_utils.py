#!/usr/bin/env python3
"""
Configuration utility functions for the transcription pipeline.

Run settings live in :class:`TranscriptionConfig`; secrets and service
endpoints come from the environment (optionally a ``.env`` file).
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, Any, Optional

from dotenv import load_dotenv

from ..models import TranscriptionConfig
from .file_utils import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_TRANSCRIPTION_URL = "https://api.groq.com/openai/v1/audio/transcriptions"
DEFAULT_CHAT_COMPLETIONS_URL = "https://openrouter.ai/api/v1/chat/completions"


@dataclass(frozen=True)
class ServiceSettings:
    """Credentials and endpoints for the remote services."""
    transcription_api_key: Optional[str]
    transcription_api_url: str
    google_api_key: Optional[str]
    summary_api_key: Optional[str]
    summary_api_url: str
    request_timeout: float = 120.0


def load_service_settings(env_file: Optional[str] = None) -> ServiceSettings:
    """
    Read service settings from the environment.

    Args:
        env_file: Optional path to a ``.env`` file; by default ``load_dotenv``
            searches from the current directory upwards

    Returns:
        ServiceSettings instance
    """
    load_dotenv(env_file)

    timeout = os.getenv('REQUEST_TIMEOUT_SECONDS')
    return ServiceSettings(
        transcription_api_key=(
            os.getenv('TRANSCRIPTION_API_KEY') or os.getenv('GROQ_API_KEY') or os.getenv('OPENAI_API_KEY')
        ),
        transcription_api_url=os.getenv('TRANSCRIPTION_API_URL', DEFAULT_TRANSCRIPTION_URL),
        google_api_key=os.getenv('GOOGLE_API_KEY'),
        summary_api_key=os.getenv('SUMMARY_API_KEY') or os.getenv('OPENROUTER_API_KEY'),
        summary_api_url=os.getenv('SUMMARY_API_URL', DEFAULT_CHAT_COMPLETIONS_URL),
        request_timeout=float(timeout) if timeout else 120.0,
    )


def load_config(config_path: str) -> TranscriptionConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to configuration file

    Returns:
        TranscriptionConfig object

    Raises:
        ValueError: If the file does not hold a valid configuration
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid configuration file {config_path}: {e}") from e
    return TranscriptionConfig.from_dict(config_dict)


def save_config(config: TranscriptionConfig, config_path: str) -> None:
    """Save configuration to a JSON file."""
    atomic_write_text(config_path, json.dumps(config.to_dict(), indent=2))
    logger.info("Configuration saved to %s", config_path)


def merge_configs(base_config: TranscriptionConfig, override_dict: Dict[str, Any]) -> TranscriptionConfig:
    """
    Merge a base configuration with override values.

    Args:
        base_config: Base configuration
        override_dict: Override values; ``None`` values are ignored

    Returns:
        New TranscriptionConfig with merged values
    """
    base_dict = base_config.to_dict()
    base_dict.update({k: v for k, v in override_dict.items() if v is not None})
    return TranscriptionConfig.from_dict(base_dict)

#!/usr/bin/env python3
"""
Remote AI services for the transcription pipeline.

Speech-to-text and summarization clients, plus factories that build them from
service settings.
"""

import logging
from typing import Optional

from ..models import SummaryProvider
from ..utils.config_utils import ServiceSettings
from .chat_client import ChatCompletionSummarizer
from .gemini_client import GeminiSummarizer
from .prompt_manager import PromptManager
from .transcription_client import WhisperAPIClient

logger = logging.getLogger(__name__)


def create_transcription_client(settings: ServiceSettings) -> WhisperAPIClient:
    """Build the speech-to-text client from service settings."""
    return WhisperAPIClient(
        api_key=settings.transcription_api_key,
        endpoint_url=settings.transcription_api_url,
        timeout=settings.request_timeout,
    )


def create_summarizer(provider: SummaryProvider, settings: ServiceSettings, model: Optional[str] = None):
    """
    Build the summarizer for a provider.

    Args:
        provider: Which summarization backend to use
        settings: Service credentials and endpoints
        model: Optional model override

    Returns:
        A summarizer, or None when summarization is disabled or has no
        credentials
    """
    if provider is SummaryProvider.NONE:
        logger.info("Summarization disabled")
        return None
    if provider is SummaryProvider.GEMINI:
        if not settings.google_api_key:
            logger.warning("GOOGLE_API_KEY is not set, continuing without summary and topics")
            return None
        return GeminiSummarizer(api_key=settings.google_api_key, model=model)
    if provider is SummaryProvider.OPENAI:
        if not settings.summary_api_key:
            logger.warning("SUMMARY_API_KEY is not set, continuing without summary and topics")
            return None
        return ChatCompletionSummarizer(
            api_key=settings.summary_api_key,
            model=model,
            endpoint_url=settings.summary_api_url,
            timeout=settings.request_timeout,
        )
    raise ValueError(f"Unknown summary provider: {provider}")


__all__ = [
    'ChatCompletionSummarizer',
    'GeminiSummarizer',
    'PromptManager',
    'WhisperAPIClient',
    'create_summarizer',
    'create_transcription_client'
]

#!/usr/bin/env python3
"""
Gemini API client for the transcription pipeline.

This module generates transcript summaries and topic outlines with Gemini.
"""

import logging
from typing import Optional

from google import genai

from ..exceptions import SummarizationError
from ..models import SummaryTask
from .prompt_manager import PromptManager

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class GeminiSummarizer:
    """
    Summarizer backed by the Gemini API.
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        prompt_manager: Optional[PromptManager] = None,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize the Gemini summarizer.

        Args:
            api_key: Google API key
            model: Gemini model name
            prompt_manager: Prompt templates
            client: Pre-built client, mainly for tests
        """
        if client is None and not api_key:
            raise ValueError("GOOGLE_API_KEY not found in environment variables")
        self.model = model or DEFAULT_GEMINI_MODEL
        self.prompt_manager = prompt_manager or PromptManager()
        self.client = client or genai.Client(api_key=api_key)

    def summarize(self, text: str, task: SummaryTask) -> str:
        """
        Generate ``task`` output for the transcript text.

        Raises:
            SummarizationError: If the call fails or the model returns no text
        """
        prompt = self.prompt_manager.get_prompt(text, task)
        try:
            response = self.client.models.generate_content(
                model=f'models/{self.model}',
                contents=prompt,
            )
        except Exception as e:
            raise SummarizationError(f"Gemini request failed: {e}", task=task.value) from e

        result = (getattr(response, 'text', None) or '').strip()
        if not result:
            raise SummarizationError("Gemini returned an empty response", task=task.value)

        logger.info("Generated %s with %s (%d chars)", task.value, self.model, len(result))
        return result

#!/usr/bin/env python3
"""
Chat completions client for the transcription pipeline.

Generates summaries and topic outlines through an OpenAI-compatible
``/chat/completions`` endpoint such as OpenRouter.
"""

import logging
from typing import Dict, Optional

import requests

from ..exceptions import SummarizationError
from ..models import SummaryTask
from ..utils.config_utils import DEFAULT_CHAT_COMPLETIONS_URL
from .prompt_manager import PromptManager

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "meta-llama/llama-3.2-1b-instruct:free"


class ChatCompletionSummarizer:
    """
    Summarizer backed by a chat completions HTTP endpoint.
    """

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        endpoint_url: str = DEFAULT_CHAT_COMPLETIONS_URL,
        timeout: float = 120.0,
        prompt_manager: Optional[PromptManager] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        if not api_key:
            raise ValueError("A summary API key is required (set SUMMARY_API_KEY)")
        self.api_key = api_key
        self.model = model or DEFAULT_CHAT_MODEL
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.prompt_manager = prompt_manager or PromptManager()
        self.extra_headers = extra_headers or {'HTTP-Referer': 'https://read.videos', 'X-Title': 'Read.Videos'}
        self.session = session or requests.Session()

    def summarize(self, text: str, task: SummaryTask) -> str:
        """
        Generate ``task`` output for the transcript text.

        Raises:
            SummarizationError: On transport failure, non-2xx status or an
                empty or malformed reply
        """
        body = {
            'model': self.model,
            'messages': [
                {'role': 'user', 'content': self.prompt_manager.get_prompt(text, task)}
            ],
        }
        headers = {
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
            **self.extra_headers,
        }

        try:
            response = self.session.post(self.endpoint_url, json=body, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise SummarizationError(f"Request timeout after {self.timeout} seconds", task=task.value) from e
        except requests.exceptions.HTTPError as e:
            raise SummarizationError(f"HTTP error: {e}", task=task.value) from e
        except requests.exceptions.RequestException as e:
            raise SummarizationError(f"Request failed: {e}", task=task.value) from e

        try:
            content = response.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise SummarizationError(f"Unexpected response structure: {e}", task=task.value) from e

        content = (content or '').strip()
        if not content:
            raise SummarizationError("Model returned an empty response", task=task.value)

        logger.info("Generated %s with %s (%d chars)", task.value, self.model, len(content))
        return content

#!/usr/bin/env python3
"""
Speech-to-text API client for the transcription pipeline.

This module posts audio chunks to an OpenAI-compatible
``/audio/transcriptions`` endpoint (Groq by default) and parses the
``verbose_json`` response into a :class:`TranscriptionResponse`.
"""

import logging
from typing import Dict, Optional

import requests

from ..exceptions import TranscriptionAPIError
from ..models import TranscriptionResponse, TranscriptSegment
from ..utils.config_utils import DEFAULT_TRANSCRIPTION_URL

logger = logging.getLogger(__name__)


class WhisperAPIClient:
    """
    Client for an OpenAI-compatible audio transcription endpoint.

    Each call builds a fresh multipart request from its arguments only, so
    repeating a call sends an identical request.
    """

    def __init__(
        self,
        api_key: str,
        endpoint_url: str = DEFAULT_TRANSCRIPTION_URL,
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transcription client.

        Args:
            api_key: Bearer token for the service
            endpoint_url: Full URL of the transcription endpoint
            timeout: Per-request timeout in seconds
            session: Optional requests session (connection reuse, testing)
        """
        if not api_key:
            raise ValueError("A transcription API key is required (set TRANSCRIPTION_API_KEY)")
        self.api_key = api_key
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_request(
        self,
        audio: bytes,
        model: str,
        response_format: str = "verbose_json",
        language: Optional[str] = None,
    ) -> Dict:
        """Build the keyword arguments for the POST request."""
        data = {'model': model, 'response_format': response_format}
        if language:
            data['language'] = language
        return {
            'headers': {'Authorization': f'Bearer {self.api_key}'},
            'files': {'file': ('chunk.m4a', audio, 'audio/m4a')},
            'data': data,
            'timeout': self.timeout,
        }

    def transcribe(
        self,
        audio: bytes,
        *,
        model: str,
        response_format: str = "verbose_json",
        language: Optional[str] = None,
    ) -> TranscriptionResponse:
        """
        Transcribe one audio payload.

        Args:
            audio: Audio bytes, at most the service's request size limit
            model: Model name, e.g. ``distil-whisper-large-v3-en``
            response_format: ``verbose_json`` to get timed segments
            language: Optional ISO-639-1 language hint

        Returns:
            TranscriptionResponse with text and timed segments

        Raises:
            TranscriptionAPIError: On transport failure, non-2xx status or a
                malformed response body
        """
        request_kwargs = self.build_request(audio, model, response_format, language)

        try:
            response = self.session.post(self.endpoint_url, **request_kwargs)
        except requests.exceptions.Timeout as e:
            raise TranscriptionAPIError(f"Request timeout after {self.timeout} seconds") from e
        except requests.exceptions.ConnectionError as e:
            raise TranscriptionAPIError(f"Connection error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise TranscriptionAPIError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error("HTTP error %s from transcription service: %s", response.status_code, response.text[:500])
            raise TranscriptionAPIError(
                f"HTTP error: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TranscriptionAPIError(
                "Response body is not valid JSON", status_code=response.status_code, body=response.text
            ) from e

        if not isinstance(body, dict) or not isinstance(body.get('text'), str):
            raise TranscriptionAPIError(
                "Unexpected JSON structure: missing 'text'", status_code=response.status_code, body=response.text
            )

        try:
            result = TranscriptionResponse.from_dict(body)
        except (TypeError, ValueError, AttributeError) as e:
            raise TranscriptionAPIError(
                f"Malformed segments in response: {e}", status_code=response.status_code, body=response.text
            ) from e

        # Plain json/text formats carry no segments; keep the text as one segment
        if not result.segments and result.text.strip():
            result.segments = [TranscriptSegment(start=0.0, end=result.duration or 0.0, text=result.text.strip())]
        return result

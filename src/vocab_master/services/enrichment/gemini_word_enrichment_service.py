"""Gemini Word Enrichment Service - word cards via Google Gemini API."""

import logging
import time

import google.genai as genai
from google.genai import types

from vocab_master.services.enrichment.word_enrichment_service import (
    EnrichmentResult,
    WordEnrichmentService,
    build_enrichment_prompt,
    parse_enrichment_json,
)

logger = logging.getLogger(__name__)


def _is_rate_limit(error_msg: str) -> bool:
    return (
        "429" in error_msg
        or "resource_exhausted" in error_msg
        or "quota" in error_msg
        or "rate_limit" in error_msg
    )


class GeminiWordEnrichmentService(WordEnrichmentService):
    """Enrichment service using Google Gemini API.

    Rate-limit errors are retried with exponential backoff; other failures
    are classified into a readable error on the result.
    """

    MODEL_NAME = "gemini-2.0-flash"
    MAX_RETRIES = 3
    INITIAL_RETRY_DELAY = 2

    def __init__(self, client_factory=genai.Client, sleep=time.sleep):
        self._client_factory = client_factory
        self._sleep = sleep

    def enrich(self, english: str, api_key: str) -> EnrichmentResult:
        if not english or not english.strip():
            return EnrichmentResult(data=None, model=self.MODEL_NAME, error="No word given")

        prompt = build_enrichment_prompt(english)
        retry_delay = self.INITIAL_RETRY_DELAY
        attempt = 0

        while True:
            attempt += 1
            try:
                client = self._client_factory(api_key=api_key)
                logger.debug(
                    "Enrichment request for %r (attempt %d/%d, model %s)",
                    english, attempt, self.MAX_RETRIES, self.MODEL_NAME,
                )
                response = client.models.generate_content(
                    model=self.MODEL_NAME,
                    contents=prompt,
                    config=types.GenerateContentConfig(
                        temperature=0.3,
                        top_p=0.95,
                        top_k=40,
                        max_output_tokens=2048,
                        response_mime_type="application/json",
                    ),
                )
            except Exception as exc:
                error_msg = str(exc).lower()
                rate_limited = _is_rate_limit(error_msg)
                logger.warning(
                    "Enrichment attempt %d failed (%s): %s", attempt, type(exc).__name__, exc
                )
                if rate_limited and attempt < self.MAX_RETRIES:
                    self._sleep(retry_delay)
                    retry_delay *= 2
                    continue
                return EnrichmentResult(
                    data=None, model=self.MODEL_NAME, error=self._classify_error(exc, rate_limited)
                )

            if not response.text:
                return EnrichmentResult(
                    data=None, model=self.MODEL_NAME, error="Empty response from API"
                )
            try:
                data = parse_enrichment_json(response.text)
            except ValueError as e:
                return EnrichmentResult(data=None, model=self.MODEL_NAME, error=str(e))
            if not data["english"]:
                data["english"] = english.strip()
            return EnrichmentResult(data=data, model=self.MODEL_NAME)

    @staticmethod
    def _classify_error(exc: Exception, rate_limited: bool) -> str:
        error_msg = str(exc).lower()
        if rate_limited:
            return "API quota exceeded. Please try again later."
        if "api_key" in error_msg or "authentication" in error_msg or "invalid" in error_msg:
            return f"Invalid API key or request: {exc}"
        if "deadline" in error_msg or "timeout" in error_msg:
            return "Request timed out. Please check your connection."
        return f"Enrichment failed: {exc}"

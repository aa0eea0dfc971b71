"""Gemini text generation used to polish report drafts."""

from __future__ import annotations

import asyncio
import logging
from typing import List

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPICallError, NotFound

from selfreview.core.config import GeminiSettings

logger = logging.getLogger(__name__)

# Tried in order after the configured model when it is unknown to the API.
FALLBACK_MODELS = ("gemini-1.5-pro", "gemini-1.5-flash", "gemini-pro")


class GeminiModelError(RuntimeError):
    """No usable model answered, or the API rejected the request."""


class GeminiClient:
    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        genai.configure(api_key=settings.api_key)

    def candidate_models(self) -> List[str]:
        """Configured model first, then the fallbacks, without duplicates."""
        names: List[str] = []
        for name in (self._settings.model_name, *FALLBACK_MODELS):
            name = (name or "").strip()
            if name and name not in names:
                names.append(name)
        return names

    async def generate_text(self, prompt: str) -> str:
        return await asyncio.to_thread(self._generate_blocking, prompt)

    def _generate_blocking(self, prompt: str) -> str:
        models = self.candidate_models()
        for attempt, name in enumerate(models, start=1):
            try:
                response = genai.GenerativeModel(name).generate_content(prompt)
            except NotFound:  # pragma: no cover - network call
                logger.warning(
                    "Gemini model %s unavailable (%d/%d)", name, attempt, len(models)
                )
                continue
            except GoogleAPICallError as exc:  # pragma: no cover - network call
                raise GeminiModelError(f"Gemini request failed: {exc.message}") from exc
            return response.text or ""

        raise GeminiModelError(
            f"None of the Gemini models {', '.join(models)} is available; "
            "set GEMINI_MODEL_NAME to a supported model."
        )


__all__ = ["FALLBACK_MODELS", "GeminiClient", "GeminiModelError"]

"""Report generation using Gemini when configured, else the deterministic draft."""

from __future__ import annotations

import asyncio
import logging
from textwrap import dedent
from typing import Optional

from selfreview.clients.gemini import GeminiClient, GeminiModelError
from selfreview.core.config import GenerationSettings
from selfreview.core.errors import GenerationError
from selfreview.schemas import NormalizedInput

from .report_synthesis import synthesize

logger = logging.getLogger(__name__)

_MAX_PROMPT_PAYLOAD = 20000


def build_prompt(data: NormalizedInput, draft: str, *, job_name: str = "") -> str:
    """Compose the Gemini prompt: role, section contract, evidence and skeleton."""
    payload = data.model_dump_json(exclude_none=True)
    if len(payload) > _MAX_PROMPT_PAYLOAD:
        payload = payload[: _MAX_PROMPT_PAYLOAD - 3] + "..."
    role = f" working as {job_name}" if job_name else ""
    return dedent(
        (
            f"You are helping an employee{role} write a self-assessment report.\n"
            "Keep every Markdown heading of the draft below, in the same order, and "
            "rewrite the bullet points into concise, first-person prose grounded "
            "only in the evidence provided. Do not invent work items.\n\n"
            "Evidence (JSON):\n"
            f"{payload}\n\n"
            "Draft:\n"
            f"{draft}"
        )
    )


class ReportGenerator:
    """Turn a normalized input into report text."""

    def __init__(
        self,
        settings: GenerationSettings,
        gemini_client: Optional[GeminiClient] = None,
    ) -> None:
        self._settings = settings
        self._gemini = gemini_client

    @property
    def uses_remote_model(self) -> bool:
        return self._settings.use_remote_model and self._gemini is not None

    async def generate(self, data: NormalizedInput, *, job_name: str = "") -> str:
        draft = synthesize(data)
        if not self.uses_remote_model:
            await asyncio.sleep(self._settings.simulated_latency_seconds)
            return draft

        prompt = build_prompt(data, draft, job_name=job_name)
        try:
            text = await self._gemini.generate_text(prompt)
        except GeminiModelError as exc:
            logger.error("Gemini generation failed: %s", exc)
            raise GenerationError(str(exc)) from exc

        if not text.strip():
            raise GenerationError("Gemini did not return a response.")
        return text


__all__ = ["ReportGenerator", "build_prompt"]

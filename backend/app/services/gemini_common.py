"""
Gemini access shared by every AI feature. The SDK call is blocking, so it runs
in the threadpool; each attempt is bounded by GEMINI_REQUEST_TIMEOUT_SECONDS and
429/5xx-looking failures are retried with exponential backoff. Every failure
surfaces as UpstreamServiceError.
"""
from __future__ import annotations

import asyncio
import logging
import re

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.core.errors import UpstreamServiceError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_PATTERN = re.compile(r"\b(429|5\d{2})\b")

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_ONLY_HIGH,
}


def _is_retryable_error(exc: BaseException) -> bool:
    msg = getattr(exc, "message", None) or str(exc)
    return bool(RETRYABLE_STATUS_PATTERN.search(msg))


def build_model(generation_config: dict | None = None):
    if not settings.google_gemini_api_key:
        raise UpstreamServiceError("Gemini API key is not configured")
    return genai.GenerativeModel(
        settings.gemini_model,
        generation_config=generation_config,
        safety_settings=SAFETY_SETTINGS,
    )


async def run_generate_content(model, contents):
    """Call model.generate_content(contents) off the event loop with timeout and retries."""
    timeout = float(settings.gemini_request_timeout_seconds or 30)
    max_attempts = max(1, settings.gemini_max_attempts)
    for attempt in range(max_attempts):
        last = attempt == max_attempts - 1
        try:
            return await asyncio.wait_for(
                run_in_threadpool(model.generate_content, contents),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning("Gemini request timed out after %ss (attempt %d)", timeout, attempt + 1)
            if last:
                raise UpstreamServiceError("Gemini request timed out") from e
        except Exception as e:
            if last or not _is_retryable_error(e):
                raise UpstreamServiceError(f"Gemini request failed: {e}") from e
            logger.warning("Gemini request failed (attempt %d), retrying: %s", attempt + 1, e)
        await asyncio.sleep(2 ** attempt)
    raise UpstreamServiceError("Gemini request failed")


def response_text(response) -> str:
    """Text of a Gemini response; blocked or empty responses raise UpstreamServiceError."""
    try:
        text = response.text if response is not None else ""
    except ValueError as e:
        # .text raises when the candidate was blocked or has no parts
        raise UpstreamServiceError("Gemini returned no text") from e
    if not text or not text.strip():
        raise UpstreamServiceError("Empty response from Gemini")
    return text.strip()


async def generate_text(contents, generation_config: dict | None = None) -> str:
    model = build_model(generation_config)
    response = await run_generate_content(model, contents)
    return response_text(response)

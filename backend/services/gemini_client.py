"""Google Gemini API wrapper with strict error handling.

Every failure mode (no key, transport error, timeout, unparseable output)
surfaces as ScoringUnavailable so callers never act on a guessed result.
"""

import asyncio
import json
import logging

from google import genai
from google.genai import types

from config import settings
from services.errors import ScoringUnavailable

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - scoring oracle disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def parse_json_object(text: str) -> dict:
    """Decode the oracle's reply as a single JSON object.

    Raises ScoringUnavailable when the reply is not a JSON object.
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse Gemini response as JSON: %s", e)
        raise ScoringUnavailable("Scoring oracle returned non-JSON output") from e
    if not isinstance(data, dict):
        raise ScoringUnavailable("Scoring oracle returned JSON that is not an object")
    return data


async def generate_text(prompt: str, temperature: float = 0.3) -> str:
    """Send a prompt to Gemini and return the raw reply text."""
    client = get_client()
    if client is None:
        raise ScoringUnavailable("Scoring oracle is not configured")

    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=8192,
                ),
            ),
            timeout=settings.oracle_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        logger.error("Gemini call timed out after %ss", settings.oracle_timeout_seconds)
        raise ScoringUnavailable("Scoring oracle timed out") from e
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        raise ScoringUnavailable("Scoring oracle is unreachable") from e

    text = response.text
    if not text:
        raise ScoringUnavailable("Scoring oracle returned an empty response")
    return text


async def generate_json(prompt: str) -> dict:
    """Send a prompt to Gemini and parse the JSON response."""
    text = await generate_text(prompt)
    return parse_json_object(text)

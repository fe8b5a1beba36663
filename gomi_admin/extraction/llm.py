"""
Chunk extraction through OpenAI-compatible chat-completions providers.

Providers from config.AI_MODEL_ROTATION are tried in order; the first one that
returns a valid JSON document wins.
"""

import json
import logging
import re

import requests

import config
from gomi_admin.common.throttle import backoff, throttle
from gomi_admin.extraction.schemas import ExtractedData
from gomi_admin.ingest.categories import CATEGORY_KEYS, CATEGORY_LABELS

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n(.*?)\n?```", re.DOTALL)


class ExtractionError(RuntimeError):
    """No provider produced a usable extraction result."""


def get_model_rotation() -> list[tuple[str, str]]:
    return [(entry["provider"], entry["model"]) for entry in config.AI_MODEL_ROTATION]


def is_rate_limit_error(exc: Exception) -> bool:
    msg = str(exc).lower()
    return "429" in msg or "rate limit" in msg or "resource_exhausted" in msg


def _get_provider_config(provider_name: str) -> dict:
    for provider in config.AI_PROVIDERS:
        if provider.get("name") == provider_name:
            return provider
    raise ValueError(f"Unknown AI provider: {provider_name}")


def _strip_json_code_fence(content: str) -> str:
    text = content.strip()
    match = _CODE_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def _category_lines() -> str:
    return "\n".join(
        f"- {key}: {CATEGORY_LABELS[key]['ja']} ({CATEGORY_LABELS[key]['en']})"
        for key in CATEGORY_KEYS
    )


def create_extraction_prompt(
    chunk: str, municipality_name: str, chunk_index: int, total_chunks: int
) -> str:
    part = f"{chunk_index + 1}/{total_chunks}"
    return f"""You extract garbage collection calendars and sorting rules from a Japanese municipal PDF.
The text below is part {part} of the PDF. Return ONLY valid JSON (no markdown, no explanations).

Municipality: {municipality_name}

### Output schema
{{
  "areas": [
    {{
      "name": "area name as written",
      "schedule": {{
        "1": {{"burnable": [day numbers 1-31], "nonBurnable": [...], ...}},
        "2": {{...}},
        ...
        "12": {{...}}
      }}
    }}
  ],
  "garbageItems": [
    {{
      "name": "item name",
      "category": "one of the category keys below",
      "description": "how to put it out",
      "examples": ["example 1", "example 2"]
    }}
  ]
}}

### Categories
{_category_lines()}

### Rules
- Only return information present in this part of the text.
- Use empty arrays when nothing is found.
- Months are string keys "1" to "12"; collection days are integers 1-31 within that month.
- Read every month of the calendar carefully; do not guess days.
- category must be one of the keys listed above.

### PDF text (part {part})
{chunk}
"""


def _extract_retry_delay_seconds(response_text: str) -> float | None:
    """retryDelay hint ("12s") from a Gemini-style error body, if any."""
    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError:
        return None
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        payload = payload[0]
    error_obj = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error_obj, dict):
        return None
    for detail in error_obj.get("details") or []:
        retry_delay = detail.get("retryDelay") if isinstance(detail, dict) else None
        if isinstance(retry_delay, str) and retry_delay.endswith("s"):
            try:
                return float(retry_delay[:-1])
            except ValueError:
                return None
    return None


def _request_completion(provider_name: str, model_id: str, prompt: str) -> str:
    provider_config = _get_provider_config(provider_name)
    api_key = provider_config.get("api_key")
    if not api_key:
        raise ValueError(f"Missing API key for AI provider: {provider_name}")

    base_url = provider_config.get("base_url", "").rstrip("/")
    payload = {
        "model": model_id,
        "messages": [
            {"role": "system", "content": "Return valid JSON only."},
            {"role": "user", "content": prompt},
        ],
        "temperature": 0,
    }

    if provider_name == "gemini":
        throttle("ai", min_seconds=3.0, max_seconds=3.5)
    else:
        throttle("ai")

    resp = requests.post(
        f"{base_url}/chat/completions",
        headers={"Authorization": f"Bearer {api_key}"},
        json=payload,
        timeout=config.AI_TIMEOUT_SECONDS,
    )
    if resp.status_code == 429:
        retry_delay = _extract_retry_delay_seconds(resp.text)
        if retry_delay:
            backoff("ai", min_seconds=retry_delay, max_seconds=retry_delay + 1.0)
        raise ValueError(f"AI request failed (429): {resp.text}")
    if resp.status_code >= 400:
        raise ValueError(f"AI request failed ({resp.status_code}): {resp.text}")

    response_json = resp.json()
    return response_json["choices"][0]["message"]["content"]


def extract_from_chunk(
    chunk: str, municipality_name: str, chunk_index: int, total_chunks: int
) -> ExtractedData:
    """
    Extract areas and garbage items from one chunk of PDF text.

    Raises:
        ExtractionError: when no provider has a key or every provider failed
    """
    prompt = create_extraction_prompt(chunk, municipality_name, chunk_index, total_chunks)
    last_error: Exception | None = None
    tried = 0

    for provider_name, model_id in get_model_rotation():
        if not _get_provider_config(provider_name).get("api_key"):
            logger.debug("Skipping %s: no API key", provider_name)
            continue
        tried += 1
        logger.info(
            "Chunk %s/%s extraction using %s:%s",
            chunk_index + 1,
            total_chunks,
            provider_name,
            model_id,
        )
        try:
            content = _request_completion(provider_name, model_id, prompt)
            output = json.loads(_strip_json_code_fence(content))
            if not isinstance(output, dict):
                raise ValueError("AI output must be a JSON object")
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            last_error = e
            logger.warning(
                "Chunk %s/%s extraction failed (%s:%s): %s",
                chunk_index + 1,
                total_chunks,
                provider_name,
                model_id,
                e,
            )
            if is_rate_limit_error(e):
                logger.info("Rate limited by %s, trying next provider", provider_name)
            continue

        # Invalid areas and items are dropped during validation.
        return ExtractedData.model_validate(output)

    if tried == 0:
        raise ExtractionError("No AI provider API key configured")
    raise ExtractionError(
        f"All AI providers failed for chunk {chunk_index + 1}/{total_chunks}"
    ) from last_error

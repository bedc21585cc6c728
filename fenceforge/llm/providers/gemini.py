# fenceforge/llm/providers/gemini.py
"""
Google Gemini provider implementation.

Two entry points:
- call(): one generateContent request, returns the whole text
- stream(): streamGenerateContent over server-sent events, yields text chunks
  in arrival order
"""
import json
import aiohttp
from typing import Any, AsyncIterator, Dict, List, Optional

from fenceforge.core.config import settings
from fenceforge.core.exceptions import ConfigurationError, LLMError, RateLimitError
from fenceforge.core.logging import log


PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-1.5-pro"
API_URL = "https://generativelanguage.googleapis.com/v1beta/models"

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_payload(
    contents: List[Dict[str, Any]],
    system_prompt: str = "",
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """Request body shared by both endpoints."""
    llm = settings.llm
    payload: Dict[str, Any] = {
        "contents": contents,
        "generationConfig": {
            "temperature": llm.temperature if temperature is None else temperature,
            "topK": llm.top_k,
            "topP": llm.top_p,
            "maxOutputTokens": max_tokens or llm.max_output_tokens,
        },
        "safetySettings": [
            {"category": category, "threshold": llm.safety_threshold}
            for category in HARM_CATEGORIES
        ],
    }

    if system_prompt:
        payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    return payload


def extract_text(data: Dict[str, Any]) -> str:
    """Concatenate the text parts of the first candidate ("" if none)."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(part.get("text", "") for part in parts)


def _block_reason(data: Dict[str, Any]) -> str:
    reason = (data.get("promptFeedback") or {}).get("blockReason")
    return f" (blocked: {reason})" if reason else ""


def _endpoint(model: Optional[str], method: str) -> str:
    api_key = settings.llm.gemini_api_key
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY not configured")
    return f"{API_URL}/{model or DEFAULT_MODEL}:{method}?key={api_key}"


async def _raise_for_status(response: aiohttp.ClientResponse) -> None:
    if response.status == 200:
        return

    text = await response.text()
    log("GEMINI", f"Error {response.status}: {text[:500]}")

    if response.status == 429:
        raise RateLimitError(PROVIDER, f"Rate limited (429): {text[:200]}")
    if response.status == 403:
        raise LLMError(PROVIDER, f"API key invalid or quota exceeded (403): {text[:200]}")
    if response.status == 400:
        raise LLMError(PROVIDER, f"Bad request (400): {text[:200]}")
    raise LLMError(PROVIDER, f"Gemini API error {response.status}: {text[:200]}")


async def call(
    contents: List[Dict[str, Any]],
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> str:
    """
    Single generateContent request.

    Returns:
        The generated text

    Raises:
        LLMError on transport or API errors, or when no candidate comes back
    """
    url = _endpoint(model, "generateContent")
    payload = build_payload(contents, system_prompt, temperature, max_tokens)
    timeout = aiohttp.ClientTimeout(total=settings.llm.request_timeout)

    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(url, json=payload, timeout=timeout) as response:
                await _raise_for_status(response)
                text = await response.text()
    except aiohttp.ClientError as e:
        raise LLMError(PROVIDER, f"Transport error: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMError(PROVIDER, f"Failed to parse Gemini response: {e}") from e

    if not data.get("candidates"):
        raise LLMError(PROVIDER, f"No candidates returned{_block_reason(data)}")

    return extract_text(data)


async def stream(
    contents: List[Dict[str, Any]],
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> AsyncIterator[str]:
    """
    streamGenerateContent with ``alt=sse``.

    Yields:
        Text chunks in the order the server produced them
    """
    url = _endpoint(model, "streamGenerateContent") + "&alt=sse"
    payload = build_payload(contents, system_prompt, temperature, max_tokens)
    timeout = aiohttp.ClientTimeout(total=settings.llm.request_timeout)

    try:
        async with aiohttp.ClientSession() as session:
            async with session.post(url, json=payload, timeout=timeout) as response:
                await _raise_for_status(response)

                async for raw_line in response.content:
                    line = raw_line.decode("utf-8").strip()
                    if not line.startswith("data:"):
                        continue

                    try:
                        event = json.loads(line[len("data:"):].strip())
                    except json.JSONDecodeError as e:
                        raise LLMError(PROVIDER, f"Malformed stream event: {e}") from e

                    if _block_reason(event):
                        raise LLMError(PROVIDER, f"Prompt rejected{_block_reason(event)}")

                    chunk = extract_text(event)
                    if chunk:
                        yield chunk
    except aiohttp.ClientError as e:
        raise LLMError(PROVIDER, f"Transport error: {e}") from e

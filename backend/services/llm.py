import json
from typing import Dict, Any, Optional

import httpx

from config import LLM_CONFIG, Settings, get_settings, logger
from exceptions import LLMException

SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]


def build_request_body(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": LLM_CONFIG.TEMPERATURE,
            "topK": LLM_CONFIG.TOP_K,
            "topP": LLM_CONFIG.TOP_P,
            "maxOutputTokens": LLM_CONFIG.MAX_OUTPUT_TOKENS,
        },
        "safetySettings": [
            {"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
            for category in SAFETY_CATEGORIES
        ],
    }


async def call_gemini(prompt: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Single attempt against the Gemini generateContent endpoint.
    Raises LLMException on any failure; callers decide the fallback.
    """
    settings = settings or get_settings()
    if not settings.GEMINI_API_KEY:
        logger.critical("GEMINI_API_KEY not configured.")
        raise LLMException("API key not configured", recoverable=False)

    headers = {"Content-Type": "application/json", "x-goog-api-key": settings.GEMINI_API_KEY}
    body = build_request_body(prompt)
    try:
        async with httpx.AsyncClient(timeout=LLM_CONFIG.REQUEST_TIMEOUT) as client:
            response = await client.post(settings.GEMINI_ENDPOINT, headers=headers, json=body)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("Gemini HTTP error %s: %s", e.response.status_code, e.response.text[:500])
        raise LLMException(f"HTTP {e.response.status_code}", recoverable=True)
    except httpx.TimeoutException as e:
        logger.error("Gemini request timed out after %ss: %s", LLM_CONFIG.REQUEST_TIMEOUT, e)
        raise LLMException("Request timed out", recoverable=True)
    except httpx.RequestError as e:
        logger.error("Gemini request error: %s", str(e))
        raise LLMException(f"Request failed: {str(e)}", recoverable=True)
    except json.JSONDecodeError as e:
        logger.error("Gemini returned a non-JSON body: %s", e)
        raise LLMException("Malformed response body", recoverable=True)

    text = ""
    try:
        if isinstance(data, dict):
            candidates = data.get("candidates", [])
            if isinstance(candidates, list) and candidates:
                content = candidates[0].get("content", {})
                parts = content.get("parts", [])
                if isinstance(parts, list) and parts:
                    text = parts[0].get("text", "")
    except (AttributeError, IndexError, TypeError) as e:
        logger.error("Error parsing Gemini response structure: %s. Response: %s", e, data)
        text = ""

    if not text:
        logger.error("Gemini response carried no candidate text.")
        raise LLMException("Empty response", recoverable=True)

    return {"raw": data, "text": text}

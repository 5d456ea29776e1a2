import json
import re
from dataclasses import dataclass
from typing import Any, Optional, Dict, Literal

from config.constants import FALLBACK_CONFIDENCE

ExtractionStage = Literal["strict", "salvage", "keyword", "default"]

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)

AFFIRMING_PATTERN = re.compile(
    r"\b(verdadeir[oa]|real|confirmad[oa]|corret[oa]|true|accurate|confirmed)\b",
    re.IGNORECASE
)
DENYING_PATTERN = re.compile(
    r"\b(fals[oa]|fake|incorret[oa]|enganos[oa]|false|inaccurate|misleading)\b",
    re.IGNORECASE
)


@dataclass(frozen=True)
class ExtractionResult:
    """Which stage of the extraction pipeline produced ``data``."""
    stage: ExtractionStage
    data: Optional[Dict[str, Any]] = None


def strip_code_fences(text: str) -> str:
    return CODE_FENCE_PATTERN.sub("", text).strip()


def parse_strict(text: str) -> Optional[Dict[str, Any]]:
    """Parse the span between the first '{' and the last '}' after dropping code fences."""
    if not text:
        return None

    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        return None

    try:
        data = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def extract_json_block(text: str) -> Optional[Dict[str, Any]]:
    """Extract the first balanced JSON object from text."""
    if not text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                candidate = text[start : i + 1]
                try:
                    data = json.loads(candidate)
                except json.JSONDecodeError:
                    try:
                        cleaned = re.sub(r"[\x00-\x1f]", "", candidate)
                        data = json.loads(cleaned)
                    except json.JSONDecodeError:
                        return None
                return data if isinstance(data, dict) else None
    return None


def keyword_verdict(text: str) -> Dict[str, Any]:
    """
    Last-resort classification from vocabulary alone. Mixed or absent signals
    are uncertain.
    """
    affirming = bool(AFFIRMING_PATTERN.search(text))
    denying = bool(DENYING_PATTERN.search(text))

    if affirming and not denying:
        status, confidence = "real", FALLBACK_CONFIDENCE.DECISIVE
    elif denying and not affirming:
        status, confidence = "fake", FALLBACK_CONFIDENCE.DECISIVE
    else:
        status, confidence = "uncertain", FALLBACK_CONFIDENCE.UNCERTAIN

    return {
        "status": status,
        "confidence": confidence,
        "justification": strip_code_fences(text),
    }


def extract_structured(text: Optional[str]) -> ExtractionResult:
    if not text or not text.strip():
        return ExtractionResult(stage="default")

    if (data := parse_strict(text)) is not None:
        return ExtractionResult(stage="strict", data=data)

    if (data := extract_json_block(text)) is not None:
        return ExtractionResult(stage="salvage", data=data)

    return ExtractionResult(stage="keyword", data=keyword_verdict(text))

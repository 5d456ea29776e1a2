import re
from typing import Any

from config.constants import SANITIZER_CONFIG
from exceptions import InvalidInputException

class InputValidator:

    FORBIDDEN_CHARS_PATTERN = re.compile("[" + re.escape(SANITIZER_CONFIG.FORBIDDEN_CHARS) + "]")

    WHITESPACE_PATTERN = re.compile(r"\s+")

    @staticmethod
    def collapse_whitespace(text: str) -> str:
        return InputValidator.WHITESPACE_PATTERN.sub(" ", text).strip()

    @staticmethod
    def sanitize_text(raw: Any) -> str:
        """
        Strip markup metacharacters, collapse whitespace and bound the length.
        Truncation is silent; only empty or too-short text is rejected.
        """
        if not raw or not isinstance(raw, str):
            raise InvalidInputException("Texto é obrigatório para verificação", reason="missing")

        text = InputValidator.FORBIDDEN_CHARS_PATTERN.sub("", raw)
        text = InputValidator.collapse_whitespace(text)
        # trailing space can surface at the cut point
        text = text[:SANITIZER_CONFIG.MAX_TEXT_LENGTH].rstrip()

        if len(text) < SANITIZER_CONFIG.MIN_TEXT_LENGTH:
            raise InvalidInputException(
                f"Texto muito curto para análise (mínimo {SANITIZER_CONFIG.MIN_TEXT_LENGTH} caracteres)",
                reason="too_short"
            )

        return text


sanitize_input = InputValidator.sanitize_text

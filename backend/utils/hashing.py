from utils.validation import InputValidator

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def fingerprint(text: str) -> str:
    """
    Cache key for a text: case-folded, whitespace-collapsed, then a 32-bit
    rolling hash rendered in base 36. Not collision resistant.
    """
    normalized = InputValidator.collapse_whitespace(text.casefold())
    h = 0
    for ch in normalized:
        h = _to_int32((h << 5) - h + ord(ch))
    return _to_base36(abs(h))

from typing import Optional, Dict, Any

class FactCheckException(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class InvalidInputException(FactCheckException):
    """Client-facing; ``message`` is shown to the user as is."""
    def __init__(self, message: str, reason: str = "invalid"):
        super().__init__(message, {"reason": reason})

class PayloadTooLargeException(InvalidInputException):
    def __init__(self, size: int, limit: int):
        super().__init__("Texto muito longo para análise", reason="payload_too_large")
        self.details.update({"size": size, "limit": limit})

class RateLimitException(FactCheckException):
    def __init__(self, client_id: str, retry_after: int):
        super().__init__(
            "Muitas tentativas. Aguarde um momento antes de tentar novamente.",
            {"client_id": client_id, "retry_after": retry_after}
        )
        self.retry_after = retry_after

class LLMException(FactCheckException):
    def __init__(self, reason: str, recoverable: bool = True):
        super().__init__(
            f"LLM service error: {reason}",
            {"reason": reason, "recoverable": recoverable}
        )

class PersistenceException(FactCheckException):
    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Cache store {operation} failed: {reason}",
            {"operation": operation, "reason": reason}
        )

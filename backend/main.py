import json
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from config import FALLBACK_CONFIDENCE, check_api_keys_on_startup, get_settings, logger
from exceptions import InvalidInputException, PayloadTooLargeException, RateLimitException
from middleware.cors import EmptyPreflightCORSMiddleware
from middleware.context import RequestContextMiddleware, get_client_id, get_request_id
from models import (
    ErrorResponse,
    FactCheckRequest,
    FactCheckResponse,
    RateLimitResponse,
    ServerErrorResponse,
)
from services import FactCheckService, VerdictRequester
from services.reference_sources import manual_verification_sources
from storage import CacheStore, Database
from utils.rate_limiter import FixedWindowRateLimiter

SERVER_ERROR_MESSAGE = "Erro temporário no serviço. Tente novamente em alguns instantes."
SERVER_ERROR_JUSTIFICATION = "Ocorreu um erro técnico durante a verificação. Por favor, tente novamente."
INVALID_BODY_MESSAGE = "Formato de dados inválido"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    check_api_keys_on_startup(settings)

    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    await database.init_db()

    app.state.database = database
    app.state.fact_check_service = FactCheckService(
        cache=CacheStore(database.session_factory),
        rate_limiter=FixedWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
        requester=VerdictRequester(settings),
        settings=settings,
    )
    try:
        yield
    finally:
        await database.close()


app = FastAPI(title="Fake News Checker API", lifespan=lifespan)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, body: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _server_error() -> JSONResponse:
    body = ServerErrorResponse(
        error=SERVER_ERROR_MESSAGE,
        confidence=FALLBACK_CONFIDENCE.UNEXPECTED_ERROR,
        justification=SERVER_ERROR_JUSTIFICATION,
        sources=manual_verification_sources(""),
    )
    return _error(500, body.model_dump())


async def _read_text(request: Request, max_bytes: int) -> Any:
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        raise PayloadTooLargeException(int(content_length), max_bytes)

    body = await request.body()
    if len(body) > max_bytes:
        raise PayloadTooLargeException(len(body), max_bytes)

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInputException(INVALID_BODY_MESSAGE, reason="malformed_body")

    if not isinstance(payload, dict):
        raise InvalidInputException(INVALID_BODY_MESSAGE, reason="malformed_body")
    return payload.get("text")


@app.get("/")
async def health_check():
    return {"status": "ok", "message": "Fake News Checker API is running."}


@app.options("/fact-check", status_code=204)
async def fact_check_preflight():
    return Response(status_code=204)


@app.post(
    "/fact-check",
    response_model=FactCheckResponse,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": FactCheckRequest.model_json_schema()}},
        }
    },
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        429: {"model": RateLimitResponse},
        500: {"model": ServerErrorResponse},
    },
)
async def fact_check(request: Request):
    """Classify a short passage as real, fake or uncertain."""
    service: FactCheckService = request.app.state.fact_check_service

    try:
        raw_text = await _read_text(request, service.settings.MAX_PAYLOAD_BYTES)
        result = await service.check(raw_text, get_client_id(request))
        return FactCheckResponse(**result)

    except PayloadTooLargeException as e:
        logger.warning("Rejected oversized payload: %s bytes", e.details.get("size"))
        return _error(413, ErrorResponse(error=e.message).model_dump())
    except InvalidInputException as e:
        logger.info("Rejected invalid input: %s", e.details.get("reason"))
        return _error(400, ErrorResponse(error=e.message).model_dump())
    except RateLimitException as e:
        return _error(
            429,
            RateLimitResponse(error=e.message, retryAfter=e.retry_after).model_dump(),
            headers={"Retry-After": str(e.retry_after)},
        )
    except Exception:
        logger.exception("Unexpected error in fact-check endpoint (request %s).", get_request_id())
        return _server_error()

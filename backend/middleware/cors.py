from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

BODY_HEADERS = {"content-length", "content-type"}


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Starlette's CORS handling, with preflight responses sent without a body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            key: value for key, value in response.headers.items()
            if key.lower() not in BODY_HEADERS
        }
        return Response(status_code=response.status_code, headers=headers)

import logging
import time
from uuid import uuid4

from fastapi import Request
from fastapi.responses import JSONResponse

from campaign_feed.config import settings

logger = logging.getLogger("campaign_feed.api")

REQUEST_ID_HEADER = "x-request-id"


async def add_request_id(request: Request, call_next):
    """Tags the request (and its response) with the caller's id or a fresh one."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def enforce_body_size(request: Request, call_next):
    """
    Rejects a CSV upload by its declared Content-Length before the body is read.
    A missing or non-numeric header is left to the route.
    """
    limit = settings.security.max_upload_bytes
    declared = request.headers.get("content-length", "")
    if limit and declared.isdigit() and int(declared) > limit:
        logger.warning(
            "request body over upload cap",
            extra={"path": request.url.path, "content_length": int(declared), "limit": limit},
        )
        body = {
            "error": "request_too_large",
            "detail": f"Uploads are capped at {settings.security.max_upload_mb}MB",
        }
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            body["request_id"] = request_id
        return JSONResponse(status_code=413, content=body)
    return await call_next(request)


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            status,
            extra={
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "request_id": getattr(request.state, "request_id", None),
            },
        )

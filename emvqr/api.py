"""FastAPI application for emvqr."""
from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import settings
from .errors import QRError
from .logging_conf import configure_logging
from .middleware import RequestLoggingMiddleware, route_path
from .monitoring import metrics_payload, record_codec_error
from .schemas import (
    AmendRequest,
    DecodeRequest,
    DecodeResponse,
    EncodeRequest,
    EncodeResponse,
    InspectRequest,
    InspectResponse,
)
from .services.codec import amend_payload, decode_payload, encode_fields, inspect_payload

app = FastAPI(title="emvqr", version="0.1.0")
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_methods=["GET", "POST"], allow_headers=["*"])

logger = logging.getLogger("emvqr.api")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.api_key == "dev-secret-key":
        logger.warning("api key is using its default value", extra={"config_key": "api_key"})


async def require_api_key(x_api_key: str = Header(...)) -> None:
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


@app.exception_handler(QRError)
async def qr_error_handler(request: Request, exc: QRError) -> JSONResponse:
    path = route_path(request)
    logger.warning("codec error", extra={"code": exc.code, "path": path, "method": request.method})
    record_codec_error(exc.code, path)
    return JSONResponse(status_code=exc.status_code, content={"code": exc.code, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled exception", extra={"path": route_path(request), "method": request.method})
    return JSONResponse(status_code=500, content={"code": "ERR_INTERNAL", "message": "Internal server error"})


@app.get("/health", tags=["system"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["system"])
async def metrics() -> Response:
    payload, content_type = metrics_payload()
    return Response(content=payload, media_type=content_type)


@app.post("/v1/decode", response_model=DecodeResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def decode(payload: DecodeRequest) -> DecodeResponse:
    result = decode_payload(payload.payload)
    return DecodeResponse(
        fields=result.message.to_dict(),
        tags=result.message.get_tags(),
        crc=result.crc,
    )


@app.post("/v1/encode", response_model=EncodeResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def encode(payload: EncodeRequest) -> EncodeResponse:
    encoded = encode_fields(payload.fields)
    return EncodeResponse(payload=encoded.payload, crc=encoded.crc)


@app.post("/v1/inspect", response_model=InspectResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def inspect(payload: InspectRequest) -> InspectResponse:
    return InspectResponse(values=inspect_payload(payload.payload, payload.paths))


@app.post("/v1/amend", response_model=EncodeResponse, tags=["qr"], dependencies=[Depends(require_api_key)])
async def amend(payload: AmendRequest) -> EncodeResponse:
    encoded = amend_payload(payload.payload, payload.updates)
    return EncodeResponse(payload=encoded.payload, crc=encoded.crc)

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.requests import ClientDisconnect

from pricescout.deps import get_pipeline
from pricescout.errors import ClientInputError, TransportError
from pricescout.ratelimit import RECEIPT_RATE_LIMIT, limiter
from pricescout.receipt.pipeline import PipelineHandler

logger = logging.getLogger("pricescout")
router = APIRouter()

# Every method reaches the pipeline so non-POST requests get a 405 with an Allow header.
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def _read_body(request: Request, max_bytes: int | None = None) -> bytes:
    if request.method != "POST":
        return b""
    declared = request.headers.get("content-length", "")
    if max_bytes is not None and declared.isdigit() and int(declared) > max_bytes:
        raise ClientInputError("Upload too large.", status_code=413)
    try:
        return await request.body()
    except ClientDisconnect as e:
        logger.warning("Client disconnected while uploading", extra={"extra_data": {"path": request.url.path}})
        raise TransportError("Failed to read the request body.") from e


@router.api_route("/gemini", methods=ROUTE_METHODS)
@limiter.limit(RECEIPT_RATE_LIMIT)
async def analyze_receipt_text(request: Request, pipeline: PipelineHandler = Depends(get_pipeline)):
    body = await _read_body(request)
    receipt = await pipeline.handle_text(request.method, body)
    return receipt.model_dump()


@router.api_route("/gemini/receipt", methods=ROUTE_METHODS)
@limiter.limit(RECEIPT_RATE_LIMIT)
async def scan_receipt_image(request: Request, pipeline: PipelineHandler = Depends(get_pipeline)):
    body = await _read_body(request, pipeline.settings.max_upload_bytes)
    receipt = await pipeline.handle_image(request.method, request.headers.get("content-type"), body)
    return Response(
        content=json.dumps(receipt.model_dump(), ensure_ascii=False, indent=2),
        media_type="application/json; charset=utf-8",
    )

"""Receipt understanding pipeline.

One invocation validates its input, optionally pulls the uploaded image out of
a multipart body, builds a model request, makes exactly one call to the model
endpoint and sanitizes whatever comes back. Retrying is left to the caller.
"""

import json
import logging

import httpx

from pricescout.config import Settings
from pricescout.errors import ClientInputError, ConfigurationError, TransportError, UpstreamError
from pricescout.receipt import request_builder
from pricescout.receipt.base import (
    Flavor,
    ImageInput,
    ModelRequest,
    ModelTransport,
    MultiItemReceipt,
    SanitizedReceipt,
    SingleItemReceipt,
    TextInput,
)
from pricescout.receipt.multipart import MultipartExtractor, parse_boundary
from pricescout.receipt.sanitizer import ResponseSanitizer, candidate_text

logger = logging.getLogger("pricescout")

RATE_LIMITED_MESSAGE = "The receipt model is busy. Please retry later."
UPSTREAM_ERROR_MESSAGE = "The receipt model returned an error."
TRANSPORT_ERROR_MESSAGE = "Failed to reach the receipt model."
MAX_LOGGED_BODY = 2000


class PipelineHandler:
    def __init__(self, settings: Settings, transport: ModelTransport):
        self.settings = settings
        self.transport = transport
        self.extractor = MultipartExtractor(settings.receipt_field_name)

    def _check_method(self, method: str) -> None:
        if method.upper() != "POST":
            raise ClientInputError("Method Not Allowed", status_code=405, headers={"Allow": "POST"})

    def _check_configuration(self) -> None:
        if not self.settings.gemini_api_key:
            raise ConfigurationError("Gemini API key is not configured.")
        if not self.settings.gemini_endpoint or not self.settings.gemini_model:
            raise ConfigurationError("Gemini endpoint is not configured.")

    def read_text_input(self, body: bytes) -> TextInput:
        payload = None
        if body:
            try:
                payload = json.loads(body.decode("utf-8"))
            except (ValueError, RecursionError):
                raise ClientInputError("Request body could not be parsed as JSON.")

        raw_text = payload.get("rawText") if isinstance(payload, dict) else None
        raw_text = raw_text.strip() if isinstance(raw_text, str) else ""
        if not raw_text:
            raise ClientInputError("rawText is required.")
        return TextInput(content=raw_text)

    def read_image_input(self, content_type: str | None, body: bytes) -> ImageInput:
        boundary = parse_boundary(content_type)
        if boundary is None:
            media_type = (content_type or "").split(";", 1)[0].strip().lower()
            if media_type == "multipart/form-data":
                raise ClientInputError("multipart boundary is missing.")
            raise ClientInputError("Content-Type must be multipart/form-data.", status_code=415)

        if len(body) > self.settings.max_upload_bytes:
            raise ClientInputError("Upload too large.", status_code=413)

        part = self.extractor.extract(body, boundary)
        if part is None:
            raise ClientInputError(f"No '{self.extractor.field_name}' file was uploaded.")
        return ImageInput(data=part.data, mime_type=part.mime_type)

    async def dispatch(self, request: ModelRequest, flavor: Flavor) -> SanitizedReceipt:
        try:
            upstream = await self.transport.submit(request_builder.encode(request))
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Model endpoint unreachable: {e}", exc_info=True)
            raise TransportError(TRANSPORT_ERROR_MESSAGE) from e

        if not upstream.ok:
            logger.error(
                "Model endpoint error",
                extra={"extra_data": {
                    "flavor": flavor.value,
                    "status": upstream.status_code,
                    "body": upstream.body[:MAX_LOGGED_BODY].decode("utf-8", errors="replace"),
                }},
            )
            message = RATE_LIMITED_MESSAGE if upstream.status_code == 429 else UPSTREAM_ERROR_MESSAGE
            raise UpstreamError(message, status_code=upstream.status_code)

        try:
            document = json.loads(upstream.body)
        except (ValueError, RecursionError):
            document = None

        result = ResponseSanitizer(flavor).sanitize(candidate_text(document))
        logger.info("Receipt sanitized", extra={"extra_data": {"flavor": flavor.value, "status": result.status}})
        return result

    async def handle_text(self, method: str, body: bytes) -> SingleItemReceipt:
        self._check_method(method)
        self._check_configuration()
        raw_input = self.read_text_input(body)

        result = await self.dispatch(request_builder.build_text_request(raw_input), Flavor.TEXT)
        return result.receipt

    async def handle_image(self, method: str, content_type: str | None, body: bytes) -> MultiItemReceipt:
        self._check_method(method)
        self._check_configuration()
        raw_input = self.read_image_input(content_type, body)

        result = await self.dispatch(request_builder.build_image_request(raw_input), Flavor.IMAGE)
        logger.info(
            "Receipt scanned",
            extra={"extra_data": {"items_count": len(result.receipt.items), "bytes": len(raw_input.data)}},
        )
        return result.receipt

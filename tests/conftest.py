import json

import pytest

from pricescout.config import Settings
from pricescout.ratelimit import limiter
from pricescout.receipt.base import UpstreamResponse
from pricescout.receipt.pipeline import PipelineHandler


class FakeTransport:
    """Records submitted payloads and answers with a canned response or error."""

    def __init__(self, response: UpstreamResponse | None = None, error: Exception | None = None):
        self.response = response or gemini_reply("{}")
        self.error = error
        self.payloads = []

    async def submit(self, body: bytes) -> UpstreamResponse:
        self.payloads.append(json.loads(body))
        if self.error is not None:
            raise self.error
        return self.response


def gemini_reply(text: str, status_code: int = 200) -> UpstreamResponse:
    document = {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}
    return UpstreamResponse(status_code=status_code, body=json.dumps(document).encode("utf-8"))


def build_multipart(boundary: str, parts: list[tuple[list[str], bytes]], preamble: bytes = b"") -> bytes:
    delimiter = b"--" + boundary.encode("latin-1")
    chunks = [preamble]
    for headers, data in parts:
        chunks.append(delimiter + b"\r\n" + "\r\n".join(headers).encode("latin-1") + b"\r\n\r\n" + data + b"\r\n")
    chunks.append(delimiter + b"--\r\n")
    return b"".join(chunks)


def receipt_part(data: bytes, mime_type: str | None = "image/jpeg", name: str = "receipt") -> tuple[list[str], bytes]:
    headers = [f'Content-Disposition: form-data; name="{name}"; filename="receipt.jpg"']
    if mime_type:
        headers.append(f"Content-Type: {mime_type}")
    return headers, data


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def pipeline(settings, transport):
    return PipelineHandler(settings, transport)

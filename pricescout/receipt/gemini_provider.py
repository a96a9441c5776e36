import httpx

from pricescout.config import Settings
from pricescout.receipt.base import UpstreamResponse


class GeminiTransport:
    """Submits encoded generateContent requests to the Gemini REST API."""

    def __init__(self, settings: Settings, http_transport: httpx.AsyncBaseTransport | None = None):
        self.url = settings.generate_content_url
        self.api_key = settings.gemini_api_key
        self.timeout = settings.gemini_timeout
        self._http_transport = http_transport

    async def submit(self, body: bytes) -> UpstreamResponse:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._http_transport) as client:
            resp = await client.post(
                self.url,
                params={"key": self.api_key},
                content=body,
                headers={"Content-Type": "application/json"},
            )
        return UpstreamResponse(status_code=resp.status_code, body=resp.content)

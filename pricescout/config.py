import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-1.5-flash-latest"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MB


class Settings(BaseModel):
    """Process-wide configuration, built once at startup and passed to the pipeline."""

    model_config = ConfigDict(frozen=True)

    gemini_api_key: str | None = None
    gemini_endpoint: str = DEFAULT_ENDPOINT
    gemini_model: str = DEFAULT_MODEL
    gemini_timeout: float = 30.0
    receipt_provider: str = "gemini"
    receipt_field_name: str = "receipt"
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit: str = "30/minute"
    sentry_dsn: str | None = None

    @property
    def generate_content_url(self) -> str:
        return f"{self.gemini_endpoint.rstrip('/')}/{self.gemini_model}:generateContent"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_endpoint=os.getenv("GEMINI_ENDPOINT") or DEFAULT_ENDPOINT,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            gemini_timeout=float(os.getenv("GEMINI_TIMEOUT", "30")),
            receipt_provider=os.getenv("RECEIPT_PROVIDER", "gemini"),
            receipt_field_name=os.getenv("RECEIPT_FIELD_NAME", "receipt"),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES))),
            cors_origins=[o.strip() for o in origins if o.strip()],
            rate_limit=os.getenv("RATE_LIMIT", "30/minute"),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
        )

from pricescout.config import Settings
from pricescout.errors import ConfigurationError
from pricescout.receipt.base import ModelTransport
from pricescout.receipt.gemini_provider import GeminiTransport


def get_model_transport(settings: Settings) -> ModelTransport:
    """Return the configured model endpoint transport."""
    if settings.receipt_provider == "gemini":
        return GeminiTransport(settings)
    raise ConfigurationError(f"Unknown receipt provider: {settings.receipt_provider}")

from functools import lru_cache

from pricescout.config import Settings
from pricescout.receipt.factory import get_model_transport
from pricescout.receipt.pipeline import PipelineHandler


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def _build_pipeline() -> PipelineHandler:
    settings = get_settings()
    return PipelineHandler(settings, get_model_transport(settings))


def get_pipeline() -> PipelineHandler:
    """Shared, read-only pipeline. Configuration problems surface per request."""
    return _build_pipeline()

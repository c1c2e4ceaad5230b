from typing import Optional

import httpx

from .base import PipelineAdapter
from .bhashini import BhashiniAdapter
from .extractors import (
    AUDIO_EXTRACTORS,
    STAGE_LOCATORS,
    TEXT_EXTRACTORS,
    build_result,
    extract_audio_content,
    extract_text,
    parse_metadata,
)


def create_adapter(transport: Optional[httpx.AsyncBaseTransport] = None) -> PipelineAdapter:
    return BhashiniAdapter(transport=transport)


__all__ = [
    "PipelineAdapter",
    "BhashiniAdapter",
    "create_adapter",
    "build_result",
    "parse_metadata",
    "extract_text",
    "extract_audio_content",
    "STAGE_LOCATORS",
    "TEXT_EXTRACTORS",
    "AUDIO_EXTRACTORS",
]

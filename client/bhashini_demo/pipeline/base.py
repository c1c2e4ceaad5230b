from typing import Any, Dict, Optional, Union

from ..models import (
    ApiError,
    FeedbackOutcome,
    FeedbackPayload,
    MetadataOutcome,
    PipelineOutcome,
)


class PipelineAdapter:
    """Base class for pipeline adapters (translation, transliteration, ASR, TTS)."""

    async def translate(self, text: str, source_lang: str, target_lang: str, token: str) -> PipelineOutcome:
        raise NotImplementedError

    async def transliterate(self, text: str, source_lang: str, target_lang: str, token: str) -> PipelineOutcome:
        raise NotImplementedError

    async def recognize_speech(self, audio_base64: str, source_lang: str, token: str) -> PipelineOutcome:
        raise NotImplementedError

    async def synthesize_speech(self, text: str, source_lang: str, token: str, voice_gender: str = "female") -> PipelineOutcome:
        raise NotImplementedError

    async def speech_to_speech(self, audio_base64: str, source_lang: str, target_lang: str, token: str,
                               voice_gender: str = "female") -> PipelineOutcome:
        raise NotImplementedError

    async def fetch_pipeline_metadata(self, task_type: str, source_lang: str, target_lang: Optional[str],
                                      token: str) -> MetadataOutcome:
        raise NotImplementedError

    async def submit_feedback(self, payload: Union[FeedbackPayload, Dict[str, Any]], token: str) -> FeedbackOutcome:
        raise NotImplementedError

    async def fetch_pipeline_config(self, payload: Dict[str, Any], ulca_api_key: str,
                                    user_id: Optional[str] = None) -> Union[Any, ApiError]:
        raise NotImplementedError

    async def compute(self, callback_url: str, payload: Dict[str, Any],
                      inference_api_key: Optional[str] = None) -> Union[Any, ApiError]:
        raise NotImplementedError

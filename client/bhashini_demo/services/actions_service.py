"""
Page-level actions of the demo UI.

Each coroutine validates its local input, reads the bearer token from the
injected CredentialStore and makes at most one adapter call. Validation
failures come back as ``ApiError(kind=validation)`` without any request
being sent, and no exception escapes an action.
"""
from typing import List, Optional, Union

from pydantic import ValidationError

from .questions_service import build_pipeline_questions
from ..catalog import feedback_api_ids, task_type_ids, voice_ids
from ..config import logger
from ..credentials import CredentialStore
from ..models import (
    ApiError,
    ErrorKind,
    FeedbackOutcome,
    FeedbackPayload,
    PipelineOutcome,
    PipelineQuestion,
)
from ..pipeline.base import PipelineAdapter
from ..pipeline.errors import validation_error
from ..utils import encode_audio_base64

TOKEN_REQUIRED = "Please set your Authorization Token first"
AUDIO_REQUIRED = "Please record audio first"
QUESTIONS_UNAVAILABLE = "Failed to retrieve pipeline questions. Please try again."
VOICE_REQUIRED = "Please choose a female or male voice"


def _token(store: CredentialStore) -> Optional[str]:
    token = store.value.strip()
    return token or None


def _audio_payload(audio: Union[bytes, str, None]) -> Optional[str]:
    if not audio:
        return None
    if isinstance(audio, bytes):
        return encode_audio_base64(audio)
    return audio


def _unexpected(label: str, e: Exception) -> ApiError:
    logger.error(f"{label} failed unexpectedly: {e}")
    return ApiError(kind=ErrorKind.LOCAL, status_code=-1, message=str(e) or f"{label} failed. Please try again.")


async def translate_text(store: CredentialStore, adapter: PipelineAdapter, text: str,
                         source_lang: str, target_lang: str) -> PipelineOutcome:
    if not (text or "").strip():
        return validation_error("Please enter text to translate")
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        return await adapter.translate(text, source_lang, target_lang, token)
    except Exception as e:
        return _unexpected("Translation", e)


async def transliterate_text(store: CredentialStore, adapter: PipelineAdapter, text: str,
                             source_lang: str, target_lang: str) -> PipelineOutcome:
    if not (text or "").strip():
        return validation_error("Please enter text to transliterate")
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        return await adapter.transliterate(text, source_lang, target_lang, token)
    except Exception as e:
        return _unexpected("Transliteration", e)


async def recognize_recording(store: CredentialStore, adapter: PipelineAdapter,
                              audio: Union[bytes, str, None], source_lang: str) -> PipelineOutcome:
    audio_base64 = _audio_payload(audio)
    if audio_base64 is None:
        return validation_error(AUDIO_REQUIRED)
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        return await adapter.recognize_speech(audio_base64, source_lang, token)
    except Exception as e:
        return _unexpected("Speech recognition", e)


async def generate_speech(store: CredentialStore, adapter: PipelineAdapter, text: str,
                          source_lang: str, voice_gender: str = "female") -> PipelineOutcome:
    if not (text or "").strip():
        return validation_error("Please enter text to convert to speech")
    if voice_gender not in voice_ids():
        return validation_error(VOICE_REQUIRED)
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        return await adapter.synthesize_speech(text, source_lang, token, voice_gender)
    except Exception as e:
        return _unexpected("Text-to-speech conversion", e)


async def convert_speech(store: CredentialStore, adapter: PipelineAdapter, audio: Union[bytes, str, None],
                         source_lang: str, target_lang: str, voice_gender: str = "female") -> PipelineOutcome:
    audio_base64 = _audio_payload(audio)
    if audio_base64 is None:
        return validation_error(AUDIO_REQUIRED)
    if voice_gender not in voice_ids():
        return validation_error(VOICE_REQUIRED)
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        return await adapter.speech_to_speech(audio_base64, source_lang, target_lang, token, voice_gender)
    except Exception as e:
        return _unexpected("Speech-to-speech conversion", e)


async def get_pipeline_questions(store: CredentialStore, adapter: PipelineAdapter, task_type: str,
                                 source_lang: str, target_lang: Optional[str] = None) -> Union[List[PipelineQuestion], ApiError]:
    if task_type not in task_type_ids():
        return validation_error(f"Unknown task type: {task_type}")
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        metadata = await adapter.fetch_pipeline_metadata(task_type, source_lang, target_lang, token)
    except Exception as e:
        return _unexpected("Pipeline questions", e)
    if isinstance(metadata, ApiError):
        return metadata
    if not metadata.raw.get("pipelineInferenceAPIEndPoint"):
        logger.warning(f"Pipeline metadata for {task_type} has no inference endpoint")
        return ApiError(kind=ErrorKind.REMOTE, status_code=200, message=QUESTIONS_UNAVAILABLE, raw_body=metadata.raw)
    return build_pipeline_questions(metadata)


async def send_feedback(store: CredentialStore, adapter: PipelineAdapter, rating: int, feedback_text: str,
                        email: str = "", api_used: str = "") -> FeedbackOutcome:
    if not rating:
        return validation_error("Please provide a rating")
    if not (feedback_text or "").strip():
        return validation_error("Please provide feedback text")
    if api_used and api_used not in feedback_api_ids():
        return validation_error(f"Unknown API for feedback: {api_used}")
    token = _token(store)
    if token is None:
        return validation_error(TOKEN_REQUIRED)
    try:
        payload = FeedbackPayload(rating=rating, feedback=feedback_text, email=email, api_used=api_used)
    except ValidationError:
        return validation_error("Rating must be between 1 and 5")
    try:
        return await adapter.submit_feedback(payload, token)
    except Exception as e:
        return _unexpected("Feedback submission", e)

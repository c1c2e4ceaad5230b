"""
Bhashini Demo Client - session bootstrap

This module wires the pieces a demo page needs:
- Configuration and environment setup
- Settings database initialization
- Credential store (bearer token, loaded from storage)
- Pipeline adapter (Bhashini inference + ULCA metadata endpoints)

The logic is organized into:
- bhashini_demo/config.py: Environment variables and configuration
- bhashini_demo/db.py: Settings database helpers
- bhashini_demo/credentials.py: Token store and its storage backends
- bhashini_demo/models.py: Pydantic models for tasks, requests and results
- bhashini_demo/utils.py: Audio helpers (base64, clip files, duration)
- bhashini_demo/pipeline/: Adapter, response extractors, error normalization
- bhashini_demo/services/: Page actions, pipeline questions, recording
"""
from pathlib import Path
from typing import List, Optional, Union

import httpx

from .config import STORAGE_AUDIO_DIR, ensure_directories, logger
from .credentials import CredentialStore, create_credential_store
from .pipeline import PipelineAdapter, create_adapter
from .services import actions_service
from .models import PipelineResult
from .utils import get_audio_duration_seconds, save_audio_clip


class DemoSession:
    """One running client: a loaded token store plus an adapter."""

    def __init__(self, store: CredentialStore, adapter: PipelineAdapter):
        self.store = store
        self.adapter = adapter

    async def translate(self, text: str, source_lang: str, target_lang: str):
        return await actions_service.translate_text(self.store, self.adapter, text, source_lang, target_lang)

    async def transliterate(self, text: str, source_lang: str, target_lang: str):
        return await actions_service.transliterate_text(self.store, self.adapter, text, source_lang, target_lang)

    async def recognize(self, audio: Union[bytes, str, None], source_lang: str):
        return await actions_service.recognize_recording(self.store, self.adapter, audio, source_lang)

    async def speak(self, text: str, source_lang: str, voice_gender: str = "female"):
        return await actions_service.generate_speech(self.store, self.adapter, text, source_lang, voice_gender)

    async def convert(self, audio: Union[bytes, str, None], source_lang: str, target_lang: str,
                      voice_gender: str = "female"):
        return await actions_service.convert_speech(self.store, self.adapter, audio, source_lang, target_lang,
                                                    voice_gender)

    async def pipeline_questions(self, task_type: str, source_lang: str, target_lang: Optional[str] = None):
        return await actions_service.get_pipeline_questions(self.store, self.adapter, task_type, source_lang,
                                                            target_lang)

    async def feedback(self, rating: int, feedback_text: str, email: str = "", api_used: str = ""):
        return await actions_service.send_feedback(self.store, self.adapter, rating, feedback_text, email, api_used)

    async def save_audio(self, result: PipelineResult,
                         directory: Union[str, Path] = STORAGE_AUDIO_DIR) -> List[str]:
        """Write each synthesized clip of a result to disk and return the file paths."""
        paths = []
        for clip in result.audio_clips:
            paths.append(await save_audio_clip(clip, directory))
            logger.info(f"Clip {len(paths)} is {get_audio_duration_seconds(clip):.2f}s long")
        logger.info(f"Saved {len(paths)} audio clip(s) to {directory}")
        return paths


def start_session(db_path: Optional[Union[str, Path]] = None,
                  transport: Optional[httpx.AsyncBaseTransport] = None) -> DemoSession:
    """Create storage directories, load the saved token and build the adapter."""
    if db_path is None:
        ensure_directories()
    return DemoSession(create_credential_store(db_path), create_adapter(transport))

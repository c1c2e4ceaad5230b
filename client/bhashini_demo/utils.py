import io
import uuid
import wave
import base64
import binascii
from pathlib import Path
from typing import Optional, Union

import aiofiles
from mutagen import File as MutagenFile

from .config import STORAGE_AUDIO_DIR, logger


def encode_audio_base64(audio: bytes) -> str:
    return base64.b64encode(audio).decode("ascii")


def strip_data_url(content: str) -> str:
    if content.startswith("data:") and "," in content:
        return content.split(",", 1)[1]
    return content


def decode_audio_base64(content: str) -> bytes:
    """Decode base64 audio content, accepting an optional data-URL prefix.

    Raises binascii.Error when the content is not valid base64.
    """
    return base64.b64decode(strip_data_url(content), validate=True)


def is_valid_base64(content: str) -> bool:
    try:
        decode_audio_base64(content)
    except (binascii.Error, ValueError):
        return False
    return True


async def read_audio_file_base64(audio_path: Union[str, Path]) -> str:
    """Read a recorded clip from disk and return it base64-encoded."""
    async with aiofiles.open(audio_path, 'rb') as audio_file:
        audio_data = await audio_file.read()
    logger.info(f"Read {len(audio_data)} bytes of audio from {audio_path}")
    return encode_audio_base64(audio_data)


async def save_audio_clip(audio: bytes, directory: Optional[Union[str, Path]] = None, suffix: str = "wav") -> str:
    """Write a synthesized clip to the audio storage directory and return its path."""
    target_dir = Path(directory) if directory is not None else STORAGE_AUDIO_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    audio_path = target_dir / f"bhashini_tts_{uuid.uuid4().hex}.{suffix}"
    async with aiofiles.open(audio_path, 'wb') as f:
        await f.write(audio)
    logger.info(f"Saved {len(audio)} bytes of audio to {audio_path}")
    return str(audio_path)


def get_audio_duration_seconds(audio: bytes) -> float:
    if not audio:
        return 0.0

    # Method 1: mutagen
    try:
        mf = MutagenFile(io.BytesIO(audio))
        if mf is not None and hasattr(mf, 'info') and hasattr(mf.info, 'length'):
            duration = float(mf.info.length)
            if 0 < duration <= 86400:
                return duration
    except Exception as e:
        logger.debug(f"mutagen could not read clip: {e}")

    # Method 2: wave
    try:
        with wave.open(io.BytesIO(audio), 'rb') as wf:
            frames = wf.getnframes()
            rate = wf.getframerate()
            if rate > 0:
                duration = frames / float(rate)
                if 0 < duration <= 86400:
                    return duration
    except (wave.Error, EOFError) as e:
        logger.debug(f"wave could not read clip: {e}")

    logger.warning(f"Unable to determine duration for clip of {len(audio)} bytes")
    return 0.0

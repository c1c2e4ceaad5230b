import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..config import logger
from ..utils import encode_audio_base64


class AudioRecorder:
    """Host microphone primitive: start() begins capture, stop() ends it and returns the clip."""

    async def start(self) -> None:
        raise NotImplementedError

    async def stop(self) -> bytes:
        raise NotImplementedError


class RecordingSession:
    def __init__(self, recorder: AudioRecorder):
        self._recorder = recorder
        self._stopped = False
        self.audio = b""

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def stop(self) -> bytes:
        if not self._stopped:
            self._stopped = True
            self.audio = await self._recorder.stop()
            logger.info(f"Recording stopped with {len(self.audio)} bytes")
        return self.audio

    @property
    def audio_base64(self) -> str:
        return encode_audio_base64(self.audio)


class Microphone:
    """Gives out one recording session at a time and always releases the recorder."""

    def __init__(self, recorder: AudioRecorder):
        self.recorder = recorder
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock is bound to one loop once contended
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    @property
    def in_use(self) -> bool:
        return self._lock is not None and self._lock.locked()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[RecordingSession]:
        async with self._loop_lock():
            await self.recorder.start()
            logger.info("Recording started")
            session = RecordingSession(self.recorder)
            try:
                yield session
            finally:
                await session.stop()

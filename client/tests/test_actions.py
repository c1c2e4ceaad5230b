"""
Unit tests for the page actions.

Local validation must reject bad input, above all a missing token, before
any request leaves the client. The happy paths run through DemoSession
against a mocked transport.
"""
import base64
import io
import tempfile
import unittest
import wave
from pathlib import Path

import httpx

from bhashini_demo.credentials import CredentialStore, SqliteTokenStorage
from bhashini_demo.models import ApiError, ErrorKind, PipelineQuestion, PipelineResult
from bhashini_demo.pipeline import BhashiniAdapter, PipelineAdapter
from bhashini_demo.services import actions_service
from bhashini_demo.services.actions_service import (
    AUDIO_REQUIRED,
    QUESTIONS_UNAVAILABLE,
    TOKEN_REQUIRED,
    VOICE_REQUIRED,
)
from bhashini_demo.session import DemoSession, start_session

AUDIO = b"RIFF0000WAVE"
AUDIO_B64 = base64.b64encode(AUDIO).decode("ascii")


class CountingHandler:
    def __init__(self, body=None):
        self.body = body if body is not None else {}
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return httpx.Response(200, json=self.body)


class ExplodingAdapter(PipelineAdapter):
    async def translate(self, text, source_lang, target_lang, token):
        raise RuntimeError("adapter exploded")


class ActionsTestCase(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "settings.db"
        self.store = CredentialStore(SqliteTokenStorage(self.db_path))
        self.store.load()

    def tearDown(self):
        self._tmp.cleanup()

    def make_adapter(self, handler) -> BhashiniAdapter:
        return BhashiniAdapter(transport=httpx.MockTransport(handler))


class TestEmptyTokenRejected(ActionsTestCase):
    """Every action must fail locally when no token is set."""

    async def test_no_request_without_token(self):
        """Test all actions return a validation error and send nothing."""
        handler = CountingHandler()
        adapter = self.make_adapter(handler)
        outcomes = [
            await actions_service.translate_text(self.store, adapter, "Hello", "en", "hi"),
            await actions_service.transliterate_text(self.store, adapter, "namaste", "en", "hi"),
            await actions_service.recognize_recording(self.store, adapter, AUDIO, "hi"),
            await actions_service.generate_speech(self.store, adapter, "नमस्ते", "hi"),
            await actions_service.convert_speech(self.store, adapter, AUDIO, "hi", "en"),
            await actions_service.get_pipeline_questions(self.store, adapter, "translation", "hi", "en"),
            await actions_service.send_feedback(self.store, adapter, 5, "Nice"),
        ]
        for outcome in outcomes:
            self.assertIsInstance(outcome, ApiError)
            self.assertEqual(outcome.kind, ErrorKind.VALIDATION)
            self.assertEqual(outcome.message, TOKEN_REQUIRED)
        self.assertEqual(handler.calls, 0, "No request should be sent without a token")

    async def test_cleared_token_rejected(self):
        """Test a token that was set then cleared is rejected too."""
        handler = CountingHandler()
        self.store.set("token-1")
        self.store.clear()
        outcome = await actions_service.translate_text(self.store, self.make_adapter(handler), "Hello", "en", "hi")
        self.assertEqual(outcome.message, TOKEN_REQUIRED)
        self.assertEqual(handler.calls, 0)


class TestInputValidation(ActionsTestCase):
    """Test cases for missing text, audio and feedback fields."""

    def setUp(self):
        super().setUp()
        self.store.set("token-1")
        self.handler = CountingHandler()
        self.adapter = self.make_adapter(self.handler)

    async def test_empty_text(self):
        """Test whitespace-only text is rejected for text actions."""
        outcome = await actions_service.translate_text(self.store, self.adapter, "   ", "en", "hi")
        self.assertEqual(outcome.message, "Please enter text to translate")
        outcome = await actions_service.transliterate_text(self.store, self.adapter, "", "en", "hi")
        self.assertEqual(outcome.message, "Please enter text to transliterate")
        outcome = await actions_service.generate_speech(self.store, self.adapter, "", "hi")
        self.assertEqual(outcome.message, "Please enter text to convert to speech")
        self.assertEqual(self.handler.calls, 0, "Validation failures must not send requests")

    async def test_missing_audio(self):
        """Test speech actions require a recording."""
        outcome = await actions_service.recognize_recording(self.store, self.adapter, b"", "hi")
        self.assertEqual(outcome.message, AUDIO_REQUIRED)
        outcome = await actions_service.convert_speech(self.store, self.adapter, None, "hi", "en")
        self.assertEqual(outcome.message, AUDIO_REQUIRED)
        self.assertEqual(self.handler.calls, 0)

    async def test_feedback_fields(self):
        """Test rating and feedback text are required and the rating is bounded."""
        outcome = await actions_service.send_feedback(self.store, self.adapter, 0, "text")
        self.assertEqual(outcome.message, "Please provide a rating")
        outcome = await actions_service.send_feedback(self.store, self.adapter, 4, "  ")
        self.assertEqual(outcome.message, "Please provide feedback text")
        outcome = await actions_service.send_feedback(self.store, self.adapter, 9, "too high")
        self.assertEqual(outcome.kind, ErrorKind.VALIDATION)
        self.assertEqual(self.handler.calls, 0)

    async def test_unknown_choices(self):
        """Test voices, task types and feedback targets come from the catalog."""
        outcome = await actions_service.generate_speech(self.store, self.adapter, "text", "hi", voice_gender="robot")
        self.assertEqual(outcome.message, VOICE_REQUIRED)
        outcome = await actions_service.convert_speech(self.store, self.adapter, AUDIO, "hi", "en", voice_gender="")
        self.assertEqual(outcome.message, VOICE_REQUIRED)
        outcome = await actions_service.get_pipeline_questions(self.store, self.adapter, "ocr", "hi")
        self.assertEqual(outcome.kind, ErrorKind.VALIDATION)
        outcome = await actions_service.send_feedback(self.store, self.adapter, 4, "ok", api_used="weather")
        self.assertEqual(outcome.kind, ErrorKind.VALIDATION)
        self.assertEqual(self.handler.calls, 0)


class TestActionsHappyPath(ActionsTestCase):
    """Test cases for successful actions."""

    def setUp(self):
        super().setUp()
        self.store.set("token-1")

    async def test_recognize_bytes_are_encoded(self):
        """Test raw recording bytes are sent base64-encoded."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"pipelineResponse": [{"output": [{"source": "hi"}]}]})

        outcome = await actions_service.recognize_recording(self.store, self.make_adapter(handler), AUDIO, "hi")
        self.assertIsInstance(outcome, PipelineResult)
        self.assertEqual(outcome.text, "hi")
        self.assertIn(AUDIO_B64.encode("ascii"), seen[0].content)

    async def test_pipeline_questions(self):
        """Test metadata is turned into four question cards."""
        handler = CountingHandler(body={
            "languages": ["hi", "en"],
            "pipelineInferenceAPIEndPoint": {
                "callbackUrl": "https://cb.test/pipeline",
                "inferenceApiKey": {"name": "Authorization", "value": "k"},
                "schema": {"fields": 1},
            },
        })
        outcome = await actions_service.get_pipeline_questions(self.store, self.make_adapter(handler), "asr", "hi")
        self.assertEqual([q.type for q in outcome], ["endpoint", "auth", "languages", "config"])
        self.assertIsInstance(outcome[0], PipelineQuestion)
        self.assertEqual(outcome[0].answer, "https://cb.test/pipeline")
        self.assertEqual(outcome[2].answer, "hi, en")

    async def test_pipeline_questions_without_endpoint(self):
        """Test a metadata body without an endpoint block is reported."""
        handler = CountingHandler(body={"languages": ["hi"]})
        outcome = await actions_service.get_pipeline_questions(self.store, self.make_adapter(handler), "asr", "hi")
        self.assertIsInstance(outcome, ApiError)
        self.assertEqual(outcome.message, QUESTIONS_UNAVAILABLE)

    async def test_adapter_exception_is_contained(self):
        """Test an unexpected adapter exception becomes an ApiError."""
        outcome = await actions_service.translate_text(self.store, ExplodingAdapter(), "Hello", "en", "hi")
        self.assertIsInstance(outcome, ApiError)
        self.assertEqual(outcome.kind, ErrorKind.LOCAL)
        self.assertEqual(outcome.message, "adapter exploded")

    async def test_session_round_trip(self):
        """Test a DemoSession loads the saved token and uses it."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"pipelineResponse": [{"output": [{"target": "नमस्ते"}]}]})

        session = start_session(self.db_path, transport=httpx.MockTransport(handler))
        self.assertIsInstance(session, DemoSession)
        self.assertEqual(session.store.value, "token-1", "Session should load the persisted token")
        outcome = await session.translate("Hello", "en", "hi")
        self.assertEqual(outcome.texts, ["नमस्ते"])
        self.assertEqual(seen[0].headers["Authorization"], "token-1")

    async def test_session_feedback(self):
        """Test feedback goes through the session with the stored token."""
        handler = CountingHandler(body={"status": "ok"})
        session = DemoSession(self.store, self.make_adapter(handler))
        outcome = await session.feedback(5, "Great demo", api_used="general")
        self.assertEqual(outcome.status, "success")
        self.assertEqual(handler.calls, 1)

    async def test_session_save_audio(self):
        """Test synthesized clips are written to the given directory."""
        handler = CountingHandler(body={"pipelineResponse": [{"audio": [{"audioContent": AUDIO_B64}]}]})
        session = DemoSession(self.store, self.make_adapter(handler))
        outcome = await session.speak("नमस्ते", "hi")
        paths = await session.save_audio(outcome, self._tmp.name)
        self.assertEqual(len(paths), 1)
        self.assertEqual(Path(paths[0]).read_bytes(), AUDIO)

    async def test_session_save_audio_logs_duration(self):
        """Test saving a clip reports how long it is."""
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(1)
            wf.setsampwidth(2)
            wf.setframerate(16000)
            wf.writeframes(b"\x00\x00" * 16000)
        clip_b64 = base64.b64encode(buf.getvalue()).decode("ascii")
        handler = CountingHandler(body={"pipelineResponse": [{"audio": [{"audioContent": clip_b64}]}]})
        session = DemoSession(self.store, self.make_adapter(handler))
        outcome = await session.speak("नमस्ते", "hi")
        with self.assertLogs("bhashini_demo.config", level="INFO") as logs:
            await session.save_audio(outcome, self._tmp.name)
        self.assertTrue(any("1.00s" in line for line in logs.output), "Clip duration should be logged")


if __name__ == "__main__":
    unittest.main()

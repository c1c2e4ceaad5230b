import time
from typing import Any, Dict, List, Optional, Union

import httpx
from pydantic import ValidationError

from .base import PipelineAdapter
from .errors import error_from_exception, error_from_response, response_body
from .extractors import build_result, parse_metadata
from ..catalog import SOURCE_ONLY_TASKS
from ..config import (
    BHASHINI_INFERENCE_URL,
    MODEL_PIPELINE_ENDPOINT,
    REQUEST_TIMEOUT,
    TTS_SERVICE_ID,
    ULCA_BASE_URL,
    debug_log,
    logger,
)
from ..models import (
    ApiError,
    ErrorKind,
    FeedbackOutcome,
    FeedbackPayload,
    FeedbackReceipt,
    MetadataOutcome,
    PipelineOutcome,
    PipelineRequest,
)


class BhashiniAdapter(PipelineAdapter):
    """Bhashini inference pipeline and ULCA metadata adapter."""

    def __init__(self, inference_url: str = BHASHINI_INFERENCE_URL, ulca_base_url: str = ULCA_BASE_URL,
                 timeout: float = REQUEST_TIMEOUT, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.inference_url = inference_url
        self.metadata_url = f"{ulca_base_url}{MODEL_PIPELINE_ENDPOINT}"
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def _auth_headers(token: str) -> Dict[str, str]:
        return {"Authorization": token, "Content-Type": "application/json"}

    async def _post(self, url: str, payload: Any, headers: Dict[str, str]) -> Union[Any, ApiError]:
        """Single POST; returns the decoded body or an ApiError. Never raises for HTTP failures."""
        req_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(url, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL, TypeError, ValueError) as e:
            error = error_from_exception(e)
            logger.error(f"POST {url} failed without a usable response ({error.kind.value}): {e!r}")
            return error
        latency = time.perf_counter() - req_time
        if resp.status_code >= 400:
            error = error_from_response(resp)
            logger.error(f"POST {url} returned HTTP {resp.status_code} in {latency:.3f}s: {error.message}")
            return error
        logger.info(f"POST {url} returned HTTP {resp.status_code} in {latency:.3f}s")
        return response_body(resp)

    async def _run_pipeline(self, label: str, tasks: List[Dict[str, Any]], input_data: Dict[str, Any],
                            token: str) -> PipelineOutcome:
        try:
            request = PipelineRequest.model_validate({"tasks": tasks, "input_data": input_data})
        except ValidationError as e:
            reason = e.errors()[0].get("msg", str(e))
            logger.error(f"{label} request could not be built: {reason}")
            return ApiError(kind=ErrorKind.LOCAL, status_code=-1, message=f"Invalid {label} request: {reason}")

        payload = request.to_payload()
        debug_log(f"{label} pipeline tasks: {[task['taskType'] for task in payload['pipelineTasks']]}")
        body = await self._post(self.inference_url, payload, self._auth_headers(token))
        if isinstance(body, ApiError):
            return body
        result = build_result(body, request.tasks)
        logger.info(f"{label} completed: {len(result.texts)} text(s), {len(result.audio_clips)} audio clip(s)")
        return result

    async def translate(self, text: str, source_lang: str, target_lang: str, token: str) -> PipelineOutcome:
        tasks = [{"task_type": "translation", "source_language": source_lang, "target_language": target_lang}]
        return await self._run_pipeline("translation", tasks, {"text": text}, token)

    async def transliterate(self, text: str, source_lang: str, target_lang: str, token: str) -> PipelineOutcome:
        tasks = [{"task_type": "transliteration", "source_language": source_lang, "target_language": target_lang}]
        return await self._run_pipeline("transliteration", tasks, {"text": text}, token)

    async def recognize_speech(self, audio_base64: str, source_lang: str, token: str) -> PipelineOutcome:
        tasks = [{"task_type": "asr", "source_language": source_lang}]
        return await self._run_pipeline("asr", tasks, {"audio_base64": audio_base64}, token)

    async def synthesize_speech(self, text: str, source_lang: str, token: str, voice_gender: str = "female") -> PipelineOutcome:
        tasks = [{"task_type": "tts", "source_language": source_lang, "gender": voice_gender}]
        return await self._run_pipeline("tts", tasks, {"text": text}, token)

    async def speech_to_speech(self, audio_base64: str, source_lang: str, target_lang: str, token: str,
                               voice_gender: str = "female") -> PipelineOutcome:
        tasks = [
            {"task_type": "asr", "source_language": source_lang},
            {"task_type": "translation", "source_language": source_lang, "target_language": target_lang},
            {"task_type": "tts", "source_language": target_lang, "gender": voice_gender, "service_id": TTS_SERVICE_ID},
        ]
        return await self._run_pipeline("speech-to-speech", tasks, {"audio_base64": audio_base64}, token)

    async def fetch_pipeline_metadata(self, task_type: str, source_lang: str, target_lang: Optional[str],
                                      token: str) -> MetadataOutcome:
        language: Dict[str, str] = {"sourceLanguage": source_lang}
        if task_type not in SOURCE_ONLY_TASKS and target_lang:
            language["targetLanguage"] = target_lang
        payload = {"pipelineTasks": [{"taskType": task_type, "config": {"language": language}}]}
        body = await self._post(self.metadata_url, payload, self._auth_headers(token))
        if isinstance(body, ApiError):
            return body
        return parse_metadata(body)

    async def submit_feedback(self, payload: Union[FeedbackPayload, Dict[str, Any]], token: str) -> FeedbackOutcome:
        data = payload.to_payload() if isinstance(payload, FeedbackPayload) else payload
        body = await self._post(self.inference_url, data, self._auth_headers(token))
        if isinstance(body, ApiError):
            return body
        return FeedbackReceipt(raw=body)

    async def fetch_pipeline_config(self, payload: Dict[str, Any], ulca_api_key: str,
                                    user_id: Optional[str] = None) -> Union[Any, ApiError]:
        """Legacy ULCA config lookup keyed by ``ulcaApiKey`` (and ``userID`` when given)."""
        headers = {"ulcaApiKey": ulca_api_key}
        if user_id:
            headers["userID"] = user_id
        return await self._post(self.metadata_url, payload, headers)

    async def compute(self, callback_url: str, payload: Dict[str, Any],
                      inference_api_key: Optional[str] = None) -> Union[Any, ApiError]:
        """Legacy direct call to a callback URL obtained from pipeline metadata."""
        headers = {"Accept": "application/json"}
        if inference_api_key:
            headers["Authorization"] = inference_api_key
        return await self._post(callback_url, payload, headers)

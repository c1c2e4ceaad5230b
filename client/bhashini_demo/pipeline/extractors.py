"""
Result extraction for pipeline responses.

The inference service returns logically equivalent results in differently
shaped bodies, e.g. ``pipelineResponse[0].output[0].source``,
``output[0].source`` or ``data.output``. Each result field is read by walking
an ordered list of stage locators and, inside each located stage, an ordered
list of extractors. The first non-empty hit wins. New shapes are supported by
appending to the lists below.
"""
import binascii
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import logger
from ..models import Modality, PipelineMetadata, PipelineResult
from ..utils import decode_audio_base64

NO_USABLE_OUTPUT = "No usable output in response"
AUDIO_DECODE_FAILED = "Failed to process generated audio."

# Preferred output fields per text-producing task
TEXT_FIELDS: Dict[str, Sequence[str]] = {
    "asr": ("source",),
    "translation": ("target",),
    "transliteration": ("target",),
}

Stage = Dict[str, Any]
StageLocator = Callable[[Any, int], Optional[Stage]]
TextExtractor = Callable[[Stage, Sequence[str]], Optional[str]]
AudioExtractor = Callable[[Stage], Optional[str]]


def _first_item(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return None


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    # transliteration may answer with a list of candidates
    if isinstance(value, list):
        for candidate in value:
            if isinstance(candidate, str) and candidate.strip():
                return candidate
    return None


# Stage locators

def stage_from_pipeline_response(body: Any, index: int) -> Optional[Stage]:
    stages = body.get("pipelineResponse") if isinstance(body, dict) else None
    if isinstance(stages, list) and index < len(stages) and isinstance(stages[index], dict):
        return stages[index]
    return None


def stage_from_body(body: Any, index: int) -> Optional[Stage]:
    if index == 0 and isinstance(body, dict):
        return body
    return None


def stage_from_data(body: Any, index: int) -> Optional[Stage]:
    if index == 0 and isinstance(body, dict) and isinstance(body.get("data"), dict):
        return body["data"]
    return None


STAGE_LOCATORS: List[StageLocator] = [
    stage_from_pipeline_response,
    stage_from_body,
    stage_from_data,
]


# Text extractors

def text_from_output_item(stage: Stage, fields: Sequence[str]) -> Optional[str]:
    item = _first_item(stage.get("output"))
    if item is None:
        return None
    for field in (*fields, "text"):
        found = _non_empty_str(item.get(field))
        if found:
            return found
    return None


def text_from_output_value(stage: Stage, fields: Sequence[str]) -> Optional[str]:
    return _non_empty_str(stage.get("output"))


def text_from_text_field(stage: Stage, fields: Sequence[str]) -> Optional[str]:
    return _non_empty_str(stage.get("text"))


TEXT_EXTRACTORS: List[TextExtractor] = [
    text_from_output_item,
    text_from_output_value,
    text_from_text_field,
]


# Audio extractors

def audio_from_audio_item(stage: Stage) -> Optional[str]:
    item = _first_item(stage.get("audio"))
    return _non_empty_str(item.get("audioContent")) if item else None


def audio_from_output_item(stage: Stage) -> Optional[str]:
    item = _first_item(stage.get("output"))
    return _non_empty_str(item.get("audioContent")) if item else None


def audio_from_stage(stage: Stage) -> Optional[str]:
    return _non_empty_str(stage.get("audioContent"))


AUDIO_EXTRACTORS: List[AudioExtractor] = [
    audio_from_audio_item,
    audio_from_output_item,
    audio_from_stage,
]


def extract_text(body: Any, index: int, fields: Sequence[str] = ("source",)) -> Optional[str]:
    for locate in STAGE_LOCATORS:
        stage = locate(body, index)
        if stage is None:
            continue
        for extract in TEXT_EXTRACTORS:
            found = extract(stage, fields)
            if found:
                return found
    return None


def extract_audio_content(body: Any, index: int) -> Optional[str]:
    for locate in STAGE_LOCATORS:
        stage = locate(body, index)
        if stage is None:
            continue
        for extract in AUDIO_EXTRACTORS:
            found = extract(stage)
            if found:
                return found
    return None


def build_result(body: Any, tasks: Sequence[Any]) -> PipelineResult:
    """Collect one text per text-producing task and one clip per audio-producing task.

    Positions are probed independently, so a pipeline that failed part way
    still yields whatever the earlier stages produced. Texts keep their
    positions (empty string for a stage without output) unless no stage
    produced any text at all.
    """
    texts: List[str] = []
    audio_clips: List[bytes] = []
    notice: Optional[str] = None

    for index, task in enumerate(tasks):
        if task.produces == Modality.TEXT:
            texts.append(extract_text(body, index, TEXT_FIELDS.get(task.task_type, ())) or "")
            continue
        content = extract_audio_content(body, index)
        if not content:
            logger.info(f"No audio content at pipeline position {index}")
            continue
        try:
            audio_clips.append(decode_audio_base64(content))
        except (binascii.Error, ValueError) as e:
            logger.warning(f"Audio at pipeline position {index} could not be decoded: {e}")
            notice = AUDIO_DECODE_FAILED

    if not any(texts):
        texts = []
    if not texts and not audio_clips and notice is None:
        logger.warning(f"{NO_USABLE_OUTPUT}: {str(body)[:200]}")
        notice = NO_USABLE_OUTPUT
    return PipelineResult(texts=texts, audio_clips=audio_clips, notice=notice, raw=body)


def _language_codes(value: Any) -> List[str]:
    codes: List[str] = []
    if not isinstance(value, list):
        return codes
    for entry in value:
        if isinstance(entry, str) and entry:
            codes.append(entry)
        elif isinstance(entry, dict) and isinstance(entry.get("sourceLanguage"), str):
            codes.append(entry["sourceLanguage"])
    return codes


def _config_languages(response_config: Any) -> List[str]:
    codes: List[str] = []
    if not isinstance(response_config, list):
        return codes
    for task in response_config:
        configs = task.get("config") if isinstance(task, dict) else None
        for config in configs if isinstance(configs, list) else []:
            language = config.get("language") if isinstance(config, dict) else None
            source = language.get("sourceLanguage") if isinstance(language, dict) else None
            if isinstance(source, str) and source not in codes:
                codes.append(source)
    return codes


def parse_metadata(body: Any) -> PipelineMetadata:
    if not isinstance(body, dict):
        logger.warning("Pipeline metadata response is not an object")
        return PipelineMetadata()

    endpoint = body.get("pipelineInferenceAPIEndPoint")
    endpoint = endpoint if isinstance(endpoint, dict) else {}
    api_key = endpoint.get("inferenceApiKey")
    api_key = api_key if isinstance(api_key, dict) else {}

    languages = _language_codes(body.get("languages")) or _config_languages(body.get("pipelineResponseConfig"))
    config_schema = endpoint.get("schema")
    if config_schema is None:
        config_schema = body.get("pipelineResponseConfig")

    return PipelineMetadata(
        inference_endpoint=endpoint.get("callbackUrl"),
        inference_api_key_name=api_key.get("name"),
        inference_api_key_value=api_key.get("value"),
        languages=languages,
        config_schema=config_schema,
        raw=body,
    )

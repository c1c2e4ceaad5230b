from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .config import ASR_SERVICE_ID, TRANSLATION_SERVICE_ID
from .utils import is_valid_base64, strip_data_url


class Modality(str, Enum):
    TEXT = "text"
    AUDIO = "audio"


class TranslationTask(BaseModel):
    task_type: Literal["translation"] = "translation"
    source_language: str
    target_language: str
    service_id: str = TRANSLATION_SERVICE_ID

    consumes: ClassVar[Modality] = Modality.TEXT
    produces: ClassVar[Modality] = Modality.TEXT

    def to_payload(self) -> Dict[str, Any]:
        return {
            "taskType": self.task_type,
            "config": {
                "language": {"sourceLanguage": self.source_language, "targetLanguage": self.target_language},
                "serviceId": self.service_id,
            },
        }


class TransliterationTask(BaseModel):
    task_type: Literal["transliteration"] = "transliteration"
    source_language: str
    target_language: str

    consumes: ClassVar[Modality] = Modality.TEXT
    produces: ClassVar[Modality] = Modality.TEXT

    def to_payload(self) -> Dict[str, Any]:
        return {
            "taskType": self.task_type,
            "config": {
                "language": {"sourceLanguage": self.source_language, "targetLanguage": self.target_language},
            },
        }


class ASRTask(BaseModel):
    task_type: Literal["asr"] = "asr"
    source_language: str
    service_id: str = ASR_SERVICE_ID

    consumes: ClassVar[Modality] = Modality.AUDIO
    produces: ClassVar[Modality] = Modality.TEXT

    def to_payload(self) -> Dict[str, Any]:
        return {
            "taskType": self.task_type,
            "config": {
                "language": {"sourceLanguage": self.source_language},
                "serviceId": self.service_id,
            },
        }


class TTSTask(BaseModel):
    task_type: Literal["tts"] = "tts"
    source_language: str
    gender: str = "female"
    service_id: Optional[str] = None

    consumes: ClassVar[Modality] = Modality.TEXT
    produces: ClassVar[Modality] = Modality.AUDIO

    def to_payload(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "language": {"sourceLanguage": self.source_language},
            "gender": self.gender,
        }
        if self.service_id:
            config["serviceId"] = self.service_id
        return {"taskType": self.task_type, "config": config}


PipelineTask = Annotated[
    Union[TranslationTask, TransliterationTask, ASRTask, TTSTask],
    Field(discriminator="task_type"),
]


class InputData(BaseModel):
    text: Optional[str] = None
    audio_base64: Optional[str] = None

    @field_validator("audio_base64")
    @classmethod
    def _audio_is_base64(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_base64(value):
            raise ValueError("audio content is not valid base64")
        return strip_data_url(value) if value is not None else None

    @model_validator(mode="after")
    def _exactly_one_input(self) -> "InputData":
        if (self.text is None) == (self.audio_base64 is None):
            raise ValueError("exactly one of text or audio_base64 must be provided")
        return self

    @property
    def modality(self) -> Modality:
        return Modality.TEXT if self.text is not None else Modality.AUDIO

    def to_payload(self) -> Dict[str, Any]:
        if self.text is not None:
            return {"input": [{"source": self.text}]}
        return {"audio": [{"audioContent": self.audio_base64}]}


class PipelineRequest(BaseModel):
    tasks: List[PipelineTask] = Field(min_length=1, max_length=3)
    input_data: InputData

    @model_validator(mode="after")
    def _tasks_chain(self) -> "PipelineRequest":
        available = self.input_data.modality
        for index, task in enumerate(self.tasks):
            if task.consumes != available:
                raise ValueError(
                    f"task {index} ({task.task_type}) consumes {task.consumes.value} but receives {available.value}"
                )
            available = task.produces
        return self

    def to_payload(self) -> Dict[str, Any]:
        return {
            "pipelineTasks": [task.to_payload() for task in self.tasks],
            "inputData": self.input_data.to_payload(),
        }


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    REMOTE = "remote"
    NETWORK = "network"
    LOCAL = "local"


class ApiError(BaseModel):
    status: Literal["error"] = "error"
    kind: ErrorKind
    status_code: int
    message: str
    raw_body: Optional[Any] = None


class PipelineResult(BaseModel):
    status: Literal["success"] = "success"
    texts: List[str] = []
    audio_clips: List[bytes] = []
    notice: Optional[str] = None
    raw: Optional[Any] = None

    @property
    def text(self) -> str:
        """First non-empty text, or an empty string."""
        return next((t for t in self.texts if t), "")

    @property
    def audio(self) -> Optional[bytes]:
        return self.audio_clips[0] if self.audio_clips else None

    @property
    def is_empty(self) -> bool:
        return not any(self.texts) and not self.audio_clips


class PipelineMetadata(BaseModel):
    status: Literal["success"] = "success"
    inference_endpoint: Optional[str] = None
    inference_api_key_name: Optional[str] = None
    inference_api_key_value: Optional[str] = None
    languages: List[str] = []
    config_schema: Optional[Any] = None
    raw: Dict[str, Any] = {}


class FeedbackPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rating: int = Field(ge=1, le=5)
    feedback: str
    email: str = ""
    api_used: str = Field(default="", alias="apiUsed")
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    user_agent: str = Field(default="bhashini-demo-client", alias="userAgent")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class FeedbackReceipt(BaseModel):
    status: Literal["success"] = "success"
    raw: Optional[Any] = None


class PipelineQuestion(BaseModel):
    question: str
    answer: str
    type: str


PipelineOutcome = Union[PipelineResult, ApiError]
MetadataOutcome = Union[PipelineMetadata, ApiError]
FeedbackOutcome = Union[FeedbackReceipt, ApiError]

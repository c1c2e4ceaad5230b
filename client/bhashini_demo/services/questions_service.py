import json
from typing import List

from ..catalog import language_names
from ..config import BHASHINI_INFERENCE_URL
from ..models import PipelineMetadata, PipelineQuestion


def build_pipeline_questions(metadata: PipelineMetadata) -> List[PipelineQuestion]:
    """Question/answer cards for the pipeline discovery page."""
    languages = ", ".join(metadata.languages) if metadata.languages else ", ".join(language_names()) + " and more"
    return [
        PipelineQuestion(
            question="What is the pipeline inference API endpoint?",
            answer=metadata.inference_endpoint or BHASHINI_INFERENCE_URL,
            type="endpoint",
        ),
        PipelineQuestion(
            question="What is the authorization method?",
            answer=f"Bearer Token in {metadata.inference_api_key_name or 'Authorization'} header",
            type="auth",
        ),
        PipelineQuestion(
            question="What are the supported languages?",
            answer=languages,
            type="languages",
        ),
        PipelineQuestion(
            question="What is the task configuration?",
            answer=json.dumps(metadata.config_schema or {}, indent=2, ensure_ascii=False),
            type="config",
        ),
    ]

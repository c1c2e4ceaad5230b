import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Logging configuration
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Remote endpoints
BHASHINI_INFERENCE_URL = os.getenv("BHASHINI_INFERENCE_URL", "https://dhruva-api.bhashini.gov.in/services/inference/pipeline")
ULCA_BASE_URL = os.getenv("ULCA_BASE_URL", "https://meity-auth.ulcacontrib.org")
MODEL_PIPELINE_ENDPOINT = "/ulca/apis/v0/model/getModelsPipeline"

REQUEST_TIMEOUT = 30.0

# Default service ids per task
TRANSLATION_SERVICE_ID = "ai4bharat/indictrans-v2-all-gpu--t4"
ASR_SERVICE_ID = "ai4bharat/conformer-hi-gpu--t4"
TTS_SERVICE_ID = "ai4bharat/indic-tts-coqui-indo_aryan-gpu--t4"

# Persisted state
AUTH_TOKEN_KEY = "bhashini_auth_token"

# Directories and paths
DATA_DIR = Path("data")
STORAGE_AUDIO_DIR = Path("storage/audio")
DB_PATH = DATA_DIR / "bhashini_demo.db"


def ensure_directories() -> None:
    """Ensure required directories exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    STORAGE_AUDIO_DIR.mkdir(parents=True, exist_ok=True)


def debug_log(msg: str) -> None:
    """Temporary debug logger, routed through info level."""
    logger.info(f"DEBUG: {msg}")

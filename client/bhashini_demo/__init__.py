from .credentials import CredentialStore, SqliteTokenStorage, TokenStorage
from .models import ApiError, ErrorKind, PipelineMetadata, PipelineResult
from .pipeline import BhashiniAdapter, PipelineAdapter
from .session import DemoSession, start_session

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "BhashiniAdapter",
    "CredentialStore",
    "DemoSession",
    "ErrorKind",
    "PipelineAdapter",
    "PipelineMetadata",
    "PipelineResult",
    "SqliteTokenStorage",
    "TokenStorage",
    "start_session",
]

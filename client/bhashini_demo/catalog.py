"""Static choices offered by the demo pages: languages, tasks, voices, feedback targets."""
from typing import Dict, List


LANGUAGES: List[Dict[str, str]] = [
    {"code": "hi", "name": "Hindi", "native": "हिंदी"},
    {"code": "en", "name": "English", "native": "English"},
    {"code": "bn", "name": "Bengali", "native": "বাংলা"},
    {"code": "te", "name": "Telugu", "native": "తెలుగు"},
    {"code": "mr", "name": "Marathi", "native": "मराठी"},
    {"code": "ta", "name": "Tamil", "native": "தமிழ்"},
    {"code": "gu", "name": "Gujarati", "native": "ગુજરાતી"},
    {"code": "kn", "name": "Kannada", "native": "ಕನ್ನಡ"},
    {"code": "ml", "name": "Malayalam", "native": "മലയാളം"},
    {"code": "pa", "name": "Punjabi", "native": "ਪੰਜਾਬੀ"},
]

TASK_TYPES: List[Dict[str, str]] = [
    {"id": "translation", "name": "Translation", "description": "Text translation between languages"},
    {"id": "transliteration", "name": "Transliteration", "description": "Script conversion between languages"},
    {"id": "asr", "name": "Speech Recognition", "description": "Convert speech to text"},
    {"id": "tts", "name": "Text to Speech", "description": "Convert text to speech"},
]

VOICES: List[Dict[str, str]] = [
    {"id": "female", "name": "Female Voice"},
    {"id": "male", "name": "Male Voice"},
]

FEEDBACK_APIS: List[Dict[str, str]] = [
    {"id": "translation", "name": "Translation"},
    {"id": "transliteration", "name": "Transliteration"},
    {"id": "asr", "name": "Speech Recognition"},
    {"id": "tts", "name": "Text to Speech"},
    {"id": "speech-to-speech", "name": "Speech to Speech"},
    {"id": "pipeline-questions", "name": "Pipeline Questions"},
    {"id": "general", "name": "General Experience"},
]

# Task types whose language config carries only a source language
SOURCE_ONLY_TASKS = ("asr", "tts")


def language_names() -> List[str]:
    return [lang["name"] for lang in LANGUAGES]


def voice_ids() -> List[str]:
    return [voice["id"] for voice in VOICES]


def task_type_ids() -> List[str]:
    return [task["id"] for task in TASK_TYPES]


def feedback_api_ids() -> List[str]:
    return [api["id"] for api in FEEDBACK_APIS]

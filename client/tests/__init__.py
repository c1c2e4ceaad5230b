"""
Test suite for the Bhashini demo client

This package contains unit tests for the client layer:
- test_credentials.py: Token store persistence and failure handling
- test_models.py: Pipeline task and request payload construction
- test_extractors.py: Multi-shape response extraction
- test_adapter.py: HTTP calls, payloads and error bucketing
- test_actions.py: Page actions and local validation
- test_audio_utils.py: Base64, clip files and duration
- test_recording.py: Microphone session lifecycle
"""

"""
Gemini integration - model client, response extraction and fallbacks.
"""

from .client import ModelClient, build_contents, extract_response_text, initialize_model_client
from .fallback import build_fallback_response, clean_conditions
from .normalizer import extract_json

__all__ = [
    "ModelClient",
    "build_contents",
    "build_fallback_response",
    "clean_conditions",
    "extract_json",
    "extract_response_text",
    "initialize_model_client",
]

"""
Structured extraction with language models
"""

from .llm_extract import ExtractResult, LLMExtract
from .registry import AgentRegistry, default_registry
from .structured import StructuredExtractor, resolve_model_id

__all__ = [
    'AgentRegistry',
    'ExtractResult',
    'LLMExtract',
    'StructuredExtractor',
    'default_registry',
    'resolve_model_id'
]

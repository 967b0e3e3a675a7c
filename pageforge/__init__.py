"""
pageforge - Multi-format page extraction for crawl jobs
"""

from .config import ExtractorConfig
from .errors import DataExtractionError, ExtractionConfigError, OptionsValidationError, PageforgeError
from .extraction import DataExtractor
from .options import Engine, JobOptions, JsonOptions

__all__ = [
    'DataExtractionError',
    'DataExtractor',
    'Engine',
    'ExtractionConfigError',
    'ExtractorConfig',
    'JobOptions',
    'JsonOptions',
    'OptionsValidationError',
    'PageforgeError'
]

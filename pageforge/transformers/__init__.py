"""
Transformers - Format derivations used by the extraction pipeline
"""

from .converters import html_to_text, process_markdown
from .html_transformer import HTMLTransformer, TransformOptions
from .screenshot_transformer import ScreenshotTransformer

__all__ = [
    'HTMLTransformer',
    'ScreenshotTransformer',
    'TransformOptions',
    'html_to_text',
    'process_markdown'
]

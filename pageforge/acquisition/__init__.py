"""
Page acquisition - Engine output and its normalized surface
"""

from .adapter import BaseContent, acquire, extract_base_content, read_or_default
from .result import AcquisitionResult, CrawlContext, JobUserData, RenderedPage, StaticBody
from .surface import ContentSurface

__all__ = [
    'AcquisitionResult',
    'BaseContent',
    'ContentSurface',
    'CrawlContext',
    'JobUserData',
    'RenderedPage',
    'StaticBody',
    'acquire',
    'extract_base_content',
    'read_or_default',
]

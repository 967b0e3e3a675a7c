"""
Engines - Fetch/render backends that produce acquisition results
"""

from .browser_engine import BrowserEngine
from .runner import JobRunner
from .static_engine import StaticEngine

__all__ = ['BrowserEngine', 'JobRunner', 'StaticEngine']

"""
Storage and persistence modules
"""

from .file_storage import FileStorage
from .content_type import ContentType

__all__ = [
    'FileStorage',
    'ContentType'
]

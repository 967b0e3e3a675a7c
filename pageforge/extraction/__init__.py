"""
Extraction pipeline - From one acquired page to a multi-format result
"""

from .assembler import assemble_data
from .extractor import DataExtractor
from .metadata import MetadataEntry, extract_metadata
from .tasks import FormatTaskGraph

__all__ = [
    'DataExtractor',
    'FormatTaskGraph',
    'MetadataEntry',
    'assemble_data',
    'extract_metadata'
]

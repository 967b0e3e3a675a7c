"""
Metadata Extractor - Reads <meta> tags from a content surface
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..acquisition.surface import ContentSurface

logger = logging.getLogger(__name__)


@dataclass
class MetadataEntry:
    """A single name/content pair from a <meta> tag"""
    name: str
    content: str
    property: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry = {'name': self.name, 'content': self.content}
        if self.property is not None:
            entry['property'] = self.property
        return entry


def _attr(element, name: str) -> Optional[str]:
    value = element.get(name)
    if isinstance(value, list):
        value = ' '.join(value)
    return value or None


def extract_metadata(surface: ContentSurface) -> List[MetadataEntry]:
    """Collect meta entries in document order

    Tags without a name/property or without content are skipped.
    """
    metadata: List[MetadataEntry] = []

    try:
        elements = surface.meta_tags()
    except Exception as e:
        logger.error(f"Failed to extract metadata: {e}")
        return []

    for element in elements:
        try:
            name = _attr(element, 'name')
            prop = _attr(element, 'property')
            content = _attr(element, 'content')
            if not (name or prop) or not content:
                continue
            content = content.strip()
            if not content:
                continue
            metadata.append(MetadataEntry(name=name or prop, content=content, property=prop))
        except Exception as e:
            logger.debug(f"Skipping malformed meta tag: {e}")

    return metadata

"""
Result Assembler - Builds the final extraction result for a job
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from ..acquisition.adapter import BaseContent
from ..acquisition.result import CrawlContext
from .metadata import MetadataEntry


def assemble_data(context: CrawlContext, base_content: BaseContent,
                  metadata: List[MetadataEntry], completed: Dict[str, Any]) -> Dict[str, Any]:
    """Merge base content, metadata and format outputs

    rawHtml appears only when requested. Format outputs are merged last so
    they win over same-named base fields.
    """
    formats = context.user_data.formats

    data: Dict[str, Any] = {
        'jobId': context.user_data.job_id,
        'url': base_content.url,
        'title': base_content.title,
    }
    if 'rawHtml' in formats:
        data['rawHtml'] = base_content.raw_html
    data['metadata'] = [entry.to_dict() for entry in metadata]

    for key, value in base_content.extra.items():
        if key not in ('url', 'title', 'rawHtml'):
            data[key] = value

    for key, value in completed.items():
        if key in formats:
            data[key] = value

    data['timestamp'] = datetime.now(timezone.utc).isoformat()
    return data

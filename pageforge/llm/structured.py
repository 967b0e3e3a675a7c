"""
Structured Extractor - Runs an extraction agent over derived Markdown
"""

import logging
from typing import Any, Optional

from ..config import ExtractorConfig
from ..errors import ExtractionConfigError
from ..options import JobOptions, JsonOptions
from .registry import AgentRegistry

logger = logging.getLogger(__name__)


def resolve_model_id(options: JobOptions, config: ExtractorConfig) -> str:
    """Pick the extraction model: job override, then process default"""
    model_id: Optional[str] = options.extract_model or config.default_extract_model
    if not model_id or not isinstance(model_id, str):
        raise ExtractionConfigError(
            "No extraction model configured: set extract_model on the job "
            "or DEFAULT_EXTRACT_MODEL for the process"
        )
    return model_id


class StructuredExtractor:
    """Bridge between the task graph and an extraction agent"""

    def __init__(self, registry: AgentRegistry, model_id: str):
        self.registry = registry
        self.model_id = model_id

    async def extract(self, markdown: str, json_options: JsonOptions) -> Any:
        agent = self.registry.get(self.model_id)
        logger.debug(f"Running structured extraction with {self.model_id}")
        result = await agent.perform(
            markdown,
            json_options.schema,
            {
                'prompt': json_options.user_prompt or None,
                'schema_name': json_options.schema_name or None,
                'schema_description': json_options.schema_description or None,
            },
        )
        return result.data

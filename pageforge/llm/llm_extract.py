"""
LLM Extract - Model-bound agent that turns Markdown into structured data
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import StructuredExtractionError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You extract structured data from web page content. "
    "Answer only with data found in the content; use null for anything missing."
)

# JSON mode rejects requests whose messages never mention "json"
JSON_MODE_INSTRUCTION = "Respond with a single JSON object."

# Markdown beyond this many characters is cut before it reaches the model
MAX_CONTENT_CHARS = 100_000


@dataclass
class ExtractResult:
    """Payload returned by an extraction agent"""
    data: Any
    model_id: str
    truncated: bool = False


def _build_schema(schema: Dict[str, Any], name: Optional[str],
                  description: Optional[str]) -> Dict[str, Any]:
    """Attach the title/description the structured-output API expects"""
    schema = dict(schema)
    schema['title'] = name or schema.get('title') or 'extracted_data'
    if description:
        schema['description'] = description
    elif 'description' not in schema:
        schema['description'] = 'Data extracted from the page'
    if schema.get('type') is None:
        schema['type'] = 'object'
    return schema


class LLMExtract:
    """Structured extraction agent bound to a single model identifier"""

    def __init__(self, model_id: str, temperature: float = 0):
        from langchain_openai import ChatOpenAI

        self.model_id = model_id
        self.llm = ChatOpenAI(model=model_id, temperature=temperature)

    def _build_messages(self, markdown: str, options: Dict[str, Optional[str]], json_mode: bool = False):
        system = SYSTEM_PROMPT
        if json_mode:
            system += f"\n{JSON_MODE_INSTRUCTION}"
        if options.get('schema_name'):
            system += f"\nThe result describes: {options['schema_name']}."
        if options.get('schema_description'):
            system += f"\n{options['schema_description']}"

        instructions = options.get('prompt') or "Extract the key information from this page."
        human = f"{instructions}\n\n--- PAGE CONTENT ---\n{markdown}"
        return [('system', system), ('human', human)]

    async def perform(self, markdown: str, schema: Optional[Dict[str, Any]],
                      options: Dict[str, Optional[str]]) -> ExtractResult:
        """Extract structured data from markdown

        With a schema the model is forced through it; without one the model
        is asked for a free-form JSON object.
        """
        truncated = len(markdown) > MAX_CONTENT_CHARS
        if truncated:
            logger.warning(f"Truncating {len(markdown)} chars of markdown for {self.model_id}")
            markdown = markdown[:MAX_CONTENT_CHARS]

        messages = self._build_messages(markdown, options, json_mode=schema is None)

        if schema is not None:
            runnable = self.llm.with_structured_output(
                _build_schema(schema, options.get('schema_name'), options.get('schema_description')),
                method='function_calling',
            )
        else:
            runnable = self.llm.with_structured_output(None, method='json_mode')

        try:
            data = await runnable.ainvoke(messages)
        except Exception as e:
            raise StructuredExtractionError(f"Model {self.model_id} failed: {e}") from e

        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise StructuredExtractionError(
                    f"Model {self.model_id} returned invalid JSON: {e}"
                ) from e

        return ExtractResult(data=data, model_id=self.model_id, truncated=truncated)

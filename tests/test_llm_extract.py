"""Tests for the LLM extraction agent.

ChatOpenAI is patched with a MagicMock; with_structured_output returns a
runnable whose ainvoke is an AsyncMock.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pageforge.errors import StructuredExtractionError
from pageforge.llm import LLMExtract
from pageforge.llm.llm_extract import JSON_MODE_INSTRUCTION, MAX_CONTENT_CHARS, _build_schema

SCHEMA = {'type': 'object', 'properties': {'name': {'type': 'string'}}}
NO_OPTIONS = {'prompt': None, 'schema_name': None, 'schema_description': None}


@pytest.fixture
def chat_model():
    with patch('langchain_openai.ChatOpenAI') as chat_cls:
        llm = MagicMock()
        runnable = MagicMock()
        runnable.ainvoke = AsyncMock(return_value={'name': 'Example'})
        llm.with_structured_output.return_value = runnable
        chat_cls.return_value = llm
        yield chat_cls, llm, runnable


class TestLLMExtract:
    def test_binds_model(self, chat_model) -> None:
        chat_cls, _, _ = chat_model
        agent = LLMExtract('gpt-4o-mini')

        assert agent.model_id == 'gpt-4o-mini'
        chat_cls.assert_called_once_with(model='gpt-4o-mini', temperature=0)

    async def test_schema_uses_function_calling(self, chat_model) -> None:
        _, llm, runnable = chat_model
        agent = LLMExtract('gpt-4o-mini')

        result = await agent.perform('# Example', SCHEMA, dict(NO_OPTIONS, schema_name='company'))

        assert result.data == {'name': 'Example'}
        assert result.model_id == 'gpt-4o-mini'
        assert result.truncated is False
        schema, = llm.with_structured_output.call_args.args
        assert schema['title'] == 'company'
        assert llm.with_structured_output.call_args.kwargs == {'method': 'function_calling'}
        runnable.ainvoke.assert_awaited_once()

    async def test_no_schema_uses_json_mode(self, chat_model) -> None:
        _, llm, _ = chat_model
        await LLMExtract('gpt-4o-mini').perform('# Example', None, NO_OPTIONS)
        llm.with_structured_output.assert_called_once_with(None, method='json_mode')

    async def test_json_mode_messages_mention_json(self, chat_model) -> None:
        _, _, runnable = chat_model
        options = dict(NO_OPTIONS, prompt='Find the company name')

        await LLMExtract('gpt-4o-mini').perform('# Acme', None, options)

        messages = runnable.ainvoke.call_args.args[0]
        assert any('json' in content.lower() for _, content in messages)

    async def test_schema_messages_skip_json_mode_instruction(self, chat_model) -> None:
        _, _, runnable = chat_model
        await LLMExtract('gpt-4o-mini').perform('# Acme', SCHEMA, NO_OPTIONS)

        system = runnable.ainvoke.call_args.args[0][0][1]
        assert JSON_MODE_INSTRUCTION not in system

    async def test_prompt_reaches_model(self, chat_model) -> None:
        _, _, runnable = chat_model
        options = {'prompt': 'Find the name', 'schema_name': None, 'schema_description': 'A company'}

        await LLMExtract('gpt-4o-mini').perform('# Example', None, options)

        (system_role, system), (human_role, human) = runnable.ainvoke.call_args.args[0]
        assert (system_role, human_role) == ('system', 'human')
        assert 'A company' in system
        assert human.startswith('Find the name')
        assert human.endswith('# Example')

    async def test_long_markdown_is_truncated(self, chat_model) -> None:
        _, _, runnable = chat_model
        markdown = 'x' * (MAX_CONTENT_CHARS + 10)

        result = await LLMExtract('gpt-4o-mini').perform(markdown, None, NO_OPTIONS)

        assert result.truncated is True
        human = runnable.ainvoke.call_args.args[0][1][1]
        assert human.endswith('x' * 10)
        assert 'x' * (MAX_CONTENT_CHARS + 1) not in human

    async def test_string_payload_is_parsed(self, chat_model) -> None:
        _, _, runnable = chat_model
        runnable.ainvoke.return_value = '{"name": "Parsed"}'

        result = await LLMExtract('gpt-4o-mini').perform('# Example', None, NO_OPTIONS)
        assert result.data == {'name': 'Parsed'}

    async def test_invalid_string_payload(self, chat_model) -> None:
        _, _, runnable = chat_model
        runnable.ainvoke.return_value = 'not json'

        with pytest.raises(StructuredExtractionError, match='invalid JSON'):
            await LLMExtract('gpt-4o-mini').perform('# Example', None, NO_OPTIONS)

    async def test_model_failure(self, chat_model) -> None:
        _, _, runnable = chat_model
        runnable.ainvoke.side_effect = RuntimeError('rate limited')

        with pytest.raises(StructuredExtractionError, match='rate limited'):
            await LLMExtract('gpt-4o-mini').perform('# Example', SCHEMA, NO_OPTIONS)


class TestBuildSchema:
    def test_defaults(self) -> None:
        schema = _build_schema({'properties': {}}, None, None)

        assert schema['title'] == 'extracted_data'
        assert schema['type'] == 'object'
        assert schema['description']

    def test_does_not_mutate_input(self) -> None:
        original = dict(SCHEMA)
        _build_schema(original, 'company', 'A company')
        assert original == SCHEMA

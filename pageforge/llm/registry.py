"""
Agent Registry - Process-wide cache of extraction agents keyed by model
"""

import logging
import threading
from typing import Callable, Dict

from .llm_extract import LLMExtract

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Lazily builds one agent per model identifier and keeps it for the process

    Lookups and construction share one lock, so concurrent first access for
    a model builds exactly one agent.
    """

    def __init__(self, factory: Callable[[str], LLMExtract] = LLMExtract):
        self._factory = factory
        self._agents: Dict[str, LLMExtract] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(model_id: str) -> str:
        return model_id

    def get(self, model_id: str) -> LLMExtract:
        key = self._key(model_id)
        with self._lock:
            agent = self._agents.get(key)
            if agent is None:
                logger.debug(f"Creating extraction agent for model {model_id}")
                agent = self._factory(model_id)
                self._agents[key] = agent
            return agent

    def __contains__(self, model_id: str) -> bool:
        return self._key(model_id) in self._agents

    def __len__(self) -> int:
        return len(self._agents)


_default_registry = AgentRegistry()


def default_registry() -> AgentRegistry:
    """Registry shared by every DataExtractor in the process"""
    return _default_registry

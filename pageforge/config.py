"""
Extractor Config - Process-level settings for the extraction pipeline
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

_TRUTHY = {'1', 'true', 'yes', 'on'}


def load_ai_config(path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Load the AI config JSON file, or None when no path is configured"""
    path = path or os.environ.get('PAGEFORGE_AI_CONFIG_PATH')
    if not path:
        return None

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"AI config file not found at: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"AI config file {config_path} is not valid JSON: {e}") from e


@dataclass
class ExtractorConfig:
    """Configuration threaded into the DataExtractor

    default_extract_model is the process-level fallback used when a job does
    not name its own extraction model.
    """
    default_extract_model: Optional[str] = None
    ai_config_path: Optional[str] = None
    storage_dir: str = 'crawl_data'
    compress_screenshots: bool = False
    log_dir: str = 'crawl_data/logs'
    log_level: str = 'INFO'

    def __post_init__(self):
        if self.default_extract_model is not None:
            self.default_extract_model = self.default_extract_model.strip() or None

    @classmethod
    def from_env(cls) -> 'ExtractorConfig':
        """Build a config from PAGEFORGE_* and model environment variables"""
        ai_config_path = os.environ.get('PAGEFORGE_AI_CONFIG_PATH') or None

        model = os.environ.get('DEFAULT_EXTRACT_MODEL') or os.environ.get('DEFAULT_LLM_MODEL')
        if not model:
            ai_config = load_ai_config(ai_config_path) or {}
            model = (ai_config.get('defaults') or {}).get('extract_model')

        return cls(
            default_extract_model=model,
            ai_config_path=ai_config_path,
            storage_dir=os.environ.get('PAGEFORGE_STORAGE_DIR', 'crawl_data'),
            compress_screenshots=os.environ.get(
                'PAGEFORGE_COMPRESS_SCREENSHOTS', 'false'
            ).lower() in _TRUTHY,
            log_dir=os.environ.get('PAGEFORGE_LOG_DIR', 'crawl_data/logs'),
            log_level=os.environ.get('PAGEFORGE_LOG_LEVEL', 'INFO'),
        )

"""
Job Options - Validated per-job crawl and extraction options
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .errors import OptionsValidationError


class Engine(Enum):
    """Fetch/render engines a job can run on"""
    STATIC = "static"      # Plain HTTP fetch, no JavaScript
    BROWSER = "browser"    # Headless Chromium via Playwright


AVAILABLE_FORMATS = (
    'markdown', 'html', 'text', 'screenshot', 'screenshot@fullPage', 'rawHtml', 'json'
)
SCREENSHOT_FORMATS = ('screenshot', 'screenshot@fullPage')

MIN_TIMEOUT_MS = 1_000
MAX_TIMEOUT_MS = 600_000
DEFAULT_TIMEOUT_MS = 60_000
MIN_WAIT_FOR_MS = 1
MAX_WAIT_FOR_MS = 60_000


def _is_http_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def _check_tag_list(name: str, value: Optional[List[str]]):
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise OptionsValidationError(name, "must be a list of strings")


@dataclass
class JsonOptions:
    """Options for structured JSON extraction"""
    schema: Optional[Dict[str, Any]] = None
    user_prompt: Optional[str] = None
    schema_name: Optional[str] = None
    schema_description: Optional[str] = None

    def __post_init__(self):
        if self.schema is not None and not isinstance(self.schema, dict):
            raise OptionsValidationError('json_options.schema', "must be a JSON schema object")
        for name in ('user_prompt', 'schema_name', 'schema_description'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise OptionsValidationError(f'json_options.{name}', "must be a string")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JsonOptions':
        """Build from a mapping, rejecting unknown keys"""
        if not isinstance(data, dict):
            raise OptionsValidationError('json_options', "must be an object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise OptionsValidationError('json_options', f"unknown keys: {', '.join(unknown)}")
        return cls(**data)


@dataclass
class JobOptions:
    """Options for a single crawl job"""
    url: str
    engine: Engine = Engine.STATIC
    proxy: Optional[str] = None
    formats: List[str] = field(default_factory=lambda: ['markdown'])
    timeout: int = DEFAULT_TIMEOUT_MS
    wait_for: Optional[int] = None
    retry: bool = False
    include_tags: Optional[List[str]] = None
    exclude_tags: Optional[List[str]] = None
    json_schema: Optional[Dict[str, Any]] = None
    json_options: Optional[JsonOptions] = None
    extract_model: Optional[str] = None

    def __post_init__(self):
        if not _is_http_url(self.url):
            raise OptionsValidationError('url', f"invalid URL: {self.url!r}")

        if isinstance(self.engine, str):
            try:
                self.engine = Engine(self.engine)
            except ValueError:
                allowed = ', '.join(e.value for e in Engine)
                raise OptionsValidationError('engine', f"must be one of: {allowed}") from None

        if self.proxy is not None and not _is_http_url(self.proxy):
            raise OptionsValidationError('proxy', f"invalid proxy URL: {self.proxy!r}")

        self._validate_formats()
        self._validate_ranges()

        _check_tag_list('include_tags', self.include_tags)
        _check_tag_list('exclude_tags', self.exclude_tags)

        if self.json_schema is not None and not isinstance(self.json_schema, dict):
            raise OptionsValidationError('json_schema', "must be a JSON schema object")

        if isinstance(self.json_options, dict):
            self.json_options = JsonOptions.from_dict(self.json_options)

        if 'json' in self.formats and self.json_options is None:
            if self.json_schema is None:
                raise OptionsValidationError(
                    'formats', "'json' requires json_options or json_schema"
                )
            self.json_options = JsonOptions(schema=self.json_schema)

    def _validate_formats(self):
        if not isinstance(self.formats, list) or not self.formats:
            raise OptionsValidationError('formats', "must be a non-empty list")

        unique: List[str] = []
        for fmt in self.formats:
            if fmt not in AVAILABLE_FORMATS:
                raise OptionsValidationError(
                    'formats', f"unsupported format {fmt!r}, expected one of {AVAILABLE_FORMATS}"
                )
            if fmt not in unique:
                unique.append(fmt)
        self.formats = unique

    def _validate_ranges(self):
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int):
            raise OptionsValidationError('timeout', "must be an integer number of milliseconds")
        if not MIN_TIMEOUT_MS <= self.timeout <= MAX_TIMEOUT_MS:
            raise OptionsValidationError(
                'timeout', f"must be between {MIN_TIMEOUT_MS} and {MAX_TIMEOUT_MS}"
            )

        if self.wait_for is not None:
            if isinstance(self.wait_for, bool) or not isinstance(self.wait_for, int):
                raise OptionsValidationError('wait_for', "must be an integer number of milliseconds")
            if not MIN_WAIT_FOR_MS <= self.wait_for <= MAX_WAIT_FOR_MS:
                raise OptionsValidationError(
                    'wait_for', f"must be between {MIN_WAIT_FOR_MS} and {MAX_WAIT_FOR_MS}"
                )

        if not isinstance(self.retry, bool):
            raise OptionsValidationError('retry', "must be a boolean")

    @property
    def wants_screenshot(self) -> bool:
        return any(fmt in self.formats for fmt in SCREENSHOT_FORMATS)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JobOptions':
        """Build options from a queue payload, rejecting unknown keys"""
        if not isinstance(data, dict):
            raise OptionsValidationError('options', "must be an object")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise OptionsValidationError('options', f"unknown keys: {', '.join(unknown)}")
        if 'url' not in data:
            raise OptionsValidationError('url', "is required")

        payload = dict(data)
        if payload.get('json_options') is not None:
            payload['json_options'] = JsonOptions.from_dict(payload['json_options'])
        return cls(**payload)

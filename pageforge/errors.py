"""
Errors - Exception hierarchy for the extraction pipeline
"""

from typing import Optional


class PageforgeError(Exception):
    """Base class for all pageforge errors"""


class ConfigError(PageforgeError):
    """Process-level configuration could not be loaded"""


class OptionsValidationError(PageforgeError):
    """Job options failed validation"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class PageClosedError(PageforgeError):
    """The live page was closed before its content could be read"""


class ExtractionConfigError(PageforgeError):
    """Structured extraction was requested but no model is configured"""


class ScreenshotError(PageforgeError):
    """Screenshot capture or storage failed"""


class StructuredExtractionError(PageforgeError):
    """The extraction agent failed or returned an unusable payload"""


class DataExtractionError(PageforgeError):
    """Fatal extraction failure, tagged with the job that produced it"""

    def __init__(self, message: str, job_id: str = "unknown", queue_name: str = "unknown",
                 stack: Optional[str] = None):
        self.job_id = job_id
        self.queue_name = queue_name
        self.stack = stack
        super().__init__(message)


class FetchError(PageforgeError):
    """An engine could not load the page"""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{url}: {message}")

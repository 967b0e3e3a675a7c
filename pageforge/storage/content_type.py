from enum import Enum


class ContentType(Enum):
    """Enum for the artifacts a job can persist"""
    SCREENSHOT = 'screenshots'
    RESULT = 'results'

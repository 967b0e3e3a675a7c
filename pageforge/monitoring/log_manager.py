"""
Log Manager - Console, daily file and job event logging for extraction workers
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List

EVENTS_LOGGER = 'pageforge.events'

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class LogManager:
    """Configures the root logger and a separate JSON-lines event stream

    Files are written per day as extractor_YYYYMMDD.log (everything),
    errors_YYYYMMDD.log (WARNING and up) and events_YYYYMMDD.log (job events).
    """

    def __init__(self, log_dir: str = "crawl_data/logs", log_level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = logging.getLevelName(log_level.upper())
        if not isinstance(self.level, int):
            self.level = logging.INFO
        self.handlers: List[logging.Handler] = []

        self.setup_logging()

    def _daily_path(self, prefix: str) -> Path:
        return self.log_dir / f"{prefix}_{datetime.now().strftime('%Y%m%d')}.log"

    def _file_handler(self, prefix: str, level: int, fmt: str) -> logging.FileHandler:
        handler = logging.FileHandler(self._daily_path(prefix), encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt))
        self.handlers.append(handler)
        return handler

    def setup_logging(self):
        """Replace root handlers with console, daily and error handlers"""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.level)
        root_logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(self.level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console)

        root_logger.addHandler(self._file_handler('extractor', logging.DEBUG, DETAILED_FORMAT))
        root_logger.addHandler(self._file_handler('errors', logging.WARNING, DETAILED_FORMAT))

        # Events bypass the root handlers
        self.events_handler = self._file_handler('events', logging.INFO, '%(message)s')
        self.events_logger = logging.getLogger(EVENTS_LOGGER)
        self.events_logger.setLevel(logging.INFO)
        self.events_logger.handlers.clear()
        self.events_logger.addHandler(self.events_handler)
        self.events_logger.propagate = False

    def log_extraction_event(self, event_type: str, **kwargs):
        """Write one job event as a JSON line"""
        event = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'event_type': event_type,
        }
        event.update(kwargs)
        self.events_logger.info(json.dumps(event, default=str))

    def close(self):
        """Flush and close the file handlers"""
        for handler in self.handlers:
            handler.close()

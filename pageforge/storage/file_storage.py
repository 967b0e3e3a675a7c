import io
import json
import hashlib
import logging
import aiofiles
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse
from PIL import Image
from .content_type import ContentType

logger = logging.getLogger(__name__)


class FileStorage:
    def __init__(self, base_path='crawl_data', compress=False):
        self.base_path = Path(base_path)
        self.compress = compress  # Store screenshots as WebP instead of PNG
        self.setup_directories()

    def setup_directories(self):
        """Create base directory - per-page dirs are created as needed"""
        self.base_path.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def page_id(url: str) -> str:
        """Short stable identifier for a URL"""
        return hashlib.md5(url.encode()).hexdigest()[:12]

    def get_file_path(self, url: str, content_type: ContentType, name: str) -> Path:
        """Generate a file path for an artifact organized by domain/page_id

        Structure: crawl_data/domain/page_id/content_type/name.ext
        """
        domain = urlparse(url).netloc
        clean_domain = domain.replace('www.', '').replace(':', '_') or 'unknown'

        extensions = {
            ContentType.SCREENSHOT: '.webp' if self.compress else '.png',
            ContentType.RESULT: '.json',
        }
        extension = extensions.get(content_type, '.bin')

        file_path = self.base_path / clean_domain / self.page_id(url) / content_type.value / f"{name}{extension}"
        file_path.parent.mkdir(parents=True, exist_ok=True)
        return file_path

    async def save_screenshot(self, url: str, content: bytes, name: str) -> Optional[str]:
        """Save screenshot bytes and return the file path, or None if the save failed"""
        file_path = self.get_file_path(url, ContentType.SCREENSHOT, name)

        try:
            if self.compress:
                content = self._to_webp(content)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
            return str(file_path)
        except Exception as e:
            logger.error(f"Error saving screenshot for {url}: {e}")
            return None

    async def save_result(self, url: str, result: Dict[str, Any], name: str) -> Optional[str]:
        """Save an extraction result as JSON"""
        file_path = self.get_file_path(url, ContentType.RESULT, name)

        try:
            async with aiofiles.open(file_path, 'w', encoding='utf-8') as f:
                await f.write(json.dumps(result, indent=2, ensure_ascii=False, default=str))
            return str(file_path)
        except Exception as e:
            logger.error(f"Error saving result for {url}: {e}")
            return None

    @staticmethod
    def _to_webp(content: bytes) -> bytes:
        """Convert PNG bytes to WebP for better compression"""
        image = Image.open(io.BytesIO(content))
        output = io.BytesIO()
        image.save(output, format='WEBP', quality=85, method=6)
        return output.getvalue()

    def get_storage_stats(self):
        """Count files and bytes per artifact type"""
        stats = {}
        for content_type in ContentType:
            files = [f for f in self.base_path.rglob(f"{content_type.value}/*") if f.is_file()]
            total_size = sum(f.stat().st_size for f in files)
            stats[content_type.value] = {
                'file_count': len(files),
                'total_size_mb': round(total_size / (1024 * 1024), 2)
            }
        return stats

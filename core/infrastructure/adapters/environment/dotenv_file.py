"""
Dotenv File Adapter.

Reads and edits one dotenv file of the storefront with python-dotenv.
"""
from pathlib import Path
from typing import Dict
import logging

from dotenv import dotenv_values, set_key, unset_key


logger = logging.getLogger(__name__)


class DotenvFile:
    """
    A dotenv file on disk.

    Only the targeted line changes on set/unset; comments and the order of
    the other entries are preserved.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Dict[str, str]:
        """Parse the file; keys without a value are skipped."""
        if not self.exists():
            return {}
        return {
            key: value
            for key, value in dotenv_values(self.path).items()
            if value is not None
        }

    def set(self, key: str, value: str) -> None:
        """Add ``key`` or replace its value, creating the file if needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        set_key(self.path, key, value, quote_mode="auto")
        logger.info(f"{self.path.name}: set {key}")

    def unset(self, key: str) -> bool:
        """Remove ``key``; False when the file or the key does not exist."""
        if key not in self.read():
            return False
        removed, _ = unset_key(self.path, key)
        if removed:
            logger.info(f"{self.path.name}: removed {key}")
        return bool(removed)

    def write(self, content: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {self.path}")

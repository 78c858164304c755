# workhub/services/storage.py
import logging
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalStorage:
    """Stores uploaded files under a single directory, keyed by a random name."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def save(self, data: bytes, original_name: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        suffix = Path(original_name).suffix.lower()
        key = f"{uuid.uuid4().hex}{suffix}"
        (self.root / key).write_bytes(data)
        logger.info("Stored %s (%d bytes) as %s", original_name, len(data), key)
        return key

    def path_for(self, key: str) -> Path:
        # keys are generated by save(); refuse anything that escapes the root
        path = (self.root / key).resolve()
        if path.parent != self.root.resolve():
            raise ValueError(f"Invalid storage key: {key}")
        return path

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.is_file():
            path.unlink()

    @staticmethod
    def url_for(key: str) -> str:
        return f"/uploads/{key}"

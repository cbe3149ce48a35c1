"""Client-side persistence of the session token.

The store is a small JSON key-value file; the token lives under a single fixed
key. A missing file or a missing key both mean "logged out".
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class TokenStore:
    """Read, write and clear the persisted session token."""

    def __init__(self, path: str | Path) -> None:
        """
        Args:
            path: Location of the JSON file. Parent directories are created on first write.
        """
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)

    def get(self) -> Optional[str]:
        """Return the stored token, or None when logged out."""
        token = self._load().get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must not be empty")
        data = self._load()
        data[TOKEN_KEY] = token
        self._save(data)

    def clear(self) -> None:
        """Remove the token; deletes the file when nothing else is stored in it."""
        data = self._load()
        data.pop(TOKEN_KEY, None)
        if data:
            self._save(data)
        elif self.path.exists():
            self.path.unlink()

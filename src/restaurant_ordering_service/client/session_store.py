"""Durable local session identifier for anonymous carts."""

import json
import logging
import os
import random
import string
import time
from pathlib import Path

logger = logging.getLogger(__name__)

SESSION_KEY = "sessionId"
SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


def default_session_file() -> Path:
    """Session file location from ORDERING_SESSION_FILE, else under the home directory."""
    configured = os.getenv("ORDERING_SESSION_FILE")
    if configured:
        return Path(configured)
    return Path.home() / ".restaurant_ordering" / "session.json"


def generate_session_id() -> str:
    """Build a session identifier from the current time and a random base36 suffix."""
    suffix = "".join(random.choices(SUFFIX_ALPHABET, k=9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class SessionIdStore:
    """Keeps one session identifier per local installation.

    The identifier is generated on first use and read back on every later run. It
    correlates carts across visits; it is not a credential.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_session_file()

    def get_session_id(self) -> str:
        """Return the stored session identifier, creating and saving one if needed."""
        session_id = self._read()
        if session_id:
            return session_id

        session_id = generate_session_id()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({SESSION_KEY: session_id}))
        logger.info(f"Created new session id {session_id}")
        return session_id

    def _read(self) -> str | None:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

        value = data.get(SESSION_KEY) if isinstance(data, dict) else None
        return value if isinstance(value, str) and value else None

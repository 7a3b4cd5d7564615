"""Environment variable overrides for scripts and the dashboard."""

import os
from typing import Optional

from dotenv import load_dotenv

from .settings import DEFAULT_SNAPSHOT_PATH

load_dotenv()


class Env:
    """Container for environment-driven settings."""

    SNAPSHOT_PATH = os.getenv("BUBBLEMAP_SNAPSHOT_PATH", DEFAULT_SNAPSHOT_PATH)
    LOG_LEVEL = os.getenv("BUBBLEMAP_LOG_LEVEL", "INFO")

    @staticmethod
    def seed() -> Optional[int]:
        """Seed for layout RNGs (None = nondeterministic)."""
        raw = os.getenv("BUBBLEMAP_SEED")
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

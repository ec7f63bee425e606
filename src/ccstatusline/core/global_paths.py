"""Directory paths used by ccstatusline.

Our own config, cache and log directories follow the platform conventions
(via platformdirs). The host's config directory, where session transcripts
live, is resolved separately because the host decides where it is.
"""

import os
from pathlib import Path
from typing import Optional

from platformdirs import user_cache_dir, user_config_dir, user_data_dir

APP_NAME = "ccstatusline"
HOST_CONFIG_ENV = "CLAUDE_CONFIG_DIR"


class GlobalPath:
    """Path lookups for ccstatusline directories.

    Nothing is created on import; callers that write files create the
    parent directory themselves.
    """

    @classmethod
    def home(cls) -> str:
        """User home directory, with override for testing."""
        return os.environ.get("CCSTATUSLINE_TEST_HOME", str(Path.home()))

    @classmethod
    def config(cls) -> str:
        """Directory holding settings.json."""
        return user_config_dir(APP_NAME)

    @classmethod
    def settings_file(cls) -> str:
        return str(Path(cls.config()) / "settings.json")

    @classmethod
    def cache(cls) -> str:
        return user_cache_dir(APP_NAME)

    @classmethod
    def block_cache_file(cls) -> str:
        """Fixed location of the activity window cache."""
        return str(Path(cls.cache()) / "block-cache.json")

    @classmethod
    def log(cls) -> str:
        return str(Path(user_data_dir(APP_NAME)) / "log")

    @classmethod
    def host_config(cls, transcript_path: Optional[str] = None) -> str:
        """Resolve the host's config directory (the root of ``projects/``).

        Order: an ancestor of the transcript named ``.claude``, then the
        ``CLAUDE_CONFIG_DIR`` environment variable, then ``~/.claude``.
        """
        if transcript_path:
            for parent in Path(transcript_path).parents:
                if parent.name == ".claude":
                    return str(parent)

        override = os.environ.get(HOST_CONFIG_ENV)
        if override:
            resolved = Path(override).expanduser().resolve()
            if not resolved.exists() or resolved.is_dir():
                return str(resolved)

        return str(Path(cls.home()) / ".claude")

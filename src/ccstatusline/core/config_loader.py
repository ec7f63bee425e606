"""Settings file reading: JSONC parsing with graceful failure."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import commentjson

from ..util.log import Log

log = Log.create({"service": "config.loader"})


def load_json_file(filepath: str) -> Optional[Dict[str, Any]]:
    """Load a JSON or JSONC object.

    Returns None when the file does not exist and ``{}`` when it cannot be
    read or does not hold a JSON object.
    """
    path = Path(filepath)
    if not path.exists():
        return None

    try:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = commentjson.loads(text)
    except (OSError, ValueError, UnicodeDecodeError) as e:
        log.error("failed to load settings file", {"path": filepath, "error": str(e)})
        return {}
    except Exception as e:
        # commentjson surfaces lark parse errors that are not ValueErrors
        log.error("failed to parse settings file", {"path": filepath, "error": str(e)})
        return {}

    if not isinstance(data, dict):
        log.error("settings file is not a JSON object", {"path": filepath})
        return {}
    return data

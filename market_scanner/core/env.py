from __future__ import annotations

import os
from pathlib import Path


def load_dotenv(path: str = ".env") -> dict[str, str]:
    """
    Read KEY=VALUE lines (an optional leading `export` is accepted) into os.environ.

    Existing environment variables win. Returns the keys that were applied.
    """
    applied: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return applied
    for raw in p.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        if line.startswith("export "):
            line = line[len("export ") :]
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value
            applied[key] = value
    return applied

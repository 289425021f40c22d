"""Schema loading utility."""

import json
from pathlib import Path

SNAPSHOT_SCHEMA_PATH = Path(__file__).parent / "snapshot.schema.json"


def load_schema(path: Path) -> dict:
    """Load a JSON Schema file and return as dict."""
    with open(path) as f:
        return json.load(f)

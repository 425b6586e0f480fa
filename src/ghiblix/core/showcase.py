"""Showcase gallery data.

The showcase is a static list of before/after pairs bundled as ``case.json``::

    [
      {"original": "case/01-original.jpg", "effect": "case/01-effect.jpg"},
      ...
    ]

References are relative to the asset host; list order is display order.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

CASE_FILE = "case.json"


class ShowcaseEntry(BaseModel):
    """One before/after pair in the showcase.

    Attributes:
        original: Reference to the source photo, relative to the asset host
        effect: Reference to the restyled image, relative to the asset host
    """

    model_config = ConfigDict(frozen=True)

    original: str
    effect: str

    def resolve(self, asset_host: str) -> tuple[str, str]:
        """Return absolute (original, effect) URLs under ``asset_host``."""
        return f"{asset_host}{self.original}", f"{asset_host}{self.effect}"


_entries_adapter = TypeAdapter(list[ShowcaseEntry])


def load_showcase(data_dir: Path) -> list[ShowcaseEntry]:
    """Load the showcase entries from ``data_dir / case.json``.

    A missing or malformed file is logged and yields an empty showcase, so a
    broken data file never takes the page down.

    Args:
        data_dir: Directory containing ``case.json``

    Returns:
        Entries in display order
    """
    path = data_dir / CASE_FILE
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        entries = _entries_adapter.validate_python(raw)
    except FileNotFoundError:
        logger.error(f"Showcase data not found: {path}")
        return []
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Error loading showcase data from {path}: {e}")
        return []

    logger.info(f"Loaded {len(entries)} showcase entries")
    return entries

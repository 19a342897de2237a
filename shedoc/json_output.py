"""JSON output."""

from __future__ import annotations

import json
from typing import TextIO

from .models import Document


def format_json(stream: TextIO, document: Document) -> None:
    """Write `document` as indented JSON followed by a newline."""
    json.dump(document.to_dict(), stream, indent=2, ensure_ascii=False)
    stream.write("\n")


def format_json_line(stream: TextIO, document: Document) -> None:
    """Write `document` as a single compact JSON line (NDJSON)."""
    json.dump(document.to_dict(), stream, ensure_ascii=False, separators=(",", ":"))
    stream.write("\n")

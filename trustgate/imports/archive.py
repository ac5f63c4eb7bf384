"""Saved-exam archive codec.

Archives are written as ``ZPLUS:v1:`` followed by base64(gzip(JSON)).
Plain JSON files from older versions are still accepted on import.
"""

import base64
import binascii
import gzip
import json
import zlib
from typing import Any

from trustgate.imports.exceptions import SchemaInvalidError

HEADER_TAG = "ZPLUS:v1:"


def compress_exam(data: Any) -> str:
    """Serialize *data* to a compressed archive string."""
    raw = json.dumps(data, ensure_ascii=False).encode("utf-8")
    encoded = base64.b64encode(gzip.compress(raw)).decode("ascii")
    return f"{HEADER_TAG}{encoded}"


def decompress_exam(content: str) -> Any:
    """Decode an archive string (or legacy plain JSON) back into Python data.

    Raises:
        SchemaInvalidError: if the content is neither a valid archive nor JSON.
    """
    if not content:
        return None

    stripped = content.strip()
    if stripped.startswith(("{", "[")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise SchemaInvalidError(f"Invalid legacy JSON format: {exc}") from exc

    if not stripped.startswith(HEADER_TAG):
        raise SchemaInvalidError("Invalid file signature. Not a valid .zplus file.")

    try:
        compressed = base64.b64decode(stripped[len(HEADER_TAG):], validate=True)
        return json.loads(gzip.decompress(compressed).decode("utf-8"))
    except (
        binascii.Error,
        OSError,
        EOFError,
        zlib.error,
        UnicodeDecodeError,
        json.JSONDecodeError,
    ) as exc:
        raise SchemaInvalidError(
            "File is corrupted or encoded with an incompatible version."
        ) from exc

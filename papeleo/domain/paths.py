"""Storage path naming and the fallback candidates used to resolve stored URLs."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

_DISALLOWED = re.compile(r"[^\w\s.-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")


def sanitize_file_name(name: str) -> str:
    """Storage-safe segment: trimmed, lowercase, punctuation stripped, spaces as hyphens.

    Deterministic but not collision-free; callers prefix paths with entity ids.
    """
    cleaned = _DISALLOWED.sub("", name.strip().lower())
    return _WHITESPACE.sub("-", cleaned.strip())


def build_storage_path(folder: str, entity_id: str, file_name: str) -> str:
    return f"{folder}/{entity_id}/{sanitize_file_name(file_name)}"


def extra_document_path(
    member_id: str, document_id: str, file_name: str, timestamp: datetime
) -> str:
    """``extra/{member}/{document}_{millis}{ext}``; the original name only contributes its extension."""
    stamp = int(timestamp.timestamp() * 1000)
    suffix = PurePosixPath(sanitize_file_name(file_name)).suffix
    return f"extra/{member_id}/{document_id}_{stamp}{suffix}"


def storage_path_from_url(url: str, bucket: str) -> str:
    """Object path inside ``bucket`` for a public/signed storage URL, or the input itself.

    Non-URL inputs are treated as paths already.
    """
    parsed = urlparse(url)
    path = unquote(parsed.path) if parsed.scheme else url
    for marker in (
        f"/object/public/{bucket}/",
        f"/object/sign/{bucket}/",
        f"/object/{bucket}/",
    ):
        if marker in path:
            return path.split(marker, 1)[1]
    if path.startswith(f"{bucket}/"):
        return path[len(bucket) + 1 :]
    return path.lstrip("/")


def candidate_storage_paths(url: str, bucket: str) -> list[str]:
    """Plausible object paths for ``url``, most specific first, without duplicates.

    Older uploads appended the member id as a trailing segment or dropped the
    extension, so shorter and ``.pdf`` variants are tried after the exact path.
    """
    path = storage_path_from_url(url, bucket)
    segments = path.split("/")
    candidates = [path]

    if len(segments) > 2:
        parent = "/".join(segments[:-1])
        candidates.append(parent)
        if "." not in segments[-1]:
            candidates.append(f"{path}.pdf")
            candidates.append(f"{parent}.pdf")
    if len(segments) > 4:
        candidates.append("/".join(segments[:3] + segments[-1:]))
        candidates.append("/".join(segments[:3]))

    unique = []
    for candidate in candidates:
        if candidate and candidate not in unique:
            unique.append(candidate)
    return unique


def is_docgen_url(url: str | None, docgen_base_url: str) -> bool:
    return bool(url) and url.startswith(docgen_base_url.rstrip("/"))


def docgen_document_id(url: str | None, docgen_base_url: str) -> str | None:
    """Trailing document id of a ``{docgen}/{id}`` link."""
    if not is_docgen_url(url, docgen_base_url):
        return None
    document_id = url.rstrip("/").rsplit("/", 1)[-1].split("?", 1)[0]
    if not document_id or document_id == docgen_base_url.rstrip("/").rsplit("/", 1)[-1]:
        return None
    return document_id

"""Literal placeholder substitution over docgen section maps.

A section map is ``{section_name: {"content": <html str>, "type": <str>}}``.
Every function returns a new map and never mutates its input.
"""

from __future__ import annotations

import copy
import logging
import re
from datetime import date
from typing import Any, Literal, Mapping

logger = logging.getLogger(__name__)

SIGNATURES_SECTION = "2. FIRMAS"
GENERAL_SECTION = "0. GENERALIDADES"
SIGNATURE_MARKER = "<hr style='width: 150px;'>"

# Row label -> key in the contractor's document data
CONTRACTOR_ROWS = (
    ("NOMBRE DEL CONTRATISTA", "NOMBRE"),
    ("IDENTIFICACIÓN CONTRATISTA", "IDENTIFICACIÓN"),
    ("DIRECCIÓN DEL CONTRATISTA", "DIRECCIÓN"),
    ("TELÉFONO CONTRATISTA", "TELEFONO"),
)

Sections = dict[str, dict[str, Any]]


def format_locale_date(d: date) -> str:
    """Short es-ES date: day/month/year, no zero padding (31/12/2024, 5/1/2025)."""
    return f"{d.day}/{d.month}/{d.year}"


def signature_image_tag(signature_url: str) -> str:
    return f"<img src='{signature_url}' style='max-width:150px'><br>"


def substitute_placeholders(
    sections: Mapping[str, Mapping[str, Any]],
    value: str | None = None,
    end_date: date | None = None,
    user_email: str | None = None,
) -> Sections:
    """Replace ``${value}``, ``${endDate}`` and ``${userEmail}`` in every section.

    A missing replacement leaves its token in place. Sections whose content is
    not a string are copied unchanged.
    """
    replacements = {}
    if value is not None:
        replacements["${value}"] = str(value)
    if end_date is not None:
        replacements["${endDate}"] = format_locale_date(end_date)
    if user_email is not None:
        replacements["${userEmail}"] = user_email

    result = copy.deepcopy(dict(sections))
    for section in result.values():
        content = section.get("content") if isinstance(section, dict) else None
        if not isinstance(content, str):
            continue
        for token, replacement in replacements.items():
            content = content.replace(token, replacement)
        section["content"] = content
    return result


def insert_signature(
    sections: Mapping[str, Mapping[str, Any]],
    signature_url: str,
    section: str = SIGNATURES_SECTION,
    occurrence: Literal["first", "last"] = "last",
) -> Sections:
    """Swap one signature-line marker in ``section`` for the signature image.

    The contratante signs on the last line of the block, the contratista on the
    first; other markers are left untouched. A missing section, non-string
    content or absent marker is logged and the sections come back unchanged.
    """
    result = copy.deepcopy(dict(sections))
    target = result.get(section)
    content = target.get("content") if isinstance(target, dict) else None
    if not isinstance(content, str):
        logger.warning("Cannot insert signature: section %r has no text content", section)
        return result

    if occurrence == "last":
        index = content.rfind(SIGNATURE_MARKER)
    else:
        index = content.find(SIGNATURE_MARKER)
    if index == -1:
        logger.warning("Cannot insert signature: no signature line in section %r", section)
        return result

    target["content"] = (
        content[:index]
        + signature_image_tag(signature_url)
        + content[index + len(SIGNATURE_MARKER) :]
    )
    return result


def _contractor_row_pattern(label: str) -> re.Pattern:
    return re.compile(
        r"<tr>\s*<td><b>"
        + re.escape(label)
        + r"</b></td>\s*<td><span style='color:red;'>.*?</span></td>\s*</tr>"
    )


def fill_contractor_details(
    sections: Mapping[str, Mapping[str, Any]],
    details: Mapping[str, str],
    section: str = GENERAL_SECTION,
) -> Sections:
    """Write the contractor's name, id, address and phone into the general table.

    Only rows still showing the red placeholder span are rewritten.
    """
    result = copy.deepcopy(dict(sections))
    target = result.get(section)
    content = target.get("content") if isinstance(target, dict) else None
    if not isinstance(content, str):
        logger.warning("Cannot fill contractor details: section %r has no text content", section)
        return result

    for label, key in CONTRACTOR_ROWS:
        cell = details.get(key) or ""
        row = f"<tr><td><b>{label}</b></td><td>{cell}</td></tr>"
        content = _contractor_row_pattern(label).sub(lambda _match: row, content, count=1)
    target["content"] = content
    return result


def has_placeholder(sections: Mapping[str, Mapping[str, Any]]) -> bool:
    """True when any section still carries an unresolved ``${...}`` token."""
    for section in sections.values():
        content = section.get("content") if isinstance(section, Mapping) else None
        if isinstance(content, str) and re.search(r"\$\{\w+\}", content):
            return True
    return False

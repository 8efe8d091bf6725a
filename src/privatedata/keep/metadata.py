"""Flatten Google Keep note JSON into an ordered Markdown metadata block.

A note such as

    {"title": "Groceries", "labels": [{"name": "home"}], "attachments": {"count": 2}}

flattens to the entries ``("title", "Groceries")``, ``("labels", [...])`` and
``("attachments.count", 2)``. Nested objects are descended into and only their
leaves are kept; lists are leaves and render as compact JSON.
"""

import json
import re
import unicodedata
from collections.abc import Collection, Iterable, Mapping, Sequence
from typing import NamedTuple

from pydantic import JsonValue

from privatedata.config import MetadataOptions
from privatedata.exceptions import MetadataError

METADATA_HEADING = "## Metadata from Google Keep"

_COLLATION_TOKEN_RE = re.compile(r"\d+|.", re.DOTALL)
_TITLE_UNSAFE_RE = re.compile(r"[/\\:?]")

# Primary collation classes; punctuation and symbols follow the ICU root order
_PUNCTUATION, _DIGITS, _LETTERS = range(3)
_PUNCTUATION_ORDER = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


class MetadataEntry(NamedTuple):
    """One leaf of a note, addressed by its dotted path."""

    path: str
    value: JsonValue


def flatten(
    record: Mapping[str, JsonValue],
    ignore_keys: Collection[str],
    prefix: str | None = None,
) -> list[MetadataEntry]:
    """
    Collect every leaf value of record as a (dotted path, value) entry.

    Keys in ignore_keys are skipped at any depth, together with everything below
    them. Paths are unique, so the result behaves as a set; its order follows
    the record's key order but callers should not rely on it.
    """
    entries = []
    for key, value in record.items():
        if key in ignore_keys:
            continue

        path = f"{prefix}.{key}" if prefix is not None else key
        if isinstance(value, dict):
            # Only leaves are recorded, never the intermediate object
            entries.extend(flatten(value, ignore_keys, path))
        else:
            entries.append(MetadataEntry(path, value))
    return entries


def _natural_key(text: str) -> list[tuple[int, int | str]]:
    """Collation key: punctuation before digit runs before letters, accents and case ignored."""
    folded = "".join(
        ch for ch in unicodedata.normalize("NFKD", text.casefold()) if not unicodedata.combining(ch)
    )
    key = []
    for token in _COLLATION_TOKEN_RE.findall(folded):
        if token.isdecimal():
            key.append((_DIGITS, int(token)))
        elif token.isalpha():
            key.append((_LETTERS, token))
        elif token in _PUNCTUATION_ORDER:
            key.append((_PUNCTUATION, _PUNCTUATION_ORDER.index(token)))
        else:
            key.append((_PUNCTUATION, len(_PUNCTUATION_ORDER) + ord(token)))
    return key


def order(entries: Iterable[MetadataEntry], priority_keys: Sequence[str]) -> list[MetadataEntry]:
    """
    Sort entries for display.

    Paths listed in priority_keys come first, in that order. The rest follow in
    case-insensitive natural order ("alpha2" before "alpha10", punctuation before
    digits before letters), with the raw path as final tie-break so distinct
    paths never compare equal.
    """
    rank = {key: index for index, key in enumerate(priority_keys)}

    def sort_key(entry: MetadataEntry) -> tuple:
        if not entry.path:
            raise MetadataError(f"Invalid metadata: entry without a key (value {entry.value!r})")
        if entry.path in rank:
            return (0, rank[entry.path], [], "", "")
        return (1, 0, _natural_key(entry.path), entry.path.casefold(), entry.path)

    return sorted(entries, key=sort_key)


def format_value(value: JsonValue) -> str:
    """Render a metadata value as Markdown text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def render(title: str, text_content: str, entries: Iterable[MetadataEntry]) -> str:
    """Build the Markdown document for one note."""
    lines = [f"# {title}", "", text_content, "", METADATA_HEADING]
    lines.extend(f"*{entry.path}*: {format_value(entry.value)}" for entry in entries)
    return "\n".join(lines) + "\n"


def normalize_title(title: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    return _TITLE_UNSAFE_RE.sub("_", title)


def convert_note_to_markdown(note: Mapping[str, JsonValue], options: MetadataOptions) -> str:
    """Render a note, whose title is already defaulted and normalized, as Markdown."""
    entries = order(flatten(note, options.ignore_keys), options.priority_keys)

    text_content = note.get("textContent")
    if not isinstance(text_content, str):
        text_content = format_value(text_content)

    return render(str(note.get("title", "")), text_content, entries)

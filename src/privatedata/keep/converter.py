"""Google Keep export converter: JSON notes in, categorized Markdown files out."""

import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import JsonValue, TypeAdapter, ValidationError

from privatedata.config import KeepConversionConfig
from privatedata.exceptions import NoteConversionError
from privatedata.keep.metadata import convert_note_to_markdown, normalize_title
from privatedata.models import ConversionStats, NoteCategory

logger = logging.getLogger(__name__)

_NOTE = TypeAdapter(dict[str, JsonValue])


def classify(note: Mapping[str, JsonValue]) -> NoteCategory:
    """Pick the destination folder. Trashed wins over archived."""
    if note.get("isTrashed"):
        return NoteCategory.TRASH
    if note.get("isArchived"):
        return NoteCategory.ARCHIVE
    return NoteCategory.UNSORTED


def load_note(path: Path) -> dict[str, JsonValue]:
    """Load a note file, defaulting and normalizing its title."""
    note = _NOTE.validate_json(path.read_bytes())
    title = note.get("title")
    if not isinstance(title, str) or not title:
        title = path.name
    note["title"] = normalize_title(title)
    return note


def discover_notes(input_dir: Path) -> list[Path]:
    """List the JSON note files in input_dir, sorted by name."""
    return sorted(p for p in Path(input_dir).iterdir() if p.is_file() and p.suffix == ".json")


class NoteConverter:
    """Converts every note of a Keep export directory to Markdown."""

    def __init__(self, config: KeepConversionConfig):
        self.config = config
        self.stats = ConversionStats()

    def output_path(self, title: str, category: NoteCategory) -> Path:
        return self.config.output_dir / category.value / f"{title}.md"

    def convert_note(self, note_path: Path) -> NoteCategory:
        """Convert one note file, write it out and optionally delete the source."""
        logger.info(f"Processing note: {note_path.name}")
        try:
            note = load_note(note_path)
        except (OSError, ValidationError) as e:
            raise NoteConversionError(note_path.name, e) from e

        title = note["title"]
        markdown = convert_note_to_markdown(note, self.config.metadata)
        logger.info(f"  Note converted to markdown: {title}")
        logger.debug(f"  {title}: {markdown}")

        category = classify(note)
        destination = self.output_path(title, category)
        if self.config.dry_run:
            logger.info(f"  DRY RUN: Would write note to {category.value} directory: {destination}")
        else:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_text(markdown, encoding="utf-8")
            except OSError as e:
                raise NoteConversionError(note_path.name, e) from e
            logger.info(f"  Note written to {category.value} directory: {destination}")

        if self.config.delete_originals:
            if self.config.dry_run:
                logger.info(f"  DRY RUN: Would delete note: {note_path}")
            else:
                try:
                    note_path.unlink()
                except OSError as e:
                    raise NoteConversionError(note_path.name, e) from e
                self.stats.deleted += 1
                logger.info(f"  Deleted note: {note_path}")

        return category

    def run(self) -> ConversionStats:
        """Convert the export directory and return run statistics."""
        notes = discover_notes(self.config.input_dir)
        self.stats.discovered = len(notes)
        to_process = notes[:1] if self.config.test_one_note else notes
        logger.info(f"Found {len(notes)} notes, processing {len(to_process)}")

        for note_path in to_process:
            try:
                category = self.convert_note(note_path)
            except NoteConversionError as e:
                self.stats.failed += 1
                self.stats.errors.append(str(e))
                logger.error(f"  Error: {e}")
                continue
            self.stats.count(category)

        logger.info(f"Notes total: {self.stats.discovered}")
        logger.info(f"Notes unsorted: {self.stats.unsorted}")
        logger.info(f"Notes archived: {self.stats.archived}")
        logger.info(f"Notes trashed: {self.stats.trashed}")
        if self.stats.failed:
            logger.info(f"Notes failed: {self.stats.failed}")
        return self.stats

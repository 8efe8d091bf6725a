"""Data models for privatedata."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContactRecord(BaseModel):
    """Contact details extracted from one LinkedIn profile.

    Serialized with camelCase keys:
    {
        "fullName": "Jane Doe",
        "profileUrl": "https://www.linkedin.com/in/janedoe",
        "emails": ["jane@example.com"],
        "phones": ["(650) 253-0000"],
        "currentCompanyRole": "Acme - Technical Recruiter",
    }
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str | None = None
    profile_url: str | None = None
    emails: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    current_company_role: str | None = None


class ScrapeStats(BaseModel):
    """Statistics from a contact scraping run."""

    added: int = 0
    invalid_urls: int = 0
    rejected: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class NoteCategory(str, Enum):
    """Destination folder for a converted note."""

    UNSORTED = "unsorted"
    ARCHIVE = "archive"
    TRASH = "trash"


class ConversionStats(BaseModel):
    """Statistics from a Keep conversion run."""

    discovered: int = 0
    processed: int = 0
    unsorted: int = 0
    archived: int = 0
    trashed: int = 0
    deleted: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)

    def count(self, category: NoteCategory) -> None:
        """Record one processed note in its category."""
        self.processed += 1
        if category is NoteCategory.TRASH:
            self.trashed += 1
        elif category is NoteCategory.ARCHIVE:
            self.archived += 1
        else:
            self.unsorted += 1

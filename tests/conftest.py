import json
import pathlib

import pytest

from privatedata.config import Settings


@pytest.fixture
def settings():
    """Unipile settings that never read the environment or a .env file."""
    return Settings(
        _env_file=None,
        UNIPILE_DSN="api1.unipile.com:13111",
        UNIPILE_API_KEY="test-key",
        UNIPILE_ACCOUNT_ID="account-123",
    )


@pytest.fixture
def linkedin_profile():
    """A Unipile profile response for a recruiter with full contact info."""
    return {
        "object": "UserProfile",
        "provider": "LINKEDIN",
        "provider_id": "ACoAAB12345",
        "public_identifier": "janedoe",
        "first_name": "Jane",
        "last_name": "Doe",
        "contact_info": {
            "emails": ["Jane.Doe@Example.COM"],
            "phones": ["+1 650-253-0000", "call me maybe"],
        },
        "work_experience": [
            {"company": "Acme Talent", "position": "Technical Recruiter"},
            {"company": "Old Corp", "position": "Sourcer"},
        ],
    }


@pytest.fixture
def write_note():
    """Write a Keep note dict as <name>.json into a directory."""

    def _write(directory: pathlib.Path, name: str, note: dict) -> pathlib.Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{name}.json"
        path.write_text(json.dumps(note), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def keep_note():
    """A typical Google Keep export note."""
    return {
        "color": "DEFAULT",
        "isTrashed": False,
        "isPinned": False,
        "isArchived": False,
        "textContent": "Milk\nEggs",
        "textContentHtml": "<p>Milk<br>Eggs</p>",
        "title": "Groceries",
        "userEditedTimestampUsec": 1700000000000000,
        "createdTimestampUsec": 1690000000000000,
        "labels": [{"name": "home"}],
    }

"""
Tests for the privatedata command line.
"""
import json

import pytest
from click.testing import CliRunner

from privatedata import cli


class FakeUnipileClient:
    """Serves the same profile for every identifier."""

    profile: dict = {}

    def __init__(self, settings):
        self.settings = settings

    async def get_profile(self, identifier, sections=("experience",)):
        return {**self.profile, "public_identifier": identifier}

    async def close(self):
        pass


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def with_settings(monkeypatch, settings):
    monkeypatch.setattr(cli, "get_settings", lambda: settings)


@pytest.fixture
def without_settings(monkeypatch):
    def missing():
        raise ValueError("UNIPILE_DSN field required")

    monkeypatch.setattr(cli, "get_settings", missing)


@pytest.fixture
def fake_unipile(monkeypatch, linkedin_profile):
    FakeUnipileClient.profile = linkedin_profile
    monkeypatch.setattr(cli, "UnipileClient", FakeUnipileClient)


class TestScrapeContactsCommand:
    """Test the scrape-contacts command."""

    def test_missing_credentials_exit_1(self, runner, without_settings, tmp_path):
        """Test that the command refuses to run without Unipile settings."""
        result = runner.invoke(cli.main, ["scrape-contacts", "--input", str(tmp_path / "urls.json")])

        assert result.exit_code == 1
        assert "UNIPILE_DSN" in result.output

    def test_writes_report(self, runner, with_settings, fake_unipile, tmp_path):
        """Test a full scrape run writing a report."""
        urls = tmp_path / "urls.json"
        urls.write_text(
            json.dumps(["https://www.linkedin.com/in/janedoe", "https://example.com/nobody"]),
            encoding="utf-8",
        )
        out = tmp_path / "outputs"

        result = runner.invoke(
            cli.main,
            ["scrape-contacts", "--input", str(urls), "--output-dir", str(out), "--delay", "0", "--jitter", "0"],
        )

        assert result.exit_code == 0, result.output
        assert "Added: 1" in result.output
        assert "Invalid URLs: 1" in result.output
        [report] = out.glob("linkedin-contacts-*.json")
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data[0]["profileUrl"] == "https://www.linkedin.com/in/janedoe"

    def test_malformed_input_exit_1(self, runner, with_settings, fake_unipile, tmp_path):
        """Test that a malformed URL file aborts the run."""
        urls = tmp_path / "urls.json"
        urls.write_text('{"not": "a list"}', encoding="utf-8")

        result = runner.invoke(cli.main, ["scrape-contacts", "--input", str(urls)])

        assert result.exit_code == 1
        assert "not a JSON array" in result.output

    def test_report_write_failure_exit_1(self, runner, with_settings, fake_unipile, monkeypatch, tmp_path):
        """Test that an OSError while writing the report is reported, not raised."""
        urls = tmp_path / "urls.json"
        urls.write_text(json.dumps(["https://www.linkedin.com/in/janedoe"]), encoding="utf-8")

        def unwritable(records, output_dir):
            raise PermissionError(13, "Permission denied", str(output_dir))

        monkeypatch.setattr(cli, "write_report", unwritable)

        result = runner.invoke(cli.main, ["scrape-contacts", "--input", str(urls), "--delay", "0", "--jitter", "0"])

        assert result.exit_code == 1
        assert "Error: [Errno 13] Permission denied" in result.output


class TestProfileCommand:
    """Test the single-profile lookup command."""

    def test_prints_record(self, runner, with_settings, fake_unipile):
        """Test that the contact record is printed as JSON."""
        result = runner.invoke(cli.main, ["profile", "https://www.linkedin.com/in/janedoe"])

        assert result.exit_code == 0, result.output
        assert '"fullName": "Jane Doe"' in result.output

    def test_invalid_url_exit_1(self, runner, with_settings, fake_unipile):
        """Test that a URL without /in/ gives exit status 1."""
        result = runner.invoke(cli.main, ["profile", "https://www.linkedin.com/company/acme"])

        assert result.exit_code == 1

    def test_lookup_crash_exit_1(self, runner, with_settings, fake_unipile, monkeypatch):
        """Test that an unexpected error during lookup prints an Error line."""

        async def broken_close(self):
            raise OSError("connection reset")

        monkeypatch.setattr(FakeUnipileClient, "close", broken_close)

        result = runner.invoke(cli.main, ["profile", "https://www.linkedin.com/in/janedoe"])

        assert result.exit_code == 1
        assert "Error: connection reset" in result.output


class TestConvertKeepCommand:
    """Test the convert-keep command."""

    def test_converts_export(self, runner, without_settings, tmp_path, write_note, keep_note):
        """Test a conversion run; Unipile settings are not needed."""
        export = tmp_path / "Keep"
        write_note(export, "a", keep_note)
        write_note(export, "b", {**keep_note, "title": "Gone", "isTrashed": True})

        result = runner.invoke(
            cli.main,
            ["convert-keep", "--input-dir", str(export), "--output-dir", str(tmp_path / "outputs")],
        )

        assert result.exit_code == 0, result.output
        assert "Notes total: 2" in result.output
        assert "Trashed: 1" in result.output
        [root] = (tmp_path / "outputs").glob("keep-markdown-*")
        assert (root / "unsorted" / "Groceries.md").exists()
        assert (root / "trash" / "Gone.md").exists()

    def test_dry_run(self, runner, without_settings, tmp_path, write_note, keep_note):
        """Test that dry run creates no output."""
        export = tmp_path / "Keep"
        write_note(export, "a", keep_note)

        result = runner.invoke(
            cli.main,
            [
                "convert-keep",
                "--input-dir",
                str(export),
                "--output-dir",
                str(tmp_path / "outputs"),
                "--dry-run",
                "--delete-originals",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "DRY RUN MODE" in result.output
        assert not (tmp_path / "outputs").exists()
        assert (export / "a.json").exists()

    def test_priority_override(self, runner, without_settings, tmp_path, write_note, keep_note):
        """Test that --priority replaces the default priority list."""
        export = tmp_path / "Keep"
        write_note(export, "a", keep_note)

        result = runner.invoke(
            cli.main,
            [
                "convert-keep",
                "--input-dir",
                str(export),
                "--output-dir",
                str(tmp_path / "outputs"),
                "--priority",
                "labels",
            ],
        )

        assert result.exit_code == 0, result.output
        [note] = (tmp_path / "outputs").glob("keep-markdown-*/unsorted/Groceries.md")
        metadata = note.read_text(encoding="utf-8").split("## Metadata from Google Keep\n")[1]
        assert metadata.startswith("*labels*:")

    def test_unexpected_failure_exit_1(self, runner, without_settings, monkeypatch, tmp_path, write_note, keep_note):
        """Test that an unexpected error during conversion prints an Error line."""
        export = tmp_path / "Keep"
        write_note(export, "a", keep_note)

        def failing_run(self):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(cli.NoteConverter, "run", failing_run)

        result = runner.invoke(
            cli.main,
            ["convert-keep", "--input-dir", str(export), "--output-dir", str(tmp_path / "outputs")],
        )

        assert result.exit_code == 1
        assert "Error: [Errno 28] No space left on device" in result.output

    def test_long_title_does_not_abort(self, runner, without_settings, tmp_path, write_note, keep_note):
        """Test that a note whose title cannot be a file name is skipped."""
        export = tmp_path / "Keep"
        write_note(export, "a", {**keep_note, "title": "x" * 300})
        write_note(export, "b", keep_note)

        result = runner.invoke(
            cli.main,
            ["convert-keep", "--input-dir", str(export), "--output-dir", str(tmp_path / "outputs")],
        )

        assert result.exit_code == 0, result.output
        assert "Errors: 1" in result.output
        [note] = (tmp_path / "outputs").glob("keep-markdown-*/unsorted/Groceries.md")
        assert note.exists()

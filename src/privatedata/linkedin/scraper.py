"""LinkedIn contact scraper: profile URLs in, JSON report out."""

import asyncio
import json
import logging
import random
import time
from collections.abc import Awaitable, Callable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from privatedata.config import ScrapeConfig
from privatedata.exceptions import InputFileError
from privatedata.linkedin.client import UnipileClient
from privatedata.linkedin.contacts import build_contact_record, extract_public_identifier
from privatedata.models import ContactRecord, ScrapeStats

logger = logging.getLogger(__name__)

_URL_LIST = TypeAdapter(list[str])
_RECORD_LIST = TypeAdapter(list[ContactRecord])


def read_profile_urls(path: Path) -> list[str]:
    """Load a JSON array of LinkedIn profile URLs."""
    try:
        return _URL_LIST.validate_json(Path(path).read_bytes())
    except OSError as e:
        raise InputFileError(f"Cannot read {path}: {e}") from e
    except ValidationError as e:
        raise InputFileError(f"{path} is not a JSON array of URL strings: {e}") from e


class ContactScraper:
    """Looks up LinkedIn profiles one at a time and collects contact records."""

    def __init__(
        self,
        client: UnipileClient,
        config: ScrapeConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.config = config
        self._sleep = sleep
        self.stats = ScrapeStats()

    async def _pause(self) -> None:
        """Wait between lookups to stay under the upstream rate limit."""
        delay = self.config.delay_seconds + random.uniform(0, self.config.jitter_seconds)
        logger.debug(f"Sleeping {delay:.2f}s before next lookup")
        await self._sleep(delay)

    async def scrape_one(self, url: str) -> ContactRecord | None:
        """Look up one profile URL. Returns None if the URL or profile is unusable."""
        identifier = extract_public_identifier(url)
        if not identifier:
            self.stats.invalid_urls += 1
            logger.warning(f"Invalid LinkedIn URL: {url}")
            return None

        try:
            profile = await self.client.get_profile(identifier, sections=("experience",))
            record = build_contact_record(profile, self.config.default_region)
            if record is None:
                self.stats.rejected += 1
                is_linkedin_provider = profile.get("provider") == "LINKEDIN"
                logger.warning(
                    f"Record is not valid for {url} "
                    f"(is_linkedin_provider={is_linkedin_provider}, "
                    f"has_public_identifier={isinstance(profile.get('public_identifier'), str)})"
                )
                return None

            self.stats.added += 1
            logger.info(f"Record added for {url}")
            return record

        except Exception as e:
            error_msg = f"Error fetching profile for {url}: {e}"
            self.stats.failed += 1
            self.stats.errors.append(error_msg)
            logger.error(error_msg)
            return None

        finally:
            await self._pause()

    async def run(self, urls: list[str]) -> list[ContactRecord]:
        """Scrape every URL in order, skipping the ones that fail."""
        logger.info(f"Scraping {len(urls)} LinkedIn profiles")
        records = []
        for i, url in enumerate(urls, 1):
            record = await self.scrape_one(url)
            if record is not None:
                records.append(record)
            if i % 10 == 0 or i == len(urls):
                logger.info(f"Progress: {i}/{len(urls)} profiles processed")

        logger.info("Scraping complete:")
        logger.info(f"  Added: {self.stats.added}")
        logger.info(f"  Invalid URLs: {self.stats.invalid_urls}")
        logger.info(f"  Rejected: {self.stats.rejected}")
        logger.info(f"  Errors: {self.stats.failed}")
        return records


def write_report(records: list[ContactRecord], output_dir: Path) -> Path:
    """Write records to a timestamped JSON file and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"linkedin-contacts-{int(time.time() * 1000)}.json"
    payload = _RECORD_LIST.dump_python(records, by_alias=True, mode="json")
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Wrote {len(records)} records to {path}")
    return path

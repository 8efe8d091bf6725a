"""LinkedIn contact scraping through the Unipile API."""

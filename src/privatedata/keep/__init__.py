"""Google Keep export to Markdown conversion."""

"""Batch scripts for personal data exports: LinkedIn contacts and Google Keep notes."""

__version__ = "0.1.0"

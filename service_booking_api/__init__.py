"""Service booking platform: REST API over MongoDB with email notifications."""

__version__ = "1.0.0"

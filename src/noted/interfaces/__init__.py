"""User-facing interfaces for Noted."""

"""Configuration loading and validation for gettext-extractor."""

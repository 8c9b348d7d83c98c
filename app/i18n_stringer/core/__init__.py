"""Ambient configuration and logging for i18n-stringer."""

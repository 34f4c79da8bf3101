"""Utility functions for mushafbot."""

from mushafbot.utils.helpers import format_bytes, format_uptime, truncate

__all__ = ["format_bytes", "format_uptime", "truncate"]

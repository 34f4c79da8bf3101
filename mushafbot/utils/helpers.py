"""Utility functions for mushafbot."""


def format_uptime(seconds: float) -> str:
    """
    Format a duration as '1d 2h 3m 4s', dropping leading zero units.

    Seconds are always shown.
    """
    seconds = int(seconds)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)


def format_bytes(size: float) -> str:
    """Format a byte count with a binary unit."""
    for unit in ("Bytes", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != "Bytes" else f"{int(size)} Bytes"
        size /= 1024
    return f"{size:.2f} TB"


def truncate(text: str, max_len: int = 100, suffix: str = "...") -> str:
    """Truncate a string to max length, adding suffix if truncated."""
    if len(text) <= max_len:
        return text
    return text[: max_len - len(suffix)] + suffix

"""Formatting utilities for CLI output."""


def format_file_size(size_bytes: int) -> str:
    """Format a byte count in human-readable form.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted string (e.g., "4.2 GB", "128.0 MB", "512 B").
    """
    if size_bytes >= 1024**4:
        return f"{size_bytes / (1024**4):.1f} TB"
    elif size_bytes >= 1024**3:
        return f"{size_bytes / (1024**3):.1f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / (1024**2):.1f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.1f} KB"
    else:
        return f"{size_bytes} B"


def truncate_title(title: str, max_length: int = 40) -> str:
    """Truncate a media title to fit a table column.

    Uses a single ellipsis character (U+2026) as the final character.

    Examples:
        >>> truncate_title("The Lord of the Rings: The Fellowship", 20)
        'The Lord of the Rin…'
        >>> truncate_title("Heat", 20)
        'Heat'
    """
    if not title or len(title) <= max_length:
        return title
    return title[: max_length - 1] + "…"

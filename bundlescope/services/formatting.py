from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size: float) -> str:
    if abs(size) < 1024:
        return f"{int(size)} B"
    value = float(size)
    unit = _UNITS[1]
    for unit in _UNITS[1:]:
        value /= 1024
        if abs(value) < 1024:
            break
    return f"{value:.1f} {unit}"


def format_kb(size: float) -> str:
    return f"{size / 1024:.2f}"


def format_mb(size: float) -> str:
    return f"{size / 1024 / 1024:.2f}"


def tail(text: str, width: int) -> str:
    """Keep the last *width* characters; module paths differ at the end."""
    return text[-width:] if len(text) > width else text


def percent_bar(percentage: float) -> str:
    return "█" * round(max(percentage, 0.0) / 2)

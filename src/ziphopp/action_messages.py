"""UI-facing copy builders for notifications."""

from __future__ import annotations


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_open_failed_message(message: str) -> str:
    """Build the notification shown when an archive fails to open."""
    return build_actionable_error(
        "open the archive",
        why=message or None,
        next_step="press o to choose another archive",
    )


def build_opened_notification(name: str, entry_count: int) -> str:
    """Build notification text for a successfully opened archive."""
    return f"Opened {name} ({entry_count} entr{'ies' if entry_count != 1 else 'y'})"


__all__ = [
    "build_actionable_error",
    "build_next_step_hint",
    "build_open_failed_message",
    "build_opened_notification",
]

from __future__ import annotations

import re
from typing import Dict, Optional
from urllib.parse import urlencode

from src.models import ResolvedMember

PLACEHOLDER = "-"

# Lookalike quotes that messaging template validation rejects or mangles
_QUOTE_TRANSLATION = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‟": '"',
        "″": '"',
        "״": '"',  # hebrew gershayim
        "‘": "'",
        "’": "'",
        "‚": "'",
        "‛": "'",
        "′": "'",
        "׳": "'",  # hebrew geresh
        "`": "'",
    }
)


def sanitize_text(value: Optional[str], placeholder: str = PLACEHOLDER) -> str:
    """Make a value safe to use as a template content variable."""
    if value is None:
        return placeholder

    text = str(value)
    text = re.sub(r"[\r\n\t]+", " ", text)
    text = text.translate(_QUOTE_TRANSLATION)
    text = re.sub(r"\s+", " ", text).strip()
    return text or placeholder


def registration_link(base_url: str, group_id: str) -> str:
    query = urlencode({"groupId": group_id})
    return f"{base_url.rstrip('/')}/NextGame?{query}"


def format_registration_open(
    member: ResolvedMember, group_name: str, link: str
) -> Dict[str, str]:
    """Content variables for the "registration open" template.

    Returns:
        {"1": member name, "2": group name, "3": registration link}
    """
    return {
        "1": sanitize_text(member.display_name),
        "2": sanitize_text(group_name),
        "3": sanitize_text(link),
    }


def format_game_reminder(member: ResolvedMember, group_name: str) -> Dict[str, str]:
    """Content variables for the game-day reminder template.

    Returns:
        {"1": member name, "2": group name}
    """
    return {
        "1": sanitize_text(member.display_name),
        "2": sanitize_text(group_name),
    }

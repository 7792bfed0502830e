"""Canonical tweet model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class User:
    """Tweet author as resolved from the page's user map."""

    screen_name: str
    name: str = ""
    id_str: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Tweet:
    """Twitter/X tweet decoded from a search page."""

    id: str
    created_at: Optional[datetime]
    full_text: str
    user_id: str
    user: Optional[User] = None
    extra: Dict[str, Any] = field(default_factory=dict)  # unmodeled raw fields, original order

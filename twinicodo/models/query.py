"""Search query model."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Query:
    """Free text search with optional date bounds."""

    text: str
    since: Optional[str] = None
    until: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.text]
        if self.since:
            parts.append(f"since:{self.since}")
        if self.until:
            parts.append(f"until:{self.until}")
        return " ".join(parts)

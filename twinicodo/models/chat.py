"""Comment (chat) model for the niconico comment XML."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Chat:
    """One timed comment.

    ``date`` is seconds since the Unix epoch and ``vpos`` the offset in
    seconds from the first comment of the same sequence.
    """

    date: int
    vpos: int
    content: str
    user_id: Optional[str] = None
    id: Optional[str] = None
    mail: Optional[str] = None

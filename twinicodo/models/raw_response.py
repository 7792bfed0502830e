"""Wire models for the adaptive search API response."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawUser(BaseModel):
    """User record from ``globalObjects.users``."""

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    id_str: str = ""
    name: str = ""
    screen_name: str


class RawTweet(BaseModel):
    """Tweet record from ``globalObjects.tweets``.

    Fields outside the modeled ones are kept in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow")

    id_str: str
    full_text: str = ""
    user_id: Optional[int] = None
    user_id_str: str = ""


class GlobalObjects(BaseModel):
    """Tweets and users keyed by their id strings."""

    tweets: Dict[str, RawTweet] = Field(default_factory=dict)
    users: Dict[str, RawUser] = Field(default_factory=dict)


class EntryCursor(BaseModel):
    value: str


class EntryContentOperation(BaseModel):
    cursor: EntryCursor


class EntryContent(BaseModel):
    operation: Optional[EntryContentOperation] = None


class Entry(BaseModel):
    entry_id: str = Field(..., alias="entryId")
    sort_index: Optional[str] = Field(None, alias="sortIndex")
    content: EntryContent = Field(default_factory=EntryContent)


class AddEntries(BaseModel):
    entries: List[Entry] = Field(default_factory=list)


class ReplaceEntry(BaseModel):
    entry_id_to_replace: Optional[str] = Field(None, alias="entryIdToReplace")
    entry: Entry


class Instruction(BaseModel):
    """One timeline instruction; only entry additions and replacements matter."""

    add_entries: Optional[AddEntries] = Field(None, alias="addEntries")
    replace_entry: Optional[ReplaceEntry] = Field(None, alias="replaceEntry")

    def entries(self) -> List[Entry]:
        """Return the entries carried by this instruction, if any."""
        if self.add_entries is not None:
            return self.add_entries.entries
        if self.replace_entry is not None:
            return [self.replace_entry.entry]
        return []


class Timeline(BaseModel):
    id: Optional[str] = None
    instructions: List[Instruction] = Field(default_factory=list)


class RawResponse(BaseModel):
    """One page of the adaptive search API."""

    global_objects: GlobalObjects = Field(..., alias="globalObjects")
    timeline: Timeline

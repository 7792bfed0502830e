"""Writer for the niconico comment XML format."""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO, Sequence, Union

from ..models.chat import Chat

logger = logging.getLogger(__name__)

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


class XMLWriteError(Exception):
    """Raised when the comment XML cannot be written."""

    pass


def _xml_text(value: str) -> str:
    return _INVALID_XML_CHARS.sub("", value)


def _chat_element(parent: ET.Element, no: int, chat: Chat) -> ET.Element:
    element = ET.SubElement(parent, "chat")
    element.set("date", str(chat.date))
    element.set("vpos", str(chat.vpos))
    element.set("no", str(no))
    if chat.user_id is not None:
        element.set("user_id", _xml_text(chat.user_id))
    if chat.mail is not None:
        element.set("mail", _xml_text(chat.mail))
    if chat.id is not None:
        element.set("id", _xml_text(chat.id))
    element.text = _xml_text(chat.content)
    return element


def build_packet(chats: Sequence[Chat]) -> ET.ElementTree:
    """Build the ``packet`` document for a non-empty comment sequence.

    ``no`` is the 1-based position in ``chats``; comments with empty content
    are left out without renumbering the rest.
    """
    packet = ET.Element("packet")
    ET.SubElement(packet, "thread", {"last_res": str(len(chats) - 1), "ticket": ""})
    ET.SubElement(packet, "view_counter", {"video": "0"})

    for no, chat in enumerate(chats, start=1):
        if not chat.content:
            continue
        _chat_element(packet, no, chat)

    tree = ET.ElementTree(packet)
    ET.indent(tree, space=" ")
    return tree


def write_xml(stream: BinaryIO, chats: Sequence[Chat]) -> int:
    """Write comments as XML to a binary stream.

    Nothing at all is written for an empty sequence.

    Args:
        stream: Binary file-like object
        chats: Comments in playback order

    Returns:
        Number of ``chat`` elements written

    Raises:
        XMLWriteError: If writing to the stream fails
    """
    if not chats:
        return 0

    tree = build_packet(chats)
    try:
        tree.write(stream, encoding="utf-8", xml_declaration=True)
    except OSError as e:
        raise XMLWriteError(f"Failed to write comment XML: {e}") from e

    return len(tree.getroot().findall("chat"))


def save_xml(path: Union[str, Path], chats: Sequence[Chat]) -> int:
    """Write comments to ``path``.

    The file is neither created nor truncated when there is nothing to write.

    Raises:
        XMLWriteError: If the file cannot be opened or written
    """
    if not chats:
        logger.debug(f"No comments, not writing {path}")
        return 0

    try:
        with open(path, "wb") as f:
            written = write_xml(f, chats)
    except OSError as e:
        raise XMLWriteError(f"Failed to write {path}: {e}") from e

    logger.info(f"💾 Wrote {written} comments to {path}")
    return written

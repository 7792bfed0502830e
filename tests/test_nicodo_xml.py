"""Tests for the niconico comment XML writer."""

import io
import xml.etree.ElementTree as ET
from unittest.mock import MagicMock, patch

import pytest

from twinicodo.models.chat import Chat
from twinicodo.publishers.nicodo_xml import XMLWriteError, save_xml, write_xml


@pytest.fixture
def sample_chats():
    """Three comments; the second one has no text left after cleanup."""
    return [
        Chat(date=1596385521, vpos=0, content="first", user_id="alice", id="111"),
        Chat(date=1596385530, vpos=9, content="", user_id="bob", id="222"),
        Chat(date=1596385581, vpos=60, content="third & <last>", id="333"),
    ]


class _FullDisk(io.BytesIO):
    def write(self, data):
        raise OSError("No space left on device")


def _render(chats) -> bytes:
    buffer = io.BytesIO()
    write_xml(buffer, chats)
    return buffer.getvalue()


class TestWriteXML:
    """Tests for the document structure."""

    def test_document_structure(self, sample_chats):
        data = _render(sample_chats)
        root = ET.fromstring(data)

        assert root.tag == "packet"
        children = list(root)
        assert children[0].tag == "thread"
        assert children[0].attrib == {"last_res": "2", "ticket": ""}
        assert children[1].tag == "view_counter"
        assert children[1].attrib == {"video": "0"}
        assert [c.tag for c in children[2:]] == ["chat", "chat"]

    def test_empty_content_keeps_numbering_gap(self, sample_chats):
        """Test that skipped comments still consume their ``no``."""
        root = ET.fromstring(_render(sample_chats))

        chats = root.findall("chat")
        assert [c.get("no") for c in chats] == ["1", "3"]

    def test_chat_attributes(self, sample_chats):
        root = ET.fromstring(_render(sample_chats))
        first, third = root.findall("chat")

        assert first.attrib == {
            "date": "1596385521",
            "vpos": "0",
            "no": "1",
            "user_id": "alice",
            "id": "111",
        }
        assert first.text == "first"
        assert "user_id" not in third.attrib
        assert "mail" not in third.attrib
        assert third.get("id") == "333"
        assert third.text == "third & <last>"

    def test_attribute_order_and_indent(self, sample_chats):
        text = _render(sample_chats).decode("utf-8")
        lines = text.splitlines()

        assert lines[0] == "<?xml version='1.0' encoding='utf-8'?>"
        assert lines[1] == "<packet>"
        assert lines[2] == ' <thread last_res="2" ticket="" />'
        assert lines[3] == ' <view_counter video="0" />'
        assert lines[4] == (
            ' <chat date="1596385521" vpos="0" no="1" user_id="alice" id="111">first</chat>'
        )
        assert lines[-1] == "</packet>"

    def test_mail_and_id_are_distinct_attributes(self):
        chats = [Chat(date=1, vpos=0, content="x", mail="184", id="42")]

        chat = ET.fromstring(_render(chats)).find("chat")

        assert chat.get("mail") == "184"
        assert chat.get("id") == "42"

    def test_utf8_output(self):
        chats = [Chat(date=1, vpos=0, content="こんにちは")]

        data = _render(chats)

        assert "こんにちは".encode("utf-8") in data

    def test_control_characters_are_dropped(self):
        """Test that characters XML 1.0 forbids never reach the document."""
        chats = [Chat(date=1, vpos=0, content="bad\x0bchar\x08", user_id="al\x00ice", id="7")]

        chat = ET.fromstring(_render(chats)).find("chat")

        assert chat.text == "badchar"
        assert chat.get("user_id") == "alice"

    def test_tab_and_newline_are_kept(self):
        chats = [Chat(date=1, vpos=0, content="line one\nline\ttwo")]

        chat = ET.fromstring(_render(chats)).find("chat")

        assert chat.text == "line one\nline\ttwo"

    def test_returns_written_count(self, sample_chats):
        assert write_xml(io.BytesIO(), sample_chats) == 2

    def test_empty_sequence_performs_no_io(self):
        """Test that nothing at all is written for no comments."""
        stream = MagicMock()

        assert write_xml(stream, []) == 0
        assert stream.method_calls == []

    def test_stream_failure_raises_write_error(self, sample_chats):
        with pytest.raises(XMLWriteError):
            write_xml(_FullDisk(), sample_chats)


class TestSaveXML:
    """Tests for writing to a file path."""

    def test_save_creates_file(self, tmp_path, sample_chats):
        path = tmp_path / "out.xml"

        written = save_xml(path, sample_chats)

        assert written == 2
        root = ET.parse(path).getroot()
        assert len(root.findall("chat")) == 2

    def test_empty_sequence_creates_no_file(self, tmp_path):
        path = tmp_path / "out.xml"

        assert save_xml(path, []) == 0
        assert not path.exists()

    def test_empty_sequence_leaves_existing_file(self, tmp_path):
        path = tmp_path / "out.xml"
        path.write_text("keep me", encoding="utf-8")

        save_xml(path, [])

        assert path.read_text(encoding="utf-8") == "keep me"

    def test_unwritable_path_raises_write_error(self, tmp_path, sample_chats):
        path = tmp_path / "missing-dir" / "out.xml"

        with pytest.raises(XMLWriteError):
            save_xml(path, sample_chats)

    def test_open_failure_raises_write_error(self, sample_chats):
        with patch("builtins.open", side_effect=PermissionError("denied")):
            with pytest.raises(XMLWriteError):
                save_xml("out.xml", sample_chats)

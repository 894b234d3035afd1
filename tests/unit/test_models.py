"""
Unit tests for record types, issue categories and response parsing
"""

import sys
from pathlib import Path

# Add parent directory to path to import log2trello module
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from log2trello import (
    Attachment,
    Board,
    Card,
    CardSummary,
    IssueDept,
    IssueType,
    Label,
    MalformedResponseError,
    TrelloList,
    format_card_title,
)
from log2trello.models import parse_collection


class TestParseCollection:
    """Test typed deserialization of fetched snapshots"""

    def test_parses_boards_and_ignores_extra_fields(self, boards_payload):
        """Should keep only id and name"""
        boards = parse_collection(boards_payload, "boards", Board)

        assert boards == [Board(id="b1", name="Dev"), Board(id="b2", name="QA")]

    def test_parses_lists_in_order(self, lists_payload):
        """Should preserve the order Trello returned"""
        lists = parse_collection(lists_payload, "lists", TrelloList)

        assert [entry.name for entry in lists] == ["Inbox", "Crashes", "Done"]

    def test_empty_collection(self):
        """Should return an empty list for an empty array"""
        assert parse_collection({"cards": []}, "cards", CardSummary) == []

    def test_missing_field(self):
        """Should raise when the collection field is absent"""
        with pytest.raises(MalformedResponseError, match="missing 'boards'"):
            parse_collection({"id": "member"}, "boards", Board)

    def test_payload_not_an_object(self):
        """Should raise when the payload is an array"""
        with pytest.raises(MalformedResponseError, match="Expected a JSON object"):
            parse_collection([{"id": "b1", "name": "Dev"}], "boards", Board)

    def test_field_not_an_array(self):
        """Should raise when the collection is not an array"""
        with pytest.raises(MalformedResponseError, match="not an array"):
            parse_collection({"lists": {"id": "l1"}}, "lists", TrelloList)

    def test_entry_missing_id(self):
        """Should name the record type and the missing key"""
        with pytest.raises(MalformedResponseError, match="Board entry is missing 'id'"):
            parse_collection({"boards": [{"name": "Dev"}]}, "boards", Board)

    def test_entry_with_non_string_name(self):
        """Should reject mistyped fields"""
        with pytest.raises(MalformedResponseError, match="non-string 'name'"):
            parse_collection({"cards": [{"id": "c1", "name": 42}]}, "cards", CardSummary)

    def test_entry_not_an_object(self):
        """Should reject scalar entries"""
        with pytest.raises(MalformedResponseError, match="not an object"):
            parse_collection({"lists": ["l1"]}, "lists", TrelloList)


class TestCard:
    """Test the Card record"""

    def test_defaults(self):
        """Should use Trello's 'not provided' sentinels"""
        card = Card()

        assert card.pos == "top"
        assert card.desc == ""
        assert card.due == "null"
        assert card.url_source == "null"
        assert card.file_source == ""
        assert card.id_labels == []

    def test_to_form(self):
        """Should encode every field with Trello's parameter names"""
        card = Card(name="Crash", desc="boom", id_list="l2", id_labels=["lab1", "lab2"])

        assert card.to_form() == {
            "pos": "top",
            "name": "Crash",
            "desc": "boom",
            "due": "null",
            "idList": "l2",
            "idLabels": "lab1,lab2",
            "urlSource": "null",
        }

    def test_file_source_not_in_form_fields(self):
        """Should leave fileSource to the binary part"""
        assert "fileSource" not in Card(file_source="/tmp/log.txt").to_form()

    def test_label_lists_are_not_shared(self):
        """Should give every card its own label list"""
        first, second = Card(), Card()
        first.id_labels.append("lab1")

        assert second.id_labels == []


class TestLabelAndAttachment:
    """Test Label and Attachment records"""

    def test_label_form(self):
        assert Label(name="Crash", color="red").to_form() == {"color": "red", "name": "Crash"}

    def test_label_for_department(self):
        """Should use the department display name"""
        label = Label.for_department(IssueDept.ART_UI, "purple")

        assert label.name == "Art-UI"
        assert label.color == "purple"

    def test_attachment_defaults(self):
        attachment = Attachment()

        assert attachment.file == ""
        assert attachment.url == "null"
        assert attachment.has_url() is False

    def test_attachment_form(self):
        attachment = Attachment(url="https://example.com/log", name="log", mime_type="text/plain")

        assert attachment.has_url() is True
        assert attachment.to_form() == {
            "mimeType": "text/plain",
            "url": "https://example.com/log",
            "name": "log",
        }


class TestIssueCategories:
    """Test IssueType / IssueDept display names"""

    @pytest.mark.parametrize(
        "issue_type, expected",
        [
            (IssueType.BUG, "Bug"),
            (IssueType.FEEDBACK, "Feedback"),
            (IssueType.REQUEST, "Request"),
            (IssueType.BLUE_SCREEN, "Blue Screen"),
            (IssueType.RED_SCREEN, "Red Screen"),
            (IssueType.EXCEPTION, "Exception"),
        ],
    )
    def test_issue_type_names(self, issue_type, expected):
        assert issue_type.display_name == expected

    def test_department_names(self):
        assert [dept.display_name for dept in IssueDept] == [
            "Design",
            "Engineering",
            "Art-UI",
            "Art-3D",
            "Art-2D",
            "Production",
        ]

    def test_format_card_title(self):
        assert format_card_title(IssueType.BLUE_SCREEN, "GPU hang") == "[Blue Screen] GPU hang"

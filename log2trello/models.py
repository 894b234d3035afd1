"""Record types for Trello boards, lists, cards, labels and attachments.

Remote records (``Board``, ``TrelloList``, ``CardSummary``) are parsed from the
JSON returned by Trello right after each fetch; only ``id`` and ``name`` are
consumed. Local records (``Card``, ``Label``, ``Attachment``) are built by the
caller and encoded into form bodies on upload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

from log2trello.exceptions import MalformedResponseError
from log2trello.issues import IssueDept

T = TypeVar("T", bound="RemoteRecord")


@dataclass(frozen=True)
class RemoteRecord:
    id: str
    name: str

    @classmethod
    def from_json(cls: type[T], data: Any) -> T:
        """Build a record from one JSON object, requiring string ``id``/``name``"""
        kind = cls.__name__
        if not isinstance(data, dict):
            raise MalformedResponseError(f"{kind} entry is not an object: {data!r}")

        values = {}
        for key in ("id", "name"):
            if key not in data:
                raise MalformedResponseError(f"{kind} entry is missing '{key}'")
            value = data[key]
            if not isinstance(value, str):
                raise MalformedResponseError(
                    f"{kind} entry has non-string '{key}': {value!r}"
                )
            values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class Board(RemoteRecord):
    """A Trello board"""


@dataclass(frozen=True)
class TrelloList(RemoteRecord):
    """A list on a board"""


@dataclass(frozen=True)
class CardSummary(RemoteRecord):
    """A card already stored in a list"""


def parse_collection(payload: Any, field_name: str, model: type[T]) -> list[T]:
    """Extract ``payload[field_name]`` and parse every entry as ``model``

    Raises:
        MalformedResponseError: If the payload is not an object, the field is
            missing or not an array, or any entry fails to parse
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Expected a JSON object holding '{field_name}', got {type(payload).__name__}"
        )
    if field_name not in payload:
        raise MalformedResponseError(f"Response is missing '{field_name}'")
    entries = payload[field_name]
    if not isinstance(entries, list):
        raise MalformedResponseError(f"'{field_name}' is not an array")
    return [model.from_json(entry) for entry in entries]


@dataclass
class Card:
    """A card to upload.

    Unset fields keep the sentinel values Trello accepts for "not provided":
    ``pos="top"``, ``due="null"``, ``url_source="null"``. ``file_source`` is a
    local path whose bytes are uploaded alongside the card when non-empty.
    """

    pos: str = "top"
    name: str = ""
    desc: str = ""
    due: str = "null"
    id_list: str = ""
    id_labels: list[str] = field(default_factory=list)
    url_source: str = "null"
    file_source: str = ""

    def to_form(self) -> dict[str, str]:
        """Encode as the form fields expected by ``POST cards``"""
        return {
            "pos": self.pos,
            "name": self.name,
            "desc": self.desc,
            "due": self.due,
            "idList": self.id_list,
            "idLabels": ",".join(self.id_labels),
            "urlSource": self.url_source,
        }


@dataclass
class Label:
    """A coloured label to add to a card"""

    name: str = ""
    color: str = ""

    @classmethod
    def for_department(cls, dept: IssueDept, color: str = "") -> Label:
        return cls(name=dept.display_name, color=color)

    def to_form(self) -> dict[str, str]:
        return {"color": self.color, "name": self.name}


@dataclass
class Attachment:
    """A file (local path) or URL to attach to a card"""

    file: str = ""
    url: str = "null"
    name: str = ""
    mime_type: str = ""

    def has_url(self) -> bool:
        return self.url not in ("", "null")

    def to_form(self) -> dict[str, str]:
        return {"mimeType": self.mime_type, "url": self.url, "name": self.name}

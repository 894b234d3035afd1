"""Trello session: board/list/card selection and card uploads."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from log2trello.config import DEFAULT_TIMEOUT
from log2trello.exceptions import NotFoundError, PreconditionError
from log2trello.issues import IssueType, format_card_title
from log2trello.models import (
    Attachment,
    Board,
    Card,
    CardSummary,
    Label,
    RemoteRecord,
    TrelloList,
    parse_collection,
)
from log2trello.system_info import SystemInformation
from log2trello.transport import FileParts, TrelloTransport

if TYPE_CHECKING:
    from log2trello.exception_hook import ExceptionHandlingRegistration

logger = logging.getLogger("log2trello.trello_client")


class TrelloSession:
    """Selection state and upload operations for one key/token pair

    Usage follows Trello's hierarchy:

        >>> session = TrelloSession(api_key="...", token="...")
        >>> session.populate_boards()
        >>> session.set_current_board("Game Dev")
        >>> session.populate_lists()
        >>> session.set_current_list("Bugs")
        >>> card = session.new_card("Player falls through floor", IssueType.BUG)
        >>> session.upload_card(card)

    The last fetched boards/lists/cards are kept as snapshots and used only to
    resolve names to ids. A session is not thread-safe; use one per flow.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        transport: TrelloTransport | None = None,
        system_info: SystemInformation | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.token = token
        self.transport = transport or TrelloTransport(api_key, token, timeout=timeout)
        self.system_info = system_info

        self.current_board_id = ""
        self.current_list_id = ""
        self.current_card_id = ""

        self.boards: list[Board] | None = None
        self.lists: list[TrelloList] | None = None
        self.cards: list[CardSummary] | None = None

    # ===== Selection =====

    def populate_boards(self) -> list[Board]:
        """Fetch all boards of the authenticated member"""
        self.boards = None
        payload = self.transport.get(
            "members/me",
            {"boards": "all"},
            action="Connection to the Trello servers was not possible",
        )
        self.boards = parse_collection(payload, "boards", Board)
        logger.debug(f"Fetched {len(self.boards)} boards")
        return self.boards

    def set_current_board(self, name: str) -> None:
        """Select the board called ``name`` from the boards snapshot

        The board id is left empty whenever selection fails.

        Raises:
            NotFoundError: If boards were never populated or no board matches
        """
        if self.boards is None:
            self.current_board_id = ""
            raise NotFoundError(
                "You have not yet populated the list of boards, so one cannot be selected."
            )
        self.current_board_id = self._find_id(self.boards, name)
        if not self.current_board_id:
            raise NotFoundError(f"No such board found: '{name}'")

    def populate_lists(self) -> list[TrelloList]:
        """Fetch all lists of the current board"""
        self.lists = None
        if not self.current_board_id:
            raise PreconditionError(
                "Cannot retrieve the lists, you have not selected a board yet."
            )
        payload = self.transport.get(
            f"boards/{self.current_board_id}",
            {"lists": "all"},
            action="Could not fetch Trello lists",
        )
        self.lists = parse_collection(payload, "lists", TrelloList)
        logger.debug(f"Fetched {len(self.lists)} lists for board {self.current_board_id}")
        return self.lists

    def set_current_list(self, name: str) -> None:
        """Select the list called ``name`` from the lists snapshot

        Raises:
            PreconditionError: If lists were never populated
            NotFoundError: If no list matches
        """
        if self.lists is None:
            raise PreconditionError(
                "You have not yet populated the list of lists, so one cannot be selected."
            )
        self.current_list_id = self._find_id(self.lists, name)
        if not self.current_list_id:
            raise NotFoundError(f"No such list found: '{name}'")

    def populate_cards(self) -> list[CardSummary]:
        """Fetch all cards of the current list"""
        self.cards = None
        if not self.current_list_id:
            raise PreconditionError(
                "Cannot retrieve the cards, you have not selected a list yet."
            )
        payload = self.transport.get(
            f"lists/{self.current_list_id}",
            {"cards": "all"},
            action="Could not fetch Trello cards",
        )
        self.cards = parse_collection(payload, "cards", CardSummary)
        return self.cards

    def set_current_card(self) -> None:
        """Select the first card of the cards snapshot

        Raises:
            PreconditionError: If cards were never populated
            NotFoundError: If the list holds no cards
        """
        if self.cards is None:
            raise PreconditionError(
                "You have not yet populated the list of cards, so one cannot be selected."
            )
        if not self.cards:
            raise NotFoundError("The current list has no cards to select.")
        self.current_card_id = self.cards[0].id

    @staticmethod
    def _find_id(records: list[RemoteRecord], name: str) -> str:
        for record in records:
            if record.name == name:
                return record.id
        return ""

    # ===== Factories =====

    def new_card(self, name: str = "", issue_type: IssueType | None = None) -> Card:
        """Create a card bound to the current list

        Args:
            name: Card title
            issue_type: When given, the title is prefixed with ``[<type>]``

        Raises:
            PreconditionError: If no list is selected
        """
        if not self.current_list_id:
            raise PreconditionError("Cannot create a card when you have not selected a list.")
        if issue_type is not None:
            name = format_card_title(issue_type, name)
        return Card(name=name, id_list=self.current_list_id)

    def new_attachment(self) -> Attachment:
        return Attachment()

    def new_label(self, name: str = "", color: str = "") -> Label:
        return Label(name=name, color=color)

    # ===== Uploads =====

    def upload_card(self, card: Card) -> Card:
        """Upload ``card`` to its list.

        If ``card.file_source`` is set, the file is read and sent as the
        binary part ``fileSource``. The id Trello assigns is not copied back.

        Returns:
            The card that was passed in

        Raises:
            PreconditionError: If the card has no ``id_list``
            TransportError: If the request fails
        """
        if not card.id_list:
            raise PreconditionError(
                "Cannot upload a card without a list id, select a list first."
            )

        files: FileParts | None = None
        if card.file_source:
            path = Path(card.file_source)
            files = {"fileSource": (path.name, path.read_bytes())}

        created = self.transport.post(
            "cards", card.to_form(), files=files, action="Could not upload Trello card"
        )
        card_id = created.get("id") if isinstance(created, dict) else None
        logger.info(f"Uploaded card '{card.name}' to list {card.id_list} (id: {card_id})")
        return card

    def upload_exception_card(
        self,
        condition: str,
        stack_trace: str,
        device_info: bool = True,
        graphics_info: bool = True,
        processor_info: bool = True,
    ) -> Card:
        """Build a card describing an exception and upload it to the current list

        The description holds the condition, the stack trace and a system
        information block whose sections can be switched off individually.
        """
        if self.system_info is None:
            self.system_info = SystemInformation.collect()
        sys_info = self.system_info.build(device_info, graphics_info, processor_info)

        card = Card(
            pos="top",
            name=format_card_title(IssueType.EXCEPTION, condition),
            due=datetime.now().astimezone().isoformat(timespec="seconds"),
            desc=f"{condition}\n--------\n```\n{stack_trace}\n{sys_info}```",
            id_list=self.current_list_id,
            file_source="",
        )
        return self.upload_card(card)

    def add_label_to_card(self, label: Label) -> Label:
        """Add ``label`` to the current card

        Raises:
            PreconditionError: If no card is selected
            TransportError: If the request fails
        """
        self._require_current_card("add a label")
        self.transport.post(
            f"cards/{self.current_card_id}/labels",
            label.to_form(),
            action="Could not upload Label to Trello card",
        )
        return label

    def upload_attachment_to_card(self, attachment: Attachment) -> Attachment:
        """Attach a local file (sent as binary part ``file``) or a URL to the current card

        Raises:
            PreconditionError: If no card is selected, or the attachment has
                neither a file nor a URL
            TransportError: If the request fails
        """
        self._require_current_card("upload an attachment")
        if not attachment.file and not attachment.has_url():
            raise PreconditionError("An attachment needs a file path or a url.")

        files: FileParts | None = None
        if attachment.file:
            path = Path(attachment.file)
            files = {"file": (attachment.name or path.name, path.read_bytes())}

        self.transport.post(
            f"cards/{self.current_card_id}/attachments",
            attachment.to_form(),
            files=files,
            action="Could not upload attachment to Trello card",
        )
        return attachment

    def _require_current_card(self, operation: str) -> None:
        if not self.current_card_id:
            raise PreconditionError(
                f"Cannot {operation} when no card is selected. "
                "Call populate_cards() and set_current_card() first."
            )

    # ===== Exception reporting =====

    def initialize_exception_handling(
        self,
        target_logger: logging.Logger | None = None,
        install_excepthook: bool = False,
    ) -> ExceptionHandlingRegistration:
        """Report every logged exception as a card in the current list

        Returns:
            A registration whose ``unsubscribe()`` removes the hook again
        """
        from log2trello.exception_hook import ExceptionReporter, initialize_exception_handling

        reporter = ExceptionReporter.from_session(self)
        return initialize_exception_handling(
            reporter, target_logger=target_logger, install_excepthook=install_excepthook
        )

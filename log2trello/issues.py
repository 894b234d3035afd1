"""Issue categories used to title cards and name department labels."""

from __future__ import annotations

from enum import Enum


class IssueType(Enum):
    """Kind of report a card represents"""

    BUG = "Bug"
    FEEDBACK = "Feedback"
    REQUEST = "Request"
    BLUE_SCREEN = "Blue Screen"
    RED_SCREEN = "Red Screen"
    EXCEPTION = "Exception"

    @property
    def display_name(self) -> str:
        return self.value


class IssueDept(Enum):
    """Department responsible for an issue"""

    DESIGN = "Design"
    ENGINEERING = "Engineering"
    ART_UI = "Art-UI"
    ART_3D = "Art-3D"
    ART_2D = "Art-2D"
    PRODUCTION = "Production"

    @property
    def display_name(self) -> str:
        return self.value


def format_card_title(issue_type: IssueType, title: str) -> str:
    """Prefix a title with its issue type, e.g. ``[Bug] Crash on load``"""
    return f"[{issue_type.display_name}] {title}"

"""
Shared pytest fixtures for log2trello tests
"""
import json
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from log2trello import SystemInformation, TrelloSession


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() between tests"""
    yield
    logger = logging.getLogger("log2trello")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory"""
    return Path(__file__).parent / "fixtures"


def _load(fixtures_dir, name):
    with open(fixtures_dir / name) as f:
        return json.load(f)


@pytest.fixture
def boards_payload(fixtures_dir):
    """Response of GET members/me?boards=all"""
    return _load(fixtures_dir, "member_boards.json")


@pytest.fixture
def lists_payload(fixtures_dir):
    """Response of GET boards/b2?lists=all"""
    return _load(fixtures_dir, "board_lists.json")


@pytest.fixture
def cards_payload(fixtures_dir):
    """Response of GET lists/l2?cards=all"""
    return _load(fixtures_dir, "list_cards.json")


@pytest.fixture
def system_info():
    """Deterministic system information block"""
    return SystemInformation(
        device_name="test-rig",
        device_type="x86_64",
        operating_system="Linux-6.1",
        system_memory_mb="16384",
        processor_type="x86_64",
        processor_count="8",
    )


@pytest.fixture
def session(system_info):
    """Session with no selection yet"""
    return TrelloSession(api_key="test_key", token="test_token", system_info=system_info)


@pytest.fixture
def selected_session(session):
    """Session with board b2 / list l2 already selected"""
    session.current_board_id = "b2"
    session.current_list_id = "l2"
    return session


@pytest.fixture
def make_response():
    """Factory for mock requests.Response objects returning a JSON payload"""

    def _make(payload, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    return _make

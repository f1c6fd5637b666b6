from __future__ import annotations

from typing import Optional

from models import BrowseState, Coordinate
from services import browse
from services.session import session_manager

BROWSE_ACTIONS = ("view", "category", "search", "tag", "load_more", "locate", "reset")


def fetch_state(session_id: Optional[str]) -> BrowseState:
    """Return the state for a session, or a fresh one if session_id is falsy."""
    return session_manager.get_state(session_id or "")


def apply_action(
    session_id: Optional[str],
    action: str,
    value: Optional[str] = None,
    coordinate: Optional[Coordinate] = None,
) -> BrowseState:
    """Apply one browse action to a session's state and persist the result."""
    if action not in BROWSE_ACTIONS:
        raise ValueError(f"unknown action: {action}")
    if action == "category" and not value:
        raise ValueError("category action needs a value")

    def transition(state: BrowseState) -> BrowseState:
        if action == "reset":
            state = BrowseState(category=session_manager.default_category)
        elif action == "category":
            state = browse.select_category(state, value or "")
        elif action == "search":
            state = browse.set_search(state, value)
        elif action == "tag":
            state = browse.select_tag(state, value)
        elif action == "load_more":
            state = browse.load_more(state)

        # a reported position always wins; no position leaves the last one in place
        if coordinate is not None:
            state = browse.set_user_coordinate(state, coordinate)
        return state

    return session_manager.update(session_id or "", transition)


def reset_session(session_id: Optional[str]) -> None:
    """Clear state for a session id."""
    if not session_id:
        return
    session_manager.reset(session_id)

from __future__ import annotations

import logging
from typing import Any

from catering.application.ports.state_store import StateStorePort
from catering.application.utils.user_codec import deserialize_user, serialize_user
from catering.domain.entities.oauth_state import OAuthState
from catering.domain.entities.user import User


class TurnState:
    """
    State of one user in one conversation, read once at the start of a turn.

    Changes stay in memory until save_changes(), which the dispatcher calls once per turn.
    """

    def __init__(self, store: StateStorePort, key: str, user_id: str) -> None:
        self._store = store
        self._key = key
        self._user_id = user_id
        self._document: dict[str, Any] = dict(store.read(key) or {})
        self._changed = False
        self._logger = logging.getLogger(__name__)

    @property
    def key(self) -> str:
        return self._key

    @property
    def has_changes(self) -> bool:
        return self._changed

    def get_user(self) -> User:
        data = self._document.get("user")
        if not data:
            return User(id=self._user_id)
        return deserialize_user(data)

    def set_user(self, user: User) -> None:
        self._document["user"] = serialize_user(user)
        self._changed = True

    def get_oauth_state(self) -> OAuthState:
        raw = self._document.get("oauth_state")
        try:
            return OAuthState(raw) if raw else OAuthState.IDLE
        except ValueError:
            self._logger.warning("Unknown oauth state reset to idle", extra={"reason": raw})
            return OAuthState.IDLE

    def set_oauth_state(self, oauth_state: OAuthState) -> None:
        self._document["oauth_state"] = oauth_state.value
        self._changed = True

    def save_changes(self, force: bool = False) -> bool:
        """Write the document if anything changed (or `force`). Returns True if a write happened."""
        if not (self._changed or force):
            return False
        self._store.write(self._key, dict(self._document))
        self._changed = False
        return True

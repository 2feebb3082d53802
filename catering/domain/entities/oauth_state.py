from __future__ import annotations

from enum import Enum


class OAuthState(str, Enum):
    """Which sign-in flow, if any, is waiting for its continuation invoke."""

    IDLE = "idle"
    PENDING_NOMINAL = "pending_nominal"
    PENDING_SSO = "pending_sso"

    @property
    def started_nominal_auth(self) -> bool:
        return self is OAuthState.PENDING_NOMINAL

    @property
    def started_sso_auth(self) -> bool:
        return self is OAuthState.PENDING_SSO

from abc import ABC, abstractmethod

from catering.application.dto.activity import ActivityDTO
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.token_result import TokenResult


class TokenProviderPort(ABC):
    """One sign-in connection. The coordinator never looks inside the token."""

    @property
    @abstractmethod
    def connection_name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def begin(self, activity: ActivityDTO) -> TokenResult:
        """Return a token if one is available, otherwise the response that starts sign-in."""
        raise NotImplementedError

    @abstractmethod
    def complete(self, activity: ActivityDTO) -> TokenResult:
        """Finish sign-in using the magic code or SSO token carried by `activity`."""
        raise NotImplementedError

    @abstractmethod
    def sign_out(self, activity: ActivityDTO) -> InvokeResponse:
        raise NotImplementedError

from dataclasses import dataclass

from catering.domain.entities.invoke_response import InvokeResponse


@dataclass(frozen=True)
class TokenResult:
    token: str | None = None
    response: InvokeResponse | None = None  # login request or error to return when no token is available

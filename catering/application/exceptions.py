class ActionValidationError(ValueError):
    """Raised when an adaptive card action cannot be accepted (client error, never a turn failure)."""

    status_code = 400
    code = "BadRequest"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidPayloadError(ActionValidationError):
    """Raised when the action data is missing or does not match the card options schema."""

    code = "InvalidPayload"


class VerbNotSupportedError(ActionValidationError):
    """Raised when the action verb is not one the bot handles."""

    code = "VerbNotSupported"

    def __init__(self, verb: str | None) -> None:
        super().__init__(f"The verb '{verb}' is not supported.")
        self.verb = verb


class MenuAuthoringError(NotImplementedError):
    """Raised when a card asks for a transition the bot does not implement."""
    pass


class OAuthProtocolError(RuntimeError):
    """Raised when a sign-in continuation arrives without a pending sign-in flow."""

    status_code = 400

    def __init__(self, invoke_name: str | None) -> None:
        super().__init__(
            f"Received an invoke with name {invoke_name} but not as a result of a loginRequest"
        )
        self.invoke_name = invoke_name


class RecognizerUpstreamError(RuntimeError):
    """Raised when the recognizer provider fails (timeouts, network errors, service unavailable)."""
    pass


class RecognizerContractError(RuntimeError):
    """Raised when the recognizer provider answers with a bad format or missing data."""
    pass


class TokenServiceError(RuntimeError):
    """Raised when the token service or the app credential endpoint rejects a request."""
    pass


class ConnectorError(RuntimeError):
    """Raised when a reply cannot be delivered to the channel."""
    pass

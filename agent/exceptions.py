"""Custom exceptions for the desktop automation agent."""


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


class ApiKeyMissingError(ConfigError):
    """Raised when no API key is configured for the reasoning endpoint."""
    pass


class ReasoningClientError(Exception):
    """Base class for failures talking to the chat-completion endpoint."""
    pass


class ReasoningConnectionError(ReasoningClientError):
    """Raised when the endpoint cannot be reached or the request times out."""
    pass


class ReasoningApiError(ReasoningClientError):
    """Raised when the endpoint answers with a non-success status."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class DesktopUnsupportedError(Exception):
    """Raised when desktop control is not available on this platform."""
    pass


class GuideNotFoundError(Exception):
    """Raised when a guide file does not exist."""
    pass


class GuidePathError(Exception):
    """Raised when a guide path is a directory or escapes the guide root."""
    pass


class GuideCreationError(Exception):
    """Raised when the model output cannot be turned into a guide."""
    pass


class PromptTemplateError(Exception):
    """Raised when a prompt template fails to render."""
    pass

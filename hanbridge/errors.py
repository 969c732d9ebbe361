"""
Errors - Exception hierarchy for the translation assistant

ValidationError is raised before any provider is called.
ProviderError is fatal for translate/back-translate and degraded elsewhere.
ParseError never leaves the json_parsing boundary.
"""

from typing import Optional


class HanbridgeError(Exception):
    """Base class for all assistant errors"""


class ValidationError(HanbridgeError):
    """Rejected input (empty text, malformed profile payload)"""


class ProviderError(HanbridgeError):
    """Network/auth/quota/timeout failure from a translation backend"""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        cause: Optional[BaseException] = None
    ):
        super().__init__(message)
        self.provider = provider
        self.cause = cause


class FormalityNotSupportedError(ProviderError):
    """Backend rejected the formality parameter for this language pair"""


class ParseError(HanbridgeError):
    """Malformed JSON from a generative backend"""


class ProfileNotFoundError(HanbridgeError):
    """No profile with the requested id"""


class ProfileProtectedError(HanbridgeError):
    """Built-in profiles cannot be deleted or overwritten"""

#!/usr/bin/env python3
"""
backpack.tf Client Exception Classes
"""

DEFAULT_ERROR_MESSAGE = "An error occurred"


class BackpackTFError(Exception):
    """Base exception for all client errors"""

    def __init__(self, message: str = DEFAULT_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(BackpackTFError):
    """Raised when the session has no identity or the site bounced us to the login provider"""

    def __init__(self, message: str = "Not logged in"):
        super().__init__(message)


class ValidationError(BackpackTFError):
    """Raised when the site accepted the request but rejected its content"""

    def __init__(self, message: str):
        # Never surface a blank message
        super().__init__(message.strip() or DEFAULT_ERROR_MESSAGE)


class ExtractionError(BackpackTFError):
    """Raised when expected markup is missing from an otherwise successful page"""
    pass


class KeyNotFoundError(ExtractionError):
    """Raised when the API key field cannot be found"""

    def __init__(self, message: str = "Could not find API key"):
        super().__init__(message)


class TransportError(BackpackTFError):
    """Raised when the HTTP request itself fails"""
    pass


class LoginFailedError(BackpackTFError):
    """Raised when the login handshake does not complete"""
    pass


class CookieError(BackpackTFError):
    """Raised when no cookie in a batch could be parsed"""
    pass


class ConfigurationError(BackpackTFError):
    """Raised when the client configuration is invalid"""
    pass

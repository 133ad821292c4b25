"""Custom exception classes for the Auditor service."""


class AuditorException(Exception):
    """
    Base exception class for all Auditor errors.
    """
    pass


class BadRequestError(AuditorException):
    """
    Raised when a request is missing a parameter or carries an invalid one.
    """
    pass


class UserAlreadyExistsError(AuditorException):
    """
    Raised when attempting to register a username that already exists.
    """
    pass


class InvalidCredentialsError(AuditorException):
    """
    Raised when login credentials are invalid.
    """
    pass


class InvalidAPIKeyError(AuditorException):
    """
    Raised when an API Key is missing, malformed or unknown.
    """
    pass


class InvalidNonceError(AuditorException):
    """
    Raised when a request's anti-forgery nonce fails verification.
    """
    pass


class PermissionDeniedError(AuditorException):
    """
    Raised when the caller lacks the network administration capability.
    """
    pass


class SiteNotFoundError(AuditorException):
    """
    Raised when a site id does not match any site in the network.
    """
    pass


class InventoryError(AuditorException):
    """
    Raised when collecting or exporting an inventory fails unexpectedly.

    The message is safe to show to the caller; the underlying cause is
    chained and logged, never returned.
    """

    def __init__(self, message: str, code: str = "ERROR_LOADING"):
        super().__init__(message)
        self.code = code

# ABOUTME: Custom exceptions for public contact submissions.
# ABOUTME: Raised when a validated message could not be written.

from portfolio_cms.errors import PortfolioCMSError


class ContactError(PortfolioCMSError):
    """Exception raised when a contact message could not be stored."""

    pass

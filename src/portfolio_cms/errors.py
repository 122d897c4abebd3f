# ABOUTME: Base exception class for portfolio-cms application errors.
# ABOUTME: Provides a common base for all custom exceptions in the application.


class PortfolioCMSError(Exception):
    """Base exception for all portfolio-cms errors.

    This is the root exception class for the application. All custom
    exceptions should inherit from this class to enable unified
    error handling throughout the CLI.
    """

    pass

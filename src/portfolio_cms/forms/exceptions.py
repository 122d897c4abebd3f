# ABOUTME: Exception raised when submitted form data fails validation.
# ABOUTME: Carries one message per offending field for inline display.

from portfolio_cms.errors import PortfolioCMSError


class FormValidationError(PortfolioCMSError):
    """Raised before any remote call when form input is invalid.

    Attributes:
        errors: Field name to human-readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid form fields: {fields}")
        self.errors = errors

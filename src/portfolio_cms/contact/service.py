# ABOUTME: Public contact and hire-me submissions stored as contact messages.
# ABOUTME: Validates the form before writing; invalid input never reaches the database.

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from portfolio_cms.contact.exceptions import ContactError
from portfolio_cms.database import DatabaseService
from portfolio_cms.forms import ContactForm, HireMeForm, validate_form
from portfolio_cms.models import ContactMessage, MessageStatus
from portfolio_cms.sync.notifications import Notifier

logger = logging.getLogger(__name__)


class ContactService:
    """Accepts messages from site visitors."""

    def __init__(self, db_service: DatabaseService, notifier: Notifier | None = None) -> None:
        self._db_service = db_service
        self.notifier = notifier if notifier is not None else Notifier()

    def submit(self, payload: dict[str, Any]) -> ContactMessage:
        """Validate a contact form and store it as an unread message.

        Args:
            payload: Raw form fields: name, email, subject, message.

        Returns:
            The stored message.

        Raises:
            FormValidationError: If a field is missing or the email is malformed.
            ContactError: If the message could not be saved.
        """
        form = validate_form(ContactForm, payload)
        return self._store(form)

    def submit_hire_me(self, payload: dict[str, Any]) -> ContactMessage:
        """Validate a hire-me request and store it as a contact message.

        Raises:
            FormValidationError: If a field is missing or the email is malformed.
            ContactError: If the message could not be saved.
        """
        form = validate_form(HireMeForm, payload)
        return self._store(form.to_contact_form())

    def _store(self, form: ContactForm) -> ContactMessage:
        try:
            message = self._db_service.insert_row(
                ContactMessage(**form.model_dump(), status=MessageStatus.UNREAD)
            )
        except SQLAlchemyError as e:
            logger.error("Failed to store contact message from %s: %s", form.email, e)
            self.notifier.error(
                "Message not sent", "Sorry, your message could not be sent. Please try again."
            )
            raise ContactError(f"Could not save your message: {e}") from e
        logger.info("Stored contact message %s from %s", message.id, form.email)
        self.notifier.success("Message sent", "Thank you! Your message has been sent.")
        return message

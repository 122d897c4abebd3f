# ABOUTME: Contact package accepting public contact and hire-me submissions.
# ABOUTME: Exports ContactService and ContactError.

from portfolio_cms.contact.exceptions import ContactError
from portfolio_cms.contact.service import ContactService

__all__ = ["ContactError", "ContactService"]

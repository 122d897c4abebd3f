# ABOUTME: Forms package with validation for admin editors and public submissions.
# ABOUTME: Exports the form models, validate_form and FormValidationError.

from portfolio_cms.forms.exceptions import FormValidationError
from portfolio_cms.forms.models import (
    CertificationForm,
    ContactForm,
    HireMeForm,
    ProfileForm,
    ProjectForm,
    RegistrationForm,
    SettingForm,
    SkillForm,
    TimelineForm,
)
from portfolio_cms.forms.validators import validate_form

__all__ = [
    "CertificationForm",
    "ContactForm",
    "FormValidationError",
    "HireMeForm",
    "ProfileForm",
    "ProjectForm",
    "RegistrationForm",
    "SettingForm",
    "SkillForm",
    "TimelineForm",
    "validate_form",
]

"""Onboarding flow."""

from .consent import (
    ConsentRouteParams,
    ConsentScreen,
    ConsentValidationError,
    Dialog,
    DialogAction,
    InvalidBirthYearError,
    MissingConsentError,
    Navigator,
    UnderAgeError,
    validate_consent,
)

__all__ = [
    "ConsentRouteParams",
    "ConsentScreen",
    "ConsentValidationError",
    "Dialog",
    "DialogAction",
    "InvalidBirthYearError",
    "MissingConsentError",
    "Navigator",
    "UnderAgeError",
    "validate_consent",
]

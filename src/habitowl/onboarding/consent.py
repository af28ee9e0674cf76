"""Consent and age gate for onboarding.

Validation runs in a fixed order and stops at the first failure:

1. Birth year is exactly four digits within [1900, current year].
2. Age (current year - birth year) is at least 13. Under-13 users are
   blocked with no way forward (COPPA).
3. Terms of service, privacy policy and data processing are all accepted.
   Marketing is optional.

Only then is a `ConsentPayload` built and handed to the auth screen.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from ..models.consent import ConsentHandoff, ConsentPayload, ConsentSelections

logger = logging.getLogger(__name__)

MIN_BIRTH_YEAR = 1900
MINIMUM_AGE = 13
AUTH_ROUTE = "Auth"

_BIRTH_YEAR_PATTERN = re.compile(r"[0-9]{4}")


# =============================================================================
# Errors
# =============================================================================


class ConsentValidationError(Exception):
    """A consent submission was rejected."""

    title = "Error"
    recoverable = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidBirthYearError(ConsentValidationError):
    title = "Invalid Birth Year"

    def __init__(self) -> None:
        super().__init__("Please enter a valid 4-digit birth year (e.g., 1990)")


class UnderAgeError(ConsentValidationError):
    title = "Age Requirement"
    recoverable = False

    def __init__(self, age: int) -> None:
        super().__init__(
            "Sorry, you must be at least 13 years old to use HabitOwl. "
            "This is required by COPPA (Children's Online Privacy Protection Act)."
        )
        self.age = age


class MissingConsentError(ConsentValidationError):
    title = "Required Consents"

    def __init__(self) -> None:
        super().__init__(
            "Please accept the Terms of Service, Privacy Policy, "
            "and Data Processing consent to continue."
        )


# =============================================================================
# Validation
# =============================================================================


def is_valid_birth_year(value: str, current_year: int) -> bool:
    """Exactly four ASCII digits, between 1900 and the current year."""
    if not _BIRTH_YEAR_PATTERN.fullmatch(value or ""):
        return False
    return MIN_BIRTH_YEAR <= int(value) <= current_year


def calculate_age(birth_year: int, current_year: int) -> int:
    return current_year - birth_year


def validate_consent(
    birth_year: str,
    selections: ConsentSelections,
    now: datetime,
) -> ConsentPayload:
    """Validate a consent submission.

    Raises:
        InvalidBirthYearError: Birth year is malformed or out of range
        UnderAgeError: User is younger than 13
        MissingConsentError: A required consent is unchecked
    """
    if not is_valid_birth_year(birth_year, now.year):
        raise InvalidBirthYearError()

    year = int(birth_year)
    age = calculate_age(year, now.year)
    if age < MINIMUM_AGE:
        raise UnderAgeError(age)

    if not selections.required_accepted:
        raise MissingConsentError()

    return ConsentPayload(
        birth_year=year,
        age=age,
        consents=selections.model_copy(),
        consent_date=now,
    )


# =============================================================================
# Screen
# =============================================================================


class Navigator(Protocol):
    """Navigation surface used by the screen."""

    def navigate(self, route: str, params: dict[str, Any]) -> None:
        ...

    def go_back(self) -> None:
        ...


@dataclass(frozen=True)
class DialogAction:
    text: str
    on_press: Optional[Callable[[], None]] = None
    style: str = "default"


@dataclass(frozen=True)
class Dialog:
    """Blocking modal shown to the user."""

    title: str
    message: str
    actions: tuple[DialogAction, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ConsentRouteParams:
    """Params the consent screen is opened with."""

    user_email: Optional[str] = None
    user_name: Optional[str] = None
    auth_method: Optional[str] = None


class ConsentScreen:
    """State and submit handling of the consent screen.

    Example:
        screen = ConsentScreen(navigator, ConsentRouteParams(user_email="a@b.c"))
        screen.set_birth_year("1995")
        for key in ("terms_of_service", "privacy_policy", "data_processing"):
            screen.toggle_consent(key)
        dialog = screen.handle_continue()  # None on success
    """

    def __init__(
        self,
        navigator: Navigator,
        params: Optional[ConsentRouteParams] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._navigator = navigator
        self.params = params or ConsentRouteParams()
        self._clock = clock

        self.birth_year = ""
        self.consents = ConsentSelections()
        self.is_loading = False

    def set_birth_year(self, value: str) -> None:
        """Update the birth year input (limited to four characters)."""
        self.birth_year = value[:4]

    def toggle_consent(self, key: str) -> None:
        """Flip one consent checkbox.

        Raises:
            KeyError: If `key` is not a consent field
        """
        if key not in ConsentSelections.model_fields:
            raise KeyError(key)
        current = getattr(self.consents, key)
        self.consents = self.consents.model_copy(update={key: not current})

    @property
    def age_preview(self) -> Optional[int]:
        """Age shown under the input once the birth year is valid."""
        current_year = self._clock().year
        if not is_valid_birth_year(self.birth_year, current_year):
            return None
        return calculate_age(int(self.birth_year), current_year)

    @property
    def is_under_13(self) -> bool:
        if not _BIRTH_YEAR_PATTERN.fullmatch(self.birth_year):
            return False
        return calculate_age(int(self.birth_year), self._clock().year) < MINIMUM_AGE

    def handle_continue(self) -> Optional[Dialog]:
        """Validate and hand the consent forward.

        Returns:
            None once the auth screen has been opened, otherwise the dialog
            to display
        """
        try:
            payload = validate_consent(self.birth_year, self.consents, self._clock())
        except UnderAgeError as e:
            logger.info("Onboarding blocked for under-13 user (age %d)", e.age)
            return Dialog(
                title=e.title,
                message=e.message,
                actions=(
                    DialogAction("Exit", on_press=self._navigator.go_back, style="cancel"),
                ),
            )
        except ConsentValidationError as e:
            return Dialog(title=e.title, message=e.message, actions=(DialogAction("OK"),))

        handoff = ConsentHandoff(
            consent_data=payload,
            user_email=self.params.user_email,
            user_name=self.params.user_name,
            auth_method=self.params.auth_method,
        )

        self.is_loading = True
        try:
            self._navigator.navigate(AUTH_ROUTE, handoff.to_params())
        except Exception as e:
            logger.error("Consent error: %s", e)
            return Dialog(
                title="Error",
                message="Something went wrong. Please try again.",
                actions=(DialogAction("OK"),),
            )
        finally:
            self.is_loading = False

        return None

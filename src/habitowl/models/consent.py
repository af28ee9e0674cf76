"""Consent models for the onboarding flow.

Field names are snake_case in Python and camelCase on the navigation
boundary, which is what the auth screen reads.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _NavigationModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConsentSelections(_NavigationModel):
    """Checkbox state of the consent screen."""

    terms_of_service: bool = False
    privacy_policy: bool = False
    data_processing: bool = False
    marketing: bool = False  # Optional

    @property
    def required_accepted(self) -> bool:
        """Whether every required consent is checked."""
        return self.terms_of_service and self.privacy_policy and self.data_processing


class ConsentPayload(_NavigationModel):
    """Consent collected during one onboarding flow."""

    model_config = ConfigDict(frozen=True)

    birth_year: int
    age: int
    consents: ConsentSelections
    consent_date: datetime


class ConsentHandoff(_NavigationModel):
    """Route params passed to the auth screen once consent is complete."""

    consent_completed: bool = True
    consent_data: ConsentPayload
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    auth_method: Optional[str] = None

    def to_params(self) -> dict[str, Any]:
        """Serialize with the camelCase keys of the navigation contract."""
        return self.model_dump(by_alias=True, mode="json")

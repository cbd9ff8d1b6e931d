"""
Age compliance: legal minimum age per jurisdiction and validation of a
verification attempt. Pure; the caller persists the outcome.
"""
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from lado.compliance.config import get_default_minimum_age, get_minimum_age_overrides
from lado.core.errors import UnderMinimumAge

# Legal minimum age by ISO 3166-1 alpha-2 code. Unlisted codes use the default.
MINIMUM_AGE_BY_COUNTRY: dict[str, int] = {
    "CL": 18,  # Chile
    "US": 18,  # United States
    "MX": 18,  # Mexico
    "AR": 18,  # Argentina
    "CO": 18,  # Colombia
    "ES": 18,  # Spain
    "PE": 18,  # Peru
    "KR": 19,  # South Korea
    "JP": 20,  # Japan
}


class VerifiedRecord(BaseModel):
    user_id: str
    birth_date: date
    country: str
    age: int
    verified_at: datetime

    model_config = {"frozen": True}


def normalize_country(country_code: str) -> str:
    return (country_code or "").strip().upper()


def minimum_age(country_code: str) -> int:
    code = normalize_country(country_code)
    overrides = get_minimum_age_overrides()
    if code in overrides:
        return overrides[code]
    return MINIMUM_AGE_BY_COUNTRY.get(code, get_default_minimum_age())


def compute_age(birth_date: date, today: date) -> int:
    """Whole years lived as of ``today``."""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def verify(user, birth_date: date, country: str, now: datetime) -> VerifiedRecord:
    """
    Validate a verification attempt for ``user`` (anything with an ``id``).
    Raises UnderMinimumAge carrying the jurisdiction's minimum.
    """
    code = normalize_country(country)
    age = compute_age(birth_date, now.date())
    required = minimum_age(code)
    if age < required:
        raise UnderMinimumAge(required=required, age=age)
    return VerifiedRecord(
        user_id=str(user.id),
        birth_date=birth_date,
        country=code,
        age=age,
        verified_at=now,
    )

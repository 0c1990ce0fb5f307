from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

MIN_ORG_LENGTH = 2


class SubmissionValidationError(ValueError):
    """A submission the respondent can fix and resend."""


class SubmissionIn(BaseModel):
    org: str | None = None
    email: str | None = None
    ratings: dict[str, Any] = Field(default_factory=dict)
    qualitative: dict[str, Any] = Field(default_factory=dict)


class ScoreRequest(BaseModel):
    ratings: Any = None


@dataclass(frozen=True)
class Submission:
    org: str
    email: str
    ratings: dict[str, Any]
    qualitative: dict[str, str]


def clean_qualitative(answers: dict[str, Any] | None) -> dict[str, str]:
    """Trim every answer and drop the blank ones."""
    cleaned = {}
    for key, value in (answers or {}).items():
        if value is None:
            continue
        text = str(value).strip()
        if text:
            cleaned[str(key)] = text
    return cleaned


def validate_submission(payload: SubmissionIn) -> Submission:
    email = (payload.email or "").strip()
    if not email or "@" not in email:
        raise SubmissionValidationError("Valid email required")

    org = (payload.org or "").strip()
    if len(org) < MIN_ORG_LENGTH:
        raise SubmissionValidationError("Organization required")

    return Submission(
        org=org,
        email=email,
        ratings=dict(payload.ratings or {}),
        qualitative=clean_qualitative(payload.qualitative),
    )

"""Checks applied to a set of answers before an evaluation is stored."""

from __future__ import annotations

from typing import Any

from team_sync.evaluations.models import EvaluationForm

RATING_MIN = 1
RATING_MAX = 5


class ResponseError(Exception):
    def __init__(self, error: str, fields: list[str]):
        super().__init__(error)
        self.error = error
        self.fields = fields

    def as_payload(self) -> dict[str, Any]:
        return {"error": self.error, "fields": self.fields}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _as_rating(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        rating = value
    elif isinstance(value, str) and value.strip().isdigit():
        rating = int(value.strip())
    else:
        return None
    return rating if RATING_MIN <= rating <= RATING_MAX else None


def clean_responses(form: EvaluationForm, responses: dict[str, Any]) -> dict[str, Any]:
    """Return the answers keyed by field label, or raise :class:`ResponseError`.

    Labels not on the form are dropped. Ratings are stored as integers.
    """
    missing = [
        field["label"]
        for field in form.fields
        if field.get("required", True) and _is_blank(responses.get(field["label"]))
    ]
    if missing:
        raise ResponseError("Missing required fields", missing)

    cleaned: dict[str, Any] = {}
    bad_ratings: list[str] = []
    for field in form.fields:
        label = field["label"]
        if _is_blank(responses.get(label)):
            continue
        value = responses[label]
        if field.get("type") == EvaluationForm.FieldType.RATING:
            rating = _as_rating(value)
            if rating is None:
                bad_ratings.append(label)
                continue
            value = rating
        cleaned[label] = value
    if bad_ratings:
        raise ResponseError(
            f"Ratings must be whole numbers from {RATING_MIN} to {RATING_MAX}",
            bad_ratings,
        )
    return cleaned

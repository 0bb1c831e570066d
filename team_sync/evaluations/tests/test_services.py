import pytest

from team_sync.evaluations.models import EvaluationForm
from team_sync.evaluations.services import ResponseError
from team_sync.evaluations.services import clean_responses


@pytest.fixture
def form():
    return EvaluationForm(
        title="Demo",
        description="-",
        fields=[
            {"type": "rating", "label": "Clarity", "required": True},
            {"type": "rating", "label": "Depth", "required": False},
            {"type": "text", "label": "Comments", "required": False},
        ],
    )


def test_clean_responses_keeps_known_labels(form):
    cleaned = clean_responses(
        form,
        {"Clarity": "4", "Comments": "Nice", "Extra": "dropped"},
    )
    assert cleaned == {"Clarity": 4, "Comments": "Nice"}


def test_missing_required_labels_reported(form):
    with pytest.raises(ResponseError) as exc:
        clean_responses(form, {"Clarity": "  ", "Depth": 3})
    assert exc.value.as_payload() == {
        "error": "Missing required fields",
        "fields": ["Clarity"],
    }


@pytest.mark.parametrize("value", [0, 6, True, 2.5, "five"])
def test_ratings_must_be_whole_numbers_in_range(form, value):
    with pytest.raises(ResponseError) as exc:
        clean_responses(form, {"Clarity": value})
    assert exc.value.fields == ["Clarity"]

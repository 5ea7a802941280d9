from datetime import datetime, timedelta, timezone

from app.schemas.forms import FormDefinition
from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring
from app.services.leaderboard import (
    DEFAULT_DISPLAY_NAME,
    EMPTY_MESSAGE,
    build_leaderboard,
    extract_display_name,
    leaderboard_view,
    unavailable_leaderboard,
)

BASE_TIME = datetime(2024, 12, 22, 9, 0, tzinfo=timezone.utc)

FORM = FormDefinition.model_validate(
    {
        "id": "quiz",
        "title": "प्रश्नोत्तरी",
        "fields": [
            {"id": "participant_name", "label": "प्रतिभागी का नाम", "type": "short_text"},
            {"id": "q1", "label": "1 + 1 = ?", "type": "short_text"},
        ],
    }
)


def _response(response_id, name, score, max_score, minutes=None):
    return FormResponse(
        id=response_id,
        answers={"participant_name": name},
        submitted_at=BASE_TIME + timedelta(minutes=minutes) if minutes is not None else None,
        scoring=QuizScoring(total_score=score, max_score=max_score, evaluations=[]),
    )


def test_ranks_by_score_then_earliest_submission():
    responses = [
        _response("b", "B", 8, 10, minutes=2),
        _response("a", "A", 8, 10, minutes=1),
        _response("c", "C", 10, 10, minutes=0),
    ]
    entries = build_leaderboard(responses, FORM)
    assert [entry.name for entry in entries] == ["C", "A", "B"]
    assert entries[0].score == 10
    assert entries[0].max_score == 10


def test_missing_timestamp_sorts_last_among_ties():
    responses = [
        _response("undated", "U", 5, 10),
        _response("dated", "D", 5, 10, minutes=30),
    ]
    assert [entry.id for entry in build_leaderboard(responses, FORM)] == ["dated", "undated"]


def test_unscored_responses_are_excluded():
    responses = [
        _response("zero-max", "Z", 3, 0, minutes=0),
        FormResponse(id="no-scoring", answers={"participant_name": "N"}, submitted_at=BASE_TIME),
        _response("ok", "O", 1, 10, minutes=1),
    ]
    assert [entry.id for entry in build_leaderboard(responses, FORM)] == ["ok"]


def test_only_top_five_are_returned():
    responses = [_response(str(index), f"P{index}", index, 10, minutes=index) for index in range(8)]
    entries = build_leaderboard(responses, FORM)
    assert [entry.score for entry in entries] == [7, 6, 5, 4, 3]
    assert len(build_leaderboard(responses, FORM, limit=2)) == 2


def test_display_name_prefers_well_known_ids():
    fields = FORM.fields
    assert extract_display_name({"student_name": " मीरा ", "name": "x"}, fields) == "मीरा"
    assert extract_display_name({"participant_name": "  ", "full_name": "Ravi"}, fields) == "Ravi"


def test_display_name_falls_back_to_name_like_field():
    form = FormDefinition.model_validate(
        {
            "id": "quiz",
            "title": "प्रश्नोत्तरी",
            "fields": [
                {"id": "q1", "label": "1 + 1 = ?", "type": "short_text"},
                {"id": "vidyarthi", "label": "विद्यार्थी का नाम", "type": "short_text"},
            ],
        }
    )
    assert extract_display_name({"vidyarthi": "अनन्या"}, form.fields) == "अनन्या"
    assert extract_display_name({"vidyarthi": ""}, form.fields) == DEFAULT_DISPLAY_NAME
    assert extract_display_name({}, []) == DEFAULT_DISPLAY_NAME


def test_leaderboard_views():
    empty = leaderboard_view([])
    assert empty.available
    assert empty.message == EMPTY_MESSAGE

    unavailable = unavailable_leaderboard()
    assert not unavailable.available
    assert unavailable.entries == []
    assert unavailable.message

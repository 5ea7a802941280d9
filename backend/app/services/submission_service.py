import logging
from typing import Any, Dict, List, Mapping, Optional

from app.schemas.forms import FieldType, FormDefinition
from app.schemas.responses import LeaderboardResponse, QuestionFeedback, ScoreSummary
from app.schemas.scoring import QuizScoring
from app.services.form_catalog import FormServiceError, collect_all_fields
from app.services.leaderboard import build_leaderboard, leaderboard_view, unavailable_leaderboard
from app.services.provider_factory import ServiceContainer

logger = logging.getLogger(__name__)
REQUIRED_MESSAGE = "यह आवश्यक है।"
SUBMIT_FAILED_MESSAGE = "सबमिट करते समय समस्या हुई। बाद में पुनः प्रयास करें।"


class SubmissionError(FormServiceError):
    pass


def find_missing_required(form: FormDefinition, answers: Mapping[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for field in collect_all_fields(form):
        if not field.required or field.id in errors:
            continue
        value = answers.get(field.id)
        if field.type == FieldType.checkbox:
            if not isinstance(value, list) or len(value) == 0:
                errors[field.id] = REQUIRED_MESSAGE
        elif not _has_value(value):
            errors[field.id] = REQUIRED_MESSAGE
    return errors


def _has_value(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def build_payload(form: FormDefinition, answers: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep only known field ids, shaped by field type."""
    payload: Dict[str, Any] = {}
    for field in collect_all_fields(form):
        if field.id in payload:
            continue
        value = answers.get(field.id)
        if field.type == FieldType.checkbox:
            payload[field.id] = list(value) if isinstance(value, list) else []
        elif isinstance(value, str):
            payload[field.id] = value.strip()
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            payload[field.id] = value
        else:
            payload[field.id] = ""
    return payload


def build_score_summary(scoring: QuizScoring) -> Optional[ScoreSummary]:
    if scoring.max_score <= 0:
        return None
    correct_count = sum(1 for evaluation in scoring.evaluations if evaluation.is_correct)
    total_questions = len(scoring.evaluations)
    points_per_question = scoring.max_score / total_questions if total_questions > 0 else 1.0
    return ScoreSummary(
        total=scoring.total_score,
        max=scoring.max_score,
        correct_count=correct_count,
        total_questions=total_questions,
        points_per_question=points_per_question,
    )


def build_question_feedback(form: FormDefinition, scoring: QuizScoring) -> List[QuestionFeedback]:
    labels = {}
    for field in collect_all_fields(form):
        labels.setdefault(field.id, field.label)
    return [
        QuestionFeedback(
            field_id=evaluation.field_id,
            label=labels.get(evaluation.field_id) or evaluation.field_id,
            is_correct=evaluation.is_correct,
            user_answer=evaluation.user_answer,
            correct_answer=evaluation.correct_answer,
        )
        for evaluation in scoring.evaluations
    ]


async def load_leaderboard(services: ServiceContainer, form: FormDefinition) -> LeaderboardResponse:
    try:
        responses = await services.responses.fetch_all(form.id)
        entries = build_leaderboard(responses, form, services.settings.leaderboard_size)
    except Exception:
        logger.exception("Leaderboard recompute failed for form %s.", form.id)
        return unavailable_leaderboard()
    return leaderboard_view(entries)


async def submit_form_response(
    services: ServiceContainer,
    form_id: str,
    answers: Optional[Mapping[str, Any]],
) -> Dict[str, Any]:
    form = services.catalog.require_form(form_id)
    answers = answers or {}

    field_errors = find_missing_required(form, answers)
    if field_errors:
        raise SubmissionError(422, "Required fields are missing", {"field_errors": field_errors})

    payload = build_payload(form, answers)
    scoring = services.evaluator.evaluate(form, payload)

    result = await services.responses.persist(form_id, payload, scoring)
    if not result.ok:
        raise SubmissionError(503, SUBMIT_FAILED_MESSAGE, {"form_id": form_id, "reason": result.reason})

    leaderboard = await load_leaderboard(services, form)
    score_summary = build_score_summary(scoring)

    return {
        "response_id": result.response_id,
        "stored_in": result.status.value,
        "scoring": scoring,
        "score_summary": score_summary,
        "score_unavailable": score_summary is None,
        "question_feedback": build_question_feedback(form, scoring),
        "leaderboard": leaderboard,
    }

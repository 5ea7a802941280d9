import logging
from typing import Any, List, Mapping, Optional, Union

from app.schemas.forms import FormDefinition, FormField
from app.schemas.scoring import FieldEvaluation, QuizScoring
from app.services.answer_comparator import compare_answers
from app.services.answer_normalizer import display_answer, normalize_answer
from app.services.form_catalog import AnswerKey, collect_quiz_fields

logger = logging.getLogger(__name__)
POINTS_PER_QUESTION = 1


def _build_evaluation(
    field: FormField,
    expected: Union[str, List[str]],
    answers: Mapping[str, Any],
) -> FieldEvaluation:
    answer = normalize_answer(answers.get(field.id))
    is_correct = compare_answers(field, expected, answer)
    return FieldEvaluation(
        field_id=field.id,
        is_correct=is_correct,
        awarded_score=POINTS_PER_QUESTION if is_correct else 0,
        max_score=POINTS_PER_QUESTION,
        correct_answer=list(expected) if isinstance(expected, list) else expected,
        user_answer=display_answer(answer),
    )


class QuizEvaluator:
    """Scores submissions against the answer keys it was built with.

    A form without a key is "not scorable" and yields an empty scoring with
    ``max_score == 0``. Fields missing from a key are left out of scoring.
    Malformed or absent answers count as incorrect; evaluation never raises
    for submission content.
    """

    def __init__(self, answer_keys: Mapping[str, AnswerKey]):
        self._answer_keys = answer_keys

    def get_answer_key(self, form_id: str) -> Optional[AnswerKey]:
        return self._answer_keys.get(form_id)

    def evaluate(self, form: FormDefinition, answers: Optional[Mapping[str, Any]]) -> QuizScoring:
        answers = answers if isinstance(answers, Mapping) else {}
        answer_key = self.get_answer_key(form.id)
        if not answer_key:
            return QuizScoring(total_score=0, max_score=0, evaluations=[])

        quiz_fields = collect_quiz_fields(form)
        keyed_fields = [field for field in quiz_fields if answer_key.get(field.id) is not None]
        unscored = [field.id for field in quiz_fields if answer_key.get(field.id) is None]
        if unscored:
            logger.debug("Form %s has fields without answer key entries: %s", form.id, unscored)

        evaluations = [_build_evaluation(field, answer_key[field.id], answers) for field in keyed_fields]
        total_score = sum(evaluation.awarded_score for evaluation in evaluations)
        max_score = sum(evaluation.max_score for evaluation in evaluations)
        return QuizScoring(total_score=total_score, max_score=max_score, evaluations=evaluations)

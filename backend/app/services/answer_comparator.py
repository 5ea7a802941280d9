from typing import Any, List, Union

from app.schemas.forms import FieldType, FormField
from app.services.answer_normalizer import (
    MultiSelectAnswer,
    SubmittedAnswer,
    TextAnswer,
    normalize_answer,
    normalize_to_string,
)


def _fold(value: str) -> str:
    return value.lower()


def compare_answers(field: FormField, expected: Union[str, List[str]], given: Any) -> bool:
    """Decide whether ``given`` matches the answer key entry for ``field``.

    List keys compare as unordered sets, all or nothing. A single-string key
    on a checkbox field needs exactly one matching selection. Everything
    else is a trimmed, case-insensitive string match.
    """
    answer: SubmittedAnswer
    if isinstance(given, (TextAnswer, MultiSelectAnswer)):
        answer = given
    else:
        answer = normalize_answer(given)

    if isinstance(expected, list):
        expected_set = {_fold(normalize_to_string(entry)) for entry in expected}
        given_values = [_fold(entry) for entry in answer.as_list()]
        if len(given_values) != len(expected_set):
            return False
        return set(given_values) == expected_set

    normalized_expected = _fold(normalize_to_string(expected))

    if field.type == FieldType.checkbox:
        given_values = answer.as_list()
        return len(given_values) == 1 and _fold(given_values[0]) == normalized_expected

    return _fold(answer.as_text()) == normalized_expected

from dataclasses import dataclass
from typing import Any, List, Tuple, Union


@dataclass(frozen=True)
class TextAnswer:
    value: str

    def as_text(self) -> str:
        return self.value

    def as_list(self) -> List[str]:
        return [self.value] if self.value else []


@dataclass(frozen=True)
class MultiSelectAnswer:
    values: Tuple[str, ...]

    def as_text(self) -> str:
        # a selection list never matches a single text answer
        return ""

    def as_list(self) -> List[str]:
        return list(self.values)


SubmittedAnswer = Union[TextAnswer, MultiSelectAnswer]


def normalize_to_string(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return ""


def normalize_to_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        entries = [normalize_to_string(entry) for entry in value]
        return [entry for entry in entries if entry]
    text = normalize_to_string(value)
    return [text] if text else []


def normalize_answer(value: Any) -> SubmittedAnswer:
    if isinstance(value, (list, tuple)):
        return MultiSelectAnswer(tuple(normalize_to_list(value)))
    return TextAnswer(normalize_to_string(value))


def display_answer(answer: SubmittedAnswer) -> Union[str, List[str], None]:
    if isinstance(answer, MultiSelectAnswer):
        return answer.as_list()
    return answer.as_text() or None

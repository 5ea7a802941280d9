from app.schemas.forms import FormField
from app.services.answer_comparator import compare_answers

TEXT_FIELD = FormField(id="capital", label="राजधानी", type="short_text")
RADIO_FIELD = FormField(id="color", label="रंग", type="radio")
CHECKBOX_FIELD = FormField(id="primes", label="अभाज्य", type="checkbox")


def test_single_key_ignores_case_and_whitespace():
    assert compare_answers(TEXT_FIELD, "India", " india ")
    assert compare_answers(RADIO_FIELD, "Blue", "BLUE")
    assert compare_answers(TEXT_FIELD, "22 दिसम्बर", "22 दिसम्बर  ")
    assert not compare_answers(TEXT_FIELD, "India", "Indian")


def test_single_key_matches_numbers():
    assert compare_answers(TEXT_FIELD, "125", 125)
    assert not compare_answers(TEXT_FIELD, "125", 124)


def test_single_key_rejects_missing_or_malformed_values():
    assert not compare_answers(TEXT_FIELD, "India", None)
    assert not compare_answers(TEXT_FIELD, "India", {"value": "India"})
    assert not compare_answers(TEXT_FIELD, "India", ["India"])


def test_list_key_is_an_unordered_set_match():
    assert compare_answers(CHECKBOX_FIELD, ["A", "B"], ["B", "A"])
    assert compare_answers(CHECKBOX_FIELD, ["A", "B"], [" a", "b "])
    assert not compare_answers(CHECKBOX_FIELD, ["A", "B"], ["A"])
    assert not compare_answers(CHECKBOX_FIELD, ["A", "B"], ["A", "B", "C"])
    assert not compare_answers(CHECKBOX_FIELD, ["A", "B"], ["A", "A"])
    assert not compare_answers(CHECKBOX_FIELD, ["A", "B"], [])


def test_list_key_accepts_single_text_for_single_member_key():
    assert compare_answers(TEXT_FIELD, ["A"], "a")
    assert not compare_answers(TEXT_FIELD, ["A"], "")


def test_checkbox_with_single_key_needs_exactly_one_selection():
    assert compare_answers(CHECKBOX_FIELD, "A", ["a"])
    assert compare_answers(CHECKBOX_FIELD, "A", "A")
    assert not compare_answers(CHECKBOX_FIELD, "A", ["A", "B"])
    assert not compare_answers(CHECKBOX_FIELD, "A", [])

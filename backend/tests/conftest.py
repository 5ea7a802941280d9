import pytest

from app.services.form_catalog import FormCatalog
from app.services.quiz_evaluator import QuizEvaluator
from app.services.response_store import ResponseStoreAdapter
from app.services.stores import FallbackStore, MemoryResponseStore

QUIZ_FORM_ID = "sample-quiz"
SURVEY_FORM_ID = "sample-survey"

QUIZ_FORM = {
    "id": QUIZ_FORM_ID,
    "title": "नमूना प्रश्नोत्तरी",
    "order": 2,
    "fields": [
        {"id": "participant_name", "label": "प्रतिभागी का नाम", "type": "short_text", "required": True},
        {"id": "country", "label": "गणितज्ञ किस देश के थे?", "type": "short_text"},
        {
            "id": "color",
            "label": "रंग चुनें",
            "type": "radio",
            "options": [
                {"id": "color-red", "label": "लाल", "value": "Red"},
                {"id": "color-blue", "label": "नीला", "value": "Blue"},
            ],
        },
        {
            "id": "primes",
            "label": "अभाज्य संख्याएँ चुनें",
            "type": "checkbox",
            "options": [
                {"id": "p2", "label": "2", "value": "2"},
                {"id": "p3", "label": "3", "value": "3"},
                {"id": "p4", "label": "4", "value": "4"},
                {"id": "p5", "label": "5", "value": "5"},
            ],
        },
        {
            "id": "single_check",
            "label": "एक विकल्प",
            "type": "checkbox",
            "options": [
                {"id": "sc-a", "label": "A", "value": "A"},
                {"id": "sc-b", "label": "B", "value": "B"},
            ],
        },
        {"id": "notes", "label": "टिप्पणी", "type": "long_text"},
    ],
    "sections": [
        {
            "id": "extra",
            "fields": [
                {
                    "id": "sevens",
                    "label": "3 + 4 = ?",
                    "type": "dropdown",
                    "options": [
                        {"id": "s6", "label": "6", "value": "6"},
                        {"id": "s7", "label": "7", "value": "7"},
                    ],
                },
                {"id": "country", "label": "दोहराया गया प्रश्न", "type": "long_text"},
            ],
        }
    ],
}

SURVEY_FORM = {
    "id": SURVEY_FORM_ID,
    "title": "प्रतिक्रिया",
    "order": 1,
    "fields": [
        {"id": "name", "label": "नाम", "type": "short_text"},
        {"id": "comments", "label": "सुझाव", "type": "long_text"},
    ],
}

QUIZ_KEY = {
    "country": "India",
    "color": "Blue",
    "primes": ["2", "3", "5"],
    "single_check": "A",
    "sevens": "7",
}

PERFECT_ANSWERS = {
    "participant_name": "आरव",
    "country": "india",
    "color": "blue",
    "primes": ["5", "2", "3"],
    "single_check": ["A"],
    "sevens": "7",
}


class FailingStore:
    """Primary store double that is always unreachable."""

    def __init__(self, fail_reads: bool = True):
        self.fail_reads = fail_reads
        self.write_attempts = 0

    async def add_response(self, form_id, answers, scoring):
        self.write_attempts += 1
        raise ConnectionError("primary store unreachable")

    async def list_responses(self, form_id):
        if self.fail_reads:
            raise ConnectionError("primary store unreachable")
        return []


@pytest.fixture
def catalog():
    return FormCatalog.from_payload([QUIZ_FORM, SURVEY_FORM], {QUIZ_FORM_ID: QUIZ_KEY})


@pytest.fixture
def quiz_form(catalog):
    return catalog.require_form(QUIZ_FORM_ID)


@pytest.fixture
def evaluator(catalog):
    return QuizEvaluator(catalog.answer_keys)


@pytest.fixture
def fallback_store():
    return FallbackStore(medium=None)


@pytest.fixture
def adapter(catalog, fallback_store):
    return ResponseStoreAdapter(catalog, MemoryResponseStore(), fallback_store)

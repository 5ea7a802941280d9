import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from app.schemas.forms import FieldType, FormDefinition, FormField, FormSummary

logger = logging.getLogger(__name__)

AnswerKey = Dict[str, Union[str, List[str]]]
SUPPORTED_TYPES = {item.value for item in FieldType}


@dataclass
class FormServiceError(Exception):
    status_code: int
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class FormNotFoundError(FormServiceError):
    def __init__(self, form_id: str) -> None:
        super().__init__(404, "Form not found", {"form_id": form_id})


class FormDefinitionError(RuntimeError):
    pass


def collect_all_fields(form: FormDefinition) -> List[FormField]:
    fields = list(form.fields)
    for section in form.sections or []:
        fields.extend(section.fields)
    return fields


def collect_quiz_fields(form: FormDefinition) -> List[FormField]:
    """Evaluable fields of a form, deduplicated by id (first occurrence wins)."""
    by_id: Dict[str, FormField] = {}
    for field in collect_all_fields(form):
        if field.type.value not in SUPPORTED_TYPES:
            continue
        if field.id not in by_id:
            by_id[field.id] = field
    return list(by_id.values())


def _order_key(form: FormDefinition) -> int:
    return form.order if isinstance(form.order, int) else sys.maxsize


def _parse_answer_key(form_id: str, raw: Any) -> AnswerKey:
    if not isinstance(raw, dict):
        raise FormDefinitionError(f"Answer key for form {form_id} must be an object")
    key: AnswerKey = {}
    for field_id, expected in raw.items():
        if isinstance(expected, list):
            key[str(field_id)] = [str(item) for item in expected]
        elif isinstance(expected, (str, int, float)) and not isinstance(expected, bool):
            key[str(field_id)] = str(expected)
        else:
            raise FormDefinitionError(
                f"Answer key entry {form_id}.{field_id} must be a string or a list of strings"
            )
    return key


class FormCatalog:
    """Static form definitions and answer keys, keyed by form id."""

    def __init__(
        self,
        forms: List[FormDefinition],
        answer_keys: Optional[Mapping[str, AnswerKey]] = None,
    ):
        self._forms = sorted(forms, key=_order_key)
        self._forms_by_id = {form.id: form for form in self._forms}
        self._answer_keys: Dict[str, AnswerKey] = {}
        for form_id, key in (answer_keys or {}).items():
            form = self._forms_by_id.get(form_id)
            if form is None:
                logger.warning("Answer key registered for unknown form %s; ignoring it.", form_id)
                continue
            known_ids = {field.id for field in collect_all_fields(form)}
            unknown_ids = sorted(set(key) - known_ids)
            if unknown_ids:
                logger.warning(
                    "Answer key for form %s references unknown fields: %s",
                    form_id,
                    ", ".join(unknown_ids),
                )
            self._answer_keys[form_id] = dict(key)

    @classmethod
    def from_payload(cls, forms_payload: Any, keys_payload: Any = None) -> "FormCatalog":
        if not isinstance(forms_payload, list):
            raise FormDefinitionError("Form definitions must be a list")
        forms: List[FormDefinition] = []
        for raw in forms_payload:
            try:
                forms.append(FormDefinition.model_validate(raw))
            except ValidationError as exc:
                form_id = raw.get("id") if isinstance(raw, dict) else None
                raise FormDefinitionError(f"Invalid form definition {form_id}: {exc}") from exc
        answer_keys: Dict[str, AnswerKey] = {}
        if keys_payload:
            if not isinstance(keys_payload, dict):
                raise FormDefinitionError("Answer keys must be an object keyed by form id")
            for form_id, raw_key in keys_payload.items():
                answer_keys[str(form_id)] = _parse_answer_key(str(form_id), raw_key)
        return cls(forms, answer_keys)

    @classmethod
    def from_files(cls, forms_path: str, answer_keys_path: Optional[str] = None) -> "FormCatalog":
        with Path(forms_path).open("r", encoding="utf-8") as handle:
            forms_payload = json.load(handle)
        keys_payload = None
        if answer_keys_path and Path(answer_keys_path).exists():
            with Path(answer_keys_path).open("r", encoding="utf-8") as handle:
                keys_payload = json.load(handle)
        elif answer_keys_path:
            logger.warning("Answer key file %s not found. All forms are unscored.", answer_keys_path)
        catalog = cls.from_payload(forms_payload, keys_payload)
        logger.info(
            "Loaded %s forms (%s with answer keys) from %s",
            len(catalog._forms),
            len(catalog._answer_keys),
            forms_path,
        )
        return catalog

    def has_form(self, form_id: str) -> bool:
        return form_id in self._forms_by_id

    def list_forms(self) -> List[FormDefinition]:
        return [form.model_copy(deep=True) for form in self._forms]

    def list_summaries(self) -> List[FormSummary]:
        return [
            FormSummary(
                id=form.id,
                title=form.title,
                description=form.description,
                order=form.order,
                is_quiz=form.id in self._answer_keys,
            )
            for form in self._forms
        ]

    def get_form(self, form_id: str) -> Optional[FormDefinition]:
        form = self._forms_by_id.get(form_id)
        return form.model_copy(deep=True) if form else None

    def require_form(self, form_id: str) -> FormDefinition:
        form = self.get_form(form_id)
        if form is None:
            raise FormNotFoundError(form_id)
        return form

    def get_answer_key(self, form_id: str) -> Optional[AnswerKey]:
        key = self._answer_keys.get(form_id)
        return dict(key) if key is not None else None

    @property
    def answer_keys(self) -> Dict[str, AnswerKey]:
        return {form_id: dict(key) for form_id, key in self._answer_keys.items()}

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FieldType(str, Enum):
    short_text = "short_text"
    long_text = "long_text"
    radio = "radio"
    checkbox = "checkbox"
    dropdown = "dropdown"


class FormFieldOption(BaseModel):
    id: str
    label: str
    value: str


class FormField(BaseModel):
    id: str = Field(..., min_length=1)
    label: str
    helper_text: Optional[str] = None
    type: FieldType
    required: bool = False
    options: Optional[List[FormFieldOption]] = None


class FormSection(BaseModel):
    id: str
    title: Optional[str] = None
    fields: List[FormField] = Field(default_factory=list)


class FormDefinition(BaseModel):
    id: str = Field(..., min_length=1)
    title: str
    description: Optional[str] = None
    fields: List[FormField] = Field(default_factory=list)
    sections: Optional[List[FormSection]] = None
    order: Optional[int] = None


class FormSummary(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    order: Optional[int] = None
    is_quiz: bool = False

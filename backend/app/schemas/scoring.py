from typing import List, Optional, Union

from pydantic import BaseModel, Field

ExpectedAnswer = Union[str, List[str]]


class FieldEvaluation(BaseModel):
    field_id: str
    is_correct: bool
    awarded_score: int = Field(..., ge=0)
    max_score: int = Field(..., ge=0)
    correct_answer: Optional[ExpectedAnswer] = None
    user_answer: Optional[ExpectedAnswer] = None


class QuizScoring(BaseModel):
    total_score: int = Field(0, ge=0)
    max_score: int = Field(0, ge=0)
    evaluations: List[FieldEvaluation] = Field(default_factory=list)

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.scoring import ExpectedAnswer, QuizScoring


class FormResponse(BaseModel):
    id: str
    answers: Dict[str, Any] = Field(default_factory=dict)
    submitted_at: Optional[datetime] = None
    scoring: Optional[QuizScoring] = None


class FormSubmitRequest(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)


class ScoreSummary(BaseModel):
    total: int
    max: int
    correct_count: int
    total_questions: int
    points_per_question: float


class QuestionFeedback(BaseModel):
    field_id: str
    label: str
    is_correct: bool
    user_answer: Optional[ExpectedAnswer] = None
    correct_answer: Optional[ExpectedAnswer] = None


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    score: int
    max_score: int
    submitted_at: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    entries: List[LeaderboardEntry] = Field(default_factory=list)
    available: bool = True
    message: Optional[str] = None


class FormSubmitResponse(BaseModel):
    response_id: Optional[str] = None
    stored_in: str
    scoring: QuizScoring
    score_summary: Optional[ScoreSummary] = None
    score_unavailable: bool = False
    question_feedback: List[QuestionFeedback] = Field(default_factory=list)
    leaderboard: LeaderboardResponse


class FormResponseListResponse(BaseModel):
    form_id: str
    total: int
    items: List[FormResponse]

# schemas/correction.py
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is camelCase; python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Request ----------


class AnalysisRequest(CamelModel):
    # Optional so missing fields get our own 400 instead of a 422
    image: Optional[str] = None
    subject: Optional[str] = None
    test_type: Optional[str] = None
    custom_instructions: Optional[str] = None
    max_score: Union[int, float] = 10


# ---------- Stage outputs ----------


class ExtractedQuestion(BaseModel):
    number: int
    text: str
    student_answer: str


class RawExtraction(BaseModel):
    student_name: str = ""
    questions: List[ExtractedQuestion] = []


class RawEvaluationEntry(BaseModel):
    number: Optional[int] = None
    score: Optional[float] = None
    correct_answer: str = ""
    feedback: str = ""
    is_correct: Optional[bool] = None


class RawEvaluation(BaseModel):
    questions: List[RawEvaluationEntry] = []
    overall_feedback: str = ""
    # True when the grading reply could not be parsed and defaults were used
    degraded: bool = False


# ---------- Report ----------


class Question(CamelModel):
    id: str
    number: int
    text: str
    student_answer: str
    correct_answer: str
    score: float
    max_score: float
    feedback: str
    is_correct: bool
    confirmed: Optional[bool] = None


class CorrectionResult(CamelModel):
    student_name: str
    subject: str
    total_score: float
    max_score: Union[int, float]
    percentage: float
    grade: str
    questions: List[Question]
    overall_feedback: str


class AnalyzeResponse(BaseModel):
    result: CorrectionResult

from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from typing import List, Literal, Optional


Role = Literal['student', 'teacher', 'admin']
QuestionType = Literal['MCQ', 'TrueFalse', 'ShortAnswer']


class Badge(BaseModel):
    id: str
    name: str
    description: str
    image: str
    earned_at: datetime


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    badges: List[Badge] = []


class Requirement(BaseModel):
    # kept as a plain string so rules stored with a newer kind still load
    type: str
    threshold: float


class AchievementOut(BaseModel):
    id: int
    name: str
    description: str
    badge_image: str
    requirement: Requirement


class QuestionIn(BaseModel):
    type: QuestionType
    text: str = Field(min_length=1, max_length=1000)
    options: Optional[List[str]] = None
    correct_answer: str = Field(min_length=1, max_length=255)

    @model_validator(mode='after')
    def check_options(self):
        if self.type == 'MCQ':
            if not self.options or len(self.options) < 2:
                raise ValueError('MCQ questions need at least two options')
            if self.correct_answer not in self.options:
                raise ValueError('correct_answer must be one of the options')
        elif self.type == 'TrueFalse':
            if self.correct_answer.strip().lower() not in ('true', 'false'):
                raise ValueError('TrueFalse answer must be "true" or "false"')
        return self


class QuestionOut(BaseModel):
    id: int
    type: QuestionType
    text: str
    options: Optional[List[str]] = None
    correct_answer: Optional[str] = None


class QuizCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    time_limit: Optional[int] = Field(default=None, gt=0)
    questions: List[QuestionIn] = Field(min_length=1)


class QuizOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    creator_id: int
    time_limit: Optional[int] = None
    questions: List[QuestionOut]


class AnswerIn(BaseModel):
    question_id: int
    answer: str


class AttemptSubmit(BaseModel):
    answers: List[AnswerIn] = []


class AttemptOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quiz_id: int
    user_id: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
    answers: Optional[List[AnswerIn]] = None


class SubmitResult(BaseModel):
    attempt: AttemptOut
    new_badges: List[Badge]


class LeaderboardEntry(BaseModel):
    user_id: int
    username: str
    score: float

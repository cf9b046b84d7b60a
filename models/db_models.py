from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Float
from datetime import datetime
from database import Base


class User(Base):
    __tablename__ = 'users'
    id = Column(Integer, primary_key=True)
    username = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(20), default='student', nullable=False)  # student/teacher/admin
    reset_code = Column(String(6), nullable=True)
    reset_code_expiry = Column(DateTime, nullable=True)
    badges = Column(JSON, default=list, nullable=False)


class Quiz(Base):
    __tablename__ = 'quizzes'
    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    creator_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    time_limit = Column(Integer, nullable=True)  # minutes
    questions = Column(JSON, nullable=False)


class Attempt(Base):
    __tablename__ = 'attempts'
    id = Column(Integer, primary_key=True)
    quiz_id = Column(Integer, ForeignKey('quizzes.id'), nullable=False)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    score = Column(Integer, nullable=True)
    answers = Column(JSON, nullable=True)


class Achievement(Base):
    __tablename__ = 'achievements'
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=False)
    badge_image = Column(String(255), nullable=False)
    requirement_type = Column(String(50), nullable=False)
    threshold = Column(Float, nullable=False)

"""Tabelas do ExamForge (SQLAlchemy ORM)."""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Quiz(Base):
    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(300))
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", index=True)
    passing_score: Mapped[Optional[float]] = mapped_column(Float)
    show_correct_answers: Mapped[bool] = mapped_column(Boolean, default=False)
    password: Mapped[Optional[str]] = mapped_column(String(200))
    max_attempts: Mapped[Optional[int]] = mapped_column(Integer)
    owner_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    questions: Mapped[list["Question"]] = relationship(
        back_populates="quiz",
        order_by="Question.order",
        cascade="all, delete-orphan",
    )


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    quiz_id: Mapped[str] = mapped_column(ForeignKey("quizzes.id", ondelete="CASCADE"), index=True)
    type: Mapped[str] = mapped_column(String(30))
    text: Mapped[str] = mapped_column(Text, default="")
    points: Mapped[int] = mapped_column(Integer, default=1)
    order: Mapped[int] = mapped_column(Integer, default=0)
    correct_answer: Mapped[Optional[str]] = mapped_column(Text)
    tolerance: Mapped[Optional[float]] = mapped_column(Float)

    quiz: Mapped[Quiz] = relationship(back_populates="questions")
    options: Mapped[list["QuestionOption"]] = relationship(
        back_populates="question",
        order_by="QuestionOption.order",
        cascade="all, delete-orphan",
    )


class QuestionOption(Base):
    __tablename__ = "question_options"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    question_id: Mapped[str] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True
    )
    text: Mapped[str] = mapped_column(Text)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    order: Mapped[int] = mapped_column(Integer, default=0)

    question: Mapped[Question] = relationship(back_populates="options")


class QuizResponse(Base):
    """Uma tentativa de um participante."""

    __tablename__ = "quiz_responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    quiz_id: Mapped[str] = mapped_column(ForeignKey("quizzes.id"), index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    participant_name: Mapped[Optional[str]] = mapped_column(String(200))
    participant_email: Mapped[Optional[str]] = mapped_column(String(320))
    score: Mapped[int] = mapped_column(Integer, default=0)
    total_points: Mapped[int] = mapped_column(Integer, default=0)
    is_passed: Mapped[Optional[bool]] = mapped_column(Boolean)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    time_taken: Mapped[Optional[int]] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    quiz: Mapped[Quiz] = relationship()
    question_responses: Mapped[list["QuestionResponse"]] = relationship(
        back_populates="response",
        order_by="QuestionResponse.position",
        cascade="all, delete-orphan",
    )


class QuestionResponse(Base):
    """Resposta a uma questao dentro de uma tentativa."""

    __tablename__ = "question_responses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    response_id: Mapped[str] = mapped_column(
        ForeignKey("quiz_responses.id", ondelete="CASCADE"), index=True
    )
    question_id: Mapped[str] = mapped_column(ForeignKey("questions.id"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    # Resposta enviada serializada como JSON
    answer: Mapped[str] = mapped_column(Text)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False)
    score: Mapped[int] = mapped_column(Integer, default=0)
    time_spent: Mapped[Optional[float]] = mapped_column(Float)

    response: Mapped[QuizResponse] = relationship(back_populates="question_responses")
    question: Mapped[Question] = relationship()

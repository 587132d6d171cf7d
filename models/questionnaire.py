"""Questionnaire question and response models."""

from datetime import datetime

from . import db


class Question(db.Model):
    """A profile questionnaire question."""

    __tablename__ = "questions"

    id = db.Column(db.Integer, primary_key=True)
    question = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(100), nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)


class ParticipantResponse(db.Model):
    """A participant's answer to one question."""

    __tablename__ = "participant_responses"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    question_id = db.Column(db.Integer, db.ForeignKey("questions.id"), nullable=False)
    response = db.Column(db.JSON, nullable=True)
    responded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

"""Pytest configuration and shared fixtures.

The application runs against an in-memory SQLite database with
``TESTING`` enabled, so Flask-Mail records messages instead of
opening an SMTP connection.
"""

from datetime import date

import pytest

from app import create_app
from db.extensions import db, mail
from models.communication import Communication
from models.communicationStatus import CommunicationStatus
from models.course import Course
from models.guardian import Guardian


TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "SQLALCHEMY_ENGINE_OPTIONS": {},
    "MAIL_SUPPRESS_SEND": True,
    "MAIL_DEFAULT_SENDER": "office@school.test",
    "COMMUNICATIONS_PER_PAGE": 15,
    "COMMUNICATIONS_MAX_PER_PAGE": 100,
}


@pytest.fixture
def app():
    """Application with a fresh schema and an active app context."""
    app = create_app(TEST_CONFIG)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def outbox(app):
    """Messages handed to Flask-Mail during the test."""
    with mail.record_messages() as messages:
        yield messages


@pytest.fixture
def course(app):
    course = Course(name="Grade 5 - Mathematics", code="MATH5")
    db.session.add(course)
    db.session.commit()
    return course


@pytest.fixture
def other_course(app):
    course = Course(name="Grade 6 - Science", code="SCI6")
    db.session.add(course)
    db.session.commit()
    return course


@pytest.fixture
def make_guardian(app):
    counter = {"n": 0}

    def _make(name=None, email="default", phone=None):
        counter["n"] += 1
        n = counter["n"]
        guardian = Guardian(
            name=name or f"Guardian {n}",
            email=f"guardian{n}@example.com" if email == "default" else email,
            phone=phone,
        )
        db.session.add(guardian)
        db.session.commit()
        return guardian

    return _make


@pytest.fixture
def make_communication(app, course):
    def _make(guardians=None, **overrides):
        fields = {
            "course_id": course.id,
            "title": "Field trip",
            "message": "The class visits the museum next week.",
            "send_date": date(2024, 1, 15),
            "status": CommunicationStatus.draft,
        }
        fields.update(overrides)
        communication = Communication(**fields)
        communication.guardians = list(guardians or [])
        db.session.add(communication)
        db.session.commit()
        return communication

    return _make


@pytest.fixture
def valid_payload(course):
    return {
        "course_id": course.id,
        "title": "Parent meeting",
        "message": "Meeting on Friday at 5pm in the main hall.",
        "send_date": "2024-02-10",
        "status": "draft",
    }

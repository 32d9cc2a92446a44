# services/utils.py

from flask_mail import Message
from db.extensions import mail
from flask import current_app
from html import escape


class DeliveryError(Exception):
    """A single guardian could not be reached."""


def build_communication_email(communication, guardian):
    course_name = communication.course.name if communication.course else 'your course'
    subject = f"{communication.title} - {course_name}"

    text_body = f"""
Dear {guardian.name},

{communication.message}

Course: {course_name}
Date: {communication.send_date.isoformat()}

This is an automated message from the school office.
"""

    html_body = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{escape(communication.title)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; color: #222; background: #fff; }}
        .main {{ max-width: 600px; margin: auto; padding: 20px; border: 1px solid #eee; }}
        h1 {{ font-size: 20px; margin-bottom: 0.5em; }}
        p {{ margin-top: 0.4em; margin-bottom: 0.4em; white-space: pre-line; }}
        .footer {{ color: #888; font-size: 11px; text-align: center; border-top: 1px solid #eee; margin-top: 30px; padding-top: 8px; }}
    </style>
</head>
<body>
<div class="main">
    <h1>{escape(communication.title)}</h1>
    <p>Dear {escape(guardian.name)},</p>
    <p>{escape(communication.message)}</p>
    <p><b>Course:</b> {escape(course_name)}<br>
    <b>Date:</b> {communication.send_date.isoformat()}</p>
    <div class="footer">
        This is an automated message from the school office.
    </div>
</div>
</body>
</html>
"""
    return subject, text_body, html_body


def deliver_communication(communication, guardian):
    """Send one communication to one guardian; raises DeliveryError on failure."""
    if not guardian.email:
        raise DeliveryError('Guardian has no email address')

    subject, text_body, html_body = build_communication_email(communication, guardian)
    msg = Message(
        subject,
        recipients=[guardian.email],
        body=text_body,
        html=html_body
    )
    try:
        mail.send(msg)
    except Exception as e:
        raise DeliveryError(str(e)) from e
    current_app.logger.debug(f"Communication {communication.id} mailed to {guardian.email}")

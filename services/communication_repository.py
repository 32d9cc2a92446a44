# services/communication_repository.py

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.orm import selectinload, undefer
from models.communication import Communication
from models.communicationStatus import CommunicationStatus
from models.guardian import Guardian
from services.exceptions import NotFound, InvalidState

DEFAULT_PER_PAGE = 15


def _contains_pattern(text):
    """LIKE pattern matching text literally anywhere in a column."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _loader_options(with_course=False, with_guardians=False, with_counts=False):
    options = []
    if with_course:
        options.append(selectinload(Communication.course))
    if with_guardians:
        options.append(selectinload(Communication.guardians))
    if with_counts:
        options.append(undefer(Communication.guardians_count))
    return options


class CommunicationRepository:
    """
    Query and write access to communications.

    Works on the session it is given and never commits; callers wrap
    writes in ``db.transaction.transaction`` to make them atomic.
    """

    def __init__(self, session):
        self.session = session

    def list(self, filters=None):
        filters = filters or {}
        query = self.session.query(Communication)

        if filters.get('course_id') is not None:
            query = query.filter(Communication.course_id == filters['course_id'])

        if filters.get('status'):
            query = query.filter(Communication.status == CommunicationStatus(filters['status']))

        if filters.get('from_date'):
            query = query.filter(Communication.send_date >= filters['from_date'])

        if filters.get('to_date'):
            query = query.filter(Communication.send_date <= filters['to_date'])

        if filters.get('search'):
            term = _contains_pattern(filters['search'])
            query = query.filter(or_(
                Communication.title.ilike(term, escape="\\"),
                Communication.message.ilike(term, escape="\\")
            ))

        options = _loader_options(
            filters.get('with_course', False),
            filters.get('with_guardians', False),
            filters.get('with_counts', False)
        )
        if options:
            query = query.options(*options)

        query = query.order_by(Communication.created_at.desc(), Communication.id.desc())

        return query.paginate(
            page=filters.get('page', 1),
            per_page=filters.get('per_page', DEFAULT_PER_PAGE),
            error_out=False
        )

    def get(self, communication_id, with_course=False, with_guardians=False, with_counts=False):
        communication = self.session.get(
            Communication,
            communication_id,
            options=_loader_options(with_course, with_guardians, with_counts)
        )
        if communication is None:
            raise NotFound(f'Communication {communication_id} not found')
        return communication

    def create(self, fields):
        guardian_ids = fields.get('guardian_ids')
        communication = Communication(
            course_id=fields['course_id'],
            title=fields['title'],
            message=fields['message'],
            send_date=fields['send_date'],
            status=CommunicationStatus(fields['status'])
        )
        if guardian_ids:
            communication.guardians = self._guardians(guardian_ids)
        self.session.add(communication)
        self.session.flush()
        current_app.logger.info(f"Communication created with ID: {communication.id}")
        return communication

    def update(self, communication, fields):
        if communication.is_sent:
            raise InvalidState('A communication that has already been sent cannot be updated')

        for field in ('course_id', 'title', 'message', 'send_date'):
            if field in fields:
                setattr(communication, field, fields[field])
        if 'status' in fields:
            communication.status = CommunicationStatus(fields['status'])
        if 'guardian_ids' in fields:
            communication.guardians = self._guardians(fields['guardian_ids'])

        self.session.flush()
        return communication

    def mark_sent(self, communication):
        communication.status = CommunicationStatus.sent
        self.session.flush()
        return communication

    def delete(self, communication):
        # Release the guardian links first; the guardians themselves stay
        communication.guardians = []
        self.session.flush()
        self.session.delete(communication)
        self.session.flush()
        current_app.logger.info(f"Communication {communication.id} deleted")

    def _guardians(self, guardian_ids):
        if not guardian_ids:
            return []
        return (
            self.session.query(Guardian)
            .filter(Guardian.id.in_(guardian_ids))
            .order_by(Guardian.id)
            .all()
        )

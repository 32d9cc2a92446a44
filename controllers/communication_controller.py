from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from db.extensions import db
from db.transaction import transaction
from models.communicationStatus import status_label
from services.communication_repository import CommunicationRepository
from services.communication_service import CommunicationService
from services.exceptions import (
    CommunicationError,
    DispatchFailure,
    InvalidState,
    PersistenceFailure,
)
from services.validators import validate_communication, validate_list_filters, parse_bool

communication_bp = Blueprint('communication', __name__)


def _isoformat(value):
    return value.isoformat() if value else None


def serialize_communication(c, with_course=False, with_guardians=False, with_counts=False):
    res = {
        'id': c.id,
        'course_id': c.course_id,
        'title': c.title,
        'message': c.message,
        'send_date': _isoformat(c.send_date),
        'status': c.status.value,
        'status_label': status_label(c.status),
        'created_at': _isoformat(c.created_at),
        'updated_at': _isoformat(c.updated_at),
    }
    if with_course:
        res['course'] = c.course.to_dict() if c.course else None
    if with_guardians:
        res['guardians'] = [g.to_dict() for g in c.guardians]
    if with_counts:
        res['guardians_count'] = c.guardians_count
    return res


def _include_flags(args):
    return {
        'with_course': bool(parse_bool(args.get('with_course', ''))),
        'with_guardians': bool(parse_bool(args.get('with_guardians', ''))),
        'with_counts': bool(parse_bool(args.get('with_counts', ''))),
    }


@communication_bp.errorhandler(CommunicationError)
def handle_communication_error(e):
    if e.status_code >= 500:
        current_app.logger.error(f"❌ {request.method} {request.path}: {e.message}")
    return jsonify(e.to_dict()), e.status_code


@communication_bp.route('/communications', methods=['GET'])
def list_communications():
    filters = validate_list_filters(request.args)
    page = CommunicationRepository(db.session).list(filters)

    data = [
        serialize_communication(
            c,
            with_course=filters['with_course'],
            with_guardians=filters['with_guardians'],
            with_counts=filters['with_counts']
        )
        for c in page.items
    ]
    return jsonify({
        'data': data,
        'meta': {
            'current_page': page.page,
            'per_page': page.per_page,
            'total': page.total,
            'last_page': max(page.pages, 1)
        }
    }), 200


@communication_bp.route('/communications', methods=['POST'])
def create_communication():
    fields = validate_communication(request.get_json(silent=True))
    send_now = fields.pop('send_now', False)

    try:
        with transaction() as session:
            repo = CommunicationRepository(session)
            communication = repo.create(fields)

            if send_now:
                result = CommunicationService.send_communication(communication)
                if not result['success']:
                    raise DispatchFailure(result)
                repo.mark_sent(communication)
    except DispatchFailure as e:
        e.message = f"Error creating communication: {e.message}"
        raise
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"Error creating communication: {str(e)}") from e

    return jsonify(serialize_communication(communication, with_course=True)), 201


@communication_bp.route('/communications/<int:communication_id>', methods=['GET'])
def show_communication(communication_id):
    flags = _include_flags(request.args)
    communication = CommunicationRepository(db.session).get(communication_id, **flags)
    return jsonify(serialize_communication(communication, **flags)), 200


@communication_bp.route('/communications/<int:communication_id>', methods=['PUT', 'PATCH'])
def update_communication(communication_id):
    communication = CommunicationRepository(db.session).get(communication_id)
    if communication.is_sent:
        raise InvalidState('A communication that has already been sent cannot be updated')

    # A bodiless update changes nothing
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    fields = validate_communication(data, partial=True)

    with transaction() as session:
        CommunicationRepository(session).update(communication, fields)

    return jsonify(serialize_communication(communication)), 200


@communication_bp.route('/communications/<int:communication_id>', methods=['DELETE'])
def delete_communication(communication_id):
    communication = CommunicationRepository(db.session).get(communication_id)

    try:
        with transaction() as session:
            CommunicationRepository(session).delete(communication)
    except SQLAlchemyError as e:
        raise PersistenceFailure(f"Error deleting communication: {str(e)}") from e

    return '', 204


@communication_bp.route('/communications/<int:communication_id>/send', methods=['POST'])
def send_communication(communication_id):
    communication = CommunicationRepository(db.session).get(
        communication_id, with_course=True, with_guardians=True
    )
    if communication.is_sent:
        raise InvalidState('The communication has already been sent', status_code=400)

    # Dispatch runs outside any transaction; only the status write below is persisted
    result = CommunicationService.send_communication(communication)
    if not result['success']:
        raise DispatchFailure(result)

    with transaction() as session:
        CommunicationRepository(session).mark_sent(communication)

    return jsonify({
        'message': result['message'],
        'sent': result['sent'],
        'errors': result['errors']
    }), 200

# services/validators.py

import re
from datetime import date, datetime
from flask import current_app
from db.extensions import db
from models.course import Course
from models.guardian import Guardian
from models.communicationStatus import CREATABLE_STATUSES, UPDATABLE_STATUSES
from services.exceptions import ValidationError

TITLE_MAX_LENGTH = 255
INTEGER_PATTERN = re.compile(r'-?[0-9]+')

TRUE_VALUES = {'1', 'true', 'on', 'yes'}
FALSE_VALUES = {'0', 'false', 'off', 'no', ''}


def parse_bool(value):
    """Interpret a JSON or query-string value as a boolean; None if it is not one."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    return None


def parse_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return None


def parse_date(value):
    """Accept YYYY-MM-DD or an ISO datetime (reduced to its date)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
    except ValueError:
        return None


def _required_string(data, field, errors, max_length=None):
    value = data.get(field)
    if not isinstance(value, str):
        errors.setdefault(field, []).append(f'The {field} field must be a string.')
        return None
    value = value.strip()
    if not value:
        errors.setdefault(field, []).append(f'The {field} field is required.')
        return None
    if max_length and len(value) > max_length:
        errors.setdefault(field, []).append(
            f'The {field} field must not be greater than {max_length} characters.'
        )
        return None
    return value


def validate_communication(data, partial=False, session=None):
    """
    Check a create (partial=False) or update (partial=True) payload.

    Returns the normalized fields; raises ValidationError listing every
    invalid field. Keys not part of the communication schema are dropped.
    """
    if session is None:
        session = db.session
    if not isinstance(data, dict):
        raise ValidationError({'body': ['The request body must be a JSON object.']})

    errors = {}
    fields = {}

    if not partial:
        for field in ('course_id', 'title', 'message', 'send_date', 'status'):
            if data.get(field) is None:
                errors.setdefault(field, []).append(f'The {field} field is required.')

    if data.get('course_id') is not None:
        course_id = parse_int(data['course_id'])
        if course_id is None:
            errors.setdefault('course_id', []).append('The course_id field must be an integer.')
        elif session.get(Course, course_id) is None:
            errors.setdefault('course_id', []).append('The selected course_id is invalid.')
        else:
            fields['course_id'] = course_id

    if data.get('title') is not None:
        title = _required_string(data, 'title', errors, max_length=TITLE_MAX_LENGTH)
        if title is not None:
            fields['title'] = title

    if data.get('message') is not None:
        message = _required_string(data, 'message', errors)
        if message is not None:
            fields['message'] = message

    if data.get('send_date') is not None:
        send_date = parse_date(data['send_date'])
        if send_date is None:
            errors.setdefault('send_date', []).append('The send_date field must be a valid date.')
        else:
            fields['send_date'] = send_date

    if data.get('status') is not None:
        allowed = UPDATABLE_STATUSES if partial else CREATABLE_STATUSES
        if data['status'] not in allowed:
            errors.setdefault('status', []).append(
                f"The selected status is invalid. Allowed: {', '.join(allowed)}."
            )
        else:
            fields['status'] = data['status']

    if not partial and 'send_now' in data:
        send_now = parse_bool(data['send_now'])
        if send_now is None:
            errors.setdefault('send_now', []).append('The send_now field must be true or false.')
        else:
            fields['send_now'] = send_now

    if data.get('guardian_ids') is not None:
        guardian_ids = _validate_guardian_ids(data['guardian_ids'], errors, session)
        if guardian_ids is not None:
            fields['guardian_ids'] = guardian_ids

    if errors:
        current_app.logger.debug(f"Communication payload rejected: {errors}")
        raise ValidationError(errors)

    return fields


def _validate_guardian_ids(value, errors, session):
    if not isinstance(value, list):
        errors.setdefault('guardian_ids', []).append('The guardian_ids field must be a list.')
        return None

    ids = []
    for raw in value:
        guardian_id = parse_int(raw)
        if guardian_id is None:
            errors.setdefault('guardian_ids', []).append(f'Invalid guardian id: {raw!r}.')
            return None
        if guardian_id not in ids:
            ids.append(guardian_id)

    if ids:
        found = {
            row[0] for row in
            session.query(Guardian.id).filter(Guardian.id.in_(ids)).all()
        }
        missing = [guardian_id for guardian_id in ids if guardian_id not in found]
        if missing:
            errors.setdefault('guardian_ids', []).append(
                f"Unknown guardian ids: {', '.join(str(m) for m in missing)}."
            )
            return None
    return ids


def validate_list_filters(args):
    """Validate listing query parameters; returns a dict of normalized filters."""
    errors = {}
    filters = {}

    if args.get('course_id') not in (None, ''):
        course_id = parse_int(args['course_id'])
        if course_id is None:
            errors.setdefault('course_id', []).append('The course_id filter must be an integer.')
        else:
            filters['course_id'] = course_id

    if args.get('status') not in (None, ''):
        if args['status'] not in CREATABLE_STATUSES:
            errors.setdefault('status', []).append('The selected status filter is invalid.')
        else:
            filters['status'] = args['status']

    for field in ('from_date', 'to_date'):
        if args.get(field) not in (None, ''):
            parsed = parse_date(args[field])
            if parsed is None:
                errors.setdefault(field, []).append(f'The {field} filter must be a valid date.')
            else:
                filters[field] = parsed

    if args.get('search') not in (None, ''):
        filters['search'] = args['search']

    for flag in ('with_course', 'with_guardians', 'with_counts'):
        filters[flag] = bool(parse_bool(args.get(flag, '')))

    filters['page'] = _bounded_int(args, 'page', 1, 1, None, errors)
    filters['per_page'] = _bounded_int(
        args, 'per_page',
        current_app.config.get('COMMUNICATIONS_PER_PAGE', 15),
        1,
        current_app.config.get('COMMUNICATIONS_MAX_PER_PAGE', 100),
        errors
    )

    if errors:
        raise ValidationError(errors)
    return filters


def _bounded_int(args, field, default, minimum, maximum, errors):
    raw = args.get(field)
    if raw in (None, ''):
        return default
    value = parse_int(raw)
    if value is None or value < minimum or (maximum is not None and value > maximum):
        bound = f' between {minimum} and {maximum}' if maximum is not None else f' of at least {minimum}'
        errors.setdefault(field, []).append(f'The {field} parameter must be an integer{bound}.')
        return default
    return value

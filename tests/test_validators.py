"""Unit tests for request validation."""

from datetime import date

import pytest

from services.exceptions import ValidationError
from services.validators import (
    parse_bool,
    parse_date,
    parse_int,
    validate_communication,
    validate_list_filters,
)


class TestParsers:
    @pytest.mark.parametrize("value", [True, 1, "1", "true", "TRUE", "yes", "on"])
    def test_truthy(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "0", "false", "no", "off", ""])
    def test_falsy(self, value):
        assert parse_bool(value) is False

    @pytest.mark.parametrize("value", ["maybe", 2, None, []])
    def test_not_boolean(self, value):
        assert parse_bool(value) is None

    @pytest.mark.parametrize("value, expected", [(7, 7), ("42", 42), (" -3 ", -3)])
    def test_parse_int_accepts_integers(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value", ["--5", "-", "\u00b2", "\u0663", "4.2", "", True, None])
    def test_parse_int_rejects_malformed(self, value):
        assert parse_int(value) is None

    def test_parse_date_accepts_datetime_string(self):
        assert parse_date("2024-03-01T08:30:00Z") == date(2024, 3, 1)

    def test_parse_date_rejects_garbage(self):
        assert parse_date("31/01/2024") is None
        assert parse_date(20240131) is None


class TestCreateValidation:
    def test_valid_payload_is_normalized(self, valid_payload):
        valid_payload["title"] = "  Parent meeting  "
        valid_payload["send_now"] = "true"
        valid_payload["unexpected"] = "dropped"

        fields = validate_communication(valid_payload)

        assert fields == {
            "course_id": valid_payload["course_id"],
            "title": "Parent meeting",
            "message": "Meeting on Friday at 5pm in the main hall.",
            "send_date": date(2024, 2, 10),
            "status": "draft",
            "send_now": True,
        }

    def test_missing_fields_are_all_reported(self, app):
        with pytest.raises(ValidationError) as exc:
            validate_communication({})

        assert set(exc.value.errors) == {"course_id", "title", "message", "send_date", "status"}

    def test_unknown_course_is_rejected(self, valid_payload):
        valid_payload["course_id"] = 9999

        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)

        assert "course_id" in exc.value.errors

    def test_title_length_limit(self, valid_payload):
        valid_payload["title"] = "x" * 256
        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)
        assert "title" in exc.value.errors

        valid_payload["title"] = "x" * 255
        assert validate_communication(valid_payload)["title"] == "x" * 255

    def test_blank_message_is_rejected(self, valid_payload):
        valid_payload["message"] = "   "
        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)
        assert "message" in exc.value.errors

    def test_sent_status_allowed_on_create(self, valid_payload):
        valid_payload["status"] = "sent"
        assert validate_communication(valid_payload)["status"] == "sent"

    def test_invalid_status(self, valid_payload):
        valid_payload["status"] = "archived"
        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)
        assert "status" in exc.value.errors

    def test_invalid_send_now(self, valid_payload):
        valid_payload["send_now"] = "sometimes"
        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)
        assert "send_now" in exc.value.errors

    def test_guardian_ids_must_exist(self, valid_payload, make_guardian):
        guardian = make_guardian()
        valid_payload["guardian_ids"] = [guardian.id, guardian.id, 4242]

        with pytest.raises(ValidationError) as exc:
            validate_communication(valid_payload)

        assert "4242" in exc.value.errors["guardian_ids"][0]

    def test_guardian_ids_are_deduplicated(self, valid_payload, make_guardian):
        first, second = make_guardian(), make_guardian()
        valid_payload["guardian_ids"] = [second.id, first.id, second.id]

        assert validate_communication(valid_payload)["guardian_ids"] == [second.id, first.id]

    def test_non_object_body(self, app):
        with pytest.raises(ValidationError) as exc:
            validate_communication(None)
        assert "body" in exc.value.errors


class TestUpdateValidation:
    def test_empty_update_is_allowed(self, app):
        assert validate_communication({}, partial=True) == {}

    def test_subset_is_accepted(self, app):
        fields = validate_communication({"title": "New title", "status": "scheduled"}, partial=True)
        assert fields == {"title": "New title", "status": "scheduled"}

    def test_status_sent_is_rejected(self, app):
        with pytest.raises(ValidationError) as exc:
            validate_communication({"status": "sent"}, partial=True)
        assert "status" in exc.value.errors

    def test_send_now_is_ignored(self, app):
        assert validate_communication({"send_now": True}, partial=True) == {}


class TestListFilters:
    def test_defaults(self, app):
        filters = validate_list_filters({})
        assert filters["page"] == 1
        assert filters["per_page"] == 15
        assert filters["with_course"] is False
        assert "status" not in filters

    def test_parses_values(self, app):
        filters = validate_list_filters({
            "course_id": "3",
            "status": "scheduled",
            "from_date": "2024-01-01",
            "to_date": "2024-01-31",
            "search": "exam",
            "with_counts": "1",
            "per_page": "5",
        })
        assert filters["course_id"] == 3
        assert filters["from_date"] == date(2024, 1, 1)
        assert filters["to_date"] == date(2024, 1, 31)
        assert filters["search"] == "exam"
        assert filters["with_counts"] is True
        assert filters["per_page"] == 5

    def test_malformed_integers_are_validation_errors(self, app):
        with pytest.raises(ValidationError) as exc:
            validate_list_filters({"course_id": "--1", "page": "\u00b2", "per_page": "--5"})
        assert set(exc.value.errors) == {"course_id", "page", "per_page"}

    def test_rejects_bad_values(self, app):
        with pytest.raises(ValidationError) as exc:
            validate_list_filters({"status": "lost", "from_date": "yesterday", "per_page": "1000"})
        assert set(exc.value.errors) == {"status", "from_date", "per_page"}

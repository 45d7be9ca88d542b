"""
Unit tests for staffboard.schemas - Input Validation Messages
"""

from datetime import UTC, date, datetime
from uuid import uuid4

import pytest
from pydantic import ValidationError

from staffboard.actions.errors import map_validation_error
from staffboard.schemas.assignments import AssignmentFilter, AuditLogFilter, CreateAssignmentInput
from staffboard.schemas.auth import SignUpInput, UpdatePasswordInput
from staffboard.schemas.clients import CreateClientInput, UpdateClientInput
from staffboard.schemas.reports import HoursReportFilter
from staffboard.schemas.workers import CreateWorkerInput, WorkerFilter


def field_errors(model, payload) -> dict[str, list[str]]:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(payload)
    return map_validation_error(exc_info.value).field_errors


VALID_CLIENT = {
    "name": "Acme Corp",
    "email": "contact@acme.com",
    "phone": "+48 123 456 789",
    "address": "ul. Glowna 1, 00-001 Warszawa",
}


class TestClientInput:
    def test_valid_input_is_trimmed(self):
        data = CreateClientInput.model_validate({**VALID_CLIENT, "name": "  Acme Corp  "})
        assert data.name == "Acme Corp"

    def test_blank_name(self):
        assert field_errors(CreateClientInput, {**VALID_CLIENT, "name": "   "}) == {
            "name": ["Name is required"]
        }

    def test_name_too_long(self):
        errors = field_errors(CreateClientInput, {**VALID_CLIENT, "name": "x" * 256})
        assert errors["name"] == ["Name must be at most 255 characters"]

    def test_invalid_email(self):
        assert "email" in field_errors(CreateClientInput, {**VALID_CLIENT, "email": "not-an-email"})

    @pytest.mark.parametrize(
        ("phone", "message"),
        [
            ("call me", "Invalid phone format"),
            ("123 45", "Phone must be at least 9 characters"),
            ("+48 123 456 789 000 111", "Phone must be at most 20 characters"),
        ],
    )
    def test_phone_messages(self, phone, message):
        assert field_errors(CreateClientInput, {**VALID_CLIENT, "phone": phone}) == {
            "phone": [message]
        }

    def test_update_only_tracks_given_fields(self):
        data = UpdateClientInput.model_validate({"id": str(uuid4()), "name": "New name"})
        assert data.model_dump(exclude_unset=True, exclude={"id"}) == {"name": "New name"}


class TestAuthInput:
    def test_short_password(self):
        errors = field_errors(UpdatePasswordInput, {"new_password": "short"})
        assert errors == {"new_password": ["Password must be at least 8 characters"]}

    def test_sign_up_requires_every_field(self):
        errors = field_errors(SignUpInput, {"email": "anna@agency.example"})
        assert set(errors) == {"password", "first_name", "last_name", "organization_name"}

    def test_first_name_limit(self):
        errors = field_errors(
            SignUpInput,
            {
                "email": "anna@agency.example",
                "password": "secret123",
                "first_name": "A" * 101,
                "last_name": "Nowak",
                "organization_name": "Agency",
            },
        )
        assert errors == {"first_name": ["First name must be at most 100 characters"]}


class TestWorkerInput:
    def test_valid_worker(self):
        data = CreateWorkerInput.model_validate(
            {"first_name": "Jan", "last_name": "Kowalski", "phone": "+48 600 100 200"}
        )
        assert data.phone == "+48 600 100 200"

    def test_filter_defaults(self):
        data = WorkerFilter.model_validate({})
        assert (data.page, data.page_size, data.sort_by, data.sort_order) == (1, 20, "name", "asc")

    def test_page_size_capped(self):
        assert "page_size" in field_errors(WorkerFilter, {"page_size": 101})

    def test_unknown_sort_column(self):
        assert "sort_by" in field_errors(WorkerFilter, {"sort_by": "phone"})

    def test_available_at_requires_timezone(self):
        assert "available_at" in field_errors(WorkerFilter, {"available_at": "2026-03-02T09:00:00"})


class TestAssignmentInput:
    def test_end_must_follow_start(self):
        errors = field_errors(
            CreateAssignmentInput,
            {
                "worker_id": str(uuid4()),
                "position_id": str(uuid4()),
                "start_at": "2026-03-02T09:00:00Z",
                "end_at": "2026-03-02T09:00:00Z",
            },
        )
        assert errors == {"end_at": ["End datetime must be after start datetime"]}

    def test_open_ended_assignment(self):
        data = CreateAssignmentInput.model_validate(
            {
                "worker_id": str(uuid4()),
                "position_id": str(uuid4()),
                "start_at": "2026-03-02T09:00:00+01:00",
            }
        )
        assert data.end_at is None
        assert data.start_at == datetime(2026, 3, 2, 8, 0, tzinfo=UTC)

    def test_status_list(self):
        data = AssignmentFilter.model_validate({"status": ["scheduled", "active"]})
        assert data.status == ["scheduled", "active"]
        assert "status.0" in field_errors(AssignmentFilter, {"status": ["paused"]})

    def test_date_range_order(self):
        errors = field_errors(
            AssignmentFilter,
            {"date_from": "2026-03-10T00:00:00Z", "date_to": "2026-03-01T00:00:00Z"},
        )
        assert errors == {"date_to": ["Start date must be before or equal to end date"]}

    def test_audit_log_page_size_limit(self):
        assert "page_size" in field_errors(
            AuditLogFilter, {"assignment_id": str(uuid4()), "page_size": 500}
        )


class TestReportInput:
    def test_dates(self):
        data = HoursReportFilter.model_validate({"start_date": "2026-03-01", "end_date": "2026-03-31"})
        assert data.start_date == date(2026, 3, 1)
        assert data.client_id is None

    def test_single_day_range(self):
        data = HoursReportFilter.model_validate({"start_date": "2026-03-01", "end_date": "2026-03-01"})
        assert data.start_date == data.end_date

    def test_reversed_range(self):
        errors = field_errors(
            HoursReportFilter, {"start_date": "2026-03-31", "end_date": "2026-03-01"}
        )
        assert errors == {"end_date": ["Start date must be before or equal to end date"]}

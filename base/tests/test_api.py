"""
Tests for the shared API plumbing: health check, error envelope,
pagination and request timing.
"""
from django.urls import reverse

import pytest
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError

from base.exceptions import Conflict, HasDependents, InvariantViolation, api_exception_handler


@pytest.mark.django_db
class TestHealthCheck:
    def test_health_is_public(self, api_client):
        response = api_client.get(reverse("health-check"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == "OK"
        assert "X-Response-Time" in response

    def test_schema_is_served(self, api_client):
        response = api_client.get(reverse("schema"))

        assert response.status_code == status.HTTP_200_OK


class TestErrorEnvelope:
    def test_invariant_violation_carries_field(self):
        response = api_exception_handler(
            InvariantViolation("End date must be after start date.", field="end_date"), {}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {
            "error": {
                "code": "invariant_violation",
                "message": "End date must be after start date.",
                "field": "end_date",
            }
        }

    def test_has_dependents_is_an_invariant_violation(self):
        exc = HasDependents()
        response = api_exception_handler(exc, {})

        assert isinstance(exc, InvariantViolation)
        assert response.data["error"]["code"] == "has_dependents"

    def test_conflict_is_409(self):
        response = api_exception_handler(Conflict("Already a member.", field="user_id"), {})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error"]["code"] == "conflict"

    def test_not_found_code(self):
        response = api_exception_handler(NotFound("Task not found."), {})

        assert response.data == {"error": {"code": "not_found", "message": "Task not found."}}

    def test_validation_errors_keep_fields(self):
        response = api_exception_handler(ValidationError({"title": ["This field is required."]}), {})

        assert response.data["error"]["code"] == "validation_error"
        assert response.data["error"]["fields"] == {"title": ["This field is required."]}

    def test_non_api_exceptions_are_left_alone(self):
        assert api_exception_handler(RuntimeError("boom"), {}) is None


@pytest.mark.django_db
class TestPagination:
    def test_page_metadata(self, api_client):
        from apps.authentication.tests.factories import ManagerFactory
        from apps.projects.tests.factories import ProjectFactory

        manager = ManagerFactory()
        ProjectFactory.create_batch(3, manager=manager)
        api_client.force_authenticate(user=manager)

        response = api_client.get(reverse("project-list"), {"page_size": 2, "page": 2})

        assert response.data["count"] == 3
        assert response.data["total_pages"] == 2
        assert response.data["current_page"] == 2
        assert len(response.data["results"]) == 1
        assert response.data["next"] is None

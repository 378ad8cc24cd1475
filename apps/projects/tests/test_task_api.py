"""
Tests for task API endpoints.
"""
import uuid
from datetime import timedelta
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from django.utils import timezone
from django.utils.dateparse import parse_datetime

import pytest
from rest_framework import status

from apps.authentication.tests.factories import ManagerFactory, UserFactory
from apps.projects.models import ProjectTeamMember, Task, TaskAttachment
from apps.projects.services import get_attachment_storage
from apps.projects.tests.factories import (
    ProjectFactory,
    ProjectTeamMemberFactory,
    TaskAttachmentFactory,
    TaskFactory,
)


@pytest.fixture
def team():
    """A project with a manager, a team lead and a plain member."""
    manager = ManagerFactory()
    lead = UserFactory()
    member = UserFactory()
    project = ProjectFactory(manager=manager, team_lead=lead)
    ProjectTeamMemberFactory(project=project, user=lead, role=ProjectTeamMember.ROLE_TEAM_LEAD)
    ProjectTeamMemberFactory(project=project, user=member)
    return {"project": project, "manager": manager, "lead": lead, "member": member}


def task_payload(project, assignee, **overrides):
    data = {
        "project": str(project.id),
        "title": "Write onboarding guide",
        "description": "Cover local setup and deploys",
        "assigned_to": assignee.id,
        "priority": "high",
        "due_date": (timezone.now() + timedelta(days=5)).isoformat(),
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
@pytest.mark.api
class TestTaskCreate:
    def test_manager_creates_pending_task(self, api_client, team):
        due = (timezone.now() + timedelta(days=3)).replace(microsecond=0)
        api_client.force_authenticate(user=team["manager"])

        response = api_client.post(
            reverse("task-list"),
            task_payload(team["project"], team["member"], due_date=due.isoformat(), status="completed"),
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == Task.STATUS_PENDING
        assert parse_datetime(response.data["due_date"]) == due
        assert response.data["created_by"]["id"] == team["manager"].id
        task = Task.objects.get(pk=response.data["id"])
        assert task.due_date == due
        assert task.completed_date is None

    def test_team_lead_creates_task(self, api_client, team):
        api_client.force_authenticate(user=team["lead"])

        response = api_client.post(
            reverse("task-list"), task_payload(team["project"], team["member"]), format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_member_cannot_create_task(self, api_client, team):
        api_client.force_authenticate(user=team["member"])

        response = api_client.post(
            reverse("task-list"), task_payload(team["project"], team["member"]), format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Task.objects.count() == 0

    def test_outsider_gets_project_not_found(self, api_client, team):
        api_client.force_authenticate(user=UserFactory())

        response = api_client.post(
            reverse("task-list"), task_payload(team["project"], team["member"]), format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"]["message"] == "Project not found."

    def test_project_is_required(self, api_client, team):
        api_client.force_authenticate(user=team["manager"])
        data = task_payload(team["project"], team["member"])
        del data["project"]

        response = api_client.post(reverse("task-list"), data, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "project" in response.data["error"]["fields"]

    def test_dependencies_must_share_project(self, api_client, team):
        foreign = TaskFactory()
        api_client.force_authenticate(user=team["manager"])

        response = api_client.post(
            reverse("task-list"),
            task_payload(team["project"], team["member"], dependencies=[str(foreign.id)]),
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["field"] == "dependencies"

    def test_create_with_initial_files(self, api_client, team):
        api_client.force_authenticate(user=team["manager"])
        data = task_payload(team["project"], team["member"])
        data["files"] = [
            SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain"),
            SimpleUploadedFile("plan.pdf", b"%PDF-1.4", content_type="application/pdf"),
        ]

        response = api_client.post(reverse("task-list"), data, format="multipart")

        assert response.status_code == status.HTTP_201_CREATED
        names = sorted(a["original_name"] for a in response.data["attachments"])
        assert names == ["notes.txt", "plan.pdf"]
        storage = get_attachment_storage()
        for attachment in TaskAttachment.objects.all():
            assert storage.backend.exists(attachment.file.name)

    def test_oversized_initial_file_is_rejected(self, api_client, team):
        api_client.force_authenticate(user=team["manager"])
        too_big = get_attachment_storage().max_upload_size + 1
        data = task_payload(team["project"], team["member"])
        data["files"] = [
            SimpleUploadedFile("small.txt", b"ok", content_type="text/plain"),
            SimpleUploadedFile("huge.bin", b"x" * too_big),
        ]

        response = api_client.post(reverse("task-list"), data, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "files" in response.data["error"]["fields"]
        assert Task.objects.count() == 0
        assert TaskAttachment.objects.count() == 0

    def test_initial_files_are_capped(self, api_client, team):
        api_client.force_authenticate(user=team["manager"])
        data = task_payload(team["project"], team["member"])
        data["files"] = [
            SimpleUploadedFile(f"note{i}.txt", b"hi", content_type="text/plain")
            for i in range(6)
        ]

        response = api_client.post(reverse("task-list"), data, format="multipart")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "files" in response.data["error"]["fields"]
        assert Task.objects.count() == 0

    def test_failed_file_removes_earlier_blobs(self, api_client, team):
        api_client.force_authenticate(user=team["manager"])
        data = task_payload(team["project"], team["member"])
        data["files"] = [
            SimpleUploadedFile("first.txt", b"one", content_type="text/plain"),
            SimpleUploadedFile("second.txt", b"two", content_type="text/plain"),
        ]
        storage = get_attachment_storage()
        saved = []
        original_save = storage.backend.save

        def save_then_fail(name, content, *args, **kwargs):
            if saved:
                raise OSError("disk full")
            stored = original_save(name, content, *args, **kwargs)
            saved.append(stored)
            return stored

        api_client.raise_request_exception = False
        with mock.patch.object(storage.backend, "save", side_effect=save_then_fail):
            response = api_client.post(reverse("task-list"), data, format="multipart")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert Task.objects.count() == 0
        assert TaskAttachment.objects.count() == 0
        assert len(saved) == 1
        assert not storage.backend.exists(saved[0])


@pytest.mark.django_db
@pytest.mark.api
class TestTaskRead:
    def test_list_readable_tasks(self, api_client, team):
        own = TaskFactory(project=team["project"], assigned_to=team["member"])
        assigned_elsewhere = TaskFactory(assigned_to=team["member"])
        TaskFactory()
        api_client.force_authenticate(user=team["member"])

        response = api_client.get(reverse("task-list"))

        assert response.status_code == status.HTTP_200_OK
        ids = {item["id"] for item in response.data["results"]}
        assert ids == {str(own.id), str(assigned_elsewhere.id)}

    def test_list_filters(self, api_client, team):
        match = TaskFactory(project=team["project"], status=Task.STATUS_REVIEW, priority="high")
        TaskFactory(project=team["project"], status=Task.STATUS_PENDING, priority="high")
        api_client.force_authenticate(user=team["manager"])

        response = api_client.get(
            reverse("task-list"),
            {"project": str(team["project"].id), "status": "review", "priority": "high"},
        )

        assert [item["id"] for item in response.data["results"]] == [str(match.id)]

    def test_list_search_matches_title(self, api_client, team):
        match = TaskFactory(project=team["project"], title="Fix login redirect")
        TaskFactory(project=team["project"], title="Write release notes")
        api_client.force_authenticate(user=team["manager"])

        response = api_client.get(reverse("task-list"), {"search": "LOGIN"})

        assert [item["id"] for item in response.data["results"]] == [str(match.id)]

    def test_list_ordering_by_due_date(self, api_client, team):
        now = timezone.now()
        later = TaskFactory(project=team["project"], due_date=now + timedelta(days=9))
        sooner = TaskFactory(project=team["project"], due_date=now + timedelta(days=1))
        api_client.force_authenticate(user=team["manager"])

        response = api_client.get(reverse("task-list"), {"ordering": "-due_date"})

        assert [item["id"] for item in response.data["results"]] == [str(later.id), str(sooner.id)]

    def test_retrieve_detail(self, api_client, team):
        task = TaskFactory(project=team["project"])
        TaskAttachmentFactory(task=task)
        api_client.force_authenticate(user=team["member"])

        response = api_client.get(reverse("task-detail", args=[task.id]))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["project"]["id"] == str(team["project"].id)
        assert len(response.data["attachments"]) == 1
        assert response.data["comments"] == []

    def test_options_on_detail(self, api_client, team):
        task = TaskFactory(project=team["project"], assigned_to=team["member"])

        api_client.force_authenticate(user=team["lead"])
        lead_response = api_client.options(reverse("task-detail", args=[task.id]))
        api_client.force_authenticate(user=UserFactory())
        outsider_response = api_client.options(reverse("task-detail", args=[task.id]))

        assert lead_response.status_code == status.HTTP_200_OK
        assert "PUT" in lead_response.data["actions"]
        assert outsider_response.status_code == status.HTTP_200_OK
        assert "PUT" not in outsider_response.data.get("actions", {})

    def test_assignee_outside_team_reads_task(self, api_client, team):
        outsider = UserFactory()
        task = TaskFactory(project=team["project"], assigned_to=outsider)
        api_client.force_authenticate(user=outsider)

        response = api_client.get(reverse("task-detail", args=[task.id]))

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize("task_id", [uuid.uuid4(), "garbage"])
    def test_missing_task_is_not_found(self, api_client, team, task_id):
        api_client.force_authenticate(user=team["manager"])

        response = api_client.get(reverse("task-detail", args=[task_id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error"]["message"] == "Task not found."

    def test_unrelated_user_gets_not_found(self, api_client, team):
        task = TaskFactory(project=team["project"])
        api_client.force_authenticate(user=UserFactory())

        response = api_client.get(reverse("task-detail", args=[task.id]))

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
@pytest.mark.api
class TestTaskUpdate:
    def test_status_lifecycle_timestamps(self, api_client, team):
        task = TaskFactory(project=team["project"], assigned_to=team["member"])
        api_client.force_authenticate(user=team["member"])
        url = reverse("task-detail", args=[task.id])

        started = api_client.patch(url, {"status": "in_progress"}, format="json")
        completed = api_client.patch(url, {"status": "completed"}, format="json")

        assert started.status_code == status.HTTP_200_OK
        assert completed.status_code == status.HTTP_200_OK
        start_date = parse_datetime(completed.data["start_date"])
        completed_date = parse_datetime(completed.data["completed_date"])
        assert start_date <= completed_date

        reopened = api_client.patch(url, {"status": "pending"}, format="json")

        assert reopened.data["completed_date"] is None
        assert parse_datetime(reopened.data["start_date"]) == start_date

    def test_any_transition_is_allowed(self, api_client, team):
        task = TaskFactory(project=team["project"], status=Task.STATUS_COMPLETED)
        api_client.force_authenticate(user=team["manager"])

        response = api_client.patch(
            reverse("task-detail", args=[task.id]), {"status": "cancelled"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["status"] == Task.STATUS_CANCELLED

    def test_plain_member_cannot_update(self, api_client, team):
        task = TaskFactory(project=team["project"])
        api_client.force_authenticate(user=team["member"])

        response = api_client.patch(
            reverse("task-detail", args=[task.id]), {"title": "Hijacked"}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        task.refresh_from_db()
        assert task.title != "Hijacked"

    def test_task_cannot_depend_on_itself(self, api_client, team):
        task = TaskFactory(project=team["project"])
        api_client.force_authenticate(user=team["manager"])

        response = api_client.patch(
            reverse("task-detail", args=[task.id]),
            {"dependencies": [str(task.id)]},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"]["field"] == "dependencies"


@pytest.mark.django_db
@pytest.mark.api
class TestTaskDelete:
    def test_assignee_alone_cannot_delete(self, api_client, team):
        task = TaskFactory(project=team["project"], assigned_to=team["member"])
        api_client.force_authenticate(user=team["member"])

        response = api_client.delete(reverse("task-detail", args=[task.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Task.objects.filter(pk=task.pk).exists()

    def test_team_lead_deletes_task_and_blobs(self, api_client, team, django_capture_on_commit_callbacks):
        task = TaskFactory(project=team["project"])
        attachment = TaskAttachmentFactory(task=task)
        blob = attachment.file.name
        storage = get_attachment_storage()
        assert storage.backend.exists(blob)
        api_client.force_authenticate(user=team["lead"])

        with django_capture_on_commit_callbacks(execute=True):
            response = api_client.delete(reverse("task-detail", args=[task.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Task.objects.filter(pk=task.pk).exists()
        assert not storage.backend.exists(blob)


@pytest.mark.django_db
@pytest.mark.api
class TestManagerLeadAssigneeScenario:
    def test_roles_on_one_task(self, api_client):
        manager = ManagerFactory()
        lead = UserFactory()
        assignee = UserFactory()
        project = ProjectFactory(manager=manager)
        api_client.force_authenticate(user=manager)
        team_url = reverse("project-team-list", args=[project.id])
        assert api_client.post(team_url, {"user_id": lead.id, "role": "team_lead"}, format="json").status_code == 201
        assert api_client.post(team_url, {"user_id": assignee.id}, format="json").status_code == 201

        created = api_client.post(reverse("task-list"), task_payload(project, assignee), format="json")
        assert created.status_code == status.HTTP_201_CREATED
        url = reverse("task-detail", args=[created.data["id"]])

        for user in (manager, lead, assignee):
            api_client.force_authenticate(user=user)
            assert api_client.get(url).status_code == status.HTTP_200_OK
            assert api_client.patch(url, {"priority": "low"}, format="json").status_code == status.HTTP_200_OK

        api_client.force_authenticate(user=assignee)
        assert api_client.delete(url).status_code == status.HTTP_403_FORBIDDEN

        api_client.force_authenticate(user=lead)
        assert api_client.delete(url).status_code == status.HTTP_204_NO_CONTENT

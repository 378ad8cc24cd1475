"""
Tests for the access-control evaluator. No database is needed: contexts are
built from plain ids.
"""
import uuid

import pytest

from apps.projects.access import (
    AccessContext,
    Decision,
    Operation,
    Principal,
    ProjectFacts,
    TaskFacts,
    decide,
)
from apps.projects.access.policy import (
    REASON_FORBIDDEN,
    REASON_NOT_AUTHENTICATED,
    REASON_NOT_FOUND,
    RULES,
    can,
)

MANAGER_ID = 1
LEAD_ID = 2
MEMBER_ID = 3
ASSIGNEE_ID = 4
CREATOR_ID = 5
STRANGER_ID = 6
OTHER_MANAGER_ID = 7

PROJECT_ID = uuid.uuid4()
TASK_ID = uuid.uuid4()


def project_facts(team_lead_id=LEAD_ID, members=None):
    if members is None:
        members = {LEAD_ID: "team_lead", MEMBER_ID: "team_member"}
    return ProjectFacts(
        id=PROJECT_ID,
        manager_id=MANAGER_ID,
        team_lead_id=team_lead_id,
        members=members,
    )


def task_context(**project_kwargs):
    return AccessContext(
        project=project_facts(**project_kwargs),
        task=TaskFacts(
            id=TASK_ID,
            project_id=PROJECT_ID,
            assigned_to_id=ASSIGNEE_ID,
            created_by_id=CREATOR_ID,
        ),
    )


def project_context(**project_kwargs):
    return AccessContext(project=project_facts(**project_kwargs))


manager = Principal(id=MANAGER_ID, role="manager")
lead = Principal(id=LEAD_ID, role="team_lead")
member = Principal(id=MEMBER_ID, role="team_member")
assignee = Principal(id=ASSIGNEE_ID, role="team_member")
creator = Principal(id=CREATOR_ID, role="team_member")
stranger = Principal(id=STRANGER_ID, role="team_member")
other_manager = Principal(id=OTHER_MANAGER_ID, role="manager")


class TestDecisionValue:
    def test_every_operation_has_a_rule(self):
        assert set(RULES) == set(Operation)

    def test_allow_is_truthy(self):
        assert Decision.allow()
        assert Decision.allow().reason is None

    def test_deny_is_falsy_and_carries_reason(self):
        decision = Decision.deny(REASON_FORBIDDEN)
        assert not decision
        assert decision.reason == REASON_FORBIDDEN

    @pytest.mark.parametrize("operation", list(Operation))
    def test_missing_principal_is_not_authenticated(self, operation):
        decision = decide(None, task_context(), operation)
        assert decision.allowed is False
        assert decision.reason == REASON_NOT_AUTHENTICATED


@pytest.mark.permissions
class TestProjectRules:
    def test_only_managers_create_projects(self):
        empty = AccessContext.empty()
        assert can(manager, empty, Operation.CREATE_PROJECT)
        assert can(other_manager, empty, Operation.CREATE_PROJECT)
        decision = decide(lead, empty, Operation.CREATE_PROJECT)
        assert decision.allowed is False
        assert decision.reason == REASON_FORBIDDEN

    @pytest.mark.parametrize("principal", [manager, lead, member])
    def test_related_principals_read_project(self, principal):
        assert can(principal, project_context(), Operation.READ_PROJECT)

    @pytest.mark.parametrize("principal", [stranger, other_manager, assignee, creator])
    def test_unrelated_principals_cannot_read_project(self, principal):
        decision = decide(principal, project_context(), Operation.READ_PROJECT)
        assert decision.allowed is False
        assert decision.reason == REASON_NOT_FOUND

    def test_manager_id_without_manager_role_cannot_read(self):
        demoted = Principal(id=MANAGER_ID, role="team_member")
        assert not can(demoted, project_context(), Operation.READ_PROJECT)

    def test_team_lead_without_membership_reads_project(self):
        context = project_context(members={})
        assert can(lead, context, Operation.READ_PROJECT)

    def test_null_team_lead_matches_nobody(self):
        context = project_context(team_lead_id=None, members={})
        assert not can(lead, context, Operation.READ_PROJECT)

    @pytest.mark.parametrize(
        "operation",
        [
            Operation.UPDATE_PROJECT,
            Operation.DELETE_PROJECT,
            Operation.ADD_TEAM_MEMBER,
            Operation.REMOVE_TEAM_MEMBER,
        ],
    )
    def test_project_manager_only_operations(self, operation):
        assert can(manager, project_context(), operation)
        for principal in (lead, member):
            decision = decide(principal, project_context(), operation)
            assert decision.reason == REASON_FORBIDDEN
        decision = decide(stranger, project_context(), operation)
        assert decision.reason == REASON_NOT_FOUND

    def test_create_task_manager_or_lead(self):
        assert can(manager, project_context(), Operation.CREATE_TASK)
        assert can(lead, project_context(), Operation.CREATE_TASK)
        assert decide(member, project_context(), Operation.CREATE_TASK).reason == REASON_FORBIDDEN
        assert decide(stranger, project_context(), Operation.CREATE_TASK).reason == REASON_NOT_FOUND

    def test_project_operation_without_project_is_not_found(self):
        decision = decide(manager, AccessContext.empty(), Operation.READ_PROJECT)
        assert decision.reason == REASON_NOT_FOUND


@pytest.mark.permissions
class TestTaskRules:
    @pytest.mark.parametrize("principal", [manager, lead, member, assignee, creator])
    def test_related_principals_read_task(self, principal):
        assert can(principal, task_context(), Operation.READ_TASK)
        assert can(principal, task_context(), Operation.ADD_COMMENT)

    def test_project_manager_reads_task_without_manager_role(self):
        demoted = Principal(id=MANAGER_ID, role="team_member")
        assert can(demoted, task_context(), Operation.READ_TASK)

    @pytest.mark.parametrize("principal", [stranger, other_manager])
    def test_unrelated_principals_get_not_found(self, principal):
        for operation in (
            Operation.READ_TASK,
            Operation.UPDATE_TASK,
            Operation.DELETE_TASK,
            Operation.ADD_ATTACHMENT,
            Operation.REMOVE_ATTACHMENT,
            Operation.ADD_COMMENT,
        ):
            decision = decide(principal, task_context(), operation)
            assert decision.reason == REASON_NOT_FOUND

    @pytest.mark.parametrize(
        "operation",
        [Operation.UPDATE_TASK, Operation.ADD_ATTACHMENT, Operation.REMOVE_ATTACHMENT],
    )
    def test_update_like_operations(self, operation):
        for principal in (assignee, creator, manager, lead):
            assert can(principal, task_context(), operation)
        decision = decide(member, task_context(), operation)
        assert decision.allowed is False
        assert decision.reason == REASON_FORBIDDEN

    def test_assignee_alone_cannot_delete(self):
        decision = decide(assignee, task_context(), Operation.DELETE_TASK)
        assert decision.allowed is False
        assert decision.reason == REASON_FORBIDDEN

    @pytest.mark.parametrize("principal", [creator, manager, lead])
    def test_delete_task_allowed(self, principal):
        assert can(principal, task_context(), Operation.DELETE_TASK)

    def test_task_operation_without_task_is_not_found(self):
        context = project_context()
        decision = decide(manager, context, Operation.READ_TASK)
        assert decision.reason == REASON_NOT_FOUND

    def test_manager_lead_assignee_scenario(self):
        """Manager M, lead L and assignee A on a task T created by M."""
        context = AccessContext(
            project=ProjectFacts(
                id=PROJECT_ID,
                manager_id=MANAGER_ID,
                team_lead_id=LEAD_ID,
                members={LEAD_ID: "team_lead", ASSIGNEE_ID: "team_member"},
            ),
            task=TaskFacts(
                id=TASK_ID,
                project_id=PROJECT_ID,
                assigned_to_id=ASSIGNEE_ID,
                created_by_id=MANAGER_ID,
            ),
        )
        for principal in (manager, lead, assignee):
            assert can(principal, context, Operation.READ_TASK)
            assert can(principal, context, Operation.UPDATE_TASK)
        assert can(manager, context, Operation.DELETE_TASK)
        assert can(lead, context, Operation.DELETE_TASK)
        assert not can(assignee, context, Operation.DELETE_TASK)

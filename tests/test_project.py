"""Tests for project service and commands."""

import pytest
from datetime import date
from decimal import Decimal

from freelancedesk.cli.main import cli
from freelancedesk.domain.entities import Priority, ProjectStatus, TaskTemplate
from freelancedesk.domain.errors import DependencyError, NotFoundError, ValidationError


class TestProjectService:
    """Tests for ProjectService."""

    def test_create_defaults(self, project_service):
        project_id = project_service.create_project(name="Internal")
        project = project_service.get_project(project_id)
        assert project.status == ProjectStatus.ACTIVE
        assert project.priority == Priority.MEDIUM
        assert project.client_id is None
        assert project.is_archived is False
        assert project.budget is None

    def test_create_with_client(self, sample_project, sample_client):
        assert sample_project.client_id == sample_client.id
        assert sample_project.budget == Decimal("50000")
        assert sample_project.priority == Priority.HIGH

    def test_unknown_client_rejected(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.create_project(name="X", client_id=123)

    def test_negative_budget_rejected(self, project_service):
        with pytest.raises(ValidationError, match="negative"):
            project_service.create_project(name="X", budget=Decimal("-1"))

    def test_deadline_before_start_rejected(self, project_service):
        with pytest.raises(ValidationError):
            project_service.create_project(
                name="X", start_date=date(2024, 2, 1), deadline=date(2024, 1, 1)
            )

    def test_on_hold_status_value(self, project_service):
        project_id = project_service.create_project(name="Paused", status="on-hold")
        assert project_service.get_project(project_id).status == ProjectStatus.ON_HOLD

    def test_update(self, project_service, sample_project):
        updated = project_service.update_project(
            sample_project.id, status="completed", budget=Decimal("60000")
        )
        assert updated.status == ProjectStatus.COMPLETED
        assert updated.budget == Decimal("60000")

    def test_update_checks_dates_against_existing(self, project_service, sample_project):
        """A new deadline must not precede the stored start date."""
        with pytest.raises(ValidationError):
            project_service.update_project(sample_project.id, deadline=date(2023, 12, 1))

    def test_archived_hidden_from_list(self, project_service, sample_project):
        project_service.set_archived(sample_project.id)
        assert project_service.list_projects() == []
        archived = project_service.list_projects(include_archived=True)
        assert [p.id for p in archived] == [sample_project.id]
        assert archived[0].is_archived

        project_service.set_archived(sample_project.id, archived=False)
        assert len(project_service.list_projects()) == 1

    def test_list_filters(self, project_service, sample_project):
        project_service.create_project(name="Other", status="cancelled")
        assert [p.name for p in project_service.list_projects(status="cancelled")] == ["Other"]
        by_client = project_service.list_projects(client_id=sample_project.client_id)
        assert [p.name for p in by_client] == ["Website Redesign"]

    def test_delete(self, project_service, sample_project):
        project_service.delete_project(sample_project.id)
        assert project_service.get_project(sample_project.id) is None

    def test_delete_blocked_by_tasks(self, project_service, task_service, sample_project):
        task_service.create_task(TaskTemplate(title="Mockups", project_id=sample_project.id))
        with pytest.raises(DependencyError, match="1 task"):
            project_service.delete_project(sample_project.id)

    def test_delete_blocked_by_expenses(self, project_service, expense_service, sample_project):
        expense_service.create_expense(
            project_id=sample_project.id,
            description="Fonts",
            amount=Decimal("99"),
            date=date(2024, 1, 10),
        )
        with pytest.raises(DependencyError, match="1 expense"):
            project_service.delete_project(sample_project.id)

    def test_delete_missing(self, project_service):
        with pytest.raises(NotFoundError):
            project_service.delete_project(999)

    def test_stats(self, project_service, sample_project):
        project_service.create_project(name="B", status="on-hold", budget=Decimal("1000.50"))
        archived_id = project_service.create_project(name="C", status="completed")
        project_service.set_archived(archived_id)

        stats = project_service.get_stats()
        assert stats.total == 3
        assert stats.active == 1
        assert stats.on_hold == 1
        assert stats.completed == 1
        assert stats.cancelled == 0
        assert stats.archived == 1
        assert stats.total_budget == Decimal("51000.50")
        assert stats.by_priority == {"high": 1, "medium": 2}

    def test_stats_empty(self, project_service):
        stats = project_service.get_stats()
        assert stats.total == 0
        assert stats.total_budget == Decimal("0")


def test_project_create_command(cli_runner, temp_db, sample_client):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "project",
            "create",
            "Logo",
            "--client",
            "Acme Corp",
            "--budget",
            "₹12,500",
            "--deadline",
            "2024-05-01",
        ],
    )
    assert result.exit_code == 0
    assert "Created project 'Logo'" in result.output

    projects = temp_db.list_projects()
    assert projects[0].budget == Decimal("12500")
    assert projects[0].deadline == date(2024, 5, 1)


def test_project_create_bad_budget(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "project", "create", "Logo", "--budget", "lots"],
    )
    assert result.exit_code == 1
    assert "Invalid budget" in result.output


def test_project_archive_and_list(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "project", "archive", str(sample_project.id)]
    )
    assert result.exit_code == 0
    assert "Archived project" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "list"])
    assert "No projects found" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "project", "list", "--all"]
    )
    assert "Website Redesign" in result.output
    assert "[archived]" in result.output


def test_project_stats_command(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "project", "stats"])
    assert result.exit_code == 0
    assert "Total projects: 1" in result.output
    assert "50,000.00" in result.output

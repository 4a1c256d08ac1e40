"""Tests for client service and commands."""

import pytest
from datetime import date

from freelancedesk.cli.main import cli
from freelancedesk.domain.entities import ClientStatus
from freelancedesk.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from freelancedesk.utils.client_resolver import resolve_client


class TestClientService:
    """Tests for ClientService."""

    def test_create_lowercases_email(self, client_service):
        """Emails are stored lowercased."""
        client_id = client_service.create_client(name="Jane", email="Jane@Example.COM")
        client = client_service.get_client(client_id)
        assert client.email == "jane@example.com"
        assert client.status == ClientStatus.ACTIVE
        assert client.payment_terms == 30

    def test_duplicate_email_rejected(self, client_service, sample_client):
        """Email uniqueness ignores case."""
        with pytest.raises(ConflictError, match="already exists"):
            client_service.create_client(name="Other", email="BILLING@acme.test")

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "two words@x.io"])
    def test_invalid_email_rejected(self, client_service, email):
        with pytest.raises(ValidationError):
            client_service.create_client(name="X", email=email)

    def test_invalid_status_rejected(self, client_service):
        with pytest.raises(ValidationError, match="Invalid client status"):
            client_service.create_client(name="X", email="x@y.io", status="vip")

    def test_name_too_long_rejected(self, client_service):
        with pytest.raises(ValidationError):
            client_service.create_client(name="x" * 101, email="x@y.io")

    def test_list_filters(self, client_service, sample_client):
        """Status filter and search on name, email or company."""
        client_service.create_client(name="Prospect Ltd", email="p@p.io", status="prospect")
        assert [c.name for c in client_service.list_clients(status="prospect")] == ["Prospect Ltd"]
        assert [c.name for c in client_service.list_clients(search="acme")] == ["Acme Corp"]
        assert len(client_service.list_clients()) == 2

    def test_update(self, client_service, sample_client):
        updated = client_service.update_client(
            sample_client.id, status="inactive", email="NEW@acme.test"
        )
        assert updated.status == ClientStatus.INACTIVE
        assert updated.email == "new@acme.test"

    def test_update_to_taken_email_rejected(self, client_service, sample_client):
        other_id = client_service.create_client(name="Other", email="other@x.io")
        with pytest.raises(ConflictError):
            client_service.update_client(other_id, email="billing@acme.test")

    def test_update_missing_client(self, client_service):
        with pytest.raises(NotFoundError):
            client_service.update_client(999, name="Ghost")

    def test_delete(self, client_service, sample_client):
        client_service.delete_client(sample_client.id)
        assert client_service.get_client(sample_client.id) is None

    def test_delete_blocked_by_project(self, client_service, sample_project):
        """A client with projects cannot be deleted."""
        with pytest.raises(DependencyError, match="1 project"):
            client_service.delete_client(sample_project.client_id)

    def test_delete_blocked_by_invoice(self, client_service, invoice_service, sample_client):
        invoice_service.create_invoice(client_id=sample_client.id, issue_date=date(2024, 1, 1))
        with pytest.raises(DependencyError, match="1 invoice"):
            client_service.delete_client(sample_client.id)


class TestClientResolver:
    """Tests for resolving client references."""

    def test_by_id(self, client_service, sample_client):
        assert resolve_client(client_service, sample_client.id) == sample_client.id
        assert resolve_client(client_service, str(sample_client.id)) == sample_client.id

    def test_by_email_and_name(self, client_service, sample_client):
        assert resolve_client(client_service, "BILLING@acme.test") == sample_client.id
        assert resolve_client(client_service, "Acme Corp") == sample_client.id
        assert resolve_client(client_service, "acme corp") == sample_client.id

    def test_not_found(self, client_service):
        with pytest.raises(ValueError, match="not found"):
            resolve_client(client_service, "Nobody")
        with pytest.raises(ValueError, match="not found"):
            resolve_client(client_service, 42)

    def test_ambiguous_name(self, client_service):
        client_service.create_client(name="Sam", email="sam1@x.io")
        client_service.create_client(name="Sam", email="sam2@x.io")
        with pytest.raises(ValueError, match="ambiguous"):
            resolve_client(client_service, "Sam")


def test_client_create_command(cli_runner, temp_db):
    """Creating a client from the CLI prints its ID."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "client", "create", "Acme", "--email", "a@acme.test"],
    )
    assert result.exit_code == 0
    assert "Created client 'Acme'" in result.output
    assert "ID:" in result.output


def test_client_create_uses_configured_payment_terms(cli_runner, temp_db, monkeypatch):
    """Payment terms default from FREELANCEDESK_PAYMENT_TERMS."""
    monkeypatch.setenv("FREELANCEDESK_PAYMENT_TERMS", "45")
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "client", "create", "Acme", "--email", "a@acme.test"],
    )
    assert result.exit_code == 0
    client = temp_db.get_client_by_email("a@acme.test")
    assert client.payment_terms == 45


def test_client_create_duplicate_command(cli_runner, temp_db, sample_client):
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "client",
            "create",
            "Copy",
            "--email",
            "billing@acme.test",
        ],
    )
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "already exists" in result.output


def test_client_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "client", "list"])
    assert result.exit_code == 0
    assert "No clients found" in result.output


def test_client_show_by_name(cli_runner, temp_db, sample_client):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "client", "show", "Acme Corp"]
    )
    assert result.exit_code == 0
    assert "billing@acme.test" in result.output
    assert "15 days" in result.output


def test_client_delete_blocked_command(cli_runner, temp_db, sample_project):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "client", "delete", "Acme Corp"],
        input="y\n",
    )
    assert result.exit_code == 1
    assert "Cannot delete client" in result.output


def test_client_delete_cancelled(cli_runner, temp_db, sample_client):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "client", "delete", str(sample_client.id)],
        input="n\n",
    )
    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output

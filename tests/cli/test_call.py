"""Tests for the call and storage CLI commands."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from callwire.cli.call import call, parse_headers
from callwire.cli.info import info
from callwire.cli.storage import storage
from callwire.client.exceptions import StorageError
from callwire.client.response import HTTPMethod, Response

from conftest import FakeStorage, FakeTransport


@pytest.fixture
def runner():
    """Create Click CLI runner."""
    return CliRunner()


def configured_with(transport):
    """Patch target for configure_from_config installing ``transport``."""

    def configure(config, registry=None, listener=None):
        registry.configure(transport)
        return registry

    return patch("callwire.cli.call.configure_from_config", side_effect=configure)


class TestParseHeaders:
    """Tests for header option parsing."""

    def test_parse(self):
        assert parse_headers(("X-A: 1", "Authorization:Bearer t:k")) == {
            "X-A": "1",
            "Authorization": "Bearer t:k",
        }

    def test_invalid(self):
        import click

        with pytest.raises(click.BadParameter):
            parse_headers(("no-separator",))


class TestCallCommand:
    """Tests for `callwire call`."""

    def test_get_prints_json(self, runner):
        transport = FakeTransport(Response(b'{"id": "u1"}', 200))

        with configured_with(transport):
            result = runner.invoke(call, ["get", "/users/u1", "-H", "X-Trace: t1"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "u1"}
        assert transport.calls[0]["method"] is HTTPMethod.GET
        assert transport.calls[0]["headers"] == {"X-Trace": "t1"}

    def test_post_sends_body(self, runner):
        transport = FakeTransport(Response(b"", 204))

        with configured_with(transport):
            result = runner.invoke(call, ["POST", "users", "--data", '{"name": "Ada"}'])

        assert result.exit_code == 0
        assert "no content" in result.output
        assert json.loads(transport.calls[0]["body"]) == {"name": "Ada"}

    def test_invalid_data(self, runner):
        result = runner.invoke(call, ["POST", "users", "--data", "{bad"])

        assert result.exit_code == 2
        assert "Invalid JSON" in result.output

    def test_backend_error_aborts(self, runner):
        transport = FakeTransport(Response(b'{"message": "missing"}', 404))

        with configured_with(transport):
            result = runner.invoke(call, ["GET", "users/u1", "--json"])

        assert result.exit_code == 1
        output = json.loads(result.output.split("Aborted!")[0])
        assert output["kind"] == "backend"
        assert output["status_code"] == 404
        assert output["error"] == {"message": "missing"}

    def test_retries_option(self, runner):
        transport = FakeTransport(Response(b"down", 500))

        with configured_with(transport):
            result = runner.invoke(call, ["GET", "users/u1", "--retries", "1"])

        assert result.exit_code == 1
        assert "server_error" in result.output
        assert len(transport.calls) == 1

    def test_configuration_error(self, runner, monkeypatch):
        monkeypatch.setenv("CALLWIRE_TRANSPORT", "lambda")

        result = runner.invoke(call, ["GET", "users/u1"])

        assert result.exit_code == 1
        assert "CALLWIRE_LAMBDA_FUNCTION" in result.output


class TestStorageCommands:
    """Tests for `callwire storage`."""

    @pytest.fixture
    def fake_storage(self):
        fake = FakeStorage()
        with patch("callwire.cli.storage.create_storage_transport", return_value=fake):
            yield fake

    def test_upload(self, runner, fake_storage, tmp_path):
        source = tmp_path / "a.txt"
        source.write_bytes(b"hello")

        result = runner.invoke(storage, ["upload", str(source), "docs/a.txt"])

        assert result.exit_code == 0
        assert fake_storage.objects == {"docs/a.txt": b"hello"}
        assert "memory://docs/a.txt" in result.output

    def test_download_to_file(self, runner, fake_storage, tmp_path):
        fake_storage.objects["docs/a.txt"] = b"hello"
        target = tmp_path / "out.txt"

        result = runner.invoke(storage, ["download", "docs/a.txt", "-o", str(target)])

        assert result.exit_code == 0
        assert target.read_bytes() == b"hello"

    def test_delete(self, runner, fake_storage):
        fake_storage.objects["docs/a.txt"] = b"hello"

        result = runner.invoke(storage, ["delete", "docs/a.txt", "--yes"])

        assert result.exit_code == 0
        assert fake_storage.objects == {}

    def test_download_failure(self, runner):
        class FailingStorage(FakeStorage):
            async def download(self, path):
                raise StorageError("denied", "AccessDenied")

        with patch("callwire.cli.storage.create_storage_transport", return_value=FailingStorage()):
            result = runner.invoke(storage, ["download", "docs/a.txt"])

        assert result.exit_code == 1
        assert "Download failed" in result.output

    def test_storage_not_configured(self, runner):
        with patch("callwire.cli.storage.create_storage_transport", return_value=None):
            result = runner.invoke(storage, ["delete", "x", "--yes"])

        assert result.exit_code == 1
        assert "Storage is not configured" in result.output


class TestInfoCommand:
    def test_info_http(self, runner):
        result = runner.invoke(info, [])

        assert result.exit_code == 0
        assert "http" in result.output
        assert "3 attempts" in result.output

"""Tests for session persistence."""

from unittest.mock import patch

import pytest

from cloudraid_connector.auth.session_store import SESSION_FILE_NAME, SessionStore
from cloudraid_connector.config.settings import get_settings
from cloudraid_connector.core.connector import SESSION_PREFIX, ServerConnector
from cloudraid_connector.core.errors import SessionStoreError

from conftest import SESSION, StubTransport


class TestSessionStore:
    """Test storing and restoring sessions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.transport = StubTransport()

    def test_round_trip(self, connection, tmp_path):
        store = SessionStore(tmp_path / "cloudraid-client")
        connector = ServerConnector(connection, transport=self.transport, session_store=store, session=SESSION)

        connector.store_session()
        restored = store.restore_session(transport=self.transport)

        assert restored.connection == connection
        assert restored.connection.password == "s3cret"
        assert restored.session == SESSION
        assert restored.is_authenticated
        assert restored.session_store is store
        assert restored.transport is self.transport

    def test_file_layout(self, connection, tmp_path):
        store = SessionStore(tmp_path)
        connector = ServerConnector(connection, transport=self.transport, session=SESSION)

        store.store(connector)

        assert store.path == tmp_path / SESSION_FILE_NAME
        assert store.path.read_text(encoding="utf-8") == (
            "cloud.example.org\nalice\ns3cret\n8080\n" + SESSION + "\n"
        )

    def test_store_without_session_is_noop(self, connection, tmp_path):
        store = SessionStore(tmp_path / "config")
        connector = ServerConnector(connection, transport=self.transport, session_store=store)

        connector.store_session()

        assert not store.exists()
        assert not (tmp_path / "config").exists()

    def test_restore_does_not_contact_server(self, connection, tmp_path):
        store = SessionStore(tmp_path)
        store.store(ServerConnector(connection, transport=self.transport, session=SESSION))

        store.restore_session(transport=self.transport)

        assert self.transport.requests == []

    def test_restore_missing_file(self, tmp_path):
        store = SessionStore(tmp_path / "nowhere")

        with pytest.raises(SessionStoreError):
            store.restore_session(transport=self.transport)

    def test_restore_truncated_file(self, tmp_path):
        (tmp_path / SESSION_FILE_NAME).write_text("host\nuser\n", encoding="utf-8")

        with pytest.raises(SessionStoreError):
            SessionStore(tmp_path).restore_session(transport=self.transport)

    @pytest.mark.parametrize("port", ["eighty", "0", "70000"])
    def test_restore_bad_port(self, tmp_path, port):
        (tmp_path / SESSION_FILE_NAME).write_text(
            f"host\nuser\npw\n{port}\n{SESSION}\n", encoding="utf-8"
        )

        with pytest.raises(SessionStoreError):
            SessionStore(tmp_path).restore_session(transport=self.transport)

    def test_store_unwritable_location(self, connection, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = SessionStore(blocker / "config")

        with pytest.raises(SessionStoreError):
            store.store(ServerConnector(connection, transport=self.transport, session=SESSION))

    def test_remove(self, connection, tmp_path):
        store = SessionStore(tmp_path)
        store.store(ServerConnector(connection, transport=self.transport, session=SESSION))

        store.remove()
        store.remove()

        assert not store.exists()

    def test_restore_creates_default_transport(self, connection, tmp_path):
        store = SessionStore(tmp_path)
        store.store(ServerConnector(connection, transport=self.transport, session=SESSION))

        restored = store.restore_session(scheme="https")

        assert restored.transport.base_url == "https://cloud.example.org:8080"

    def test_default_config_home_from_settings(self, monkeypatch, tmp_path):
        monkeypatch.setattr(get_settings().session, "config_home", tmp_path / "home")

        store = SessionStore()

        assert store.config_home == tmp_path / "home"
        assert store.path == tmp_path / "home" / SESSION_FILE_NAME

    def test_stored_session_is_masked_in_log(self, connection, tmp_path):
        store = SessionStore(tmp_path)
        connector = ServerConnector(connection, transport=self.transport, session=SESSION)

        with patch("cloudraid_connector.auth.session_store.logger") as logger:
            store.store(connector)

        logged = logger.info.call_args.kwargs["session"]
        assert logged == SESSION[:len(SESSION_PREFIX) + 4] + "..."
        assert SESSION not in logged

"""Tests for persisted session storage."""

import json

from healthwire.services.storage_service import JsonFileStorage, MemoryStorage, create_storage


class TestMemoryStorage:
    """Test the in-memory backend."""

    def test_set_get_remove(self):
        """Test the basic key/value operations."""
        storage = MemoryStorage()
        storage.set_item("token", "T1")
        assert storage.get_item("token") == "T1"
        storage.remove_item("token")
        assert storage.get_item("token") is None

    def test_remove_missing_key(self):
        """Test that removing an absent key is a no-op."""
        storage = MemoryStorage()
        storage.remove_item("nothing")
        assert storage.keys() == []

    def test_json_helpers(self):
        """Test JSON values and unreadable JSON."""
        storage = MemoryStorage()
        storage.set_json("user", {"id": 5, "role": "client"})
        assert storage.get_json("user") == {"id": 5, "role": "client"}

        storage.set_item("user", "{not json")
        assert storage.get_json("user") is None

    def test_unserializable_value_not_stored(self):
        """Test that values JSON cannot encode are skipped, not raised."""
        storage = MemoryStorage()
        storage.set_json("user", {"callback": object()})
        assert storage.get_item("user") is None


class TestJsonFileStorage:
    """Test the file backend."""

    def test_survives_restart(self, tmp_path):
        """Test that values written by one instance are read by the next."""
        path = tmp_path / "session.json"
        first = JsonFileStorage(str(path))
        first.set_item("token", "T1")
        first.set_json("user", {"id": 5})

        second = JsonFileStorage(str(path))

        assert second.get_item("token") == "T1"
        assert second.get_json("user") == {"id": 5}

    def test_remove_is_persisted(self, tmp_path):
        """Test that removals reach the file."""
        path = tmp_path / "session.json"
        storage = JsonFileStorage(str(path))
        storage.set_item("token", "T1")
        storage.remove_item("token")

        assert json.loads(path.read_text()) == {}

    def test_creates_parent_directory(self, tmp_path):
        """Test that a missing directory is created on first write."""
        path = tmp_path / "nested" / "dir" / "session.json"
        JsonFileStorage(str(path)).set_item("token", "T1")
        assert path.exists()

    def test_corrupt_file_ignored(self, tmp_path):
        """Test that an unreadable file starts an empty store."""
        path = tmp_path / "session.json"
        path.write_text("{{{")
        assert JsonFileStorage(str(path)).keys() == []

    def test_non_object_file_ignored(self, tmp_path):
        """Test that a JSON file that is not an object starts an empty store."""
        path = tmp_path / "session.json"
        path.write_text("[1, 2]")
        assert JsonFileStorage(str(path)).keys() == []

    def test_unwritable_path(self, tmp_path):
        """Test that a failed write is logged and the value is kept in memory."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        storage = JsonFileStorage(str(blocker / "session.json"))

        storage.set_item("token", "T1")
        assert storage.get_item("token") == "T1"

        storage.remove_item("token")
        assert storage.get_item("token") is None
        assert blocker.read_text() == ""


class TestCreateStorage:
    """Test backend selection from settings."""

    def test_memory_backend(self, monkeypatch):
        from healthwire.config import settings
        monkeypatch.setattr(settings, "STORAGE_BACKEND", "memory")
        assert type(create_storage()) is MemoryStorage

    def test_file_backend(self, monkeypatch, tmp_path):
        from healthwire.config import settings
        monkeypatch.setattr(settings, "STORAGE_BACKEND", "file")
        monkeypatch.setattr(settings, "STORAGE_PATH", str(tmp_path / "s.json"))
        storage = create_storage()
        assert isinstance(storage, JsonFileStorage)
        assert storage.path == str(tmp_path / "s.json")

"""仓库属性存储测试"""

from __future__ import annotations

import threading

import pytest

from inspector.core import registry as registry_mod
from inspector.core.exceptions import PropertyWriteError, RepositoryNotFoundError, ValidationError
from inspector.core.properties import PropertyStore

STATUS = "blackduck.inspection.status"


class TestPropertyStore:
    def test_unset_property_is_empty(self, container, make_repo) -> None:
        make_repo("maven-remote", "maven")
        assert container.properties.get_property("maven-remote", STATUS) == []

    def test_set_replaces_values(self, container, make_repo) -> None:
        make_repo("maven-remote", "maven")
        store = container.properties
        store.set_property("maven-remote", STATUS, ["FAILURE"])
        store.set_property("maven-remote", STATUS, ["SUCCESS"])
        assert store.get_property("maven-remote", STATUS) == ["SUCCESS"]

    def test_get_returns_copy(self, container, make_repo) -> None:
        make_repo("r", "npm")
        store = container.properties
        store.set_property("r", STATUS, ["SUCCESS"])
        store.get_property("r", STATUS).append("FAILURE")
        assert store.get_property("r", STATUS) == ["SUCCESS"]

    def test_set_properties_and_get_all(self, container, make_repo) -> None:
        make_repo("r", "npm")
        store = container.properties
        store.set_properties("r", {STATUS: ["SUCCESS"], "other": ["a", "b"]})
        assert store.get_properties("r") == {STATUS: ["SUCCESS"], "other": ["a", "b"]}

    def test_delete_property(self, container, make_repo) -> None:
        make_repo("r", "npm")
        store = container.properties
        store.set_property("r", STATUS, ["SUCCESS"])
        assert store.delete_property("r", STATUS) is True
        assert store.delete_property("r", STATUS) is False
        assert store.get_property("r", STATUS) == []

    def test_persisted_across_instances(self, container, make_repo, config) -> None:
        make_repo("r", "npm")
        container.properties.set_property("r", STATUS, ["SUCCESS"])
        reopened = PropertyStore(config.properties_file, repositories=container.repositories)
        assert reopened.get_property("r", STATUS) == ["SUCCESS"]

    def test_clear(self, container, make_repo) -> None:
        make_repo("r", "npm")
        container.properties.set_property("r", STATUS, ["SUCCESS"])
        assert container.properties.clear("r") is True
        assert container.properties.get_properties("r") == {}


class TestUnknownRepository:
    def test_set_on_unknown_repository_raises(self, container) -> None:
        with pytest.raises(RepositoryNotFoundError):
            container.properties.set_property("ghost", STATUS, ["SUCCESS"])

    def test_get_on_unknown_repository_raises(self, container) -> None:
        with pytest.raises(RepositoryNotFoundError):
            container.properties.get_property("ghost", STATUS)

    def test_no_entry_created(self, container) -> None:
        with pytest.raises(RepositoryNotFoundError):
            container.properties.set_property("ghost", STATUS, ["SUCCESS"])
        assert container.properties._get_raw("ghost") is None


class TestValidation:
    def test_plain_string_rejected(self, container, make_repo) -> None:
        make_repo("r", "npm")
        with pytest.raises(ValidationError):
            container.properties.set_property("r", STATUS, "SUCCESS")

    def test_non_string_values_rejected(self, container, make_repo) -> None:
        make_repo("r", "npm")
        with pytest.raises(ValidationError):
            container.properties.set_property("r", STATUS, [1])


class TestWriteFailure:
    def test_failed_write_keeps_previous_value(self, container, make_repo, monkeypatch) -> None:
        make_repo("r", "npm")
        store = container.properties
        store.set_property("r", STATUS, ["SUCCESS"])

        def fail(*_args, **_kwargs) -> None:
            raise OSError("read-only file system")

        monkeypatch.setattr(registry_mod, "save_yaml", fail)
        with pytest.raises(PropertyWriteError):
            store.set_property("r", STATUS, ["FAILURE"])
        assert store.get_property("r", STATUS) == ["SUCCESS"]


class TestConcurrency:
    def test_lock_for_is_per_key(self, container) -> None:
        store = container.properties
        assert store.lock_for("a") is store.lock_for("a")
        assert store.lock_for("a") is not store.lock_for("b")

    def test_concurrent_writes_leave_single_value(self, container, make_repo) -> None:
        make_repo("r", "npm")
        store = container.properties
        seen: list[list[str]] = []

        def writer(value: str) -> None:
            for _ in range(20):
                store.set_property("r", STATUS, [value])

        def reader() -> None:
            for _ in range(40):
                seen.append(store.get_property("r", STATUS))

        threads = [threading.Thread(target=writer, args=(v,)) for v in ("SUCCESS", "FAILURE")]
        threads.append(threading.Thread(target=reader))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.get_property("r", STATUS)) == 1
        assert all(len(values) <= 1 for values in seen)

    def test_write_racing_repository_delete_leaves_no_entry(self, container, make_repo, monkeypatch) -> None:
        make_repo("r", "maven")
        store = container.properties
        original = store._ensure_repository
        deleter: list[threading.Thread] = []

        def delete_repository() -> None:
            container.repositories.delete("r")
            store.clear("r")

        def ensure_then_delete(key: str) -> None:
            original(key)
            if not deleter:
                t = threading.Thread(target=delete_repository)
                deleter.append(t)
                t.start()
                t.join(timeout=0.2)

        monkeypatch.setattr(store, "_ensure_repository", ensure_then_delete)
        store.set_property("r", STATUS, ["SUCCESS"])
        deleter[0].join()

        assert store._get_raw("r") is None
        make_repo("r", "docker")
        assert store.get_property("r", STATUS) == []

    def test_clear_after_delete_releases_lock(self, container, make_repo) -> None:
        make_repo("r", "maven")
        store = container.properties
        store.set_property("r", STATUS, ["SUCCESS"])
        container.repositories.delete("r")
        store.clear("r")
        assert "r" not in store._key_locks

    def test_clear_keeps_lock_of_existing_repository(self, container, make_repo) -> None:
        make_repo("r", "maven")
        store = container.properties
        lock = store.lock_for("r")
        store.clear("r")
        assert store.lock_for("r") is lock

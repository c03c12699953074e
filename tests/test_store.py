import os
from unittest import mock

import pytest

from kubenv.errors import (
    AlreadyAppliedError,
    ConfigNotFoundError,
    InvalidNameError,
    NameConflictError,
    StoreIOError,
)
from kubenv.store import ConfigStore, content_hash

DEV = b"apiVersion: v1\nkind: Config\ncurrent-context: dev\n"
PROD = b"apiVersion: v1\nkind: Config\ncurrent-context: prod\n"


@pytest.fixture
def store(tmp_path):
    return ConfigStore(store_dir=tmp_path / "kube" / "kubenv", kube_dir=tmp_path / "kube")


def test_list_uninitialized_store(store):
    assert store.list() == []
    assert store.current() is None


def test_add_then_list(store):
    store.add("dev", DEV)
    store.add("prod", PROD)

    names = [kc.name for kc in store.list()]
    assert names == ["dev", "prod"]
    assert (store.store_dir / "dev.kubeconfig").read_bytes() == DEV


def test_list_ignores_foreign_entries(store):
    store.add("dev", DEV)
    (store.store_dir / "notes.txt").write_text("hello")
    (store.store_dir / "nested.kubeconfig").mkdir()

    assert [kc.name for kc in store.list()] == ["dev"]


def test_show_round_trip(store):
    payload = b"\x00\xffbinary-ish\r\ncontent"
    store.add("odd", payload)
    assert store.show("odd") == payload


def test_add_existing_name_is_refused(store):
    store.add("dev", DEV)
    with pytest.raises(NameConflictError):
        store.add("dev", PROD)
    # Original content stays in place
    assert store.show("dev") == DEV


def test_add_duplicate_content_is_refused(store):
    store.add("dev", DEV)
    with pytest.raises(NameConflictError, match="'dev'"):
        store.add("dev-copy", DEV)
    assert [kc.name for kc in store.list()] == ["dev"]


def test_add_without_name_uses_hash(store):
    config = store.add(None, DEV)
    assert config.name == content_hash(DEV)
    assert store.show(config.name) == DEV


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "../escape"])
def test_add_invalid_name(store, name):
    with pytest.raises(InvalidNameError):
        store.add(name, DEV)


def test_remove(store):
    store.add("dev", DEV)
    store.remove("dev")

    assert store.list() == []
    with pytest.raises(ConfigNotFoundError):
        store.show("dev")


def test_remove_missing(store):
    with pytest.raises(ConfigNotFoundError, match="'ghost'"):
        store.remove("ghost")


def test_export_matches_show(store, tmp_path):
    store.add("dev", DEV)
    destination = tmp_path / "out.yaml"

    store.export("dev", destination)
    assert destination.read_bytes() == store.show("dev")


def test_export_missing_config(store, tmp_path):
    with pytest.raises(ConfigNotFoundError):
        store.export("ghost", tmp_path / "out.yaml")
    assert not (tmp_path / "out.yaml").exists()


def test_export_to_missing_directory(store, tmp_path):
    store.add("dev", DEV)
    with pytest.raises(StoreIOError):
        store.export("dev", tmp_path / "no-such-dir" / "out.yaml")


def test_apply_writes_active_pointer(store):
    store.add("dev", DEV)
    store.apply("dev")

    assert store.active_path.read_bytes() == DEV
    current = store.current()
    assert current.name == "dev"
    assert current.stored


def test_apply_switches_between_configs(store):
    store.add("dev", DEV)
    store.add("prod", PROD)
    store.apply("dev")
    store.apply("prod")

    assert store.active_path.read_bytes() == PROD
    assert store.current().name == "prod"


def test_apply_missing_config(store):
    with pytest.raises(ConfigNotFoundError, match="'dev'"):
        store.apply("dev")
    assert not store.active_path.exists()


def test_apply_twice_reports_already_applied(store):
    store.add("dev", DEV)
    store.apply("dev")
    with pytest.raises(AlreadyAppliedError):
        store.apply("dev")


def test_failed_apply_keeps_previous_pointer(store):
    store.add("dev", DEV)
    store.add("prod", PROD)
    store.apply("dev")

    with mock.patch("kubenv.store.os.replace", side_effect=PermissionError("denied")):
        with pytest.raises(StoreIOError, match="denied"):
            store.apply("prod")

    assert store.active_path.read_bytes() == DEV
    # No temporary files left behind
    assert sorted(os.listdir(store.kube_dir)) == ["config", "kubenv"]


def test_current_unstored_active_config(store):
    store.kube_dir.mkdir(parents=True)
    store.active_path.write_bytes(PROD)

    current = store.current()
    assert not current.stored
    assert current.name == content_hash(PROD)[:8]
    assert current.short_hash == current.name


def test_export_follows_symlink(store, tmp_path):
    store.add("dev", DEV)
    target = tmp_path / "real.yaml"
    target.write_bytes(b"old")
    link = tmp_path / "link.yaml"
    link.symlink_to(target)

    store.export("dev", link)

    assert link.is_symlink()
    assert target.read_bytes() == DEV


def test_export_keeps_existing_file_mode(store, tmp_path):
    store.add("dev", DEV)
    destination = tmp_path / "out.yaml"
    destination.write_bytes(b"old content that is longer than the config itself" * 4)
    destination.chmod(0o644)

    store.export("dev", destination)

    assert destination.read_bytes() == DEV
    assert destination.stat().st_mode & 0o777 == 0o644


def test_add_invalid_name_checked_before_duplicate_content(store):
    store.add("dev", DEV)
    with pytest.raises(InvalidNameError):
        store.add("../x", DEV)

from __future__ import annotations

import json
import logging
import sys
import threading
from pathlib import Path

import pytest

# Make the blog_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blog_api.domain.errors import PersistenceError, RecordNotFoundError  # noqa: E402
from blog_api.domain.records import Profile, RecordKind  # noqa: E402
from blog_api.repositories.json_storage import SnapshotWriter  # noqa: E402
from blog_api.services.store import Store  # noqa: E402


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "DB" / "db.json"


@pytest.fixture()
def store(data_file):
    return Store(SnapshotWriter(data_file))


def _on_disk(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_sequential_creates_get_ids_in_order(store):
    created = [store.create(RecordKind.POSTS, {"title": f"t{i}", "author": "bob"}) for i in range(5)]
    assert [post.id for post in created] == [1, 2, 3, 4, 5]
    assert [post.id for post in store.list_all(RecordKind.POSTS)] == [1, 2, 3, 4, 5]


def test_create_after_delete_never_reuses_an_id(store):
    for title in ("a", "b", "c"):
        store.create(RecordKind.POSTS, {"title": title})
    store.delete(RecordKind.POSTS, 2)

    new_post = store.create(RecordKind.POSTS, {"title": "d"})

    ids = [post.id for post in store.list_all(RecordKind.POSTS)]
    assert new_post.id == 4
    assert ids == [1, 3, 4]
    assert len(set(ids)) == len(ids)


def test_create_ignores_client_id_and_zero_fills_missing_fields(store):
    post = store.create(RecordKind.POSTS, {"id": 99, "title": "only title"})
    assert post.id == 1
    assert post.author == ""


def test_get_missing_raises_not_found(store):
    store.create(RecordKind.COMMENTS, {"body": "hi", "postID": 1})
    with pytest.raises(RecordNotFoundError) as excinfo:
        store.get(RecordKind.COMMENTS, 7)
    assert excinfo.value.kind == "comments"
    assert excinfo.value.record_id == 7


def test_update_is_full_replace_and_keeps_id(store):
    store.create(RecordKind.POSTS, {"title": "A", "author": "bob"})

    updated = store.update(RecordKind.POSTS, 1, {"title": "B"})

    assert updated.id == 1
    assert updated.title == "B"
    assert updated.author == ""
    assert store.get(RecordKind.POSTS, 1) == updated


def test_update_missing_id_leaves_collection_unchanged(store):
    store.create(RecordKind.POSTS, {"title": "A", "author": "bob"})
    before = store.list_all(RecordKind.POSTS)

    with pytest.raises(RecordNotFoundError):
        store.update(RecordKind.POSTS, 42, {"title": "nope"})

    assert store.list_all(RecordKind.POSTS) == before


def test_delete_preserves_order_and_returns_remaining(store):
    for title in ("a", "b", "c", "d"):
        store.create(RecordKind.POSTS, {"title": title})

    remaining = store.delete(RecordKind.POSTS, 2)

    assert [post.title for post in remaining] == ["a", "c", "d"]
    with pytest.raises(RecordNotFoundError):
        store.delete(RecordKind.POSTS, 2)
    assert len(store.list_all(RecordKind.POSTS)) == 3


def test_delete_comments_by_post_id_removes_exactly_matching(store):
    bodies = [("c1", 1), ("c2", 1), ("c3", 2), ("c4", 1), ("c5", 3)]
    for body, post_id in bodies:
        store.create(RecordKind.COMMENTS, {"body": body, "postID": post_id})

    removed = store.delete_comments_by_post_id(1)

    assert [item.body for item in removed] == ["c1", "c2", "c4"]
    assert [item.body for item in store.list_all(RecordKind.COMMENTS)] == ["c3", "c5"]
    assert store.delete_comments_by_post_id(1) == []


def test_deleting_post_keeps_its_comments_by_default(store):
    store.create(RecordKind.POSTS, {"title": "A"})
    store.create(RecordKind.COMMENTS, {"body": "x", "postID": 1})

    store.delete(RecordKind.POSTS, 1)

    assert [item.post_id for item in store.list_all(RecordKind.COMMENTS)] == [1]


def test_cascade_post_delete_removes_comments(data_file):
    store = Store(SnapshotWriter(data_file), cascade_post_delete=True)
    store.create(RecordKind.POSTS, {"title": "A"})
    store.create(RecordKind.POSTS, {"title": "B"})
    store.create(RecordKind.COMMENTS, {"body": "x", "postID": 1})
    store.create(RecordKind.COMMENTS, {"body": "y", "postID": 2})

    store.delete(RecordKind.POSTS, 1)

    assert [item.body for item in store.list_all(RecordKind.COMMENTS)] == ["y"]


def test_filters_by_author_and_post(store):
    store.create(RecordKind.POSTS, {"title": "A", "author": "bob"})
    store.create(RecordKind.POSTS, {"title": "B", "author": "Bob"})
    store.create(RecordKind.POSTS, {"title": "C", "author": "bob"})
    store.create(RecordKind.COMMENTS, {"body": "x", "postID": 3})

    assert [post.title for post in store.posts_by_author("bob")] == ["A", "C"]
    assert [item.body for item in store.comments_for_post(3)] == ["x"]
    assert store.comments_for_post(1) == []


def test_profile_singleton(store):
    assert store.get_profile() == Profile()
    assert store.set_profile({"name": "ana"}).name == "ana"
    assert store.set_profile({}).name == ""
    store.set_profile({"name": "rui"})
    assert store.clear_profile() == Profile(name="")
    assert store.get_profile().name == ""


def test_snapshot_on_disk_matches_memory_after_each_call(store, data_file):
    store.create(RecordKind.POSTS, {"title": "A", "author": "bob"})
    assert _on_disk(data_file) == store.snapshot()

    store.create(RecordKind.COMMENTS, {"body": "hi", "postID": 1})
    store.set_profile({"name": "ana"})
    assert _on_disk(data_file) == {
        "posts": [{"id": 1, "title": "A", "author": "bob"}],
        "comments": [{"id": 1, "body": "hi", "postID": 1}],
        "profile": {"name": "ana"},
    }

    store.delete(RecordKind.POSTS, 1)
    assert _on_disk(data_file)["posts"] == []


def test_reads_refresh_the_snapshot(store, data_file):
    store.create(RecordKind.POSTS, {"title": "A"})
    data_file.unlink()

    store.list_all(RecordKind.POSTS)

    assert _on_disk(data_file)["posts"][0]["title"] == "A"


def test_restore_resumes_counters(store):
    store.restore(
        {
            "posts": [{"id": 1, "title": "a", "author": "x"}, {"id": 5, "title": "b", "author": "y"}],
            "comments": [{"id": 2, "body": "c", "postID": 5}],
            "profile": {"name": "ana"},
        }
    )

    assert store.create(RecordKind.POSTS, {"title": "c"}).id == 6
    assert store.create(RecordKind.COMMENTS, {"body": "d"}).id == 3
    assert store.get_profile().name == "ana"


def test_reload_reads_snapshot_file(data_file):
    first = Store(SnapshotWriter(data_file))
    first.create(RecordKind.POSTS, {"title": "A", "author": "bob"})

    second = Store(SnapshotWriter(data_file))
    assert second.reload() is True
    assert second.get(RecordKind.POSTS, 1).author == "bob"


def test_reload_without_file_is_noop(store):
    assert store.reload() is False
    assert store.list_all(RecordKind.POSTS) == []


def test_persistence_failure_is_logged_and_swallowed(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = Store(SnapshotWriter(blocker / "db.json"))

    with caplog.at_level(logging.ERROR):
        post = store.create(RecordKind.POSTS, {"title": "A"})

    assert post.id == 1
    assert store.get(RecordKind.POSTS, 1).title == "A"
    assert "Error writing snapshot" in caplog.text


def test_strict_persistence_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = Store(SnapshotWriter(blocker / "db.json"), strict_persistence=True)

    with pytest.raises(PersistenceError):
        store.create(RecordKind.POSTS, {"title": "A"})


def test_store_without_writer_keeps_state_in_memory():
    store = Store()
    store.create(RecordKind.POSTS, {"title": "A"})
    store.flush()
    assert store.snapshot()["posts"] == [{"id": 1, "title": "A", "author": ""}]


def test_concurrent_creates_get_unique_ids(store, data_file):
    def worker():
        for _ in range(20):
            store.create(RecordKind.COMMENTS, {"body": "x", "postID": 1})

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [item.id for item in store.list_all(RecordKind.COMMENTS)]
    assert sorted(ids) == list(range(1, 161))
    assert len(_on_disk(data_file)["comments"]) == 160


@pytest.mark.parametrize(
    "state",
    [
        {"posts": [{"id": "x", "title": "a", "author": "b"}], "comments": [], "profile": {}},
        {"posts": 5, "comments": [], "profile": {}},
        {"posts": [], "comments": {"id": 1}, "profile": {}},
        {"posts": [], "comments": [], "profile": 7},
    ],
)
def test_reload_rejects_invalid_records(data_file, state):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(json.dumps(state), encoding="utf-8")
    store = Store(SnapshotWriter(data_file))

    with pytest.raises(PersistenceError):
        store.reload()

    assert store.snapshot() == {"posts": [], "comments": [], "profile": {"name": ""}}

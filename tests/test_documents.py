"""Tests for the shared document store."""

import threading

from ti_lsp.documents import DocumentStore


def test_open_and_get():
    """Opened documents can be read back."""
    store = DocumentStore()
    store.open("file:///a.rb", "puts 1")
    assert store.get("file:///a.rb") == "puts 1"
    assert "file:///a.rb" in store
    assert len(store) == 1


def test_update_replaces_whole_text():
    """Updates replace the full text."""
    store = DocumentStore()
    store.open("file:///a.rb", "puts 1")
    store.update("file:///a.rb", "puts 2")
    assert store.get("file:///a.rb") == "puts 2"


def test_unknown_uri():
    store = DocumentStore()
    assert store.get("file:///missing.rb") is None
    assert "file:///missing.rb" not in store


def test_snapshot_is_not_affected_by_later_updates():
    """A text read earlier is not changed by later updates."""
    store = DocumentStore()
    store.open("file:///a.rb", "v1")
    snapshot = store.get("file:///a.rb")
    store.update("file:///a.rb", "v2")
    assert snapshot == "v1"


def test_concurrent_writers():
    """Concurrent writers to different documents keep their last update."""
    store = DocumentStore()

    def writer(index: int) -> None:
        for n in range(200):
            store.update(f"file:///{index}.rb", f"{index}:{n}")

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 8
    assert store.get("file:///3.rb") == "3:199"

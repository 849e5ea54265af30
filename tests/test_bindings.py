import pytest

from conftest import run
from cookwho.db.bindings import CollectionBinding, DocumentBinding
from cookwho.db.documents import Subscription, collection, doc


class FailingStore:
    """Listener attaches, then the remote side reports an error."""

    def __init__(self):
        self.released = 0

    def _listen(self, on_error):
        on_error(RuntimeError("permission denied"))
        return Subscription(self._release)

    def _release(self):
        self.released += 1

    def listen_document(self, ref, on_next, on_error):
        return self._listen(on_error)

    def listen_query(self, query, on_next, on_error):
        return self._listen(on_error)


def test_document_binding_publishes_record_with_id(store):
    run(store.set_document(doc("users", "u1"), {"display_name": "Ada"}))
    seen = []
    binding = DocumentBinding(store, on_change=lambda b: seen.append((b.data, b.loading)))

    binding.bind(doc("users", "u1"))

    assert binding.loading is False
    assert binding.data == {"display_name": "Ada", "id": "u1"}
    assert seen == [({"display_name": "Ada", "id": "u1"}, False)]


def test_document_binding_follows_changes_and_deletes(store):
    ref = doc("users", "u1")
    run(store.set_document(ref, {"display_name": "Ada"}))
    binding = DocumentBinding(store).bind(ref)

    run(store.update_document(ref, {"display_name": "Ada L."}))
    assert binding.data["display_name"] == "Ada L."

    run(store.delete_document(ref))
    assert binding.data is None
    assert binding.loading is False


def test_missing_document_is_none(store):
    binding = DocumentBinding(store).bind(doc("users", "ghost"))
    assert binding.data is None
    assert binding.loading is False


def test_binding_none_settles_without_listening(store):
    seen = []
    binding = DocumentBinding(store, on_change=lambda b: seen.append(b.data))

    binding.bind(None)

    assert binding.data is None
    assert binding.loading is False
    assert binding.active is False
    assert seen == [None]


def test_collection_binding_republishes_full_list(store):
    query = collection("restaurants").where("is_available", True)
    binding = CollectionBinding(store).bind(query)
    assert binding.data == []

    run(store.set_document(doc("restaurants", "r1"), {"name": "One", "is_available": True}))
    run(store.set_document(doc("restaurants", "r2"), {"name": "Two", "is_available": False}))

    assert binding.data == [{"name": "One", "is_available": True, "id": "r1"}]


def test_rebinding_releases_previous_listener(store):
    first = collection("restaurants")
    second = collection("restaurants").where("is_available", True)
    updates = []
    binding = CollectionBinding(store, on_change=lambda b: updates.append(b.target))
    binding.bind(first)
    binding.bind(second)
    updates.clear()

    run(store.set_document(doc("restaurants", "r1"), {"is_available": True}))

    # only the current query is still listening
    assert updates == [second]


def test_same_query_object_keeps_subscription(store):
    query = collection("restaurants")
    calls = []
    binding = CollectionBinding(store, on_change=lambda b: calls.append(1))
    binding.bind(query)
    binding.bind(query)

    assert len(calls) == 1


def test_equal_but_distinct_query_is_a_new_subscription(store):
    calls = []
    binding = CollectionBinding(store, on_change=lambda b: calls.append(1))
    binding.bind(collection("restaurants"))
    binding.bind(collection("restaurants"))

    assert len(calls) == 2


def test_close_stops_updates(store):
    ref = doc("users", "u1")
    seen = []
    with DocumentBinding(store, on_change=lambda b: seen.append(b.data)) as binding:
        binding.bind(ref)
    run(store.set_document(ref, {"display_name": "Late"}))

    assert seen == [None]
    assert binding.active is False


@pytest.mark.parametrize("binding_cls, target", [
    (DocumentBinding, doc("users", "u1")),
    (CollectionBinding, collection("users")),
])
def test_errors_clear_loading_and_keep_data(binding_cls, target):
    failing = FailingStore()
    binding = binding_cls(failing)
    binding.data = "stale"

    binding.bind(target)

    assert binding.loading is False
    assert binding.data == "stale"
    binding.close()
    assert failing.released == 1

import pytest
from conftest import make_spot

from parking_backend.services.context_store import ContextStore


class Clock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def context_store(clock):
    return ContextStore(clock=clock)


def test_get_unknown_or_empty_session_returns_none(context_store):
    assert context_store.get("nope") is None
    assert context_store.get(None) is None
    assert context_store.get("") is None


def test_set_creates_and_merges(context_store, clock):
    spots = [make_spot("a"), make_spot("b")]
    context_store.set("s1", last_query="near SJSU", last_results=spots)

    clock.now += 10
    context_store.set("s1", last_response="Found 2 spots")

    context = context_store.get("s1")
    assert context.last_query == "near SJSU"
    assert [s.id for s in context.last_results] == ["a", "b"]
    assert context.last_response == "Found 2 spots"
    assert context.timestamp == clock.now


def test_set_sweeps_contexts_older_than_an_hour(context_store, clock):
    context_store.set("old", last_query="first")
    clock.now += 3601
    context_store.set("new", last_query="second")

    assert len(context_store) == 1
    assert context_store.get("old") is None
    assert context_store.get("new").last_query == "second"


def test_context_exactly_one_hour_old_is_kept(context_store, clock):
    context_store.set("s1", last_query="q")
    clock.now += 3600

    assert context_store.get("s1") is not None
    assert context_store.sweep() == 0


def test_get_hides_expired_context_before_any_sweep(context_store, clock):
    context_store.set("s1", last_query="q")
    clock.now += 7200

    assert context_store.get("s1") is None
    assert len(context_store) == 1
    assert context_store.sweep() == 1
    assert len(context_store) == 0


def test_set_on_expired_session_starts_fresh(context_store, clock):
    context_store.set("s1", last_query="old", last_response="old answer")
    clock.now += 4000
    context_store.set("s1", last_query="new")

    context = context_store.get("s1")
    assert context.last_query == "new"
    assert context.last_response is None


def test_set_requires_session_id(context_store):
    with pytest.raises(ValueError):
        context_store.set("", last_query="q")

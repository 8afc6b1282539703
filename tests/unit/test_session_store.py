import threading

import pytest

from chat_agent.config import MemoryConfig
from chat_agent.memory.session_store import NO_CONVERSATION, SessionMemoryStore


def test_unknown_session_is_empty() -> None:
    store = SessionMemoryStore()

    assert store.get_session("missing") == []
    assert store.create_memory_summary("missing") == NO_CONVERSATION


def test_per_session_cap_keeps_most_recent_in_order() -> None:
    store = SessionMemoryStore(MemoryConfig(max_messages_per_session=10))

    for i in range(15):
        store.add_message("s1", "user", f"message {i}")

    entries = store.get_session("s1")
    assert len(entries) == 10
    assert [e.content for e in entries] == [f"message {i}" for i in range(5, 15)]
    assert store.stats() == {"totalSessions": 1, "totalMessages": 10}


def test_global_cap_evicts_least_recently_updated_session() -> None:
    store = SessionMemoryStore(MemoryConfig(max_sessions=2))
    store.add_message("a", "user", "first")
    store.add_message("b", "user", "second")
    store.add_message("a", "assistant", "a is fresh again")

    store.add_message("c", "user", "third")

    assert store.get_session("b") == []
    assert [e.content for e in store.get_session("a")] == ["first", "a is fresh again"]
    assert store.stats()["totalSessions"] == 2


def test_returned_entries_are_a_copy() -> None:
    store = SessionMemoryStore()
    store.add_message("s", "user", "hello")

    entries = store.get_session("s")
    entries.clear()

    assert len(store.get_session("s")) == 1


def test_summary_uses_last_two_turns_collapsed_and_truncated() -> None:
    store = SessionMemoryStore()
    store.add_message("s", "user", "ignored turn")
    store.add_message("s", "user", "What   is\n\nmarkdown?")
    store.add_message("s", "assistant", "x" * 300)

    summary = store.create_memory_summary("s")

    user_line, assistant_line = summary.split(" | ")
    assert user_line == "user: What is markdown?"
    assert assistant_line == "assistant: " + "x" * 237 + "..."


def test_summary_with_single_entry() -> None:
    store = SessionMemoryStore()
    store.add_message("s", "user", "  hi there ")

    assert store.create_memory_summary("s") == "user: hi there"


def test_invalid_role_is_rejected() -> None:
    store = SessionMemoryStore()

    with pytest.raises(ValueError):
        store.add_message("s", "system", "nope")  # type: ignore[arg-type]


def test_clear_session_and_clear_all() -> None:
    store = SessionMemoryStore()
    store.add_message("a", "user", "1")
    store.add_message("b", "user", "2")

    store.clear_session("a")
    assert store.get_session("a") == []
    assert len(store.get_session("b")) == 1

    store.clear_all_sessions()
    assert store.stats() == {"totalSessions": 0, "totalMessages": 0}


def test_concurrent_appends_are_not_lost() -> None:
    store = SessionMemoryStore(MemoryConfig(max_messages_per_session=1000))

    def _writer(worker: int) -> None:
        for i in range(50):
            store.add_message("shared", "user", f"{worker}-{i}")

    threads = [threading.Thread(target=_writer, args=(w,)) for w in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    contents = [e.content for e in store.get_session("shared")]
    assert len(contents) == 400
    assert len(set(contents)) == 400

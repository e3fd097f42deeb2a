"""
Unit tests for the chat service and its store.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import InternalError, NotFound, UpstreamError, ValidationError
from app.models import ChatMessage, ChatSession, DebugSession
from app.services import ChatService
from app.storage import ChatStore, LocalStorage, StorageError


class FailingStorage(LocalStorage):
    async def save(self, path, content):
        raise StorageError("disk full")


class TestCreateOrAppend:
    """Tests for ChatService.create_or_append."""

    @pytest.mark.asyncio
    async def test_new_session_has_one_message(self, chat_service):
        session, created = await chat_service.create_or_append("alice", None, "hi", "hello")
        assert created is True
        assert session.owner_id == "alice"
        assert len(session.messages) == 1
        assert session.messages[0].prompt == "hi"
        assert session.messages[0].response == "hello"

    @pytest.mark.asyncio
    async def test_new_sessions_get_fresh_ids(self, chat_service):
        ids = set()
        for i in range(5):
            session, _ = await chat_service.create_or_append("alice", None, f"q{i}", f"a{i}")
            ids.add(session.session_id)
        assert len(ids) == 5

    @pytest.mark.asyncio
    async def test_append_grows_by_one_and_keeps_order(self, chat_service):
        session, _ = await chat_service.create_or_append("alice", None, "p0", "r0")
        sid = session.session_id

        for i in range(1, 4):
            before = [m.model_dump() for m in session.messages]
            session, created = await chat_service.create_or_append("alice", sid, f"p{i}", f"r{i}")
            assert created is False
            assert len(session.messages) == i + 1
            assert [m.model_dump() for m in session.messages[:-1]] == before

        assert [m.prompt for m in session.messages] == ["p0", "p1", "p2", "p3"]

    @pytest.mark.asyncio
    async def test_append_is_persisted(self, chat_service):
        session, _ = await chat_service.create_or_append("alice", None, "p0", "r0")
        await chat_service.create_or_append("alice", session.session_id, "p1", "r1")

        stored = await chat_service.get("alice", session.session_id)
        assert [m.prompt for m in stored.messages] == ["p0", "p1"]

    @pytest.mark.asyncio
    async def test_other_users_session_is_not_found(self, chat_service):
        session, _ = await chat_service.create_or_append("alice", None, "secret", "data")

        with pytest.raises(NotFound) as exc_info:
            await chat_service.create_or_append("bob", session.session_id, "p", "r")
        with pytest.raises(NotFound) as missing_info:
            await chat_service.create_or_append("bob", "does-not-exist", "p", "r")

        # Same answer whether the session exists or not
        assert exc_info.value.message == missing_info.value.message

        stored = await chat_service.get("alice", session.session_id)
        assert len(stored.messages) == 1

    @pytest.mark.asyncio
    async def test_path_like_session_id_is_not_found(self, chat_service):
        session, _ = await chat_service.create_or_append("alice", None, "p", "r")
        with pytest.raises(NotFound):
            await chat_service.create_or_append("bob", f"../alice/{session.session_id}", "p", "r")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt,response", [
        ("", "r"),
        ("p", ""),
        ("   ", "r"),
        (None, "r"),
        ("p", 42),
    ])
    async def test_invalid_input_never_touches_store(self, prompt, response):
        store = MagicMock()
        store.insert = AsyncMock()
        store.append = AsyncMock()
        service = ChatService(store)

        with pytest.raises(ValidationError):
            await service.create_or_append("alice", None, prompt, response)

        store.insert.assert_not_called()
        store.append.assert_not_called()

    @pytest.mark.asyncio
    async def test_storage_failure_is_internal_error(self, tmp_path):
        service = ChatService(ChatStore(FailingStorage(str(tmp_path))))
        with pytest.raises(InternalError):
            await service.create_or_append("alice", None, "p", "r")

    @pytest.mark.asyncio
    async def test_concurrent_appends_are_not_lost(self, chat_service):
        session, _ = await chat_service.create_or_append("alice", None, "p0", "r0")
        sid = session.session_id

        await asyncio.gather(*(
            chat_service.create_or_append("alice", sid, f"p{i}", f"r{i}")
            for i in range(1, 11)
        ))

        stored = await chat_service.get("alice", sid)
        assert len(stored.messages) == 11
        assert {m.prompt for m in stored.messages} == {f"p{i}" for i in range(11)}


class TestList:
    """Tests for ChatService.list."""

    @pytest.mark.asyncio
    async def test_empty_for_new_user(self, chat_service):
        assert await chat_service.list("nobody") == []

    @pytest.mark.asyncio
    async def test_only_owner_sessions(self, chat_service):
        for owner in ("alice", "bob", "alice", "carol"):
            await chat_service.create_or_append(owner, None, f"from {owner}", "ok")

        sessions = await chat_service.list("alice")
        assert len(sessions) == 2
        assert all(s.owner_id == "alice" for s in sessions)

    @pytest.mark.asyncio
    async def test_newest_first(self, storage):
        store = ChatStore(storage)
        now = datetime.now(timezone.utc)
        for i, sid in enumerate(["old", "middle", "new"]):
            await store.insert(ChatSession(
                session_id=sid,
                owner_id="alice",
                created_at=now + timedelta(minutes=i),
                messages=[ChatMessage(prompt="p", response="r")],
            ))

        sessions = await ChatService(store).list("alice")
        assert [s.session_id for s in sessions] == ["new", "middle", "old"]

    @pytest.mark.asyncio
    async def test_round_trip_text_unchanged(self, chat_service):
        prompt = "Why does my Lambda\n time out?  ✨ <b>"
        response = "Check the timeout setting.\t\"quoted\""
        session, _ = await chat_service.create_or_append("alice", None, "first", "turn")
        await chat_service.create_or_append("alice", session.session_id, prompt, response)

        [listed] = await chat_service.list("alice")
        assert listed.messages[-1].prompt == prompt
        assert listed.messages[-1].response == response


class TestAsk:
    """Tests for ChatService.ask."""

    @pytest.mark.asyncio
    async def test_ask_records_generated_reply(self, chat_service, generator):
        reply, session, created = await chat_service.ask("alice", None, "Lambda is slow")
        assert created is True
        assert reply == generator.reply
        assert generator.prompts == ["Lambda is slow"]
        assert session.messages[0].response == generator.reply

    @pytest.mark.asyncio
    async def test_ask_unknown_session_skips_generator(self, chat_service, generator):
        with pytest.raises(NotFound):
            await chat_service.ask("alice", "missing", "hello")
        assert generator.prompts == []

    @pytest.mark.asyncio
    async def test_ask_upstream_failure_saves_nothing(self, chat_service, generator):
        generator.error = "Lambda throttled"
        with pytest.raises(UpstreamError, match="throttled"):
            await chat_service.ask("alice", None, "hello")
        assert await chat_service.list("alice") == []


class TestTimestamps:

    def test_defaults_are_timezone_aware(self):
        message = ChatMessage(prompt="p", response="r")
        session = ChatSession(session_id="s1", owner_id="alice")
        debug = DebugSession(session_id="d1", owner_id="alice", resource_type="Lambda", resource_id="fn")
        for value in (message.created_at, session.created_at, debug.timestamp):
            assert value.utcoffset() == timedelta(0)

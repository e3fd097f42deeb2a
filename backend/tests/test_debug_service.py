"""
Unit tests for the debug session service.
"""

import pytest

from app.core.errors import NotFound, UpstreamError, ValidationError
from app.services.debug_service import build_analysis_prompt


class TestRunDebug:

    @pytest.mark.asyncio
    async def test_bundle_is_built_and_saved(self, debug_service, monitor, generator):
        session = await debug_service.run_debug("alice", "Lambda", "orders-fn")

        assert session.logs == monitor.logs
        assert session.metrics == monitor.metrics
        assert session.genai_response == generator.reply
        assert monitor.calls == [("logs", "orders-fn"), ("metrics", "orders-fn")]
        assert generator.prompts == [build_analysis_prompt(monitor.logs)]

        stored = await debug_service.get_session("alice", session.session_id)
        assert stored == session

    def test_prompt_embeds_logs(self):
        prompt = build_analysis_prompt(["line one", "line two"])
        assert prompt == "Analyze these logs: line one\nline two"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type,resource_id", [
        ("Lambda", None),
        (None, "orders-fn"),
        ("", "orders-fn"),
        (None, None),
    ])
    async def test_missing_resource_is_validation_error(
        self, debug_service, monitor, resource_type, resource_id
    ):
        with pytest.raises(ValidationError, match="Resource type and ID are required"):
            await debug_service.run_debug("alice", resource_type, resource_id)
        assert monitor.calls == []

    @pytest.mark.asyncio
    async def test_generator_error_propagates(self, debug_service, generator):
        generator.error = "Task timed out"
        with pytest.raises(UpstreamError, match="Task timed out"):
            await debug_service.run_debug("alice", "Lambda", "orders-fn")
        assert await debug_service.list_sessions("alice") == []

    @pytest.mark.asyncio
    async def test_monitor_error_propagates_without_generation(self, debug_service, monitor, generator):
        monitor.error = "log group does not exist"
        with pytest.raises(UpstreamError):
            await debug_service.run_debug("alice", "Lambda", "orders-fn")
        assert generator.prompts == []

    @pytest.mark.asyncio
    async def test_each_run_gets_new_session_id(self, debug_service):
        first = await debug_service.run_debug("alice", "Lambda", "orders-fn")
        second = await debug_service.run_debug("alice", "Lambda", "orders-fn")
        assert first.session_id != second.session_id


class TestDebugSessions:

    @pytest.mark.asyncio
    async def test_list_summaries(self, debug_service):
        await debug_service.run_debug("alice", "Lambda", "orders-fn")
        await debug_service.run_debug("alice", "RDS", "orders-db")
        await debug_service.run_debug("bob", "Lambda", "billing-fn")

        summaries = await debug_service.list_sessions("alice")
        assert len(summaries) == 2
        assert {s.summary for s in summaries} == {"Debug Lambda orders-fn", "Debug RDS orders-db"}
        assert summaries[0].timestamp >= summaries[1].timestamp

    @pytest.mark.asyncio
    async def test_list_empty(self, debug_service):
        assert await debug_service.list_sessions("alice") == []

    @pytest.mark.asyncio
    async def test_get_is_owner_scoped(self, debug_service):
        session = await debug_service.run_debug("alice", "Lambda", "orders-fn")
        with pytest.raises(NotFound):
            await debug_service.get_session("bob", session.session_id)

    @pytest.mark.asyncio
    async def test_get_requires_id(self, debug_service):
        with pytest.raises(ValidationError):
            await debug_service.get_session("alice", None)

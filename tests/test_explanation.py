"""Tests for the explanation overlay."""

import asyncio

from conftest import FakeExplanationClient, GatedExplanationClient, settle
from explanation import EMPTY_FALLBACK, FAILURE_FALLBACK, ExplanationOverlay
from trace_model import Step


STEP = Step(line_no=1, locals={"x": "1"})


class TestRequestExplanation:
    def test_sets_text(self):
        client = FakeExplanationClient(text="x becomes 1")
        overlay = ExplanationOverlay(client)
        applied = asyncio.run(overlay.request_explanation("x = 1", STEP))
        assert applied
        assert overlay.text == "x becomes 1"
        assert overlay.display_text == "x becomes 1"
        assert not overlay.loading
        assert client.calls == [("x = 1", STEP)]

    def test_passes_none_for_empty_trace(self):
        client = FakeExplanationClient()
        overlay = ExplanationOverlay(client)
        asyncio.run(overlay.request_explanation("x = (", None))
        assert client.calls == [("x = (", None)]

    def test_empty_explanation_shows_fallback(self):
        overlay = ExplanationOverlay(FakeExplanationClient(text=""))
        asyncio.run(overlay.request_explanation("x = 1", STEP))
        assert overlay.text == ""
        assert overlay.display_text == EMPTY_FALLBACK

    def test_failure_shows_fallback(self, unavailable):
        overlay = ExplanationOverlay(FakeExplanationClient(error=unavailable))
        applied = asyncio.run(overlay.request_explanation("x = 1", STEP))
        assert applied
        assert overlay.failed
        assert not overlay.loading
        assert overlay.display_text == FAILURE_FALLBACK

    def test_loading_while_in_flight(self):
        async def scenario():
            client = GatedExplanationClient()
            overlay = ExplanationOverlay(client)
            overlay.text = "old"
            task = asyncio.ensure_future(overlay.request_explanation("x = 1", STEP))
            await settle()
            during = (overlay.loading, overlay.text, overlay.display_text)
            client.pending[0].set_result("new")
            await task
            return during, overlay

        during, overlay = asyncio.run(scenario())
        assert during == (True, "", "")
        assert overlay.text == "new"
        assert not overlay.loading


class TestStaleResponses:
    def test_older_response_arriving_last_is_dropped(self):
        async def scenario():
            client = GatedExplanationClient()
            overlay = ExplanationOverlay(client)
            first = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            second = asyncio.ensure_future(overlay.request_explanation("code", Step(line_no=2)))
            await settle()
            client.pending[1].set_result("second")
            await second
            client.pending[0].set_result("first")
            return await first, overlay

        first_applied, overlay = asyncio.run(scenario())
        assert not first_applied
        assert overlay.text == "second"

    def test_older_response_arriving_first_is_dropped(self):
        async def scenario():
            client = GatedExplanationClient()
            overlay = ExplanationOverlay(client)
            first = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            second = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            client.pending[0].set_result("first")
            await first
            between = (overlay.loading, overlay.text)
            client.pending[1].set_result("second")
            await second
            return between, overlay

        between, overlay = asyncio.run(scenario())
        assert between == (True, "")
        assert overlay.text == "second"

    def test_stale_failure_is_dropped(self, unavailable):
        async def scenario():
            client = GatedExplanationClient()
            overlay = ExplanationOverlay(client)
            first = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            second = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            client.pending[1].set_result("second")
            await second
            client.pending[0].set_exception(unavailable)
            await first
            return overlay

        overlay = asyncio.run(scenario())
        assert not overlay.failed
        assert overlay.text == "second"

    def test_reset_invalidates_in_flight_request(self):
        async def scenario():
            client = GatedExplanationClient()
            overlay = ExplanationOverlay(client)
            task = asyncio.ensure_future(overlay.request_explanation("code", STEP))
            await settle()
            overlay.reset()
            client.pending[0].set_result("late")
            return await task, overlay

        applied, overlay = asyncio.run(scenario())
        assert not applied
        assert overlay.text == ""
        assert not overlay.loading

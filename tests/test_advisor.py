"""Tests for the chat orchestrator."""
import asyncio
import json

import pytest

from routine_advisor.advisor import ChatAdvisor
from routine_advisor.advisor.advisor import (
    EMPTY_SELECTION_MESSAGE,
    FOLLOWUP_ERROR_MESSAGE,
    ROUTINE_BUBBLE,
    ROUTINE_ERROR_MESSAGE,
    ROUTINE_REQUIRED_MESSAGE,
    build_routine_request,
)
from routine_advisor.advisor.transcript import Transcript
from routine_advisor.errors import AdvisorBusyError, EndpointError, MalformedResponseError
from routine_advisor.prompts import get_system_prompt


def _roles(messages):
    return [m.role for m in messages]


class TestBuildRoutineRequest:
    def test_embeds_minimal_product_json(self, catalog):
        content = build_routine_request([catalog.get(2), catalog.get(5)])
        payload = json.loads(content.split("Selected products (JSON):\n", 1)[1])
        assert [p["id"] for p in payload] == [2, 5]
        assert set(payload[0]) == {"id", "brand", "name", "category", "description"}
        assert "image" not in content

    def test_product_text_is_passed_verbatim(self, catalog):
        content = build_routine_request([catalog.get(5)])
        assert "[bold]with[/bold]" in content


class TestTranscript:
    def test_starts_with_single_system_message(self):
        transcript = Transcript("Be helpful.")
        assert _roles(transcript.messages) == ["system"]
        assert transcript.system_message.content == "Be helpful."

    def test_default_system_prompt(self):
        assert Transcript().system_message.content == get_system_prompt()

    def test_second_system_message_rejected(self):
        with pytest.raises(ValueError):
            Transcript().append("system", "again")

    def test_for_request_limit_keeps_system_message(self):
        transcript = Transcript("sys")
        for i in range(5):
            transcript.append("user" if i % 2 == 0 else "assistant", f"m{i}")
        limited = transcript.for_request(2)
        assert [m.content for m in limited] == ["sys", "m3", "m4"]
        assert len(transcript) == 6

    def test_reset_keeps_system_message(self):
        transcript = Transcript("sys")
        transcript.append("user", "hi")
        transcript.reset()
        assert [m.content for m in transcript] == ["sys"]


class TestGenerateRoutine:
    @pytest.mark.asyncio
    async def test_empty_selection_does_not_call_endpoint(self, selection, fake_llm):
        advisor = ChatAdvisor(fake_llm, selection)
        reply = await advisor.generate_routine()

        assert fake_llm.calls == []
        assert not reply.requested
        assert [b.text for b in reply.bubbles] == [EMPTY_SELECTION_MESSAGE]
        assert not advisor.routine_generated
        assert len(advisor.transcript) == 1

    @pytest.mark.asyncio
    async def test_success_appends_request_and_reply(self, selection, llm_factory):
        llm = llm_factory(["Morning: cleanse, then moisturize."])
        selection.add(5)
        selection.add(2)
        advisor = ChatAdvisor(llm, selection)

        reply = await advisor.generate_routine()

        assert reply.ok
        assert reply.content == "Morning: cleanse, then moisturize."
        assert [(b.role, b.text) for b in reply.bubbles] == [
            ("user", ROUTINE_BUBBLE),
            ("assistant", "Morning: cleanse, then moisturize."),
        ]
        assert advisor.routine_generated

        sent = llm.calls[0]
        assert _roles(sent) == ["system", "user"]
        assert '"id": 2' in sent[1].content and '"id": 5' in sent[1].content
        assert _roles(advisor.transcript.messages) == ["system", "user", "assistant"]

    @pytest.mark.asyncio
    async def test_failure_yields_one_error_bubble(self, selection, failing_llm):
        selection.add(1)
        advisor = ChatAdvisor(failing_llm, selection)

        reply = await advisor.generate_routine()

        assert reply.requested
        assert not reply.ok
        assert len(reply.errors) == 1
        assert reply.errors[0].text == ROUTINE_ERROR_MESSAGE
        assert _roles(advisor.transcript.messages) == ["system", "user"]
        assert not advisor.routine_generated
        assert not advisor.busy

    @pytest.mark.asyncio
    async def test_whitespace_reply_is_malformed(self, selection, llm_factory):
        selection.add(1)
        advisor = ChatAdvisor(llm_factory(["   \n"]), selection)
        reply = await advisor.generate_routine()
        assert len(reply.errors) == 1
        assert not advisor.routine_generated

    @pytest.mark.asyncio
    async def test_regenerate_appends_to_same_transcript(self, selection, llm_factory):
        llm = llm_factory(["First.", "Second."])
        selection.add(3)
        advisor = ChatAdvisor(llm, selection)
        await advisor.generate_routine()
        await advisor.generate_routine()
        assert _roles(advisor.transcript.messages) == [
            "system", "user", "assistant", "user", "assistant"
        ]
        assert len(llm.calls[1]) == 4


class TestFollowUp:
    @pytest.mark.asyncio
    async def test_question_before_routine_is_rejected_locally(self, selection, fake_llm):
        advisor = ChatAdvisor(fake_llm, selection)
        reply = await advisor.ask("Can I use this daily?")

        assert fake_llm.calls == []
        assert [b.text for b in reply.bubbles] == [ROUTINE_REQUIRED_MESSAGE]
        assert len(advisor.transcript) == 1

    @pytest.mark.asyncio
    async def test_blank_question_is_ignored(self, selection, fake_llm):
        advisor = ChatAdvisor(fake_llm, selection)
        reply = await advisor.ask("   ")
        assert reply.bubbles == []
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_follow_up_sends_full_transcript(self, selection, llm_factory):
        llm = llm_factory(["Routine.", "Yes, nightly is fine."])
        selection.add(5)
        advisor = ChatAdvisor(llm, selection)
        await advisor.generate_routine()

        reply = await advisor.ask("  Can I use it nightly?  ")

        assert reply.content == "Yes, nightly is fine."
        assert reply.bubbles[0].text == "Can I use it nightly?"
        assert _roles(llm.calls[1]) == ["system", "user", "assistant", "user"]
        assert llm.calls[1][-1].content == "Can I use it nightly?"

    @pytest.mark.asyncio
    async def test_follow_up_failure_keeps_gate_open(self, selection, llm_factory):
        llm = llm_factory(["Routine.", MalformedResponseError("No content in AI response."), "Ok."])
        selection.add(5)
        advisor = ChatAdvisor(llm, selection)
        await advisor.generate_routine()

        failed = await advisor.ask("First question")
        assert [b.text for b in failed.errors] == [FOLLOWUP_ERROR_MESSAGE]
        assert _roles(advisor.transcript.messages) == ["system", "user", "assistant", "user"]

        answered = await advisor.ask("Second question")
        assert answered.ok
        assert advisor.routine_generated

    @pytest.mark.asyncio
    async def test_history_limit_caps_request(self, selection, llm_factory):
        llm = llm_factory(["Routine.", "A1.", "A2."])
        selection.add(5)
        advisor = ChatAdvisor(llm, selection, history_limit=2)
        await advisor.generate_routine()
        await advisor.ask("Q1")
        await advisor.ask("Q2")

        last = llm.calls[-1]
        assert [m.content for m in last[1:]] == ["A1.", "Q2"]
        assert last[0].role == "system"
        assert len(advisor.transcript) == 7

    def test_history_limit_must_be_positive(self, selection, fake_llm):
        with pytest.raises(ValueError):
            ChatAdvisor(fake_llm, selection, history_limit=0)


class TestCallbacks:
    @pytest.mark.asyncio
    async def test_user_bubble_is_delivered_before_request(self, selection, fake_llm):
        events = []

        class RecordingLLM(type(fake_llm)):
            async def chat_completion(self, messages, model=None, **kwargs):
                events.append("request")
                return await super().chat_completion(messages, model=model, **kwargs)

        selection.add(1)
        advisor = ChatAdvisor(RecordingLLM(), selection)
        advisor.set_bubble_callback(lambda b: events.append(b.role))
        await advisor.generate_routine()
        assert events == ["user", "request", "assistant"]

    @pytest.mark.asyncio
    async def test_stream_callback_receives_chunks(self, selection, llm_factory):
        chunks = []
        selection.add(1)
        advisor = ChatAdvisor(llm_factory(["Cleanse twice daily."]), selection)
        advisor.set_stream_callback(chunks.append)

        reply = await advisor.generate_routine()

        assert chunks[0] == "__START__"
        assert chunks[-1] == "__END__"
        assert "".join(chunks[1:-1]) == "Cleanse twice daily."
        assert reply.content == "Cleanse twice daily."

    @pytest.mark.asyncio
    async def test_stream_failure_still_ends_stream(self, selection, llm_factory):
        chunks = []
        selection.add(1)
        llm = llm_factory([EndpointError("Endpoint returned HTTP 502", status_code=502)])
        advisor = ChatAdvisor(llm, selection)
        advisor.set_stream_callback(chunks.append)

        reply = await advisor.generate_routine()

        assert chunks == ["__START__", "__END__"]
        assert len(reply.errors) == 1

    @pytest.mark.asyncio
    async def test_debug_callback_reports_errors(self, selection, failing_llm):
        logs = []
        selection.add(1)
        advisor = ChatAdvisor(failing_llm, selection)
        advisor.set_debug_callback(lambda level, component, message: logs.append((level, component)))
        await advisor.generate_routine()
        assert ("error", "Advisor") in logs


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_second_request_while_busy_raises(self, selection, fake_llm):
        release = asyncio.Event()

        class SlowLLM(type(fake_llm)):
            async def chat_completion(self, messages, model=None, **kwargs):
                await release.wait()
                return await super().chat_completion(messages, model=model, **kwargs)

        selection.add(1)
        advisor = ChatAdvisor(SlowLLM(), selection)
        first = asyncio.create_task(advisor.generate_routine())
        await asyncio.sleep(0)
        assert advisor.busy

        with pytest.raises(AdvisorBusyError):
            await advisor.generate_routine()
        with pytest.raises(AdvisorBusyError):
            advisor.reset()

        release.set()
        reply = await first
        assert reply.ok
        assert not advisor.busy

    @pytest.mark.asyncio
    async def test_reset_closes_gate(self, selection, fake_llm):
        selection.add(1)
        advisor = ChatAdvisor(fake_llm, selection)
        await advisor.generate_routine()
        advisor.reset()
        assert not advisor.routine_generated
        assert len(advisor.transcript) == 1

"""Chat orchestrator.

Builds routine requests from the current selection, keeps the transcript,
and turns endpoint failures into a single user-visible error bubble.

Hidden design decisions:
- Wording of guidance and error bubbles
- How selected products are embedded in the request
- The routine-generated gate for follow-up questions
- How much of the transcript is sent per request
"""

import json
from collections.abc import Callable
from typing import Any

from ..errors import AdvisorBusyError, EndpointError, MalformedResponseError
from ..llm import LLMProvider
from ..prompts import get_routine_request_template
from ..selection import SelectionStore
from .models import AdvisorReply, Bubble
from .transcript import Transcript

ROUTINE_BUBBLE = "Generate a personalized routine with my selected products."
EMPTY_SELECTION_MESSAGE = "Please select at least one product to generate a routine."
ROUTINE_REQUIRED_MESSAGE = "Please generate a routine first, then ask follow-up questions."
ROUTINE_ERROR_MESSAGE = "Sorry, I couldn't generate a routine right now. Please try again."
FOLLOWUP_ERROR_MESSAGE = "Sorry, I couldn't answer that just now. Please try again."

BubbleCallback = Callable[[Bubble], None]
StreamCallback = Callable[[str], None]
DebugCallback = Callable[[str, str, str], None]


def build_routine_request(products: list[Any]) -> str:
    """Render the routine request for the given products.

    Only the minimal product fields are embedded, as indented JSON.
    """
    minimal = [p.minimal() for p in products]
    products_json = json.dumps(minimal, indent=2, ensure_ascii=False)
    return get_routine_request_template().format(products_json=products_json)


class ChatAdvisor:
    """Orchestrates routine generation and follow-up questions.

    One request at a time: a second call while a request is in flight
    raises AdvisorBusyError. There is no retry; each user action makes at
    most one request.

    Example:
        advisor = ChatAdvisor(llm, selection)
        advisor.set_bubble_callback(chat_view.add_bubble)
        await advisor.generate_routine()
        await advisor.ask("Can I use the BHA every night?")
    """

    def __init__(
        self,
        llm: LLMProvider,
        selection: SelectionStore,
        model: str | None = None,
        history_limit: int | None = None,
        system_prompt: str | None = None,
    ) -> None:
        """Initialize the advisor.

        Args:
            llm: Chat endpoint provider
            selection: Selection store the routine is built from
            model: Model override (None uses the provider default)
            history_limit: Cap on non-system messages sent per request
                (None sends the whole transcript)
            system_prompt: Optional custom system instruction
        """
        if history_limit is not None and history_limit < 1:
            raise ValueError("history_limit must be at least 1")

        self._llm = llm
        self._selection = selection
        self._model = model
        self._history_limit = history_limit
        self._transcript = Transcript(system_prompt)
        self._routine_generated = False
        self._busy = False
        self._bubble_callback: BubbleCallback | None = None
        self._stream_callback: StreamCallback | None = None
        self._debug_callback: DebugCallback | None = None

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def routine_generated(self) -> bool:
        """True once a routine request has succeeded."""
        return self._routine_generated

    @property
    def busy(self) -> bool:
        """True while a request is in flight."""
        return self._busy

    @property
    def model(self) -> str:
        return self._model or self._llm.model

    def set_bubble_callback(self, callback: BubbleCallback | None) -> None:
        """Set the callback that receives bubbles as soon as they exist.

        The user's bubble is delivered before the request is sent, the
        reply or error bubble after it settles.
        """
        self._bubble_callback = callback

    def set_stream_callback(self, callback: StreamCallback | None) -> None:
        """Set the stream callback for real-time token display.

        When set, requests use the streaming API. The callback receives
        "__START__", then each text chunk, then "__END__".
        """
        self._stream_callback = callback

    def set_debug_callback(self, callback: DebugCallback | None) -> None:
        """Set the debug callback.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Advisor", message)

    def _emit(self, reply: AdvisorReply, bubble: Bubble) -> None:
        reply.bubbles.append(bubble)
        if self._bubble_callback:
            self._bubble_callback(bubble)

    async def generate_routine(self) -> AdvisorReply:
        """Ask for a routine built from the current selection."""
        reply = AdvisorReply()
        products = self._selection.list()
        if not products:
            self._emit(reply, Bubble("assistant", EMPTY_SELECTION_MESSAGE))
            return reply

        self._debug("info", f"Generating routine for {len(products)} product(s)")
        await self._exchange(
            reply,
            visible_text=ROUTINE_BUBBLE,
            content=build_routine_request(products),
            error_message=ROUTINE_ERROR_MESSAGE,
        )
        if reply.ok:
            self._routine_generated = True
        return reply

    async def ask(self, text: str) -> AdvisorReply:
        """Send a follow-up question.

        Blank text is ignored. Before a routine exists the question is
        answered with fixed guidance and the endpoint is not called.
        """
        reply = AdvisorReply()
        text = text.strip()
        if not text:
            return reply

        if not self._routine_generated:
            self._debug("debug", "Follow-up rejected: no routine yet")
            self._emit(reply, Bubble("assistant", ROUTINE_REQUIRED_MESSAGE))
            return reply

        await self._exchange(
            reply,
            visible_text=text,
            content=text,
            error_message=FOLLOWUP_ERROR_MESSAGE,
        )
        return reply

    def reset(self) -> None:
        """Start a new conversation: fresh transcript, gate closed."""
        if self._busy:
            raise AdvisorBusyError("Cannot reset while a request is in flight")
        self._transcript.reset()
        self._routine_generated = False

    async def _exchange(
        self,
        reply: AdvisorReply,
        visible_text: str,
        content: str,
        error_message: str,
    ) -> None:
        """Append the user message, send the transcript, append the reply.

        On EndpointError or MalformedResponseError the transcript keeps the
        user's message only and a single error bubble is emitted.
        """
        if self._busy:
            raise AdvisorBusyError("A request is already in flight")

        self._busy = True
        try:
            self._emit(reply, Bubble("user", visible_text))
            self._transcript.append("user", content)
            messages = self._transcript.for_request(self._history_limit)
            self._debug("debug", f"Sending {len(messages)} message(s) to {self.model}")
            reply.requested = True

            try:
                answer, usage = await self._complete(messages)
            except (EndpointError, MalformedResponseError) as e:
                self._debug("error", f"{type(e).__name__}: {e}")
                self._emit(reply, Bubble("assistant", error_message, is_error=True))
                return

            self._transcript.append("assistant", answer)
            reply.content = answer
            reply.usage = usage
            self._emit(reply, Bubble("assistant", answer))
            self._debug("info", f"Reply received ({len(answer)} chars)")
        finally:
            self._busy = False

    async def _complete(self, messages: list[Any]) -> tuple[str, dict[str, int] | None]:
        """Run one request, streamed if a stream callback is set."""
        if self._stream_callback is None:
            response = await self._llm.chat_completion(messages, model=self._model)
            answer = response.content.strip()
            if not answer:
                raise MalformedResponseError("No content in AI response.")
            return answer, response.usage

        self._stream_callback("__START__")
        try:
            stream = await self._llm.chat_completion_stream(messages, model=self._model)
            async for chunk in stream:
                self._stream_callback(chunk)
        finally:
            self._stream_callback("__END__")

        answer = stream.text.strip()
        if not answer:
            raise MalformedResponseError("No content in AI response.")
        return answer, stream.usage

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from paperhub.core.prompts import build_system_prompt
from paperhub.client.attachments import extract_attachment, mime_kind
from paperhub.client.errors import (
    AttachmentError,
    ErrorKind,
    GenerationError,
    TransportError,
    UIError,
    UnsupportedFileType,
)
from paperhub.client.models import AttachedContext, ChatMessage, ChatRequest, Role
from paperhub.client.transport.base import ChatTransport

logger = logging.getLogger(__name__)

Listener = Callable[["ChatSession"], None]
Extractor = Callable[[str, str, bytes], AttachedContext]


class SessionStatus(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"


class ChatSession:
    """
    One conversation with the assistant.

    Owns the displayed messages, the draft `input`, the attached document and
    the error banner. A turn moves the session from IDLE to STREAMING and
    back; while STREAMING nothing else is accepted. Listeners registered with
    `subscribe` are called after every change.
    """

    def __init__(self, transport: ChatTransport, extractor: Extractor = extract_attachment):
        self.transport = transport
        self._extractor = extractor
        self.messages: List[ChatMessage] = []
        self.attachment: Optional[AttachedContext] = None
        self.status = SessionStatus.IDLE
        self.is_attaching = False
        self.error: Optional[UIError] = None
        self.input = ""
        self._listeners: List[Listener] = []
        self._reader: Optional[asyncio.Task] = None
        self._stop_requested = False

    # ---------------- listeners ----------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session listener failed")

    # ---------------- turns ----------------
    @property
    def is_streaming(self) -> bool:
        return self.status is SessionStatus.STREAMING

    def can_submit(self) -> bool:
        return not self.is_streaming and not self.is_attaching and bool(self.input.strip())

    def build_request(self) -> ChatRequest:
        """Request for the next turn from the current user/assistant history."""
        context = self.attachment.extracted_text if self.attachment else None
        turns = [m.as_turn() for m in self.messages if m.role is not Role.SYSTEM]
        return ChatRequest(
            system_prompt=build_system_prompt(context),
            messages=turns,
            context=context,
        )

    async def submit(self) -> bool:
        """Send the draft input as a new turn. Returns False when the submit was ignored."""
        if not self.can_submit():
            return False

        self.messages.append(ChatMessage(Role.USER, self.input))
        self.input = ""
        request = self.build_request()
        placeholder = ChatMessage(Role.ASSISTANT, "", done=False)
        self.messages.append(placeholder)
        self.status = SessionStatus.STREAMING
        self.error = None
        self._stop_requested = False
        self._notify()

        stream = self.transport.stream(request)
        self._reader = asyncio.create_task(self._consume(stream, placeholder))
        try:
            await self._reader
        except asyncio.CancelledError:
            if not self._stop_requested:
                raise
            logger.info("Turn stopped by the user")
        except GenerationError as e:
            logger.error("Generation failed: %s", e)
            self.error = UIError(ErrorKind.GENERATION, str(e))
        except TransportError as e:
            logger.error("Chat transport failed: %s", e)
            self.error = UIError(ErrorKind.TRANSPORT, str(e))
        finally:
            self._reader = None
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
            placeholder.finish()
            self.status = SessionStatus.IDLE
            self._notify()
        return True

    async def send(self, text: str) -> bool:
        """Type `text` into the input and submit it."""
        if self.is_streaming:
            return False
        self.input = text
        return await self.submit()

    async def _consume(self, stream, placeholder: ChatMessage) -> None:
        async for fragment in stream:
            placeholder.append(fragment)
            self._notify()

    async def stop(self) -> None:
        """Stop the running turn; the text received so far is kept."""
        if not self.is_streaming:
            return
        self._stop_requested = True
        await self.transport.abort()
        if self._reader is not None:
            self._reader.cancel()

    # ---------------- attachments ----------------
    async def attach(self, file_name: str, mime_type: str, data: bytes) -> bool:
        if self.is_attaching:
            return False
        try:
            mime_kind(mime_type)
        except UnsupportedFileType as e:
            self.error = UIError(ErrorKind.UNSUPPORTED_FILE, str(e))
            self._notify()
            return False

        self.is_attaching = True
        self._notify()
        try:
            context = await asyncio.to_thread(self._extractor, file_name, mime_type, data)
        except AttachmentError as e:
            logger.warning("Attachment %s rejected: %s", file_name, e)
            self.error = UIError(ErrorKind.ATTACHMENT, str(e))
            return False
        finally:
            self.is_attaching = False
            self._notify()

        self.attachment = context
        self.error = None
        self.messages.append(ChatMessage(
            Role.SYSTEM,
            f"Attached '{file_name}'. Answers will now be based on this document.",
        ))
        self._notify()
        return True

    def remove_attachment(self) -> None:
        if self.attachment is None:
            return
        self.attachment = None
        self._notify()

    # ---------------- reset ----------------
    def new_conversation(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        """
        Drop all messages and the attachment.

        Only allowed while IDLE; when there is something to lose, `confirm`
        must return True.
        """
        if self.is_streaming or self.is_attaching:
            return False
        if self.messages or self.attachment is not None:
            if confirm is None or not confirm():
                return False
        self.messages = []
        self.attachment = None
        self.error = None
        self.input = ""
        self._notify()
        return True

"""
Terminal chat front-end.

    python -m paperhub.client.repl --backend local

Commands: /attach PATH, /detach, /new, /quit.
"""

import argparse
import asyncio
import logging
import mimetypes
from pathlib import Path

from paperhub.config import settings
from paperhub.client.models import Role
from paperhub.client.session import ChatSession
from paperhub.client.transport.factory import build_transport
from paperhub.client.worker import protocol

logger = logging.getLogger(__name__)


class StreamPrinter:
    """Session listener that echoes assistant text as it grows."""

    def __init__(self):
        self._message_id = None
        self._printed = 0
        self._last_error = None

    def __call__(self, session: ChatSession) -> None:
        if session.error is not None and session.error is not self._last_error:
            self._last_error = session.error
            print(f"\n[error] {session.error.message}", flush=True)

        if not session.messages:
            return
        message = session.messages[-1]
        if message.role is Role.SYSTEM and message.id != self._message_id:
            self._message_id = message.id
            print(f"[system] {message.content}", flush=True)
            return
        if message.role is not Role.ASSISTANT:
            return
        if message.id != self._message_id:
            self._message_id = message.id
            self._printed = 0
            print("assistant> ", end="", flush=True)
        print(message.content[self._printed:], end="", flush=True)
        self._printed = len(message.content)
        if message.done and session.error is None:
            print(flush=True)


def _print_progress(event: protocol.Progress) -> None:
    print(f"[model] {event.percent:5.1f}% {event.text}", flush=True)


def _confirm(question: str) -> bool:
    return input(f"{question} [y/N] ").strip().lower() in ("y", "yes")


async def _attach(session: ChatSession, path_text: str) -> None:
    path = Path(path_text).expanduser()
    if not path.is_file():
        print(f"[error] No such file: {path}")
        return
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    data = await asyncio.to_thread(path.read_bytes)
    await session.attach(path.name, mime_type, data)


async def run(backend: str) -> None:
    transport = build_transport(settings, backend, on_progress=_print_progress)
    session = ChatSession(transport)
    session.subscribe(StreamPrinter())
    print(f"PaperHub assistant ({transport.name}). /attach PATH, /detach, /new, /quit")
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "you> ")
            except EOFError:
                break
            command, _, argument = line.strip().partition(" ")
            if command == "/quit":
                break
            if command == "/attach":
                await _attach(session, argument.strip())
            elif command == "/detach":
                session.remove_attachment()
                print("[system] Attachment removed.")
            elif command == "/new":
                if session.new_conversation(lambda: _confirm("Discard this conversation?")):
                    print("[system] New conversation.")
            else:
                await session.send(line)
    finally:
        await transport.aclose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the PaperHub research assistant.")
    parser.add_argument("--backend", choices=["hosted", "local", "worker"], default=settings.CHAT_BACKEND)
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    try:
        asyncio.run(run(args.backend))
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()

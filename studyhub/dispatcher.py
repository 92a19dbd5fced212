"""
Room-scoped message broker.

The dispatcher owns no transport: socket handlers call one ``on_*`` method
per inbound event and the dispatcher answers through an ``Emitter``. State
lives in the injected registry, directory, history and rate budget; the
only call that suspends is the AI gateway, which runs via ``spawn`` with
the room captured at the time the question was asked.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable, Optional

from .exceptions import GatewayTimeout, InvalidJoin, UnknownRoom
from .helpers.ws import Emitter
from .lib.rate_limit import AIRequestBudget
from .lib.utils import MonotonicIds, iso_now
from .models import AI_ASSISTANT, FileRef, Message, Session
from .services.ai_gateway import AIGateway
from .stores import ConnectionRegistry, HistoryStore, RoomDirectory

AI_COMMAND_PATTERN = re.compile(r"^/ai\s+(.+)", re.IGNORECASE)

RATE_LIMITED_TEXT = (
    "🤖 AI Assistant: I'm getting a lot of requests right now. "
    "Please wait a moment before asking another question."
)
CONNECTIVITY_ERROR_TEXT = (
    "❌ Sorry, I'm having trouble connecting to the AI service. Please try again later."
)
JOIN_REQUIRED_TEXT = "Username and room are required"
USERNAME_LOCKED_TEXT = "Username cannot change on this connection"


def parse_ai_command(text: Optional[str]) -> Optional[str]:
    """Return the question of an ``/ai <question>`` message, or None for plain text."""
    if not isinstance(text, str):
        return None
    match = AI_COMMAND_PATTERN.match(text)
    if not match:
        return None
    question = match.group(1).strip()
    return question or None


def _payload(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def _run_inline(function: Callable[..., None], *args: Any) -> None:
    function(*args)


class Dispatcher:
    def __init__(
        self,
        registry: ConnectionRegistry,
        directory: RoomDirectory,
        history: HistoryStore,
        budget: AIRequestBudget,
        gateway: AIGateway,
        emitter: Emitter,
        *,
        admin_usernames: Iterable[str] = (),
        spawn: Callable[..., None] = _run_inline,
        ids: Optional[MonotonicIds] = None,
    ) -> None:
        self.registry = registry
        self.directory = directory
        self.history = history
        self.budget = budget
        self.gateway = gateway
        self.emitter = emitter
        self.admin_usernames = frozenset(admin_usernames)
        self._spawn = spawn
        self._ids = ids or MonotonicIds()

    # -- inbound events -------------------------------------------------

    def on_join(self, sid: str, data: Any) -> bool:
        payload = _payload(data)
        username = str(payload.get("username") or "").strip()
        room_id = str(payload.get("room") or "").strip()
        try:
            self._join(sid, username, room_id)
        except InvalidJoin as e:
            logging.info("join rejected sid=%s: %s", sid, e)
            self.emitter.to_connection(sid, "error", str(e))
            return False
        logging.info("%s joined room: %s (sid=%s)", username, room_id, sid)
        return True

    def on_message(self, sid: str, data: Any) -> None:
        session = self._session_for(sid, "message")
        if session is None:
            return
        payload = _payload(data)
        text = payload.get("text")
        if text is None:
            text = ""
        elif not isinstance(text, str):
            text = str(text)

        question = parse_ai_command(text)
        if question:
            self._ask_ai(session, question)
            return

        file = None
        if payload.get("fileUrl"):
            file = FileRef(url=str(payload["fileUrl"]), name=str(payload.get("fileName") or ""))
        message = Message.create(self._ids.next(), session.username, text, file=file)
        self._post(session.room_id, message)
        self.directory.increment_message_count(session.room_id, 1)

    def on_typing(self, sid: str, data: Any) -> None:
        session = self._session_for(sid, "typing")
        if session is None:
            return
        is_typing = bool(_payload(data).get("isTyping"))
        self.emitter.to_room(
            session.room_id,
            "typing",
            {"username": session.username, "isTyping": is_typing},
            skip=sid,
        )

    def on_admin_stats(self, sid: str) -> None:
        session = self._session_for(sid, "admin-stats")
        if session is None or not session.is_admin:
            return
        self.emitter.to_connection(sid, "admin-stats", self.stats())

    def on_disconnect(self, sid: str) -> None:
        session = self.registry.lookup(sid)
        if session is None:
            return
        self._leave_room(session)
        self.registry.remove(sid)
        self.budget.release(sid)
        logging.info("%s disconnected from room: %s (sid=%s)", session.username, session.room_id, sid)

    # -- queries --------------------------------------------------------

    def stats(self) -> dict:
        return {
            "totalUsers": len(self.registry),
            "totalRooms": len(self.directory),
            "roomStats": [
                {
                    "id": room.id,
                    "name": room.name,
                    "activeUsers": len(room.members),
                    "messageCount": room.message_count,
                }
                for room in self.directory
            ],
        }

    # -- internals ------------------------------------------------------

    def _session_for(self, sid: str, event: str) -> Optional[Session]:
        session = self.registry.lookup(sid)
        if session is None:
            logging.debug("dropping %s from sid=%s without a session", event, sid)
        return session

    def _join(self, sid: str, username: str, room_id: str) -> None:
        if not username or not room_id:
            raise InvalidJoin(JOIN_REQUIRED_TEXT)
        if room_id not in self.directory:
            raise UnknownRoom(room_id)

        previous = self.registry.lookup(sid)
        if previous is not None and previous.username != username:
            raise InvalidJoin(USERNAME_LOCKED_TEXT)
        if previous is not None and previous.room_id != room_id:
            self._leave_room(previous)

        self.registry.register(sid, username, room_id, is_admin=username in self.admin_usernames)
        self.directory.join(room_id, sid)
        self.emitter.enter_room(sid, room_id)

        history = [message.to_dict() for message in self.history.snapshot(room_id)]
        self.emitter.to_connection(sid, "room-history", history)
        self.emitter.to_room(
            room_id, "user-joined", self._notice(username, "joined"), skip=sid
        )
        self._emit_users(room_id)

    def _leave_room(self, session: Session) -> None:
        room_id = session.room_id
        self.directory.leave(room_id, session.sid)
        self.emitter.exit_room(session.sid, room_id)
        self.emitter.to_room(
            room_id, "user-left", self._notice(session.username, "left"), skip=session.sid
        )
        self._emit_users(room_id)

    def _emit_users(self, room_id: str) -> None:
        self.emitter.to_room(room_id, "users-update", self.directory.member_usernames(room_id))

    def _post(self, room_id: str, message: Message) -> None:
        self.history.append(room_id, message)
        self.emitter.to_room(room_id, "message", message.to_dict())

    def _set_ai_typing(self, room_id: str, sid: str, is_typing: bool) -> None:
        self.emitter.to_room(
            room_id, "typing", {"username": AI_ASSISTANT, "isTyping": is_typing}, skip=sid
        )

    def _ask_ai(self, session: Session, question: str) -> None:
        room_id, sid = session.room_id, session.sid
        self._post(
            room_id,
            Message.create(self._ids.next(), session.username, f"🤖 Asked AI: {question}"),
        )
        self._set_ai_typing(room_id, sid, True)

        if not self.budget.try_consume(sid):
            logging.info("AI request rate limited sid=%s room=%s", sid, room_id)
            try:
                self._post(
                    room_id,
                    Message.create(self._ids.next(), AI_ASSISTANT, RATE_LIMITED_TEXT, is_ai=True),
                )
                self.directory.increment_message_count(room_id, 1)
            finally:
                self._set_ai_typing(room_id, sid, False)
            return

        self._spawn(self._answer, room_id, sid, question)

    def _answer(self, room_id: str, sid: str, question: str) -> None:
        # room_id is the room the question was asked in, even if the asker has moved on
        try:
            try:
                text = self.gateway.complete(question, room_id)
            except GatewayTimeout as e:
                logging.warning("AI gateway timed out room=%s: %s", room_id, e)
                text = CONNECTIVITY_ERROR_TEXT
            except Exception:
                logging.exception("AI gateway failed room=%s", room_id)
                text = CONNECTIVITY_ERROR_TEXT
            self._post(
                room_id, Message.create(self._ids.next(), AI_ASSISTANT, text, is_ai=True)
            )
            self.directory.increment_message_count(room_id, 2)
        finally:
            self._set_ai_typing(room_id, sid, False)

    @staticmethod
    def _notice(username: str, verb: str) -> dict:
        return {
            "username": username,
            "message": f"{username} {verb} the study room",
            "timestamp": iso_now(),
        }

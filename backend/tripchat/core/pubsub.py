# tripchat/core/pubsub.py
"""
PubSub (Publish-Subscribe) module for WebSocket message broadcasting.
Delivers newly stored group messages to every socket that joined the
group's channel.
"""
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Set, Union

logger = logging.getLogger("uvicorn.error")


class Subscriber(Protocol):
    """Anything that can receive a text frame (starlette WebSocket, test doubles)."""

    async def send_text(self, data: str) -> None: ...


# -------- events --------
@dataclass(frozen=True)
class Connect:
    socket_id: str
    socket: Subscriber


@dataclass(frozen=True)
class Subscribe:
    socket_id: str
    group_id: str


@dataclass(frozen=True)
class Publish:
    group_id: str
    payload: dict


@dataclass(frozen=True)
class Disconnect:
    socket_id: str


Event = Union[Connect, Subscribe, Publish, Disconnect]


def channel_name(group_id) -> str:
    """Canonical channel name for a group id (UUIDs are compared case-insensitively)."""
    try:
        return str(uuid.UUID(str(group_id)))
    except ValueError:
        return str(group_id)


class Broadcaster:
    """
    Channel-based fan-out for group messages.

    Every operation is expressed as an event (Connect, Subscribe, Publish,
    Disconnect) and handled by dispatch(); the helper methods just build the
    events. State is process-local and lives for the lifetime of the app:

    - _sockets: socket_id -> subscriber
    - _channels: group_id -> set(socket_id)
    - _joined: socket_id -> set(group_id), used to unsubscribe on disconnect

    Delivery is best-effort and at most once: a subscriber whose send fails
    is dropped from every channel, nothing is retried or replayed.
    """

    def __init__(self):
        self._sockets: Dict[str, Subscriber] = {}
        self._channels: Dict[str, Set[str]] = {}
        self._joined: Dict[str, Set[str]] = {}

    # -------- dispatch --------
    async def dispatch(self, event: Event) -> Any:
        if isinstance(event, Connect):
            self._sockets[event.socket_id] = event.socket
            self._joined.setdefault(event.socket_id, set())
            return event.socket_id
        if isinstance(event, Subscribe):
            if event.socket_id not in self._sockets:
                raise KeyError(f"unknown socket {event.socket_id}")
            self._channels.setdefault(event.group_id, set()).add(event.socket_id)
            self._joined[event.socket_id].add(event.group_id)
            return None
        if isinstance(event, Publish):
            return await self._deliver(event.group_id, event.payload)
        if isinstance(event, Disconnect):
            self._drop(event.socket_id)
            return None
        raise TypeError(f"unsupported event: {event!r}")

    # -------- helpers --------
    async def connect(self, socket: Subscriber, socket_id: Optional[str] = None) -> str:
        """Register a socket and return its id."""
        return await self.dispatch(Connect(socket_id or uuid.uuid4().hex, socket))

    async def subscribe(self, socket_id: str, group_id: str) -> None:
        await self.dispatch(Subscribe(socket_id, channel_name(group_id)))

    async def publish(self, group_id: str, message: dict) -> int:
        """
        Send a newMessage event to all sockets subscribed to the group.

        Returns:
            Number of sockets the event was delivered to
        """
        group_id = channel_name(group_id)
        payload = {"type": "newMessage", "groupId": group_id, "message": message}
        return await self.dispatch(Publish(group_id, payload))

    async def unsubscribe_all(self, socket_id: str) -> None:
        await self.dispatch(Disconnect(socket_id))

    def subscribers(self, group_id: str) -> Set[str]:
        return set(self._channels.get(channel_name(group_id), set()))

    def close(self) -> None:
        """Forget every socket and channel (application shutdown)."""
        self._sockets.clear()
        self._channels.clear()
        self._joined.clear()

    # -------- internals --------
    async def _deliver(self, group_id: str, payload: dict) -> int:
        socket_ids = list(self._channels.get(group_id, set()))
        msg = json.dumps(payload)
        delivered = 0
        for sid in socket_ids:
            socket = self._sockets.get(sid)
            if socket is None:
                continue
            try:
                await socket.send_text(msg)
                delivered += 1
            except Exception as e:
                # Connection is gone; it has to reconnect and rejoin
                logger.warning("[pubsub] drop socket %s after failed send: %r", sid, e)
                self._drop(sid)
        return delivered

    def _drop(self, socket_id: str) -> None:
        self._sockets.pop(socket_id, None)
        for group_id in self._joined.pop(socket_id, set()):
            members = self._channels.get(group_id)
            if members is None:
                continue
            members.discard(socket_id)
            if not members:
                del self._channels[group_id]

"""
In-process room registry for real-time chat.

The hub owns every live ``Connection``; a room only keeps weak references to the
connections joined to it, for fan-out. A connection owns the set of rooms it
joined. Disconnecting removes the connection from each of those rooms and never
waits on anything room-side.

Events are buffered per connection until the client drains them. Each room has
its own lock; ``chat.services`` holds it across persist + broadcast so that the
order clients observe within a room matches the order messages were stored.
Rooms live in process memory, so all chat traffic for a deployment must be
served by one process (see gunicorn.conf.py).
"""
import logging
import threading
import uuid
import weakref
from collections import deque

from django.conf import settings

logger = logging.getLogger(__name__)

MESSAGE_EVENT = "message"
READ_EVENT = "messages_read"

DEFAULT_BUFFER_SIZE = 500


class UnreadCounter:
    """Unread message counts for one connection, keyed by sender id."""

    def __init__(self):
        self._counts = {}

    def record(self, sender_id, own_id, open_counterpart_id):
        if sender_id == own_id or sender_id == open_counterpart_id:
            return
        self._counts[sender_id] = self._counts.get(sender_id, 0) + 1

    def reset(self, counterpart_id):
        self._counts.pop(counterpart_id, None)

    def snapshot(self):
        return dict(self._counts)


class Connection:
    def __init__(self, person_id, connection_id=None, buffer_size=DEFAULT_BUFFER_SIZE):
        self.id = connection_id or uuid.uuid4().hex
        self.person_id = person_id
        self.rooms = set()
        self.open_counterpart_id = None
        self.unread = UnreadCounter()
        self._events = deque(maxlen=buffer_size)
        self._lock = threading.Lock()

    def deliver(self, event):
        with self._lock:
            if event.get("type") == MESSAGE_EVENT:
                self.unread.record(event["message"]["sender"], self.person_id, self.open_counterpart_id)
            self._events.append(event)

    def open_conversation(self, counterpart_id):
        with self._lock:
            self.open_counterpart_id = counterpart_id
            self.unread.reset(counterpart_id)

    def clear_unread(self, counterpart_id):
        with self._lock:
            self.unread.reset(counterpart_id)

    def unread_counts(self):
        with self._lock:
            return self.unread.snapshot()

    def drain(self):
        with self._lock:
            events = list(self._events)
            self._events.clear()
        return events

    def __repr__(self):
        return f"Connection({self.id}, person={self.person_id}, rooms={sorted(self.rooms)})"


class ChatHub:
    def __init__(self, buffer_size=None):
        self.buffer_size = buffer_size
        self._lock = threading.Lock()
        self._connections = {}
        self._rooms = {}
        self._room_locks = {}

    def _buffer_size(self):
        if self.buffer_size is not None:
            return self.buffer_size
        return getattr(settings, "CHAT_CONNECTION_BUFFER_SIZE", DEFAULT_BUFFER_SIZE)

    def connect(self, person_id):
        connection = Connection(person_id, buffer_size=self._buffer_size())
        with self._lock:
            self._connections[connection.id] = connection
        logger.debug("chat:connect connection=%s person=%s", connection.id, person_id)
        return connection

    def get(self, connection_id):
        with self._lock:
            return self._connections.get(connection_id)

    def disconnect(self, connection_id):
        with self._lock:
            connection = self._connections.pop(connection_id, None)
            if connection is None:
                return None
            for room_id in connection.rooms:
                room = self._rooms.get(room_id)
                if room is None:
                    continue
                room.discard(connection)
                if not room:
                    del self._rooms[room_id]
        logger.debug("chat:disconnect connection=%s", connection_id)
        return connection

    def join(self, connection, room_id):
        with self._lock:
            self._rooms.setdefault(room_id, weakref.WeakSet()).add(connection)
            connection.rooms.add(room_id)
        return connection

    def members(self, room_id):
        with self._lock:
            return list(self._rooms.get(room_id, ()))

    def room_lock(self, room_id):
        with self._lock:
            return self._room_locks.setdefault(room_id, threading.Lock())

    def broadcast(self, room_id, event):
        """Deliver ``event`` to every connection joined to ``room_id``; returns how many."""
        targets = self.members(room_id)
        for connection in targets:
            connection.deliver(event)
        return len(targets)

    def reset(self):
        with self._lock:
            self._connections.clear()
            self._rooms.clear()
            self._room_locks.clear()


hub = ChatHub()

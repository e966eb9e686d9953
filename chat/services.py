"""
Room-scoped messaging: persist a message, then fan it out to the room.

A room is one organization; its id on the hub is the organization's primary key
as a string. Persist and broadcast happen under the room lock, so a message is
only broadcast after it committed and broadcasts within a room follow commit
order.
"""
import logging
from django.db import DatabaseError, transaction
from django.db.models import Q

from accounts.models import Role
from chat.hub import MESSAGE_EVENT, READ_EVENT, hub
from chat.models import Message
from chat.schemas import MessageOut
from core import audit
from core.errors import AuthorizationError, StorageError, ValidationError
from organizations.permissions import is_affiliated

logger = logging.getLogger(__name__)

# Who may open a conversation with whom inside an organization.
MESSAGING_PEERS = {
    Role.OWNER: {Role.STAFF},
    Role.STAFF: {Role.OWNER, Role.MEMBER},
    Role.MEMBER: {Role.STAFF},
}


def room_id_for(organization):
    return str(organization.pk)


def serialize_message(message):
    return MessageOut.model_validate(message).model_dump(mode="json")


def _require_affiliated(person, organization):
    if not is_affiliated(person, organization):
        raise AuthorizationError("You must be part of this organization to chat")


def check_can_message(sender, receiver, organization):
    if sender.pk == receiver.pk:
        raise ValidationError("You cannot message yourself")
    _require_affiliated(sender, organization)
    if not is_affiliated(receiver, organization):
        raise AuthorizationError("Recipient is not part of this organization")
    if receiver.role not in MESSAGING_PEERS.get(sender.role, ()):
        raise AuthorizationError(f"{sender.role.capitalize()} cannot message {receiver.role}")


def join_room(connection, organization, person, *, channel=None):
    """Join ``connection`` to the organization's room. Joining twice is a no-op."""
    channel = channel or hub
    _require_affiliated(person, organization)
    if connection.person_id != person.pk:
        raise AuthorizationError("Connection belongs to another user")
    channel.join(connection, room_id_for(organization))
    logger.info(
        "chat:join connection=%s room=%s", connection.id, organization.pk,
        extra={"connection": connection.id, "room": organization.pk, "actor": person.pk},
    )
    return connection


def send_message(sender, receiver, organization, body, *, channel=None):
    """Store a message and broadcast it to every connection in the room.

    If the write fails, StorageError is raised and nothing is broadcast.
    """
    channel = channel or hub
    body = (body or "").strip()
    if not body:
        raise ValidationError("Message body is required")
    check_can_message(sender, receiver, organization)

    room_id = room_id_for(organization)
    with channel.room_lock(room_id):
        try:
            with transaction.atomic():
                message = Message.objects.create(
                    sender=sender,
                    sender_variant=sender.role,
                    receiver=receiver,
                    receiver_variant=receiver.role,
                    organization=organization,
                    body=body,
                )
        except DatabaseError as exc:
            logger.exception(
                "chat:store_failed room=%s sender=%s", room_id, sender.pk,
                extra={"room": room_id, "actor": sender.pk},
            )
            raise StorageError("Message could not be stored") from exc
        delivered = channel.broadcast(
            room_id, {"type": MESSAGE_EVENT, "room": room_id, "message": serialize_message(message)}
        )

    logger.debug("chat:sent message=%s room=%s delivered=%s", message.pk, room_id, delivered)
    audit.emit(
        "message_sent", sender, organization,
        f"{sender.role.capitalize()} {sender.display_name} messaged {receiver.role} {receiver.display_name}",
    )
    return message


def mark_read(sender, receiver, organization, *, connection=None, channel=None):
    """Mark every sent message from ``sender`` to ``receiver`` as read.

    ``receiver`` is the person doing the reading. Messages in the other direction
    are never touched. A single read receipt is broadcast to the room.
    """
    channel = channel or hub
    _require_affiliated(receiver, organization)

    room_id = room_id_for(organization)
    with channel.room_lock(room_id):
        try:
            updated = Message.objects.filter(
                sender_id=sender.pk,
                receiver_id=receiver.pk,
                status=Message.STATUS_SENT,
            ).update(status=Message.STATUS_READ)
        except DatabaseError as exc:
            logger.exception("chat:mark_read_failed room=%s", room_id, extra={"room": room_id})
            raise StorageError("Messages could not be updated") from exc
        channel.broadcast(
            room_id,
            {"type": READ_EVENT, "room": room_id, "sender_id": sender.pk, "receiver_id": receiver.pk},
        )

    if connection is not None:
        connection.clear_unread(sender.pk)
    if updated:
        audit.emit(
            "messages_read", receiver, organization,
            f"{receiver.display_name} read {updated} message(s) from {sender.display_name}",
        )
    return updated


def history(organization, requester, counterpart, *, connection=None):
    """Both directions of the requester/counterpart conversation, oldest first.

    Passing the caller's connection marks the conversation as open on it, which
    clears its unread count for ``counterpart``.
    """
    _require_affiliated(requester, organization)
    messages = list(
        Message.objects.filter(organization=organization)
        .filter(
            Q(sender_id=requester.pk, receiver_id=counterpart.pk)
            | Q(sender_id=counterpart.pk, receiver_id=requester.pk)
        )
        .order_by("created_at", "id")
    )
    if connection is not None:
        connection.open_conversation(counterpart.pk)
    return messages

from typing import List, Optional
from ninja import Router
from ninja.errors import HttpError
from ninja_jwt.authentication import JWTAuth
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404

from chat import services
from chat.hub import hub
from chat.schemas import ConnectionOut, EventsOut, MarkReadIn, MarkReadOut, MessageIn, MessageOut
from core.utils.auth_utils import get_org_or_404, get_request_user
from memberships.schemas import DetailResponse, ErrorResponse

router = Router(tags=["chat"])
User = get_user_model()

ERRORS = {400: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse, 500: ErrorResponse}


def _own_connection(connection_id, user):
    """Return the caller's live connection or raise 404."""
    connection = hub.get(connection_id)
    if connection is None or connection.person_id != user.id:
        raise HttpError(404, "Connection not found")
    return connection


def _optional_connection(connection_id, user):
    if not connection_id:
        return None
    return _own_connection(connection_id, user)


def _connection_out(connection):
    return {"id": connection.id, "rooms": sorted(connection.rooms)}


# Connections

@router.post("/connections/", response={201: ConnectionOut}, auth=JWTAuth())
def open_connection(request):
    user = get_request_user(request)
    connection = hub.connect(user.id)
    return 201, _connection_out(connection)


@router.delete("/connections/{connection_id}/", response={200: DetailResponse, 404: ErrorResponse}, auth=JWTAuth())
def close_connection(request, connection_id: str):
    user = get_request_user(request)
    connection = _own_connection(connection_id, user)
    hub.disconnect(connection.id)
    return DetailResponse(detail="Disconnected")


@router.post("/connections/{connection_id}/rooms/{org_slug}/", response={200: ConnectionOut, **ERRORS}, auth=JWTAuth())
def join_room(request, connection_id: str, org_slug: str):
    user = get_request_user(request)
    connection = _own_connection(connection_id, user)
    org = get_org_or_404(org_slug)
    services.join_room(connection, org, user)
    return _connection_out(connection)


@router.get("/connections/{connection_id}/events/", response={200: EventsOut, 404: ErrorResponse}, auth=JWTAuth())
def poll_events(request, connection_id: str):
    """Drain buffered room events for this connection, plus its unread counts."""
    user = get_request_user(request)
    connection = _own_connection(connection_id, user)
    events = connection.drain()
    unread = {str(sender_id): count for sender_id, count in connection.unread_counts().items()}
    return {"events": events, "unread": unread}


# Messages

@router.post("/rooms/{org_slug}/messages/", response={201: MessageOut, **ERRORS}, auth=JWTAuth())
def send_message(request, org_slug: str, data: MessageIn):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    receiver = get_object_or_404(User, pk=data.receiver_id)
    message = services.send_message(user, receiver, org, data.body)
    return 201, message


@router.get("/rooms/{org_slug}/messages/{counterpart_id}/", response={200: List[MessageOut], **ERRORS}, auth=JWTAuth())
def conversation_history(request, org_slug: str, counterpart_id: int, connection_id: Optional[str] = None):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    counterpart = get_object_or_404(User, pk=counterpart_id)
    connection = _optional_connection(connection_id, user)
    return services.history(org, user, counterpart, connection=connection)


@router.post("/rooms/{org_slug}/read/", response={200: MarkReadOut, **ERRORS}, auth=JWTAuth())
def mark_read(request, org_slug: str, data: MarkReadIn):
    user = get_request_user(request)
    org = get_org_or_404(org_slug)
    sender = get_object_or_404(User, pk=data.sender_id)
    connection = _optional_connection(data.connection_id, user)
    updated = services.mark_read(sender, user, org, connection=connection)
    return {"updated": updated}

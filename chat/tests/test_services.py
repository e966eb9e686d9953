import pytest
from django.db import DatabaseError

from accounts.models import Role
from chat import services
from chat.hub import MESSAGE_EVENT, READ_EVENT, hub
from chat.models import Message
from core.errors import AuthorizationError, StorageError, ValidationError
from organizations.models import Affiliation


def connect(person, organization):
    connection = hub.connect(person.id)
    services.join_room(connection, organization, person)
    return connection


@pytest.mark.django_db
def test_offline_conversation_then_history_and_read_receipt(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    coach_connection = connect(coach, org)

    sent = [services.send_message(coach, lifter, org, f"set {n}") for n in range(3)]

    lifter_connection = connect(lifter, org)
    history = services.history(org, lifter, coach, connection=lifter_connection)
    assert [m.id for m in history] == [m.id for m in sent]
    assert all(m.status == Message.STATUS_SENT for m in history)

    coach_connection.drain()
    updated = services.mark_read(coach, lifter, org, connection=lifter_connection)

    assert updated == 3
    assert set(Message.objects.values_list("status", flat=True)) == {Message.STATUS_READ}
    receipts = coach_connection.drain()
    assert receipts == [
        {"type": READ_EVENT, "room": str(org.id), "sender_id": coach.id, "receiver_id": lifter.id}
    ]


@pytest.mark.django_db
def test_mark_read_only_touches_one_direction(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    to_lifter = services.send_message(coach, lifter, org, "how was leg day?")
    to_coach = services.send_message(lifter, coach, org, "painful")

    services.mark_read(coach, lifter, org)

    to_lifter.refresh_from_db()
    to_coach.refresh_from_db()
    assert to_lifter.status == Message.STATUS_READ
    assert to_coach.status == Message.STATUS_SENT


@pytest.mark.django_db
def test_broadcast_order_matches_store_order(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    listener = connect(gym["owner"], org)
    ids = [services.send_message(coach, lifter, org, str(n)).id for n in range(4)]
    events = listener.drain()
    assert [e["type"] for e in events] == [MESSAGE_EVENT] * 4
    assert [e["message"]["id"] for e in events] == ids
    assert events[0]["message"]["body"] == "0"
    assert events[0]["message"]["sender_variant"] == Role.STAFF


@pytest.mark.django_db
def test_unread_counts_follow_open_conversation(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    lifter_connection = connect(lifter, org)

    services.send_message(coach, lifter, org, "one")
    services.send_message(coach, lifter, org, "two")
    services.send_message(lifter, coach, org, "mine")
    assert lifter_connection.unread_counts() == {coach.id: 2}

    services.history(org, lifter, coach, connection=lifter_connection)
    assert lifter_connection.unread_counts() == {}
    services.send_message(coach, lifter, org, "three")
    assert lifter_connection.unread_counts() == {}


@pytest.mark.django_db
def test_mark_read_resets_unread(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    lifter_connection = connect(lifter, org)
    services.send_message(coach, lifter, org, "one")
    services.mark_read(coach, lifter, org, connection=lifter_connection)
    assert lifter_connection.unread_counts() == {}


@pytest.mark.django_db
def test_peer_rules(gym):
    owner, coach, lifter, org = gym["owner"], gym["staff"], gym["member"], gym["org"]
    services.send_message(owner, coach, org, "staff meeting")
    services.send_message(coach, owner, org, "on my way")

    with pytest.raises(AuthorizationError):
        services.send_message(lifter, owner, org, "hello boss")
    with pytest.raises(AuthorizationError):
        services.send_message(owner, lifter, org, "hello lifter")


@pytest.mark.django_db
def test_members_cannot_message_each_other(gym, make_person):
    other = make_person("other@gym.test", Role.MEMBER)
    Affiliation.objects.create(person=other, organization=gym["org"], role=Role.MEMBER)
    with pytest.raises(AuthorizationError):
        services.send_message(gym["member"], other, gym["org"], "hi")


@pytest.mark.django_db
def test_outsiders_cannot_chat(gym, make_person):
    outsider = make_person("outsider@gym.test", Role.MEMBER)
    with pytest.raises(AuthorizationError):
        services.send_message(outsider, gym["staff"], gym["org"], "let me in")
    with pytest.raises(AuthorizationError):
        services.send_message(gym["staff"], outsider, gym["org"], "you are not here")
    with pytest.raises(AuthorizationError):
        services.join_room(hub.connect(outsider.id), gym["org"], outsider)
    with pytest.raises(AuthorizationError):
        services.history(gym["org"], outsider, gym["staff"])


@pytest.mark.django_db
def test_message_validation(gym):
    with pytest.raises(ValidationError):
        services.send_message(gym["staff"], gym["member"], gym["org"], "   ")
    with pytest.raises(ValidationError):
        services.send_message(gym["staff"], gym["staff"], gym["org"], "note to self")
    assert not Message.objects.exists()


@pytest.mark.django_db
def test_store_failure_is_not_broadcast(gym, monkeypatch):
    listener = connect(gym["owner"], gym["org"])

    def failing_create(**kwargs):
        raise DatabaseError("disk full")

    monkeypatch.setattr(Message.objects, "create", failing_create)
    with pytest.raises(StorageError):
        services.send_message(gym["staff"], gym["member"], gym["org"], "lost")
    assert listener.drain() == []


@pytest.mark.django_db
def test_history_is_scoped_to_the_pair(gym):
    coach, lifter, org = gym["staff"], gym["member"], gym["org"]
    services.send_message(coach, lifter, org, "for lifter")
    services.send_message(coach, gym["owner"], org, "for owner")
    history = services.history(org, lifter, coach)
    assert [m.body for m in history] == ["for lifter"]

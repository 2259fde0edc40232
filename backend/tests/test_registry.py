import pytest

from taprace.models import Phase
from taprace.services.sessions import RoomNotFound, RoomNotJoinable, SessionRegistry, TimerHandle


@pytest.fixture()
def registry():
    return SessionRegistry(round_duration=15)


def test_create_registers_both_mappings(registry):
    session = registry.create('a', 'Alice')
    assert session.room_id in registry
    assert registry.room_of('a') is session
    assert list(session.members) == ['a']
    assert session.creator_id == 'a'


def test_join_unknown_room(registry):
    with pytest.raises(RoomNotFound):
        registry.join('b', 'nope', 'Bob')
    assert registry.room_of('b') is None
    assert len(registry) == 0


def test_join_room_not_waiting(registry):
    session = registry.create('a', 'Alice')
    session.phase = Phase.PLAYING
    with pytest.raises(RoomNotJoinable) as excinfo:
        registry.join('b', session.room_id, 'Bob')
    assert excinfo.value.room_id == session.room_id
    assert list(session.members) == ['a']
    assert registry.room_of('b') is None


def test_last_member_out_destroys_room_and_timer(registry):
    session = registry.create('a', 'Alice')
    handle = TimerHandle()
    session.timer = handle
    removed, new_creator, destroyed = registry.remove('a')
    assert removed is session
    assert destroyed is True
    assert new_creator is None
    assert handle.cancelled
    assert session.timer is None
    assert session.room_id not in registry
    assert registry.room_of('a') is None


def test_remove_unknown_sid_is_noop(registry):
    assert registry.remove('ghost') == (None, None, False)


def test_remove_creator_reassigns(registry):
    session = registry.create('a', 'Alice')
    registry.join('b', session.room_id, 'Bob')
    registry.join('c', session.room_id, 'Cara')
    removed, new_creator, destroyed = registry.remove('a')
    assert destroyed is False
    assert new_creator == 'b'
    assert session.creator_id == 'b'
    assert registry.room_of('b') is session

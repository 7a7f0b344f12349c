from queue import Empty
from queue import ShutDown

import pytest

from .bus import Bus


class Base:
    pass


class Derived(Base):
    pass


@pytest.fixture
def bus():
    bus = Bus()
    yield bus
    bus.shutdown()


def test_subscribers_receive_matching_events(bus):
    everything = bus.subscribe({object})
    derived_only = bus.subscribe({Derived})
    assert bus

    base, derived = Base(), Derived()
    bus.publish(base)
    bus.publish(derived)

    assert everything.get_nowait() is base
    assert everything.get_nowait() is derived
    assert derived_only.get_nowait() is derived
    with pytest.raises(Empty):
        derived_only.get_nowait()


def test_overlapping_types_deliver_once(bus):
    events = bus.subscribe({Base, Derived})
    bus.publish(Derived())

    events.get_nowait()
    with pytest.raises(Empty):
        events.get_nowait()


def test_unsubscribe_shuts_down_the_queue(bus):
    events = bus.subscribe({object})
    bus.unsubscribe(events)
    assert not bus

    bus.publish(Base())
    with pytest.raises(ShutDown):
        events.get_nowait()


def test_shutdown_delivers_pending_events_first():
    bus = Bus()
    events = bus.subscribe({object})
    event = Base()
    bus.publish(event)
    bus.shutdown()

    assert events.get_nowait() is event
    with pytest.raises(ShutDown):
        events.get_nowait()

"""
ResolutionService tests - digit keys / API requests to grid resolutions
"""

import pytest

from dotswarm.models.enums import EventSource
from dotswarm.models.events import EventType, KeyboardKeyPressEvent
from dotswarm.models.geometry import GridResolution
from dotswarm.services.event_bus import EventBus
from dotswarm.services.resolution_service import ResolutionService


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def published(bus):
    events = []
    bus.subscribe(EventType.RESOLUTION_CHANGE, events.append)
    return events


@pytest.fixture
def service(bus):
    return ResolutionService(bus, min_dots=3, initial=GridResolution(60, 45))


@pytest.mark.parametrize("fidelity,expected", [(1, (12, 9)), (2, (24, 18)), (5, (60, 45)), (9, (108, 81))])
def test_resolution_for(service, fidelity, expected):
    grid = service.resolution_for(fidelity)
    assert (grid.width, grid.height) == expected


@pytest.mark.parametrize("fidelity", [0, 10, -1])
def test_resolution_for_out_of_range(service, fidelity):
    with pytest.raises(ValueError):
        service.resolution_for(fidelity)


@pytest.mark.parametrize("key", ["0", "A", "ENTER", "12", ""])
def test_non_digit_keys_map_to_nothing(service, key):
    assert service.resolution_for_key(key) is None


def test_min_dots_must_be_positive(bus):
    with pytest.raises(ValueError):
        ResolutionService(bus, min_dots=0)


@pytest.mark.asyncio
async def test_request_publishes_change(service, published):
    grid = await service.request(2)

    assert (grid.width, grid.height) == (24, 18)
    assert service.current == grid
    assert service.changes == 1
    assert published[0].source == EventSource.API
    assert (published[0].width, published[0].height) == (24, 18)


@pytest.mark.asyncio
async def test_request_same_resolution_still_publishes(service, published):
    await service.request(5)
    assert len(published) == 1


@pytest.mark.asyncio
async def test_digit_key_publishes_keyboard_change(service, published):
    grid = await service.handle_key(KeyboardKeyPressEvent("3"))

    assert (grid.width, grid.height) == (36, 27)
    assert published[0].source == EventSource.KEYBOARD


@pytest.mark.asyncio
async def test_modified_or_other_keys_ignored(service, published):
    assert await service.handle_key(KeyboardKeyPressEvent("5", ["SHIFT"])) is None
    assert await service.handle_key(KeyboardKeyPressEvent("C", ["CTRL"])) is None
    assert await service.handle_key(KeyboardKeyPressEvent("SPACE")) is None

    assert published == []
    assert service.changes == 0

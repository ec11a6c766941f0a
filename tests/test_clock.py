import pytest

from ordwallet.clock import Clock


@pytest.mark.parametrize(
    "height, expected",
    [
        (0, 0.0),
        (504, 90.0),
        (1008, 180.0),
        (1512, 270.0),
        (2016, 0.0),
        (6930000, 180.0),
        (6930504, 270.0),
    ],
)
def test_second(height, expected):
    assert Clock.from_height(height).second == expected


@pytest.mark.parametrize(
    "height, expected",
    [
        (0, 0.0),
        (52500, 90.0),
        (105000, 180.0),
        (157500, 270.0),
        (210000, 0.0),
        (6930000, 0.0),
        (6930001, 0.0),
    ],
)
def test_minute(height, expected):
    assert Clock.from_height(height).minute == expected


@pytest.mark.parametrize(
    "height, expected",
    [
        (0, 0.0),
        (1732500, 90.0),
        (3465000, 180.0),
        (5197500, 270.0),
        (6930000, 0.0),
        (6930001, 0.0),
    ],
)
def test_hour(height, expected):
    assert Clock.from_height(height).hour == expected


def test_final_subsidy_height():
    clock = Clock.from_height(6929999)
    assert clock.second == 1007.0 / 2016.0 * 360.0
    assert clock.minute == 209_999.0 / 210_000.0 * 360.0
    assert clock.hour == 6929999.0 / 6930000.0 * 360.0


def test_final_subsidy_height_rotations():
    clock = Clock.from_height(6929999)
    assert repr(clock.hour) == "359.9999480519481"
    assert repr(clock.minute) == "359.9982857142857"
    assert repr(clock.second) == "179.82142857142858"


def test_first_post_subsidy_height():
    clock = Clock.from_height(6930000)
    assert clock.second == 180.0
    assert clock.minute == 0.0
    assert clock.hour == 0.0


def test_height_is_kept():
    assert Clock.from_height(6929999).height == 6929999


def test_negative_height_is_rejected():
    with pytest.raises(ValueError):
        Clock.from_height(-1)
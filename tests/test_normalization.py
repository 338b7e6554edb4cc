import pytest

from locatorscore.errors import DegenerateRangeError, LocatorScoreError
from locatorscore.normalization import normalize


def test_normalize_maps_range_endpoints_to_zero_and_one() -> None:
    assert normalize(0, 0, 100) == 0
    assert normalize(100, 0, 100) == 1
    assert normalize(-20, -20, 20) == 0
    assert normalize(20, -20, 20) == 1


def test_normalize_is_strictly_increasing() -> None:
    values = [normalize(value, 0, 100) for value in (-10, 0, 0.5, 25, 99.9, 100, 140)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_normalize_does_not_clamp_out_of_range_values() -> None:
    assert normalize(150, 0, 100) == pytest.approx(1.5)
    assert normalize(-50, 0, 100) == pytest.approx(-0.5)


def test_normalize_rejects_degenerate_range() -> None:
    with pytest.raises(DegenerateRangeError):
        normalize(5, 10, 10)
    with pytest.raises(ZeroDivisionError):
        normalize(0, 0, 0)


def test_degenerate_range_is_not_a_recoverable_locator_error() -> None:
    assert not issubclass(DegenerateRangeError, LocatorScoreError)

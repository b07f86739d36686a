import pytest

from apps.errors import LayerAlreadyBuiltError, NotFoundError
from apps.ward_layers import LayerRegistry, ward_label
from apps.ward_styles import DEFAULT_HIGH, DEFAULT_LOW, EXTREME_HIGH
from conftest import square


def _build(registry: LayerRegistry, ward_ids: range) -> None:
    for ward_id in ward_ids:
        registry.ensure_layer(ward_id, [square(ward_id)], DEFAULT_LOW)


def test_ensure_layer_adds_labelled_trace() -> None:
    registry = LayerRegistry()

    handle = registry.ensure_layer(3, [square(3)], DEFAULT_HIGH)

    assert registry.is_built(3)
    assert len(registry.figure.data) == 1
    assert handle.meta == {"ward_id": 3}
    assert handle.text == ward_label(3) == "Ward 3"
    assert handle.fillcolor == DEFAULT_HIGH.fill_color
    assert list(handle.lon) == [point[0] for point in square(3)]


def test_ensure_layer_twice_raises_without_new_trace() -> None:
    registry = LayerRegistry()
    registry.ensure_layer(3, [square(3)], DEFAULT_LOW)

    with pytest.raises(LayerAlreadyBuiltError):
        registry.ensure_layer(3, [square(3)], EXTREME_HIGH)

    assert len(registry.figure.data) == 1
    assert registry.style_of(3) == DEFAULT_LOW


def test_restyle_updates_in_place_without_touching_geometry() -> None:
    registry = LayerRegistry()
    _build(registry, range(1, 4))
    lons_before = list(registry.figure.data[1].lon)

    registry.restyle(2, EXTREME_HIGH)

    trace = registry.figure.data[1]
    assert trace.fillcolor == EXTREME_HIGH.fill_color
    assert trace.line.color == EXTREME_HIGH.color
    assert list(trace.lon) == lons_before
    assert len(registry.figure.data) == 3


def test_restyle_unbuilt_ward_raises_not_found() -> None:
    registry = LayerRegistry()

    with pytest.raises(NotFoundError):
        registry.restyle(9, DEFAULT_LOW)


def test_restyle_all_is_all_or_nothing() -> None:
    registry = LayerRegistry()
    _build(registry, range(1, 4))

    with pytest.raises(NotFoundError, match="42"):
        registry.restyle_all({1: EXTREME_HIGH, 42: DEFAULT_HIGH})

    assert registry.style_of(1) == DEFAULT_LOW
    assert registry.figure.data[0].fillcolor == DEFAULT_LOW.fill_color


def test_restyle_twice_is_idempotent() -> None:
    registry = LayerRegistry()
    _build(registry, range(1, 6))
    styles = {1: DEFAULT_HIGH, 5: EXTREME_HIGH, 2: DEFAULT_LOW, 3: DEFAULT_LOW, 4: DEFAULT_LOW}

    registry.restyle_all(styles)
    once = registry.figure.to_dict()
    registry.restyle_all(styles)

    assert registry.figure.to_dict() == once


def test_multipolygon_rings_are_separated() -> None:
    registry = LayerRegistry()

    handle = registry.ensure_layer(1, [square(1), square(2)], DEFAULT_LOW)

    assert None in list(handle.lon)
    assert len(handle.lon) == 11

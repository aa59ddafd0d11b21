import pytest

from orderpack.model import BoxType, OrderLine, QuantityMode, calc_usable_liters
from orderpack.model.entities import OpenBox

from tests.factories import make_piece


def test_usable_liters_from_dimensions():
    assert calc_usable_liters((30, 20, 15), 0.1) == 8.1
    assert calc_usable_liters((40, 30, 20), 0) == 24.0

    box = BoxType(key="Medium", inner_dims_cm=(40, 30, 20), max_weight_kg=10, headroom_fraction=0.25)
    assert box.usable_liters == 18.0


def test_declared_usable_liters_win():
    box = BoxType(key="Small", inner_dims_cm=(30, 20, 15), max_weight_kg=5, usable_liters=7.5)
    assert box.usable_liters == 7.5


def test_box_key_is_canonical():
    box = BoxType(key=" large ", inner_dims_cm=(60, 40, 30), max_weight_kg=20, vented=True)
    assert box.key == "Large"
    assert box.rank == 2
    assert box.label == "Large (vented)"


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(key="XL"),
        dict(inner_dims_cm=(30, 0, 15)),
        dict(max_weight_kg=0),
        dict(headroom_fraction=0.95),
        dict(max_distinct_skus=0),
    ],
)
def test_invalid_box_types(kwargs):
    fields = dict(key="Small", inner_dims_cm=(30, 20, 15), max_weight_kg=5)
    fields.update(kwargs)
    with pytest.raises(ValueError):
        BoxType(**fields)


def test_order_line_mode():
    assert OrderLine(item_id="a", quantity_kg=1.5).mode == QuantityMode.kg
    assert OrderLine(item_id="a", units=3).mode == QuantityMode.unit
    assert OrderLine(item_id="a", units=3).quantity == 3


def test_open_box_tracks_totals(boxes):
    box = OpenBox(box_type=boxes[0])
    box.add(make_piece(item_id="a", kg=1.0, liters=2.0))
    box.add(make_piece(item_id="b", liters=1.0))
    box.add(make_piece(item_id="a", kg=0.5, liters=1.0))

    assert box.item_ids == ["a", "b"]
    assert box.liters == 4.0
    assert box.weight_kg == 2.0
    assert box.weight_by_item == {"a": 1.5, "b": 0.5}

import pytest

from orderpack.model import Fragility, ItemDescriptor, ItemPackingOverride, classify, resolve_profile
from orderpack.model.classifier import BUCKETS, BUNDLED, GENERIC, MAX_KG_PER_BAG, RULES


@pytest.mark.parametrize(
    "item, bucket",
    [
        (ItemDescriptor(id="1", category="Leafy greens", type="Romaine"), "leafy"),
        (ItemDescriptor(id="2", type="Baby spinach"), "leafy"),
        (ItemDescriptor(id="3", type="Fresh herbs", variety="Basil"), "herbs"),
        (ItemDescriptor(id="4", type="Strawberry"), "berries"),
        (ItemDescriptor(id="5", type="Fruit", variety="Blackberry"), "berries"),
        (ItemDescriptor(id="6", type="Tomato", variety="Cherry"), "tomatoes"),
        (ItemDescriptor(id="7", type="Bell pepper"), "peppers"),
        (ItemDescriptor(id="8", type="Mandarin"), "citrus"),
        (ItemDescriptor(id="9", category="Citrus", type="Lemon"), "citrus"),
        (ItemDescriptor(id="10", category="Root vegetables", type="Parsnip"), "roots"),
        (ItemDescriptor(id="11", type="Egg"), BUNDLED),
        (ItemDescriptor(id="12", type="Sourdough bread"), BUNDLED),
        (ItemDescriptor(id="13", type="Eggplant"), GENERIC),
        (ItemDescriptor(id="14", type="Quinoa"), GENERIC),
        (ItemDescriptor(id="15"), GENERIC),
    ],
)
def test_classify(item, bucket):
    assert classify(item) == bucket


def test_classify_first_matching_rule_wins():
    # "leaf" category beats the tomato type rule further down the table
    item = ItemDescriptor(id="x", category="Leaf mix", type="Tomato leaves")
    assert classify(item) == "leafy"


def test_classify_with_custom_rule_table():
    rules = [(lambda t: "kohlrabi" in t.type, "roots"), *RULES]
    assert classify(ItemDescriptor(id="k", type="Kohlrabi"), rules) == "roots"


def test_profile_defaults_from_bucket(lettuce, carrot):
    leafy = resolve_profile(lettuce)
    assert leafy.bucket == "leafy"
    assert leafy.fragility == Fragility.very_fragile
    assert leafy.requires_vented is True
    assert leafy.allow_mixing is False
    assert leafy.max_kg_per_bag == MAX_KG_PER_BAG[Fragility.very_fragile] == 0.7
    assert leafy.density_kg_per_liter == BUCKETS["leafy"].density_kg_per_liter

    roots = resolve_profile(carrot)
    assert roots.fragility == Fragility.sturdy
    assert roots.allow_mixing is True
    assert roots.requires_vented is False
    assert roots.max_kg_per_bag == 3.0


def test_override_wins_field_by_field(lettuce):
    override = ItemPackingOverride(
        fragility=Fragility.sturdy,
        requires_vented_box=False,
        density_kg_per_liter=0.3,
        max_weight_per_box_kg=4,
    )
    profile = resolve_profile(lettuce, override)
    assert profile.fragility == Fragility.sturdy
    assert profile.requires_vented is False
    assert profile.density_kg_per_liter == 0.3
    assert profile.max_weight_per_box_kg == 4.0
    # bag cap follows the overridden fragility tier
    assert profile.max_kg_per_bag == MAX_KG_PER_BAG[Fragility.sturdy]
    assert profile.allow_mixing is True


def test_non_positive_override_numbers_are_ignored(apple):
    override = ItemPackingOverride(density_kg_per_liter=0, max_kg_per_bag=-1, unit_volume_liters=0)
    profile = resolve_profile(apple, override)
    assert profile.density_kg_per_liter == BUCKETS["apples"].density_kg_per_liter
    assert profile.max_kg_per_bag == MAX_KG_PER_BAG[Fragility.normal]
    assert profile.unit_volume_liters is None


def test_allow_mixing_override_beats_fragility_default(lettuce):
    profile = resolve_profile(lettuce, ItemPackingOverride(allow_mixing=True))
    assert profile.allow_mixing is True


def test_min_box_type_is_canonicalized(apple):
    profile = resolve_profile(apple, ItemPackingOverride(min_box_type="medium"))
    assert profile.min_box_key == "Medium"


def test_unknown_min_box_type_is_dropped_with_warning(apple):
    warnings = []
    profile = resolve_profile(apple, ItemPackingOverride(min_box_type="Jumbo"), warnings)
    assert profile.min_box_key is None
    assert len(warnings) == 1
    assert "apple-1" in warnings[0] and "Jumbo" in warnings[0]

import pytest

from orderpack.model import BoxType, ItemDescriptor

from tests.factories import make_boxes


@pytest.fixture
def boxes() -> list[BoxType]:
    return make_boxes()


@pytest.fixture
def vented_boxes() -> list[BoxType]:
    return make_boxes(vented=True)


@pytest.fixture
def lettuce() -> ItemDescriptor:
    return ItemDescriptor(id="lettuce-1", name="Romaine", category="Leafy greens", type="Lettuce")


@pytest.fixture
def apple() -> ItemDescriptor:
    return ItemDescriptor(
        id="apple-1", name="Gala apple", category="Fruit", type="Apple", avg_weight_per_unit_grams=200
    )


@pytest.fixture
def carrot() -> ItemDescriptor:
    return ItemDescriptor(id="carrot-1", name="Carrot", category="Root vegetables", type="Carrot")


@pytest.fixture
def eggs() -> ItemDescriptor:
    return ItemDescriptor(
        id="egg-1", name="Free range eggs", category="Dairy & eggs", type="Egg", avg_weight_per_unit_grams=60
    )


@pytest.fixture
def cucumber() -> ItemDescriptor:
    return ItemDescriptor(id="cuc-1", name="Cucumber", category="Vegetables", type="Cucumber")


@pytest.fixture
def items_by_id(lettuce, apple, carrot, eggs, cucumber) -> dict[str, ItemDescriptor]:
    return {i.id: i for i in (lettuce, apple, carrot, eggs, cucumber)}

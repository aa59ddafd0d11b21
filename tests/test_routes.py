import pytest
from fastapi.testclient import TestClient

from orderpack.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def payload() -> dict:
    return {
        "lines": [
            {"itemId": "tom-1", "quantityKg": 2.5},
            {"itemId": "egg-1", "units": 18},
            {"itemId": "missing", "quantityKg": 1},
        ],
        "items": [
            {"_id": "tom-1", "name": "Roma tomato", "category": "Vegetables", "type": "Tomato"},
            {"id": "egg-1", "name": "Eggs", "type": "Egg", "avgWeightPerUnitGrams": 60},
        ],
        "packageSizes": [
            {"key": "Small", "innerDimsCm": {"l": 30, "w": 20, "h": 15}, "maxWeightKg": 5, "headroomPct": 0.1},
            {"key": "Medium", "innerDimensionsCm": {"l": 40, "w": 30, "h": 20}, "maxWeightKg": 10},
        ],
    }


def test_plan_endpoint(client, payload):
    response = client.post("/packing/plan", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["summary"]["totalBoxes"] == len(data["boxes"]) >= 1
    assert data["summary"]["warnings"] == ["Item missing not found; skipping."]
    per_item = {s["itemId"]: s for s in data["summary"]["perItem"]}
    assert per_item["tom-1"]["totalKg"] == 2.5
    assert per_item["egg-1"]["bundleCount"] == 2
    assert "totalUnits" not in per_item["tom-1"]
    piece = data["boxes"][0]["contents"][0]
    assert {"itemId", "pieceKind", "mode", "liters", "estimatedWeightKg"} <= set(piece)


def test_plan_with_numeric_item_ids(client):
    payload = {
        "lines": [{"itemId": 7, "quantityKg": 1}],
        "items": [{"id": 7, "type": "Carrot"}],
        "boxTypes": [{"key": "small", "innerDimensionsCm": {"l": 30, "w": 20, "h": 15}, "maxWeightKg": 5}],
    }
    data = client.post("/packing/plan", json=payload).json()
    assert data["boxes"][0]["boxTypeKey"] == "Small"
    assert data["boxes"][0]["contents"][0]["itemId"] == "7"


def test_plan_without_box_types(client, payload):
    payload["packageSizes"] = []
    response = client.post("/packing/plan", json=payload)
    assert response.status_code == 200
    assert response.json() == {
        "boxes": [],
        "summary": {"totalBoxes": 0, "perItem": [], "warnings": ["No package sizes configured."]},
    }


def test_plan_overrides(client, payload):
    payload["overrides"] = {"tom-1": {"minBoxType": "Medium"}}
    data = client.post("/packing/plan", json=payload).json()
    tomato_boxes = [
        b for b in data["boxes"] if any(c["itemId"] == "tom-1" for c in b["contents"])
    ]
    assert tomato_boxes
    assert all(b["boxTypeKey"] == "Medium" for b in tomato_boxes)


@pytest.mark.parametrize(
    "box, fragment",
    [
        ({"key": "Jumbo", "innerDimsCm": {"l": 10, "w": 10, "h": 10}, "maxWeightKg": 5}, "Small"),
        ({"key": "Small", "innerDimsCm": {"l": 10, "w": 10, "h": 10}, "maxWeightKg": 5, "usableLiters": 2}, "usable liters"),
        ({"key": "Small", "innerDimsCm": {"l": 10, "w": 10, "h": 10}, "maxWeightKg": -1}, "max_weight_kg"),
    ],
)
def test_invalid_box_type_is_bad_request(client, payload, box, fragment):
    payload["packageSizes"] = [box]
    response = client.post("/packing/plan", json=payload)
    assert response.status_code == 400
    assert fragment in response.json()["detail"]


def test_duplicate_box_type_is_bad_request(client, payload):
    payload["packageSizes"].append(dict(payload["packageSizes"][0]))
    response = client.post("/packing/plan", json=payload)
    assert response.status_code == 400
    assert "duplicate" in response.json()["detail"]


def test_headroom_out_of_range_is_rejected(client, payload):
    payload["packageSizes"][0]["headroomPct"] = 0.95
    assert client.post("/packing/plan", json=payload).status_code == 422


def test_missing_lines_is_rejected(client):
    assert client.post("/packing/plan", json={"items": []}).status_code == 422


def test_container_endpoint(client):
    payload = {
        "lines": [{"itemId": "a1", "estimatedKg": 100}, {"itemId": "nope", "committedKg": 3}],
        "items": [{"id": "a1", "name": "Apple", "type": "Apple"}],
        "containers": [{"key": "crate", "usableLiters": 40, "maxWeightKg": 20}],
    }
    response = client.post("/packing/containers", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["totalContainers"] == 5
    assert data["lines"][0]["limitingFactor"] == "weight"
    assert data["lines"][0]["capacityKgPerContainer"] == 20
    assert data["warnings"] == ["Item nope not found; skipping."]


def test_health(client):
    assert client.get("/tasks/health").json()["status"] == "healthy"

"""Integration tests for the breeding endpoints."""

from fastapi.testclient import TestClient

from agent_memory.core.container import ServiceContainer


def test_mix_registers_child(client: TestClient, container: ServiceContainer) -> None:
    response = client.post(
        "/v1/breeding/mix",
        json={
            "parentA": {"Strength": 3, "Generation": 1},
            "parentB": {"Strength": 4, "Generation": 2},
            "parentAId": "agent_1",
            "parentBId": "agent_2",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["childId"] == "child_1000"
    assert data["child"] == {"Strength": 4, "Generation": 3}
    assert data["parents"] == {"parentAId": "agent_1", "parentBId": "agent_2"}
    assert container.child_registry.get("child_1000") == data["child"]


def test_mix_assigns_increasing_ids(client: TestClient) -> None:
    body = {"parentA": {"Generation": 1}, "parentB": {"Generation": 1}}

    first = client.post("/v1/breeding/mix", json=body).json()["childId"]
    second = client.post("/v1/breeding/mix", json=body).json()["childId"]

    assert (first, second) == ("child_1000", "child_1001")


def test_mix_requires_both_parents(client: TestClient) -> None:
    response = client.post("/v1/breeding/mix", json={"parentA": {}})

    assert response.status_code == 422


def test_preview_reports_traits_rarity_and_success(client: TestClient) -> None:
    response = client.post(
        "/v1/breeding/preview",
        json={
            "parentATraits": ["cautious", "swimmer"],
            "parentBTraits": ["cautious", "climber"],
            "parentABreeds": 1,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["traits"] == ["cautious", "swimmer", "climber", "bred"]
    assert data["dominantPersonality"] == "cautious"
    assert data["rarity"] == "Uncommon"
    assert data["successRate"] == 98
    assert 40 <= data["rarityScore"] <= 60


def test_breeding_is_not_rate_limited(client: TestClient) -> None:
    for _ in range(12):
        response = client.post("/v1/breeding/preview", json={})
        assert response.status_code == 200


def test_mix_with_corrupt_registry_returns_clear_error(
    client: TestClient, container: ServiceContainer
) -> None:
    container.child_registry.path.write_text("{not json", encoding="utf-8")

    response = client.post(
        "/v1/breeding/mix",
        json={"parentA": {"Generation": 1}, "parentB": {"Generation": 1}},
    )

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["error"]["code"] == "child_registry_corrupt"

import pytest


@pytest.mark.asyncio
async def test_list_and_filter_components(client, plugin):
    await plugin.load_component("asset-link-trigger", "button", {"actionID": "door"})
    await plugin.load_component("asset-link-secondary", "speaker", {"sourceID": "door"})

    all_components = (await client.get("/api/v1/components")).json()
    assert all_components["count"] == 2

    for kind in ("asset-link-secondary", "RELAY", "relay"):
        response = await client.get("/api/v1/components", params={"kind": kind})
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["components"][0]["object_id"] == "speaker"
        assert body["components"][0]["state"] == {"source_id": "door", "play_count": 0}


@pytest.mark.asyncio
async def test_invalid_kind_filter(client):
    response = await client.get("/api/v1/components", params={"kind": "lamp"})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "INVALID_COMPONENT_KIND"
    assert "asset-link-receiver" in error["details"]["valid_kinds"]


@pytest.mark.asyncio
async def test_get_component(client, plugin):
    await plugin.load_component("asset-link-trigger", "button", {"actionID": "door"})

    response = await client.get("/api/v1/components/button")

    assert response.status_code == 200
    body = response.json()
    assert body["kind"] == "asset-link-trigger"
    assert body["fields"] == {"actionID": "door"}
    assert body["state"]["input_mode"] == "On-Click"


@pytest.mark.asyncio
async def test_unknown_component_returns_envelope(client):
    response = await client.get("/api/v1/components/door-01")

    assert response.status_code == 404
    body = response.json()
    assert body["error"]["code"] == "COMPONENT_NOT_FOUND"
    assert body["error"]["details"] == {"object_id": "door-01"}


@pytest.mark.asyncio
async def test_click_fires_trigger(client, plugin, host):
    await plugin.load_component("asset-link-trigger", "button", {"actionID": "door"})

    response = await client.post("/api/v1/components/button/click")

    assert response.status_code == 200
    assert response.json()["state"]["fire_count"] == 1
    assert len(host.messages) == 1


@pytest.mark.asyncio
async def test_click_unknown_component(client):
    response = await client.post("/api/v1/components/ghost/click")

    assert response.status_code == 404

import pytest


@pytest.mark.asyncio
async def test_get_roles_empty(client):
    response = await client.get("/api/v1/roles")

    assert response.status_code == 200
    assert response.json() == {"available_roles": [], "assignments": {}}


@pytest.mark.asyncio
async def test_define_roles_normalizes_list(client, plugin):
    response = await client.put("/api/v1/roles", json={"available_roles": " guard ,, visitor "})

    assert response.status_code == 200
    assert response.json()["available_roles"] == ["guard", "visitor"]
    assert plugin.roles_draft == "guard,visitor"


@pytest.mark.asyncio
async def test_assign_role(client, plugin):
    await plugin.define_roles("guard")

    response = await client.post("/api/v1/roles/assignments", json={"user_id": "user-7", "role": " guard "})

    assert response.status_code == 201
    assert response.json()["assignments"] == {"user-7": ["guard"]}
    assert plugin.roles.has_role("user-7", "guard")


@pytest.mark.asyncio
async def test_assign_unknown_role_is_rejected(client, plugin):
    await plugin.define_roles("guard")

    response = await client.post("/api/v1/roles/assignments", json={"user_id": "user-7", "role": "pirate"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "INVALID_ROLE"
    assert body["error"]["details"] == {"role": "pirate", "available_roles": ["guard"]}
    assert body["request_id"]
    assert plugin.roles.assignments() == {}


@pytest.mark.asyncio
async def test_assign_requires_user_id(client):
    response = await client.post("/api/v1/roles/assignments", json={"user_id": "", "role": "guard"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["validation_errors"][0]["field"] == "user_id"


@pytest.mark.asyncio
async def test_clear_roles(client, plugin):
    await plugin.define_roles("guard")
    await plugin.roles.assign("user-7", "guard")

    response = await client.delete("/api/v1/roles")

    assert response.status_code == 200
    assert response.json() == {"available_roles": [], "assignments": {}}

"""HTTP tests for the users and products routers."""

import httpx
import pytest


@pytest.fixture
async def client(fresh_db):
    from playrate.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _register(client, name, email, password="password123"):
    resp = await client.post(
        "/api/users", json={"name": name, "email": email, "password": password}
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return data, {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
async def admin_headers(client):
    from playrate.services.user_service import admin_update_user

    user, headers = await _register(client, "Admin", "admin@example.com")
    await admin_update_user(user["id"], is_admin=True)
    return headers


@pytest.fixture
async def product(client, admin_headers):
    resp = await client.post(
        "/api/products",
        headers=admin_headers,
        json={
            "name": "Cyber Odyssey",
            "image": "https://example.com/cyber.png",
            "brand": "Neon Dreams",
            "category": ["RPG", "Sci-Fi"],
            "description": "A neon city.",
            "release_date": "2024-10-20",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Users ────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_register_and_login(client):
    user, _ = await _register(client, "Alice", "alice@example.com")
    assert user["is_admin"] is False

    resp = await client.post(
        "/api/users/login", json={"email": "alice@example.com", "password": "password123"}
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == user["id"]

    resp = await client.post(
        "/api/users/login", json={"email": "alice@example.com", "password": "nope"}
    )
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_register_duplicate_email(client):
    await _register(client, "Alice", "alice@example.com")
    resp = await client.post(
        "/api/users",
        json={"name": "Other", "email": "alice@example.com", "password": "password123"},
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists"


@pytest.mark.asyncio
async def test_register_validation_errors_are_400(client):
    resp = await client.post(
        "/api/users", json={"name": "A", "email": "not-an-email", "password": "123"}
    )
    assert resp.status_code == 400
    assert "message" in resp.json()


@pytest.mark.asyncio
async def test_profile_requires_token(client):
    resp = await client.get("/api/users/profile")
    assert resp.status_code == 401
    assert "message" in resp.json()

    resp = await client.get("/api/users/profile", headers={"Authorization": "Bearer junk"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_profile_update(client):
    _, headers = await _register(client, "Alice", "alice@example.com")
    resp = await client.put("/api/users/profile", headers=headers, json={"name": "Alicia"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "Alicia"

    resp = await client.get("/api/users/profile", headers=headers)
    assert resp.json()["name"] == "Alicia"


@pytest.mark.asyncio
async def test_admin_routes_reject_regular_users(client):
    _, headers = await _register(client, "Alice", "alice@example.com")
    resp = await client.get("/api/users", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["message"] == "Not authorized as an admin"


# ── Products ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_product_keeps_extra_fields(product):
    assert product["rating"] == 0
    assert product["num_reviews"] == 0
    assert product["extra"] == {"release_date": "2024-10-20"}
    assert product["disable_rating"] is False


@pytest.mark.asyncio
async def test_create_product_rejects_bad_category(client, admin_headers):
    resp = await client.post(
        "/api/products",
        headers=admin_headers,
        json={
            "name": "Too Many Genres",
            "image": "https://example.com/x.png",
            "brand": "B",
            "category": ["a", "b", "c", "d", "e", "f"],
            "description": "d",
        },
    )
    assert resp.status_code == 400
    assert "1-5 genres" in resp.json()["message"]


@pytest.mark.asyncio
async def test_create_product_rejects_gif_data_url(client, admin_headers):
    resp = await client.post(
        "/api/products",
        headers=admin_headers,
        json={
            "name": "Gif",
            "image": "data:image/gif;base64,R0lGOD",
            "brand": "B",
            "category": ["Arcade"],
            "description": "d",
        },
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_list_products_paginates_and_filters(client, admin_headers):
    for i in range(12):
        resp = await client.post(
            "/api/products",
            headers=admin_headers,
            json={
                "name": f"Racer {i}" if i % 2 else f"Puzzle {i}",
                "image": "https://example.com/x.png",
                "brand": "B",
                "category": ["Arcade"],
                "description": "d",
            },
        )
        assert resp.status_code == 201

    first = (await client.get("/api/products")).json()
    assert first["page"] == 1
    assert first["pages"] == 2
    assert len(first["products"]) == 10

    second = (await client.get("/api/products", params={"page_number": 2})).json()
    assert len(second["products"]) == 2

    racers = (await client.get("/api/products", params={"keyword": "racer"})).json()
    assert len(racers["products"]) == 6
    assert all("Racer" in p["name"] for p in racers["products"])


@pytest.mark.asyncio
async def test_get_unknown_product(client):
    resp = await client.get("/api/products/9999")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Product not found"}


@pytest.mark.asyncio
async def test_play_and_review_flow(client, product):
    _, alice = await _register(client, "Alice", "alice@example.com")
    _, bob = await _register(client, "Bob", "bob@example.com")
    pid = product["id"]

    resp = await client.post(f"/api/products/{pid}/play", headers=alice, json={"time": 59})
    assert resp.status_code == 200
    assert resp.json()["play_time"] == 59

    resp = await client.post(f"/api/products/{pid}/reviews", headers=alice, json={"rating": 5})
    assert resp.status_code == 403
    body = resp.json()
    assert body["reason"] == "insufficient_playtime"
    assert body["required_minutes"] == 60

    resp = await client.post(f"/api/products/{pid}/play", headers=alice, json={"time": 61})
    assert resp.json()["play_time"] == 120

    resp = await client.post(
        f"/api/products/{pid}/reviews", headers=alice, json={"comment": "Great world"}
    )
    assert resp.status_code == 201
    assert resp.json()["message"] == "Review added"

    resp = await client.post(f"/api/products/{pid}/reviews", headers=alice, json={"rating": 5})
    assert resp.status_code == 200
    review = resp.json()["review"]
    assert review["rating"] == 5
    assert review["comment"] == "Great world"

    await client.post(f"/api/products/{pid}/play", headers=bob, json={"time": 80})
    resp = await client.post(f"/api/products/{pid}/reviews", headers=bob, json={"rating": 3})
    assert resp.status_code == 201

    # The background recompute has run by the time the ASGI call returns
    detail = (await client.get(f"/api/products/{pid}")).json()
    assert detail["num_reviews"] == 2
    assert detail["rating"] == pytest.approx(4.2)
    assert [r["user"]["name"] for r in detail["reviews"]] == ["Alice", "Bob"]


@pytest.mark.asyncio
async def test_play_rejects_bad_time(client, product):
    _, headers = await _register(client, "Alice", "alice@example.com")
    bodies = (
        {"time": 0},
        {"time": -10},
        {},
        {"time": "abc"},
        {"time": True},
        {"time": "90"},
        {"time": 45.0},
    )
    for body in bodies:
        resp = await client.post(f"/api/products/{product['id']}/play", headers=headers, json=body)
        assert resp.status_code == 400, body

    stats = (await client.get("/api/users/stats", headers=headers)).json()
    assert stats["total_play_time"] == 0


@pytest.mark.asyncio
async def test_play_requires_auth(client, product):
    resp = await client.post(f"/api/products/{product['id']}/play", json={"time": 10})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_review_validation(client, product):
    _, headers = await _register(client, "Alice", "alice@example.com")
    pid = product["id"]
    await client.post(f"/api/products/{pid}/play", headers=headers, json={"time": 90})

    resp = await client.post(f"/api/products/{pid}/reviews", headers=headers, json={})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Rating or comment is required"

    resp = await client.post(f"/api/products/{pid}/reviews", headers=headers, json={"rating": 6})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Rating must be between 1 and 5"

    for rating in (True, "4", 4.0):
        resp = await client.post(
            f"/api/products/{pid}/reviews", headers=headers, json={"rating": rating}
        )
        assert resp.status_code == 400, rating

    resp = await client.get(f"/api/products/{pid}")
    assert resp.json()["reviews"] == []


@pytest.mark.asyncio
async def test_commenting_disabled_by_admin(client, product, admin_headers):
    _, headers = await _register(client, "Alice", "alice@example.com")
    pid = product["id"]
    resp = await client.put(
        f"/api/products/{pid}", headers=admin_headers, json={"disable_commenting": True}
    )
    assert resp.status_code == 200
    assert resp.json()["disable_commenting"] is True

    await client.post(f"/api/products/{pid}/play", headers=headers, json={"time": 90})
    resp = await client.post(
        f"/api/products/{pid}/reviews", headers=headers, json={"comment": "hello"}
    )
    assert resp.status_code == 403
    assert resp.json()["reason"] == "commenting_disabled"


@pytest.mark.asyncio
async def test_admin_delete_user_recomputes(client, product, admin_headers):
    alice_user, alice = await _register(client, "Alice", "alice@example.com")
    _, bob = await _register(client, "Bob", "bob@example.com")
    pid = product["id"]

    for headers, minutes, rating in ((alice, 120, 5), (bob, 80, 3)):
        await client.post(f"/api/products/{pid}/play", headers=headers, json={"time": minutes})
        await client.post(f"/api/products/{pid}/reviews", headers=headers, json={"rating": rating})

    resp = await client.delete(f"/api/users/{alice_user['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["affected_games"] == 1

    detail = (await client.get(f"/api/products/{pid}")).json()
    assert detail["num_reviews"] == 1
    assert detail["rating"] == pytest.approx(3.0)

    resp = await client.delete(f"/api/users/{alice_user['id']}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_delete_product_cleans_playtime(client, product, admin_headers):
    _, alice = await _register(client, "Alice", "alice@example.com")
    await client.post(f"/api/products/{product['id']}/play", headers=alice, json={"time": 30})

    resp = await client.delete(f"/api/products/{product['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["affected_users"] == 1

    stats = (await client.get("/api/users/stats", headers=alice)).json()
    assert stats["total_play_time"] == 0


@pytest.mark.asyncio
async def test_user_projection_routes(client, product):
    _, alice = await _register(client, "Alice", "alice@example.com")
    pid = product["id"]
    await client.post(f"/api/products/{pid}/play", headers=alice, json={"time": 75})
    await client.post(
        f"/api/products/{pid}/reviews", headers=alice, json={"rating": 4, "comment": "Solid"}
    )

    most = (await client.get("/api/users/most-played", headers=alice)).json()
    assert most["play_time"] == 75

    comments = (await client.get("/api/users/comments", headers=alice)).json()
    assert comments[0]["comment"] == "Solid"

    dashboard = (await client.get("/api/users/dashboard", headers=alice)).json()
    assert dashboard["stats"]["average_rating"] == 4.0

    page = (await client.get("/api/users/page", headers=alice)).json()
    assert page["user_name"] == "Alice"

    product_comments = (await client.get(f"/api/products/{pid}/comments")).json()
    assert product_comments["comments"][0]["user_play_time"] == 75

    detailed = (await client.get("/api/products/detailed")).json()
    assert detailed["games"][0]["release_date"] == "2024-10-20"


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.json()["status"] == "ok"


def test_run_serves_app_with_uvicorn(monkeypatch):
    import uvicorn

    from playrate import main

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(main.settings, "port", 8123)

    main.run()
    assert calls == [(main.app, {"host": main.settings.host, "port": 8123})]

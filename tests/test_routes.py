import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from homefix.models.auth import Role
from homefix.routes.realtime import get_feed
from homefix.services.realtime import ChangeFeed

from conftest import auth_headers, make_profile
from fakes import make_request, make_technician, request_payload


@pytest.fixture
def technician(db, technician_profile):
    return asyncio.run(make_technician(db, "Omar Saleh", lat=24.72, profile_id=technician_profile.id))


@pytest.fixture
def technician_headers(technician_profile):
    return auth_headers(technician_profile)


def test_health_check(client):
    assert client.get("/").json()["status"] == "healthy"


def test_submit_request(client, db):
    response = client.post("/service-requests/", json=request_payload(mobile="055 123 4567"))

    assert response.status_code == 201
    body = response.json()
    assert body["request"]["status"] == "pending"
    assert body["request"]["mobile"] == "0551234567"
    assert len(body["order_reference"]) == 8

    lookup = client.get(f"/service-requests/{body['request']['id']}")
    assert lookup.status_code == 200
    assert lookup.json()["full_name"] == "Fahad Alqahtani"


def test_submit_request_validation(client, db):
    response = client.post("/service-requests/", json=request_payload(mobile="12345"))

    assert response.status_code == 422
    assert db.rows("service_requests") == []


def test_unknown_request_is_404(client):
    response = client.get("/service-requests/6f1b2a8e-55c2-4d7a-9f3e-0a1b2c3d4e5f")
    assert response.status_code == 404


def test_parts_listing(client, db):
    asyncio.run(db.insert("parts_catalog", {"id": "tap", "name": "Tap", "category": "plumbing", "is_active": True}))
    asyncio.run(db.insert("parts_catalog", {"id": "fan", "name": "Fan", "category": "ac", "is_active": True}))

    response = client.get("/parts/", params={"service_type": "plumbing"})

    assert [p["id"] for p in response.json()] == ["tap"]


def test_login_and_me(client, db, admin):
    response = client.post("/auth/token", data={"username": "ADMIN@homefix.sa", "password": "secret-pass"})
    assert response.status_code == 200
    token = response.json()["access_token"]
    assert response.json()["role"] == "admin"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "admin@homefix.sa"


def test_login_wrong_password(client, admin):
    response = client.post("/auth/token", data={"username": "admin@homefix.sa", "password": "nope"})
    assert response.status_code == 401


def test_admin_routes_need_admin(client, db, technician_headers):
    assert client.get("/admin/requests").status_code == 401
    assert client.get("/admin/requests", headers={"Authorization": "Bearer junk"}).status_code == 401
    assert client.get("/admin/requests", headers=technician_headers).status_code == 403


def test_admin_lists_requests_by_status(client, db, admin_headers):
    asyncio.run(make_request(db))
    done = asyncio.run(make_request(db, status="completed"))

    response = client.get("/admin/requests", params={"status": "completed"}, headers=admin_headers)

    assert [r["id"] for r in response.json()] == [str(done.id)]
    assert len(client.get("/admin/requests", headers=admin_headers).json()) == 2


def test_no_candidates(client, db, admin_headers):
    request = asyncio.run(make_request(db, service_type="electrical"))

    response = client.get(f"/admin/requests/{request.id}/candidates", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "no technicians available"


def test_start_requires_assignment(client, db, admin_headers):
    request = asyncio.run(make_request(db, status="confirmed"))

    response = client.put(
        f"/admin/requests/{request.id}/status", json={"status": "in_progress"}, headers=admin_headers
    )

    assert response.status_code == 409
    assert db.tables["service_requests"][request.id]["status"] == "confirmed"


def test_invalid_transition_is_409(client, db, admin_headers):
    request = asyncio.run(make_request(db))

    response = client.put(
        f"/admin/requests/{request.id}/status", json={"status": "completed"}, headers=admin_headers
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "invalid transition: pending -> completed"


def test_admin_notes(client, db, admin_headers):
    request = asyncio.run(make_request(db))

    response = client.put(
        f"/admin/requests/{request.id}/notes", json={"admin_notes": "Gate code 1234"}, headers=admin_headers
    )

    assert response.json()["admin_notes"] == "Gate code 1234"


def test_admin_provisions_technician(client, db, admin_headers):
    response = client.post(
        "/admin/technicians",
        json={"full_name": "Khalid", "phone": "0500000000", "skills": ["ac"], "location": {"lat": 21.5, "lng": 39.2}},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["status"] == "available"
    assert [t["full_name"] for t in client.get("/admin/technicians", headers=admin_headers).json()] == ["Khalid"]


def test_request_lifecycle_end_to_end(client, db, admin_headers, technician, technician_headers):
    request_id = client.post("/service-requests/", json=request_payload()).json()["request"]["id"]

    candidates = client.get(f"/admin/requests/{request_id}/candidates", headers=admin_headers).json()
    assert [c["id"] for c in candidates] == [str(technician.id)]
    assert candidates[0]["distance_km"] == pytest.approx(0.7, abs=0.1)

    too_early = client.post("/reviews/", json={
        "request_id": request_id, "technician_id": str(technician.id),
        "rating": 5, "satisfaction_level": "very_satisfied",
    })
    assert too_early.status_code == 409

    assignment = client.post(
        f"/admin/requests/{request_id}/assign", json={"technician_id": str(technician.id)}, headers=admin_headers
    )
    assert assignment.status_code == 200
    assert assignment.json()["request_status"] == "in_progress"
    assert assignment.json()["technician_status"] == "busy"

    tasks = client.get("/technician/requests", headers=technician_headers).json()
    assert [t["id"] for t in tasks] == [request_id]

    completed = client.put(
        f"/technician/requests/{request_id}/status", json={"status": "completed"}, headers=technician_headers
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert db.tables["technicians"][technician.id]["status"] == "available"

    review = {
        "request_id": request_id, "technician_id": str(technician.id),
        "rating": 5, "satisfaction_level": "very_satisfied", "comment": "",
    }
    assert client.post("/reviews/", json=review).status_code == 201
    assert client.post("/reviews/", json=review).status_code == 201

    summary = client.get(f"/reviews/technician/{technician.id}").json()
    assert summary["total_reviews"] == 2
    assert len(client.get(f"/reviews/request/{request_id}").json()) == 2


def test_review_validation_errors(client, db, technician):
    request = asyncio.run(make_request(db, status="completed"))
    base = {"request_id": str(request.id), "technician_id": str(technician.id)}

    no_rating = client.post("/reviews/", json={**base, "rating": 0, "satisfaction_level": "satisfied"})
    assert no_rating.status_code == 422
    assert no_rating.json()["detail"] == "missing rating"

    no_satisfaction = client.post("/reviews/", json={**base, "rating": 4})
    assert no_satisfaction.json()["detail"] == "missing satisfaction"
    assert db.rows("reviews") == []


def test_technician_accepts_open_request(client, db, technician, technician_headers):
    request = asyncio.run(make_request(db))
    other_skill = asyncio.run(make_request(db, service_type="electrical"))

    tasks = client.get("/technician/requests", headers=technician_headers).json()
    assert [t["id"] for t in tasks] == [str(request.id)]

    accepted = client.put(
        f"/technician/requests/{request.id}/status", json={"status": "confirmed"}, headers=technician_headers
    )
    assert accepted.json()["status"] == "confirmed"

    refused = client.put(
        f"/technician/requests/{other_skill.id}/status", json={"status": "confirmed"}, headers=technician_headers
    )
    assert refused.status_code == 403


def test_technician_cannot_touch_others_work(client, db, technician_headers, technician):
    someone_else = asyncio.run(make_technician(db, "Other", status="busy"))
    request = asyncio.run(make_request(db, status="in_progress"))
    db.tables["service_requests"][request.id]["assigned_technician"] = someone_else.id

    response = client.put(
        f"/technician/requests/{request.id}/status", json={"status": "completed"}, headers=technician_headers
    )

    assert response.status_code == 403
    assert db.tables["service_requests"][request.id]["status"] == "in_progress"


def test_technician_availability(client, db, technician, technician_headers):
    offline = client.put("/technician/me/status", json={"status": "offline"}, headers=technician_headers)
    assert offline.json()["status"] == "offline"

    busy = client.put("/technician/me/status", json={"status": "busy"}, headers=technician_headers)
    assert busy.status_code == 409


def test_change_feed_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws/service-requests?token=junk"):
            pass


def test_change_feed_rejects_customers(client, db):
    customer = make_profile(db, "customer@homefix.sa", Role.USER)
    token = auth_headers(customer)["Authorization"].split()[1]

    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect(f"/ws/service-requests?token={token}"):
            pass


def test_change_feed_sends_snapshot(app, client, db, admin_headers):
    class RunningFeed(ChangeFeed):
        @property
        def running(self):
            return True

    app.dependency_overrides[get_feed] = lambda: RunningFeed("postgresql://unused")
    request = asyncio.run(make_request(db))
    token = admin_headers["Authorization"].split()[1]

    with client.websocket_connect(f"/ws/service-requests?token={token}") as websocket:
        message = websocket.receive_json()

    assert message["type"] == "snapshot"
    assert [r["id"] for r in message["requests"]] == [str(request.id)]

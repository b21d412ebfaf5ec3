"""
Test API endpoints.
"""
import httpx
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from petu.main import app
from petu.models.events import Event
from petu.models.join_requests import JoinRequest
from petu.storage import get_store
from petu.storage.hosted import HostedEventStore


class TestStatusEndpoints:
    def test_root(self, client: TestClient):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["app"] == "petu"
        assert data["status"] == "online"
        assert data["storage"] == "sql"
        assert "timestamp" in data

    def test_api_test(self, client: TestClient):
        response = client.get("/api/test")

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Route not found",
            "path": "/api/nothing-here",
            "method": "GET",
        }


class TestEventEndpoints:
    """Test event-related API endpoints."""

    def test_create_event(self, client: TestClient, event_payload: dict):
        response = client.post("/api/events/create", json=event_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        event = data["event"]
        assert event["title"] == "5-a-side"
        assert event["date"] == "2025-01-01T20:00"
        assert event["location"] == "Field A"
        assert event["maxPlayers"] == 10
        assert event["minQuorum"] == 4
        assert event["currentPlayers"] == 0
        assert event["status"] == "pending"
        assert event["requiresApproval"] is False
        assert event["hostName"] == "Usuario Petu"
        assert event["quorumPercentage"] == 0
        assert event["quorumStatus"] == "low"
        assert "id" in event

    def test_create_event_persists_spanish_columns(self, client: TestClient, db_session: Session, event_payload: dict):
        event_payload.update(hostName="Ana", requiresApproval=True)
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        row = db_session.get(Event, event_id)
        assert row.titulo == "5-a-side"
        assert row.descripcion == "Friendly match"
        assert row.categoria == "sports"
        assert row.fecha == "2025-01-01T20:00"
        assert row.ubicacion == "Field A"
        assert row.max_participantes == 10
        assert row.min_quorum == 4
        assert row.estado == "pendiente"
        assert row.anfitrion == "Ana"
        assert row.requiere_aprobacion is True

    def test_create_event_quorum_above_capacity(self, client: TestClient, event_payload: dict):
        event_payload.update(maxPlayers=5, minQuorum=8)
        response = client.post("/api/events/create", json=event_payload)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert "minQuorum" in data["error"]

    def test_create_event_missing_fields(self, client: TestClient):
        response = client.post("/api/events/create", json={"title": "Test"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert "location" in data["error"]

    def test_list_events(self, client: TestClient, event_payload: dict):
        client.post("/api/events/create", json=event_payload)
        event_payload.update(title="Board games", category="games", date="2024-12-31T18:00")
        client.post("/api/events/create", json=event_payload)

        response = client.get("/api/events")

        assert response.status_code == 200
        titles = [e["title"] for e in response.json()]
        assert titles == ["Board games", "5-a-side"]

    def test_list_events_empty(self, client: TestClient):
        response = client.get("/api/events")

        assert response.status_code == 200
        assert response.json() == []

    def test_get_event(self, client: TestClient, event_payload: dict):
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        response = client.get(f"/api/events/{event_id}")

        assert response.status_code == 200
        assert response.json()["id"] == event_id

    def test_get_event_not_found(self, client: TestClient):
        response = client.get("/api/events/99999")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestJoinEndpoints:
    def test_join(self, client: TestClient, redis_client, event_payload: dict):
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        response = client.post(f"/api/events/{event_id}/join")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["eventId"] == event_id
        assert data["requiresApproval"] is False
        assert data["event"]["currentPlayers"] == 1

    def test_join_reaches_quorum(self, client: TestClient, redis_client, event_payload: dict):
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        for _ in range(4):
            response = client.post(f"/api/events/{event_id}/join")

        event = response.json()["event"]
        assert event["status"] == "confirmed"
        assert event["quorumPercentage"] == 0

        response = client.post(f"/api/events/{event_id}/join")
        assert response.json()["event"]["quorumPercentage"] == 17

    def test_join_nonexistent_event(self, client: TestClient, redis_client):
        response = client.post("/api/events/99999/join")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_join_full_event(self, client: TestClient, redis_client, event_payload: dict):
        event_payload.update(maxPlayers=1, minQuorum=1)
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        assert client.post(f"/api/events/{event_id}/join").status_code == 200
        response = client.post(f"/api/events/{event_id}/join")

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Event is full."}

    def test_join_with_approval_and_token(
        self, client: TestClient, db_session: Session, redis_client, host_notifications, event_payload: dict
    ):
        client.post(
            "/api/register",
            json={"email": "ana@example.com", "password": "secret123", "full_name": "Ana"},
        )
        login = client.post("/api/login", json={"email": "ana@example.com", "password": "secret123"}).json()
        event_payload.update(requiresApproval=True)
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        response = client.post(
            f"/api/events/{event_id}/join",
            headers={"Authorization": f"Bearer {login['token']}"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["requiresApproval"] is True
        assert data["event"] is None
        request = db_session.get(JoinRequest, data["requestId"])
        assert request.usuario_id == login["user"]["id"]
        assert host_notifications == [data["requestId"]]

    def test_join_with_bad_token_is_anonymous(self, client: TestClient, redis_client, event_payload: dict):
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        response = client.post(
            f"/api/events/{event_id}/join",
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == 200

    def test_approve_request(self, client: TestClient, redis_client, event_payload: dict):
        event_payload.update(requiresApproval=True)
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]
        request_id = client.post(f"/api/events/{event_id}/join").json()["requestId"]

        response = client.post(f"/api/events/{event_id}/requests/{request_id}/approve")

        assert response.status_code == 200
        data = response.json()
        assert data["requestId"] == request_id
        assert data["event"]["currentPlayers"] == 1

    def test_approve_unknown_request(self, client: TestClient, redis_client, event_payload: dict):
        event_id = client.post("/api/events/create", json=event_payload).json()["event"]["id"]

        response = client.post(f"/api/events/{event_id}/requests/777/approve")

        assert response.status_code == 404


class TestAuthEndpoints:
    def test_register(self, client: TestClient):
        response = client.post(
            "/api/register",
            json={"email": "Ana@Example.com", "password": "secret123", "full_name": "Ana"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "ana@example.com"
        assert data["user"]["full_name"] == "Ana"
        assert data["user"]["lives"] == 3
        assert data["user"]["reputation"] == 0
        assert data["user"]["level"] == "beginner"
        assert "password" not in data["user"]

    def test_register_missing_fields(self, client: TestClient):
        response = client.post("/api/register", json={"email": "ana@example.com"})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_register_duplicate_email(self, client: TestClient):
        body = {"email": "ana@example.com", "password": "secret123", "full_name": "Ana"}
        client.post("/api/register", json=body)

        response = client.post("/api/register", json=body)

        assert response.status_code == 400
        assert "already registered" in response.json()["error"]

    def test_login(self, client: TestClient):
        client.post(
            "/api/register",
            json={"email": "ana@example.com", "password": "secret123", "full_name": "Ana"},
        )

        response = client.post("/api/login", json={"email": "ana@example.com", "password": "secret123"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["full_name"] == "Ana"
        assert data["token"]

    def test_login_wrong_password(self, client: TestClient):
        client.post(
            "/api/register",
            json={"email": "ana@example.com", "password": "secret123", "full_name": "Ana"},
        )

        response = client.post("/api/login", json={"email": "ana@example.com", "password": "nope"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid credentials"}

    def test_login_unknown_user(self, client: TestClient):
        response = client.post("/api/login", json={"email": "ghost@example.com", "password": "x"})

        assert response.status_code == 401


class TestUnexpectedErrors:
    """Failures outside the error hierarchy still produce a JSON body."""

    @staticmethod
    def hosted_store(handler) -> HostedEventStore:
        return HostedEventStore(httpx.Client(transport=httpx.MockTransport(handler), base_url="https://db.example.com"))

    def test_non_json_backend_response(self):
        store = self.hosted_store(lambda request: httpx.Response(200, text="<html>oops</html>"))
        app.dependency_overrides[get_store] = lambda: store
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/events")
        finally:
            del app.dependency_overrides[get_store]

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert "Invalid response" in response.json()["error"]

    def test_bad_stored_row(self):
        row = {
            "id": 1,
            "titulo": "Broken",
            "categoria": "sports",
            "fecha": "2025-01-01",
            "ubicacion": "Nowhere",
            "max_participantes": 0,
            "min_quorum": 0,
            "participantes_actuales": 0,
            "estado": "pendiente",
        }
        store = self.hosted_store(lambda request: httpx.Response(200, json=[row]))
        app.dependency_overrides[get_store] = lambda: store
        try:
            response = TestClient(app, raise_server_exceptions=False).get("/api/events")
        finally:
            del app.dependency_overrides[get_store]

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"]

from datetime import datetime

from fastapi.testclient import TestClient

from conftest import student_payload

BASE_URL = "/api/students"


def create(client, **overrides):
    return client.post(BASE_URL, json=student_payload(**overrides))


def test_student_lifecycle(client):
    """
    Create -> search -> update -> delete -> 404
    """
    response = create(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Student created successfully"
    student = body["data"]
    student_id = student["id"]
    assert student["createdAt"] == student["updatedAt"]

    response = client.get(BASE_URL, params={"search": "John"})
    assert response.status_code == 200
    page = response.json()["data"]
    assert [s["id"] for s in page["content"]] == [student_id]
    assert page["totalElements"] == 1

    response = client.put(f"{BASE_URL}/{student_id}", json=student_payload(age=21))
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["age"] == 21
    assert datetime.fromisoformat(updated["updatedAt"]) > datetime.fromisoformat(student["updatedAt"])
    assert updated["createdAt"] == student["createdAt"]

    response = client.delete(f"{BASE_URL}/{student_id}")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Student deleted successfully",
        "data": None,
    }

    response = client.get(f"{BASE_URL}/{student_id}")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_get_student_by_id(client):
    student_id = create(client).json()["data"]["id"]

    response = client.get(f"{BASE_URL}/{student_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Student retrieved successfully"
    assert body["data"]["email"] == "john@x.com"


def test_validation_error_creates_nothing(client):
    response = create(client, age=17)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "18" in body["data"]["age"]

    listing = client.get(BASE_URL).json()["data"]
    assert listing["totalElements"] == 0


def test_wrongly_typed_body_is_a_bad_request(client):
    response = create(client, age="twenty")
    assert response.status_code == 400
    assert "age" in response.json()["data"]


def test_duplicate_email_conflict(client):
    create(client)
    response = create(client, name="Other Person")
    assert response.status_code == 409
    assert response.json()["message"] == "Student with email john@x.com already exists"


def test_update_conflict_and_not_found(client):
    create(client, email="taken@x.com")
    mine = create(client, email="mine@x.com").json()["data"]

    response = client.put(f"{BASE_URL}/{mine['id']}", json=student_payload(email="taken@x.com"))
    assert response.status_code == 409

    response = client.put(f"{BASE_URL}/{mine['id']}", json=student_payload(email="mine@x.com", course="Art"))
    assert response.status_code == 200

    response = client.put(f"{BASE_URL}/999", json=student_payload())
    assert response.status_code == 404

    response = client.put(f"{BASE_URL}/{mine['id']}", json=student_payload(email="nope"))
    assert response.status_code == 400


def test_delete_missing_student(client):
    response = client.delete(f"{BASE_URL}/123")
    assert response.status_code == 404
    assert response.json()["message"] == "Student not found with id: 123"


def test_listing_defaults_and_paging(client):
    for i in range(12):
        create(client, name=f"Student {i:02d}", email=f"s{i}@x.com")

    page = client.get(BASE_URL).json()["data"]
    assert len(page["content"]) == 10
    assert page["page"] == 0
    assert page["size"] == 10
    assert page["totalElements"] == 12
    assert page["totalPages"] == 2

    past_end = client.get(BASE_URL, params={"page": 7}).json()["data"]
    assert past_end["content"] == []
    assert past_end["totalElements"] == 12


def test_listing_sort_params(client):
    create(client, name="Young One", email="young@x.com", age=19)
    create(client, name="Old One", email="old@x.com", age=80)

    page = client.get(BASE_URL, params={"sortBy": "age", "sortDir": "desc"}).json()["data"]
    assert [s["email"] for s in page["content"]] == ["old@x.com", "young@x.com"]


def test_listing_rejects_bad_sort_and_paging(client):
    assert client.get(BASE_URL, params={"sortBy": "password"}).status_code == 400
    assert client.get(BASE_URL, params={"sortDir": "sideways"}).status_code == 400
    assert client.get(BASE_URL, params={"page": -1}).status_code == 400
    assert client.get(BASE_URL, params={"size": 0}).status_code == 400


def test_blank_search_lists_everything(client):
    create(client, email="a@x.com")
    create(client, name="Jane Roe", email="b@x.com", course="Art")

    page = client.get(BASE_URL, params={"search": "   "}).json()["data"]
    assert page["totalElements"] == 2


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/courses")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_unexpected_error_is_a_500(app):
    class BrokenService:
        def get_student_by_id(self, student_id):
            raise RuntimeError("store went away")

    with TestClient(app, raise_server_exceptions=False) as client:
        app.state.student_service = BrokenService()
        response = client.get(f"{BASE_URL}/1")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "An unexpected error occurred. Please contact support.",
        "data": None,
    }


def test_root_and_health(client):
    assert client.get("/").json()["docs"] == "/docs"
    assert client.get("/health").json() == {"status": "ok", "database": "up"}


def test_huge_page_index_is_an_empty_page(client):
    create(client)

    response = client.get(BASE_URL, params={"page": 10**18})
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["content"] == []
    assert page["totalElements"] == 1


def test_unparsable_json_is_reported_on_body(client):
    response = client.post(
        BASE_URL,
        content='{"name": "John Doe", "email": ',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert list(response.json()["data"]) == ["body"]

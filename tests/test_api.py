import re

from helpdesk.main import app
from helpdesk.schemas import Suggestion
from helpdesk.services.suggestions import get_suggestion_client

SUBMISSION = {
    "name": "Ms. Rivera",
    "email": "rivera@school.edu",
    "title": "Projector flickers",
    "description": "The projector in room 12 keeps flickering during class.",
    "category": "Smart Board/Projector",
    "priority": "HIGH",
    "requesterType": "Teacher",
}


def _submit(client, **overrides):
    response = client.post("/tickets", json={**SUBMISSION, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_public_form_defaults(client):
    body = client.get("/form").json()

    assert body["themeColor"] == "#0870b8"
    assert "Network/Wi-Fi" in body["categories"]
    assert body["priorities"] == ["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    assert "Parent" in body["requesterTypes"]
    assert body["customFields"] == []


def test_public_submission(client):
    body = _submit(client)

    ticket = body["ticket"]
    assert re.fullmatch(r"T-\d{4}", ticket["id"])
    assert ticket["status"] == "OPEN"
    assert ticket["priority"] == "HIGH"
    assert ticket["createdBy"] == {"name": "Ms. Rivera", "email": "rivera@school.edu"}
    assert body["notice"] == f"Ticket {ticket['id']} logged. An acknowledgment has been sent to rivera@school.edu."


def test_public_submission_validation(client):
    assert client.post("/tickets", json={**SUBMISSION, "title": " "}).status_code == 422

    response = client.post("/tickets", json={**SUBMISSION, "category": "Cafeteria"})
    assert response.status_code == 400
    assert "Unknown category" in response.json()["detail"]


def test_staff_routes_need_a_token(client):
    assert client.get("/staff/tickets").status_code == 401
    assert client.get("/staff/tickets", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_login_failure_is_generic(client):
    wrong_password = client.post("/auth/login", json={"email": "john@school.edu", "password": "nope"})
    unknown_user = client.post("/auth/login", json={"email": "ghost@school.edu", "password": "password"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid email or password"}


def test_login_returns_public_user(client):
    response = client.post("/auth/login", json={"email": "john@school.edu", "password": "password"})

    user = response.json()["user"]
    assert user == {"id": "2", "name": "John Tech", "email": "john@school.edu", "role": "IT Support Staff"}


def test_support_staff_cannot_reach_admin(client, support_headers, admin_headers):
    assert client.get("/admin/settings", headers=support_headers).status_code == 403
    assert client.get("/admin/settings", headers=admin_headers).status_code == 200


def test_ticket_workflow(client, support_headers):
    ticket_id = _submit(client)["ticket"]["id"]

    listed = client.get("/staff/tickets", params={"status": "ALL", "search": "projector"}, headers=support_headers)
    assert [ticket["id"] for ticket in listed.json()] == [ticket_id]

    assigned = client.put(
        f"/staff/tickets/{ticket_id}/assignment", json={"staffId": "2"}, headers=support_headers
    )
    assert assigned.status_code == 200
    assert assigned.json()["notice"] == f"Ticket {ticket_id} assigned to John Tech. Requester notified."

    comment = client.post(
        f"/staff/tickets/{ticket_id}/comments", json={"text": "Swapped the HDMI cable."}, headers=support_headers
    )
    assert comment.status_code == 201
    assert comment.json()["comments"][0]["userName"] == "John Tech"

    progressed = client.put(
        f"/staff/tickets/{ticket_id}/status", json={"status": "IN_PROGRESS"}, headers=support_headers
    )
    assert progressed.json()["ticket"]["status"] == "IN_PROGRESS"

    detail = client.get(f"/staff/tickets/{ticket_id}", headers=support_headers).json()
    assert detail["assigneeName"] == "John Tech"
    assert detail["ticket"]["status"] == "IN_PROGRESS"

    stats = client.get("/staff/dashboard", headers=support_headers).json()
    assert stats["total"] == 1
    assert stats["byStatus"]["IN_PROGRESS"] == 1


def test_unknown_ticket_is_404(client, support_headers):
    response = client.put("/staff/tickets/T-0000/status", json={"status": "CLOSED"}, headers=support_headers)

    assert response.status_code == 404


def test_invalid_filter_is_400(client, support_headers):
    assert client.get("/staff/tickets", params={"status": "DONE"}, headers=support_headers).status_code == 400


def test_assignees_exclude_coordinators(client, admin_headers):
    created = client.post(
        "/admin/users",
        json={"name": "Ana Cruz", "email": "ana@school.edu", "role": "Coordinator", "password": "secret1"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    coordinator_id = created.json()["id"]

    names = {user["name"] for user in client.get("/staff/assignees", headers=admin_headers).json()}
    assert names == {"Gladson Lawrence", "John Tech"}

    ticket_id = _submit(client)["ticket"]["id"]
    response = client.put(
        f"/staff/tickets/{ticket_id}/assignment", json={"staffId": coordinator_id}, headers=admin_headers
    )
    assert response.status_code == 400


def test_custom_field_flow(client, admin_headers, support_headers):
    created = client.post(
        "/admin/settings/fields",
        json={"label": "Device", "type": "DROPDOWN", "options": ["Laptop", "Desktop"], "required": True},
        headers=admin_headers,
    )
    assert created.status_code == 201
    field_id = created.json()["id"]

    control = client.get("/form").json()["customFields"][0]
    assert control["kind"] == "select"
    assert [option["value"] for option in control["options"]] == ["", "Laptop", "Desktop"]

    assert client.post("/tickets", json=SUBMISSION).status_code == 400
    ticket_id = _submit(client, customData={field_id: "Laptop"})["ticket"]["id"]

    detail = client.get(f"/staff/tickets/{ticket_id}", headers=support_headers).json()
    assert detail["answers"] == [{"fieldId": field_id, "label": "Device", "value": "Laptop"}]

    assert client.delete(f"/admin/settings/fields/{field_id}", headers=admin_headers).status_code == 200
    detail = client.get(f"/staff/tickets/{ticket_id}", headers=support_headers).json()
    assert detail["answers"] == []
    assert detail["ticket"]["customData"] == {field_id: "Laptop"}


def test_choice_field_without_options_is_400(client, admin_headers):
    response = client.post(
        "/admin/settings/fields",
        json={"label": "Device", "type": "MULTIPLE_CHOICE", "options": []},
        headers=admin_headers,
    )

    assert response.status_code == 400


def test_resolution_notice_toggle(client, admin_headers, support_headers):
    toggled = client.put(
        "/admin/settings/notifications",
        json={
            "notifyOnCreation": True,
            "notifyOnStatusChange": True,
            "notifyOnAssignment": True,
            "notifyOnResolution": False,
        },
        headers=admin_headers,
    )
    assert toggled.json()["notifications"]["notifyOnResolution"] is False

    ticket_id = _submit(client)["ticket"]["id"]
    closed = client.put(f"/staff/tickets/{ticket_id}/status", json={"status": "CLOSED"}, headers=support_headers)

    assert closed.status_code == 200
    assert closed.json()["notice"] is None
    assert closed.json()["ticket"]["status"] == "CLOSED"


def test_categories_and_theme(client, admin_headers):
    added = client.post("/admin/settings/categories", json={"name": "Lab Equipment"}, headers=admin_headers)
    assert added.status_code == 201
    assert client.post("/admin/settings/categories", json={"name": "Lab Equipment"}, headers=admin_headers).status_code == 400

    assert client.put("/admin/settings/theme", json={"themeColor": "#123ABC"}, headers=admin_headers).status_code == 200
    assert client.put("/admin/settings/theme", json={"themeColor": "teal"}, headers=admin_headers).status_code == 422

    form = client.get("/form").json()
    assert form["themeColor"] == "#123abc"
    assert "Lab Equipment" in form["categories"]

    removed = client.delete("/admin/settings/categories/Lab Equipment", headers=admin_headers)
    assert "Lab Equipment" not in removed.json()["categories"]


def test_suggestion_endpoint(client, support_headers):
    ticket_id = _submit(client)["ticket"]["id"]

    class StubClient:
        async def suggest(self, ticket):
            return Suggestion(text=f"Check the cable for {ticket.id}", sources=["https://docs.example"])

    app.dependency_overrides[get_suggestion_client] = StubClient

    response = client.post(f"/staff/tickets/{ticket_id}/suggestion", headers=support_headers)

    assert response.status_code == 200
    assert response.json() == {"text": f"Check the cable for {ticket_id}", "sources": ["https://docs.example"]}
    assert client.post("/staff/tickets/T-0000/suggestion", headers=support_headers).status_code == 404


def test_default_categories_with_slashes_can_be_removed(client, admin_headers):
    removed = client.delete("/admin/settings/categories/Network/Wi-Fi", headers=admin_headers)
    assert removed.status_code == 200
    assert "Network/Wi-Fi" not in removed.json()["categories"]

    encoded = client.delete("/admin/settings/categories/Printer%2FScanner", headers=admin_headers)
    assert encoded.status_code == 200

    categories = client.get("/form").json()["categories"]
    assert "Network/Wi-Fi" not in categories
    assert "Printer/Scanner" not in categories
    assert "Other" in categories

from __future__ import annotations

NODE_KEYS = {
    "id",
    "name",
    "firstName",
    "lastName",
    "email",
    "phone",
    "position",
    "department",
    "superiorId",
    "children",
}


def _add(client, first: str, last: str, superior_id: str | None = None, **fields) -> dict:
    body = {
        "firstName": first,
        "lastName": last,
        "email": f"{first.lower()}@portal.example",
        "phone": "",
        "position": fields.pop("position", "Manager"),
        "department": fields.pop("department", "HR"),
        "superiorId": superior_id,
        **fields,
    }
    response = client.post("/api/v1/org-chart", json=body)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    return data["employee"]


def test_org_chart_requires_auth(client):
    response = client.get("/api/v1/org-chart")
    assert response.status_code == 401


def test_empty_org_chart(authenticated_client):
    response = authenticated_client.get("/api/v1/org-chart")
    assert response.status_code == 200
    assert response.json() == {"employees": []}


def test_add_employee_echoes_node_shape(authenticated_client):
    employee = _add(authenticated_client, "Ada", "Lovelace", position="CEO")

    assert set(employee) == NODE_KEYS
    assert employee["name"] == "Ada Lovelace"
    assert employee["position"] == "CEO"
    assert employee["superiorId"] is None
    assert employee["children"] == []


def test_hierarchy_returns_nested_forest(authenticated_client):
    ceo = _add(authenticated_client, "Ada", "Lovelace")
    cto = _add(authenticated_client, "Alan", "Turing", superior_id=ceo["id"])
    dev = _add(authenticated_client, "Linus", "Torvalds", superior_id=cto["id"])
    solo = _add(authenticated_client, "Grace", "Hopper")

    data = authenticated_client.get("/api/v1/org-chart").json()["employees"]

    assert [root["id"] for root in data] == [ceo["id"], solo["id"]]
    assert set(data[0]) == NODE_KEYS
    child = data[0]["children"][0]
    assert child["id"] == cto["id"]
    assert child["superiorId"] == ceo["id"]
    assert child["children"][0]["id"] == dev["id"]
    assert child["children"][0]["superiorId"] == cto["id"]


def test_add_with_unknown_superior_returns_404(authenticated_client):
    response = authenticated_client.post(
        "/api/v1/org-chart",
        json={"firstName": "A", "lastName": "X", "superiorId": "does-not-exist"},
    )
    assert response.status_code == 404
    assert "does-not-exist" in response.json()["detail"]
    assert authenticated_client.get("/api/v1/org-chart").json() == {"employees": []}


def test_update_employee_partial(authenticated_client):
    boss = _add(authenticated_client, "Ada", "Lovelace")
    employee = _add(authenticated_client, "Alan", "Turing", position="CTO")

    response = authenticated_client.put(
        f"/api/v1/org-chart/{employee['id']}",
        json={"department": "R&D", "superiorId": boss["id"]},
    )

    assert response.status_code == 200
    updated = response.json()["employee"]
    assert updated["department"] == "R&D"
    assert updated["position"] == "CTO"
    assert updated["superiorId"] == boss["id"]


def test_update_with_null_superior_makes_root(authenticated_client):
    boss = _add(authenticated_client, "Ada", "Lovelace")
    employee = _add(authenticated_client, "Alan", "Turing", superior_id=boss["id"])

    response = authenticated_client.put(f"/api/v1/org-chart/{employee['id']}", json={"superiorId": None})

    assert response.status_code == 200
    roots = authenticated_client.get("/api/v1/org-chart").json()["employees"]
    assert [root["id"] for root in roots] == [boss["id"], employee["id"]]


def test_update_unknown_employee_returns_404(authenticated_client):
    response = authenticated_client.put("/api/v1/org-chart/ghost", json={"position": "X"})
    assert response.status_code == 404


def test_delete_leaves_children_as_roots(authenticated_client):
    boss = _add(authenticated_client, "Ada", "Lovelace")
    report = _add(authenticated_client, "Alan", "Turing", superior_id=boss["id"])

    response = authenticated_client.delete(f"/api/v1/org-chart/{boss['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    roots = authenticated_client.get("/api/v1/org-chart").json()["employees"]
    assert [root["id"] for root in roots] == [report["id"]]

    stored = authenticated_client.get(f"/api/v1/employees/{report['id']}").json()
    assert stored["supervisorName"] == "Ada Lovelace"


def test_delete_unknown_employee_returns_404(authenticated_client):
    response = authenticated_client.delete("/api/v1/org-chart/ghost")
    assert response.status_code == 404


def test_supervisor_choices_exclude_descendants(authenticated_client):
    ceo = _add(authenticated_client, "Ada", "Lovelace", position="CEO")
    cto = _add(authenticated_client, "Alan", "Turing", superior_id=ceo["id"])
    _add(authenticated_client, "Linus", "Torvalds", superior_id=cto["id"])

    response = authenticated_client.get("/api/v1/org-chart/supervisor-choices", params={"employeeId": cto["id"]})

    assert response.status_code == 200
    assert response.json() == [{"id": ceo["id"], "name": "Ada Lovelace", "position": "CEO"}]


def test_supervisor_choices_for_new_employee(authenticated_client):
    _add(authenticated_client, "Ada", "Lovelace")
    _add(authenticated_client, "Plain", "User", roles=["USER"])

    response = authenticated_client.get("/api/v1/org-chart/supervisor-choices")

    assert [choice["name"] for choice in response.json()] == ["Ada Lovelace"]


def test_supervisor_choices_unknown_employee_returns_404(authenticated_client):
    response = authenticated_client.get("/api/v1/org-chart/supervisor-choices", params={"employeeId": "ghost"})
    assert response.status_code == 404


def test_viewer_can_read_but_not_mutate(viewer_client):
    assert viewer_client.get("/api/v1/org-chart").status_code == 200

    response = viewer_client.post("/api/v1/org-chart", json={"firstName": "A", "lastName": "X"})
    assert response.status_code == 403
    assert viewer_client.put("/api/v1/org-chart/any", json={}).status_code == 403
    assert viewer_client.delete("/api/v1/org-chart/any").status_code == 403


def test_invalid_role_value_is_rejected(authenticated_client):
    response = authenticated_client.post(
        "/api/v1/org-chart",
        json={"firstName": "A", "lastName": "X", "roles": ["OWNER"]},
    )
    assert response.status_code == 422


def test_list_employees_with_search(authenticated_client):
    _add(authenticated_client, "Ada", "Lovelace")
    _add(authenticated_client, "Alan", "Turing", roles=["USER"])

    response = authenticated_client.get("/api/v1/employees", params={"search": "turing"})

    assert response.status_code == 200
    data = response.json()
    assert [e["lastName"] for e in data] == ["Turing"]
    assert data[0]["roles"] == ["USER"]
    assert "credential" not in data[0]


def test_get_unknown_employee_returns_404(authenticated_client):
    response = authenticated_client.get("/api/v1/employees/ghost")
    assert response.status_code == 404

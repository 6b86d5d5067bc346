API = "/api/v1"


def create_hostel(client, **overrides):
    payload = {"name": "Porali Hostel", "capacityPerRoom": 2, "blocks": [{"name": "A", "numRooms": 2}]}
    payload.update(overrides)
    response = client.post(f"{API}/hostels", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_student(client, reg, **overrides):
    payload = {"studentName": f"Student {reg}", "registrationNumber": reg, "department": "CS"}
    payload.update(overrides)
    return client.post(f"{API}/students", json=payload)


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["database"] == "ok"
    assert "X-Request-ID" in response.headers
    assert "X-Process-Time" in response.headers


def test_request_id_is_echoed(client):
    response = client.get(f"{API}/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_hostel_rooms_listing(client):
    hostel = create_hostel(client)
    assert hostel["totalCapacity"] == 4

    create_student(client, "R1", assignedHostel="Porali Hostel", roomNumber="a-1")
    response = client.get(f"{API}/hostels/porali/rooms")

    assert response.status_code == 200
    rooms = response.json()["data"]["rooms"]
    assert [r["roomId"] for r in rooms] == ["A-01", "A-02"]
    assert rooms[0]["occupied"] == 1
    assert [s["registrationNumber"] for s in rooms[0]["students"]] == ["R1", "-"]
    assert rooms[1]["students"][0]["name"] == "To Be Alloted"


def test_student_lifecycle(client):
    create_hostel(client)

    created = create_student(client, "2021-CS-1", assignedHostel="Porali Hostel")
    assert created.status_code == 201, created.text
    data = created.json()["data"]
    student_id = data["student"]["id"]
    assert data["student"]["roomNumber"] == "A-01"
    assert data["cascade"]["assignmentsAdded"] == 1

    assert client.get(f"{API}/students/{student_id}").status_code == 200

    updated = client.put(f"{API}/students/{student_id}", json={"roomNumber": "A-02"})
    assert updated.json()["data"]["student"]["roomNumber"] == "A-02"

    deleted = client.delete(f"{API}/students/{student_id}", params={"username": "warden"})
    assert deleted.status_code == 200
    assert deleted.json()["data"]["cascade"]["studentsDeleted"] == 1

    missing = client.get(f"{API}/students/{student_id}")
    assert missing.status_code == 404
    assert missing.json()["errorCode"] == "RESOURCE_NOT_FOUND"


def test_duplicate_student_conflicts(client):
    assert create_student(client, "R1").status_code == 201
    response = create_student(client, "R1")
    assert response.status_code == 409
    assert response.json()["errorCode"] == "DUPLICATE_ENTRY"


def test_hostel_name_spellings_conflict(client):
    create_hostel(client)

    response = client.post(f"{API}/hostels", json={"name": "porali", "numberOfRooms": 2})

    assert response.status_code == 409
    body = response.json()
    assert body["errorCode"] == "DUPLICATE_ENTRY"
    assert [e["field"] for e in body["errors"]] == ["name"]


def test_full_hostel_rejects_auto_placement(client):
    create_hostel(client, capacityPerRoom=1, blocks=[{"name": "A", "numRooms": 1}])
    assert create_student(client, "R1", assignedHostel="Porali Hostel").status_code == 201

    response = create_student(client, "R2", assignedHostel="Porali Hostel")

    assert response.status_code == 409
    assert response.json()["errorCode"] == "NO_CAPACITY_AVAILABLE"


def test_batch_delete(client):
    for reg in ("2020-CS-1", "2020-CS-2", "2021-CS-1"):
        create_student(client, reg)

    response = client.delete(f"{API}/students/batch", params={"department": "CS", "batch": "2020"})

    assert response.status_code == 200
    assert response.json()["data"]["studentsDeleted"] == 2
    remaining = client.get(f"{API}/students").json()["data"]
    assert [s["registrationNumber"] for s in remaining] == ["2021-CS-1"]

    again = client.delete(f"{API}/students/batch", params={"department": "CS", "batch": "2020"})
    assert again.status_code == 404


def test_mark_paid(client):
    student = create_student(client, "R1", semester=1).json()["data"]["student"]

    response = client.post(f"{API}/challans/mark-paid", json={"registrationNumber": "R1", "semester": 1})

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["semesterKey"] == "sem1"
    assert data["student"]["feeTable"] == {"sem1": "paid"}
    assert data["student"]["challanNumber"] == student["challanNumber"]

    logs = client.get(f"{API}/logs", params={"subjectId": student["id"]}).json()["data"]
    assert logs[0]["action"] == "PAYMENT"


def test_challan_creation_and_listing(client):
    student = create_student(client, "R1", semester=2).json()["data"]["student"]

    created = client.post(f"{API}/challans", json={"studentId": student["id"], "amount": "1500.00"})
    assert created.status_code == 201, created.text

    listed = client.get(f"{API}/challans", params={"registrationNumber": "R1"}).json()
    assert listed["metadata"]["total"] == 1
    assert listed["data"][0]["currentStatus"] == "pending"


def test_unknown_challan_status_filter_is_rejected(client):
    response = client.get(f"{API}/challans", params={"status": "lost"})
    assert response.status_code == 422
    assert response.json()["errorCode"] == "VALIDATION_ERROR"


def test_request_validation_envelope(client):
    response = client.post(f"{API}/students", json={"studentName": "No Reg"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errorCode"] == "VALIDATION_ERROR"
    assert any("registrationNumber" in (e["field"] or "") for e in body["errors"])


def test_invalid_structure_is_unprocessable(client):
    create_hostel(client, name="Empty", blocks=[], numberOfRooms=0)
    response = client.get(f"{API}/hostels/Empty/rooms")
    assert response.status_code == 422
    assert response.json()["errorCode"] == "INVALID_STRUCTURAL_DEFINITION"


def test_delete_hostel_cascade(client):
    hostel = create_hostel(client)
    create_student(client, "R1", assignedHostel="Porali Hostel")

    response = client.delete(f"{API}/hostels/{hostel['id']}", params={"username": "admin"})

    assert response.status_code == 200
    assert response.json()["data"]["studentsDeleted"] == 1
    assert client.get(f"{API}/hostels/{hostel['id']}").status_code == 404
    assert client.get(f"{API}/students").json()["data"] == []


def test_legacy_import_endpoint(client):
    create_hostel(client)

    response = client.post(
        f"{API}/hostels/porali/legacy-records",
        content="roomNo,regNo,name\nA-02,OLD-1,Old Student\n",
        headers={"Content-Type": "text/csv"},
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["imported"] == 1
    rooms = client.get(f"{API}/hostels/porali/rooms").json()["data"]["rooms"]
    assert rooms[1]["students"][0]["registrationNumber"] == "OLD-1"


def test_logs_append_and_list(client):
    created = client.post(f"{API}/logs", json={"action": "NOTE", "description": "Inspection", "username": "w1"})
    assert created.status_code == 201

    listed = client.get(f"{API}/logs", params={"username": "w1"}).json()["data"]
    assert [e["description"] for e in listed] == ["Inspection"]

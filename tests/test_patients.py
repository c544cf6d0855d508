"""
Tests for patient endpoints.
"""
from core.dependencies import get_patient_repository
from core.exceptions import DatabaseError


def _create(client, name="Jane Doe", patient_number="P-1001"):
    return client.post("/api/patients", json={"name": name, "patientNumber": patient_number})


# =============================================================================
# CREATE
# =============================================================================

def test_create_patient_success(client):
    """First patient on an empty table gets id 1."""
    response = _create(client)
    assert response.status_code == 201
    assert response.json() == {"id": 1, "name": "Jane Doe", "patient_number": "P-1001"}


def test_create_patient_missing_patient_number(client):
    response = client.post("/api/patients", json={"name": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}


def test_create_patient_empty_fields(client):
    response = client.post("/api/patients", json={"name": "Jane Doe", "patientNumber": ""})
    assert response.status_code == 400
    assert response.json()["error"] == "Missing name or patientNumber."


def test_create_patient_null_field(client):
    response = client.post("/api/patients", json={"name": None, "patientNumber": "P-1"})
    assert response.status_code == 400


def test_create_patient_non_string_field(client):
    """Values are not coerced: a number is not a patient number."""
    response = client.post("/api/patients", json={"name": "Jane Doe", "patientNumber": 1001})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}


def test_create_patient_without_body(client):
    response = client.post("/api/patients")
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}


def test_create_patient_malformed_json(client):
    response = client.post(
        "/api/patients",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}


def test_create_patient_does_not_touch_store_on_validation_error(client):
    client.post("/api/patients", json={"name": "Jane Doe"})
    assert client.get("/api/patients").json() == {"patients": []}


def test_create_patient_whitespace_is_present(client):
    """Presence-only validation: whitespace counts as a value."""
    response = _create(client, name=" ", patient_number=" ")
    assert response.status_code == 201
    assert response.json()["name"] == " "


def test_patient_number_not_unique(client):
    first = _create(client, name="Jane Doe", patient_number="P-1")
    second = _create(client, name="John Doe", patient_number="P-1")
    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["id"] > first.json()["id"]


def test_create_patient_with_sql_metacharacters(client):
    """Values are bound parameters, so they are stored verbatim."""
    name = "Robert'); DROP TABLE patients;--"
    response = _create(client, name=name, patient_number="P-'1'")
    assert response.status_code == 201

    patients = client.get("/api/patients").json()["patients"]
    assert patients == [{"id": 1, "name": name, "patient_number": "P-'1'"}]


# =============================================================================
# LIST
# =============================================================================

def test_list_patients_empty(client):
    response = client.get("/api/patients")
    assert response.status_code == 200
    assert response.json() == {"patients": []}


def test_list_patients_after_create(client):
    _create(client)
    response = client.get("/api/patients")
    assert response.status_code == 200
    assert response.json() == {
        "patients": [{"id": 1, "name": "Jane Doe", "patient_number": "P-1001"}]
    }


def test_list_patients_ordered_by_id(client):
    for name in ("Zebra Patient", "Alice Patient", "Bob Patient"):
        _create(client, name=name, patient_number=f"N-{name[0]}")

    patients = client.get("/api/patients").json()["patients"]
    assert [p["name"] for p in patients] == ["Zebra Patient", "Alice Patient", "Bob Patient"]
    ids = [p["id"] for p in patients]
    assert ids == sorted(ids)


# =============================================================================
# UPDATE
# =============================================================================

def test_update_patient_success(client):
    patient_id = _create(client).json()["id"]

    response = client.put(
        f"/api/patients/{patient_id}",
        json={"name": "Jane Smith", "patientNumber": "P-2002"},
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Patient updated successfully."}

    patients = client.get("/api/patients").json()["patients"]
    assert patients == [{"id": patient_id, "name": "Jane Smith", "patient_number": "P-2002"}]


def test_update_patient_same_values(client):
    """Re-sending unchanged values still finds the row."""
    patient_id = _create(client).json()["id"]
    response = client.put(
        f"/api/patients/{patient_id}",
        json={"name": "Jane Doe", "patientNumber": "P-1001"},
    )
    assert response.status_code == 200


def test_update_patient_not_found(client):
    response = client.put(
        "/api/patients/999",
        json={"name": "Jane Doe", "patientNumber": "P-1001"},
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found."}
    assert client.get("/api/patients").json() == {"patients": []}


def test_update_patient_missing_fields(client):
    patient_id = _create(client).json()["id"]
    response = client.put(f"/api/patients/{patient_id}", json={"name": "Jane Smith"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}

    patients = client.get("/api/patients").json()["patients"]
    assert patients[0]["name"] == "Jane Doe"


def test_update_patient_missing_fields_checked_before_lookup(client):
    """Validation runs before the store is consulted, so a missing id with a bad body is 400."""
    response = client.put("/api/patients/999", json={})
    assert response.status_code == 400


def test_update_patient_invalid_id(client):
    """An id that cannot match a row is reported like any unknown id."""
    response = client.put(
        "/api/patients/abc",
        json={"name": "Jane Doe", "patientNumber": "P-1001"},
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found."}


def test_update_patient_invalid_id_with_bad_body(client):
    """The body is checked before the id."""
    response = client.put("/api/patients/abc", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}

    response = client.put("/api/patients/abc", json={"name": "Jane Doe"})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing name or patientNumber."}


def test_update_patient_id_out_of_range(client):
    _create(client)
    response = client.put(
        "/api/patients/99999999999999999999",
        json={"name": "Jane Smith", "patientNumber": "P-2002"},
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found."}
    assert client.get("/api/patients").json()["patients"][0]["name"] == "Jane Doe"


def test_update_leaves_other_patients_untouched(client):
    first = _create(client, name="A", patient_number="1").json()
    second = _create(client, name="B", patient_number="2").json()

    client.put(f"/api/patients/{second['id']}", json={"name": "B2", "patientNumber": "22"})

    patients = client.get("/api/patients").json()["patients"]
    assert patients == [first, {"id": second["id"], "name": "B2", "patient_number": "22"}]


# =============================================================================
# DELETE
# =============================================================================

def test_delete_patient_success(client):
    patient_id = _create(client).json()["id"]
    assert patient_id == 1

    response = client.delete("/api/patients/1")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get("/api/patients").json() == {"patients": []}


def test_delete_patient_not_found(client):
    _create(client)
    response = client.delete("/api/patients/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found."}
    assert len(client.get("/api/patients").json()["patients"]) == 1


def test_delete_patient_invalid_id(client):
    _create(client)
    for raw_id in ("abc", "1.5", "0", "-1", "99999999999999999999"):
        response = client.delete(f"/api/patients/{raw_id}")
        assert response.status_code == 404, raw_id
        assert response.json() == {"error": "Patient not found."}
    assert len(client.get("/api/patients").json()["patients"]) == 1


def test_delete_patient_twice(client):
    patient_id = _create(client).json()["id"]
    assert client.delete(f"/api/patients/{patient_id}").status_code == 204
    assert client.delete(f"/api/patients/{patient_id}").status_code == 404


def test_ids_not_reused_after_delete(client):
    first_id = _create(client).json()["id"]
    client.delete(f"/api/patients/{first_id}")

    second_id = _create(client, name="John Doe", patient_number="P-1002").json()["id"]
    assert second_id > first_id


# =============================================================================
# STORE ERRORS
# =============================================================================

class FailingRepository:
    """Repository double whose every call fails like an unreachable store."""

    async def list_all(self):
        raise DatabaseError("Failed to fetch patients.", operation="list")

    async def create(self, name, patient_number):
        raise DatabaseError("Failed to add patient.", operation="insert")

    async def update(self, patient_id, name, patient_number):
        raise DatabaseError("Failed to update patient.", operation="update")

    async def delete(self, patient_id):
        raise DatabaseError("Failed to delete patient.", operation="delete")


def test_store_errors_return_500(test_app, client):
    test_app.dependency_overrides[get_patient_repository] = lambda: FailingRepository()
    body = {"name": "Jane Doe", "patientNumber": "P-1001"}

    response = client.get("/api/patients")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch patients."}

    response = client.post("/api/patients", json=body)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to add patient."}

    response = client.put("/api/patients/1", json=body)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to update patient."}

    response = client.delete("/api/patients/1")
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete patient."}

    # The process keeps serving
    assert client.get("/health").status_code == 200


def test_request_id_header(client):
    response = client.get("/api/patients")
    assert response.headers.get("X-Request-ID")

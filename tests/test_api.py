"""
HTTP-level tests: valid records come back 200 with the result, invalid ones
400 with the result in ``detail``. The clock dependency is frozen by the
``client`` fixture.
"""

from datetime import timedelta

from dateutil.relativedelta import relativedelta
from structlog.testing import capture_logs

from herdcheck.config import ValidationRules
from herdcheck.main import app, get_rules


HUGE = "1" + "0" * 400


def post_raw(client, url, body):
    return client.post(url, content=body, headers={"Content-Type": "application/json"})


def cattle_payload(now, **overrides):
    payload = {
        "tag": "AB12",
        "type": "cow",
        "breed": "holstein",
        "birthDate": (now - relativedelta(years=3)).date().isoformat(),
    }
    payload.update(overrides)
    return payload


class TestService:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/health"

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}


class TestRecordEndpoints:

    def test_valid_cattle(self, client, now):
        response = client.post("/validate/cattle", json=cattle_payload(now))
        assert response.status_code == 200
        assert response.json() == {"isValid": True, "errors": []}

    def test_invalid_cattle(self, client, now):
        response = client.post("/validate/cattle", json=cattle_payload(now, tag="12345", latitude=4))
        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["isValid"] is False
        assert detail["errors"] == [
            "Tag must contain at least one letter",
            "Latitude and longitude must be provided together",
        ]

    def test_warnings_are_returned_with_200(self, client, now):
        response = client.post("/validate/cattle", json=cattle_payload(now, weight=1500))
        assert response.status_code == 200
        assert response.json()["warnings"] == ["Weight is very high, please verify it"]

    def test_non_object_body(self, client):
        assert client.post("/validate/cattle", json=["not", "a", "record"]).status_code == 422

    def test_bulk_operation(self, client):
        assert client.post("/validate/cattle/bulk", json={"ids": [1, 2], "operation": "delete"}).status_code == 200
        response = client.post("/validate/cattle/bulk", json={"ids": [], "operation": "delete"})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["At least one cattle id is required"]

    def test_event(self, client, now):
        payload = {
            "cattleId": 9,
            "eventType": "vaccination",
            "eventDate": now.isoformat(),
            "description": "Booster",
        }
        response = client.post("/validate/events", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Vaccine type is required for vaccination events"]

        payload["vaccineType"] = "brucellosis"
        assert client.post("/validate/events", json=payload).status_code == 200

    def test_user(self, client):
        payload = {
            "username": "vet_maria",
            "email": "maria@ranch.com",
            "password": "Str0ng!pass",
            "firstName": "Maria",
            "lastName": "Diaz",
            "role": "veterinarian",
        }
        assert client.post("/validate/users", json=payload).status_code == 200
        payload["username"] = "root"
        response = client.post("/validate/users", json=payload)
        assert response.json()["detail"]["errors"] == ["This username is reserved"]

    def test_location(self, client, now):
        payload = {"latitude": 1, "longitude": 2, "timestamp": (now - timedelta(hours=2)).isoformat()}
        response = client.post("/validate/locations", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Timestamp is too old (max 1 hour)"]

    def test_infinite_cost_is_rejected(self, client):
        body = (
            '{"cattleId": 1, "eventType": "birth", "eventDate": "2025-06-10",'
            ' "description": "Calved overnight", "cost": Infinity}'
        )
        response = post_raw(client, "/validate/events", body)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Cost must be a valid number"]

    def test_huge_latitude_is_a_client_error(self, client):
        response = post_raw(client, "/validate/locations", '{"latitude": ' + HUGE + ', "longitude": 1}')
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Latitude must be between -90 and 90"]

    def test_rejections_are_logged(self, client, now):
        with capture_logs() as logs:
            client.post("/validate/cattle", json=cattle_payload(now, tag="12345"))
        rejected = [entry for entry in logs if entry["event"] == "Record rejected"]
        assert len(rejected) == 1
        assert rejected[0]["record"] == "cattle"
        assert rejected[0]["logger"] == "herdcheck.main"

    def test_rules_dependency_override(self, client, now):
        app.dependency_overrides[get_rules] = lambda: ValidationRules(weight_max=900)
        response = client.post("/validate/cattle", json=cattle_payload(now, weight=950))
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Maximum weight is 900 kg"]


class TestParameterEndpoints:

    def test_file_as_document(self, client):
        payload = {"originalName": "vet-report.pdf", "mimetype": "application/pdf", "size": 2048}
        assert client.post("/validate/files?file_type=document", json=payload).status_code == 200
        assert client.post("/validate/files", json=payload).status_code == 400

    def test_huge_file_size(self, client):
        body = '{"originalName": "cow.jpg", "mimetype": "image/jpeg", "size": ' + HUGE + "}"
        response = post_raw(client, "/validate/files", body)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["File exceeds the maximum size of 5MB"]

    def test_file_type_is_closed(self, client):
        payload = {"originalName": "a.pdf", "mimetype": "application/pdf", "size": 1}
        assert client.post("/validate/files?file_type=video", json=payload).status_code == 422

    def test_date_range(self, client):
        response = client.get("/validate/date-range", params={"start_date": "2024-01-01", "end_date": "2023-01-01"})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Start date must be before end date"]

        response = client.get("/validate/date-range", params={"start_date": "2024-01-01", "end_date": "2024-06-01"})
        assert response.status_code == 200

    def test_record_id(self, client):
        assert client.get("/validate/ids/17").status_code == 200
        response = client.get("/validate/ids/abc")
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Invalid record_id format"]

    def test_pagination(self, client):
        response = client.get("/pagination", params={"total": 95, "page": "3", "limit": "10"})
        assert response.status_code == 200
        body = response.json()
        assert body["totalPages"] == 10
        assert body["hasNextPage"] is True

    def test_pagination_rejects_bad_limit(self, client):
        response = client.get("/pagination", params={"total": 95, "limit": "0"})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Limit must be an integer between 1 and 100"]


class TestDistanceEndpoint:

    def test_distance(self, client):
        payload = {
            "origin": {"latitude": 0, "longitude": 0},
            "destination": {"latitude": 0, "longitude": 1},
        }
        response = client.post("/distance", json=payload)
        assert response.status_code == 200
        assert response.json() == {"distance": 111.19, "unit": "km"}

    def test_distance_validates_coordinates(self, client):
        payload = {
            "origin": {"latitude": 120, "longitude": 0},
            "destination": {"latitude": 0, "longitude": 1},
            "unit": "miles",
        }
        response = client.post("/distance", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Latitude must be between -90 and 90"]

    def test_distance_with_huge_coordinate(self, client):
        body = '{"origin": {"latitude": ' + HUGE + ', "longitude": 0}, "destination": {"latitude": 0, "longitude": 1}}'
        response = post_raw(client, "/distance", body)
        assert response.status_code == 400

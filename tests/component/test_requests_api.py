"""
Component tests for driver requests and first-accept assignment
"""
import pytest

pytestmark = pytest.mark.component


def _request_url(shipment_id, request_id=None):
    url = f"/api/v1/shipments/{shipment_id}/request"
    return f"{url}/{request_id}" if request_id is not None else url


def _accepted(requests):
    return [r for r in requests if r["status"] == "accepted"]


class TestSubmitRequest:
    """POST /api/v1/shipments/{id}/request"""

    def test_appends_pending_request(self, client, shipment, driver_a, driver_a_headers):
        response = client.post(_request_url(shipment["id"]), headers=driver_a_headers)

        assert response.status_code == 201
        data = response.json()
        assert len(data["requests"]) == 1
        assert data["requests"][0]["driver_id"] == driver_a.id
        assert data["requests"][0]["status"] == "pending"
        assert data["status"] == "pending"

    def test_requests_keep_submission_order(self, client, shipment, driver_a, driver_b, driver_a_headers, driver_b_headers):
        client.post(_request_url(shipment["id"]), headers=driver_a_headers)
        data = client.post(_request_url(shipment["id"]), headers=driver_b_headers).json()

        assert [r["driver_id"] for r in data["requests"]] == [driver_a.id, driver_b.id]

    def test_duplicate_request_conflicts(self, client, shipment, driver_a_headers):
        client.post(_request_url(shipment["id"]), headers=driver_a_headers)
        response = client.post(_request_url(shipment["id"]), headers=driver_a_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "conflict"

    def test_duplicate_after_rejection_still_conflicts(self, client, shipment, business_headers, driver_a_headers):
        data = client.post(_request_url(shipment["id"]), headers=driver_a_headers).json()
        client.patch(
            _request_url(shipment["id"], data["requests"][0]["id"]),
            json={"status": "rejected"},
            headers=business_headers
        )

        response = client.post(_request_url(shipment["id"]), headers=driver_a_headers)

        assert response.status_code == 409
        assert response.json()["error_code"] == "conflict"

    def test_unknown_shipment(self, client, driver_a_headers):
        response = client.post(_request_url(4242), headers=driver_a_headers)
        assert response.status_code == 404

    def test_assigned_shipment_takes_no_new_requests(self, client, assigned_shipment, driver_c, auth_headers):
        response = client.post(_request_url(assigned_shipment["id"]), headers=auth_headers(driver_c))

        assert response.status_code == 409
        assert response.json()["error_code"] == "state_error"

    def test_businesses_cannot_request(self, client, shipment, business_headers):
        response = client.post(_request_url(shipment["id"]), headers=business_headers)
        assert response.status_code == 403


class TestResolveRequest:
    """PATCH /api/v1/shipments/{id}/request/{request_id}"""

    def test_accept_assigns_driver_and_rejects_siblings(
        self, client, shipment, business_headers, driver_a, driver_a_headers, driver_b_headers, driver_c, auth_headers
    ):
        client.post(_request_url(shipment["id"]), headers=driver_a_headers)
        client.post(_request_url(shipment["id"]), headers=driver_b_headers)
        requests = client.post(_request_url(shipment["id"]), headers=auth_headers(driver_c)).json()["requests"]

        response = client.patch(
            _request_url(shipment["id"], requests[0]["id"]),
            json={"status": "accepted"},
            headers=business_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "active"
        assert data["driver_id"] == driver_a.id
        assert data["driver"]["username"] == "driver_a"
        assert [r["status"] for r in data["requests"]] == ["accepted", "rejected", "rejected"]
        assert len(_accepted(data["requests"])) == 1

    def test_reject_leaves_shipment_untouched(self, client, shipment, business_headers, driver_a_headers, driver_b_headers):
        client.post(_request_url(shipment["id"]), headers=driver_a_headers)
        requests = client.post(_request_url(shipment["id"]), headers=driver_b_headers).json()["requests"]

        data = client.patch(
            _request_url(shipment["id"], requests[0]["id"]),
            json={"status": "rejected"},
            headers=business_headers
        ).json()

        assert data["status"] == "pending"
        assert data["driver_id"] is None
        assert [r["status"] for r in data["requests"]] == ["rejected", "pending"]

    def test_second_accept_conflicts(self, client, assigned_shipment, business_headers):
        request_b = assigned_shipment["requests"][1]

        response = client.patch(
            _request_url(assigned_shipment["id"], request_b["id"]),
            json={"status": "accepted"},
            headers=business_headers
        )

        assert response.status_code == 409
        after = client.get(f"/api/v1/shipments/{assigned_shipment['id']}", headers=business_headers).json()
        assert len(_accepted(after["requests"])) == 1
        assert after["driver_id"] == assigned_shipment["driver_id"]

    def test_resolution_happens_once(self, client, assigned_shipment, business_headers):
        request_a = assigned_shipment["requests"][0]

        response = client.patch(
            _request_url(assigned_shipment["id"], request_a["id"]),
            json={"status": "rejected"},
            headers=business_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "conflict"

    def test_accept_after_reject_of_other_request(self, client, shipment, business_headers, driver_a_headers, driver_b, driver_b_headers):
        client.post(_request_url(shipment["id"]), headers=driver_a_headers)
        requests = client.post(_request_url(shipment["id"]), headers=driver_b_headers).json()["requests"]
        client.patch(_request_url(shipment["id"], requests[0]["id"]), json={"status": "rejected"}, headers=business_headers)

        data = client.patch(
            _request_url(shipment["id"], requests[1]["id"]),
            json={"status": "accepted"},
            headers=business_headers
        ).json()

        assert data["driver_id"] == driver_b.id
        assert [r["status"] for r in data["requests"]] == ["rejected", "accepted"]

    def test_cancelled_shipment_cannot_be_assigned(self, client, shipment, business_headers, driver_a_headers):
        request_id = client.post(_request_url(shipment["id"]), headers=driver_a_headers).json()["requests"][0]["id"]
        client.patch(f"/api/v1/shipments/{shipment['id']}/status", json={"status": "cancelled"}, headers=business_headers)

        response = client.patch(
            _request_url(shipment["id"], request_id),
            json={"status": "accepted"},
            headers=business_headers
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "state_error"

    def test_unknown_request(self, client, shipment, business_headers):
        response = client.patch(_request_url(shipment["id"], 777), json={"status": "accepted"}, headers=business_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "not_found"

    def test_request_id_is_scoped_to_its_shipment(self, client, shipment, shipment_payload, business_headers, driver_a_headers):
        other = client.post("/api/v1/shipments", json=shipment_payload, headers=business_headers).json()
        request_id = client.post(_request_url(shipment["id"]), headers=driver_a_headers).json()["requests"][0]["id"]

        response = client.patch(_request_url(other["id"], request_id), json={"status": "accepted"}, headers=business_headers)

        assert response.status_code == 404

    def test_only_owner_resolves(self, client, shipment, other_business, auth_headers, driver_a_headers):
        request_id = client.post(_request_url(shipment["id"]), headers=driver_a_headers).json()["requests"][0]["id"]

        response = client.patch(
            _request_url(shipment["id"], request_id),
            json={"status": "accepted"},
            headers=auth_headers(other_business)
        )

        assert response.status_code == 403

    def test_invalid_decision(self, client, shipment, business_headers, driver_a_headers):
        request_id = client.post(_request_url(shipment["id"]), headers=driver_a_headers).json()["requests"][0]["id"]

        response = client.patch(_request_url(shipment["id"], request_id), json={"status": "pending"}, headers=business_headers)

        assert response.status_code == 422

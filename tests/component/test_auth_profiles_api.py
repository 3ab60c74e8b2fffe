"""
Component tests for the auth and profile endpoints
"""
import pytest

pytestmark = pytest.mark.component


class TestRegistrationAndLogin:

    def test_register_driver(self, client):
        response = client.post("/api/v1/auth/register", json={
            "username": "ravi",
            "email": "ravi@example.com",
            "password": "driver123",
            "role": "driver",
            "vehicle_type": "Truck",
        })

        assert response.status_code == 201
        data = response.json()
        assert data["role"] == "driver"
        assert data["vehicle_type"] == "Truck"
        assert "password" not in data and "password_hash" not in data

    def test_duplicate_username(self, client, driver_a):
        response = client.post("/api/v1/auth/register", json={
            "username": "driver_a",
            "email": "fresh@example.com",
            "password": "driver123",
            "role": "driver",
        })
        assert response.status_code == 409

    def test_unknown_role(self, client):
        response = client.post("/api/v1/auth/register", json={
            "username": "admin",
            "email": "admin@example.com",
            "password": "admin123",
            "role": "admin",
        })
        assert response.status_code == 422

    def test_login_json_then_me(self, client, business, test_password):
        response = client.post("/api/v1/auth/login-json", json={"username": "acme_steel", "password": test_password})

        assert response.status_code == 200
        token = response.json()["access_token"]
        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
        assert me["id"] == business.id
        assert me["role"] == "business"

    def test_login_form_with_email(self, client, driver_a, test_password):
        response = client.post(
            "/api/v1/auth/login",
            data={"username": "driver_a@example.com", "password": test_password}
        )
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "driver_a"

    def test_wrong_password(self, client, driver_a):
        response = client.post("/api/v1/auth/login-json", json={"username": "driver_a", "password": "wrong-pass"})
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401


class TestProfiles:

    def test_driver_profile_roundtrip(self, client, driver_a_headers):
        response = client.patch(
            "/api/v1/driver/profile",
            json={"vehicle_capacity": "10 tonnes", "address": "Hadapsar, Pune"},
            headers=driver_a_headers
        )

        assert response.status_code == 200
        profile = client.get("/api/v1/driver/profile", headers=driver_a_headers).json()
        assert profile["vehicle_capacity"] == "10 tonnes"
        assert profile["vehicle_type"] == "Truck"

    def test_role_cannot_be_changed(self, client, driver_a_headers):
        client.patch("/api/v1/driver/profile", json={"role": "business"}, headers=driver_a_headers)
        assert client.get("/api/v1/driver/profile", headers=driver_a_headers).json()["role"] == "driver"

    def test_business_profile_update(self, client, business_headers):
        data = client.patch(
            "/api/v1/business/profile",
            json={"website": "https://acmesteel.example"},
            headers=business_headers
        ).json()

        assert data["website"] == "https://acmesteel.example"
        assert data["business_name"] == "Acme Steel"

    def test_email_must_stay_unique(self, client, business_headers, other_business):
        response = client.patch(
            "/api/v1/business/profile",
            json={"email": "globex@example.com"},
            headers=business_headers
        )
        assert response.status_code == 409

    def test_profiles_are_role_bound(self, client, business_headers, driver_a_headers):
        assert client.get("/api/v1/driver/profile", headers=business_headers).status_code == 403
        assert client.get("/api/v1/business/profile", headers=driver_a_headers).status_code == 403

    def test_email_cannot_be_cleared(self, client, driver_a, driver_a_headers):
        response = client.patch("/api/v1/driver/profile", json={"email": None}, headers=driver_a_headers)

        assert response.status_code == 422
        assert response.json()["error_code"] == "validation_error"
        profile = client.get("/api/v1/driver/profile", headers=driver_a_headers).json()
        assert profile["email"] == "driver_a@example.com"

    def test_business_email_cannot_be_cleared(self, client, business_headers):
        response = client.patch("/api/v1/business/profile", json={"email": None}, headers=business_headers)
        assert response.status_code == 422

    def test_other_fields_can_be_cleared(self, client, driver_a_headers):
        data = client.patch("/api/v1/driver/profile", json={"contact_number": None}, headers=driver_a_headers).json()
        assert data["contact_number"] is None

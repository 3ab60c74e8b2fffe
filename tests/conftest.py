"""
Shared fixtures

Every test gets a fresh application bound to an in-memory SQLite database
built from the production models, plus ready-made driver and business
accounts with bearer headers.
"""
import pytest
from fastapi.testclient import TestClient

from freightlink.config.settings import Settings
from freightlink.core.auth.service import AuthService
from freightlink.main import create_app
from freightlink.shared.database.models import Base, User

TEST_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def test_password():
    return TEST_PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow; hash the shared test password once"""
    return AuthService.get_password_hash(TEST_PASSWORD)


@pytest.fixture
def settings():
    return Settings(
        secret_key="test-secret-key",
        database_url="sqlite://",
        auto_create_tables=True,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    Base.metadata.create_all(bind=application.state.engine)
    yield application
    Base.metadata.drop_all(bind=application.state.engine)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    """Session on the app database; closed before the client shuts the engine down"""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db_session, password_hash):
    """Factory creating users straight in the database"""
    def _make_user(username: str, role: str, **fields) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            role=role,
            **fields
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user: User) -> dict:
        token = app.state.auth_service.create_access_token(
            data={"user_id": user.id, "role": user.role}
        )
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def business(make_user):
    return make_user("acme_steel", "business", business_name="Acme Steel", contact_number="+91 98200 00001")


@pytest.fixture
def other_business(make_user):
    return make_user("globex", "business", business_name="Globex Freight")


@pytest.fixture
def driver_a(make_user):
    return make_user("driver_a", "driver", vehicle_type="Truck", contact_number="+91 90000 00001")


@pytest.fixture
def driver_b(make_user):
    return make_user("driver_b", "driver", vehicle_type="Van", contact_number="+91 90000 00002")


@pytest.fixture
def driver_c(make_user):
    return make_user("driver_c", "driver", vehicle_type="Pickup")


@pytest.fixture
def business_headers(business, auth_headers):
    return auth_headers(business)


@pytest.fixture
def driver_a_headers(driver_a, auth_headers):
    return auth_headers(driver_a)


@pytest.fixture
def driver_b_headers(driver_b, auth_headers):
    return auth_headers(driver_b)


@pytest.fixture
def shipment_payload():
    return {
        "title": "Steel Coils",
        "from_city": "Pune",
        "to_city": "Mumbai",
        "weight": 500,
        "volume": "2x2x2",
        "deadline": "2025-06-01",
    }


@pytest.fixture
def shipment(client, business_headers, shipment_payload):
    """A freshly posted pending shipment"""
    response = client.post("/api/v1/shipments", json=shipment_payload, headers=business_headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def assigned_shipment(client, shipment, business_headers, driver_a_headers, driver_b_headers):
    """Shipment with requests from A and B where A was accepted"""
    client.post(f"/api/v1/shipments/{shipment['id']}/request", headers=driver_a_headers)
    response = client.post(f"/api/v1/shipments/{shipment['id']}/request", headers=driver_b_headers)
    request_a = response.json()["requests"][0]
    response = client.patch(
        f"/api/v1/shipments/{shipment['id']}/request/{request_a['id']}",
        json={"status": "accepted"},
        headers=business_headers,
    )
    assert response.status_code == 200
    return response.json()

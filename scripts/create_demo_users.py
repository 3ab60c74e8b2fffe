"""
Create demo driver and business accounts

Run from the project root: python scripts/create_demo_users.py
"""
from freightlink.config.settings import Settings
from freightlink.config.database import build_engine, build_session_factory
from freightlink.core.auth.service import AuthService
from freightlink.shared.database.models import Base, User

DEMO_USERS = [
    {
        "username": "acme_steel",
        "email": "ops@acmesteel.in",
        "password": "business123",
        "role": "business",
        "business_name": "Acme Steel",
        "contact_number": "+91 98200 00000",
        "address": "MIDC Bhosari, Pune"
    },
    {
        "username": "driver_ravi",
        "email": "ravi@freightlink.in",
        "password": "driver123",
        "role": "driver",
        "vehicle_type": "Truck",
        "vehicle_capacity": "12 tonnes",
        "contact_number": "+91 90000 00001"
    },
    {
        "username": "driver_meena",
        "email": "meena@freightlink.in",
        "password": "driver123",
        "role": "driver",
        "vehicle_type": "Van",
        "vehicle_capacity": "2 tonnes",
        "contact_number": "+91 90000 00002"
    }
]


def create_demo_users():
    """Insert the demo accounts unless a user table already has rows"""
    settings = Settings()
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()

    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"✅ {existing_users} users already exist, nothing to do")
            return

        for user_data in DEMO_USERS:
            fields = {k: v for k, v in user_data.items() if k != "password"}
            db.add(User(**fields, password_hash=AuthService.get_password_hash(user_data["password"])))
            print(f"✅ Created {user_data['role']}: {user_data['username']} / {user_data['password']}")

        db.commit()
        print(f"\n🎉 {len(DEMO_USERS)} demo users created")

    except Exception as e:
        db.rollback()
        print(f"❌ Error creating users: {e}")
        raise

    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    create_demo_users()

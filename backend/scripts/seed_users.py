"""
Seed demo accounts for every role.
Run after migrations: python scripts/seed_users.py

Accounts (password: Password123!):
  admin@sparkrentals.com     ADMIN
  owner1@sparkrentals.com    OWNER
  customer1@sparkrentals.com CUSTOMER
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from spark_rentals.config import settings
from spark_rentals.core.database import SessionLocal
from spark_rentals.core.exceptions import ResourceAlreadyExistsError
from spark_rentals.core.roles import Role
from spark_rentals.schemas.user import UserCreate
from spark_rentals.services.user_service import user_service

SEED_PASSWORD = "Password123!"

SEED_USERS = [
    ("Admin User", "admin@sparkrentals.com", Role.ADMIN, "+1-555-0100"),
    ("Olivia Owner", "owner1@sparkrentals.com", Role.OWNER, "+1-555-0101"),
    ("Oscar Owner", "owner2@sparkrentals.com", Role.OWNER, "+1-555-0102"),
    ("Carla Customer", "customer1@sparkrentals.com", Role.CUSTOMER, "+1-555-0103"),
    ("Chris Customer", "customer2@sparkrentals.com", Role.CUSTOMER, "+1-555-0104"),
]


def main():
    if settings.is_production:
        print("Refusing to seed demo accounts in production.")
        sys.exit(1)

    db = SessionLocal()
    try:
        for name, email, role, phone in SEED_USERS:
            try:
                user_service.create_user(
                    db,
                    UserCreate(name=name, email=email, password=SEED_PASSWORD, role=role, phone=phone),
                )
                print(f"created  {email:<30} {role.value}")
            except ResourceAlreadyExistsError:
                print(f"exists   {email:<30} {role.value}")
    finally:
        db.close()


if __name__ == "__main__":
    main()

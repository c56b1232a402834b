#!/usr/bin/env python3
"""
Load the sample service catalog and create an administrator account.

Services and bookings are cleared first; users are kept.  The admin is
created only if no user with that email exists yet.

Usage:
    python -m service_booking_api.seed --admin-email admin@servicebooking.com --admin-password "NewStrongPass!234"

If --admin-password is omitted, you will be prompted to enter it securely.
The connection is taken from MONGO_URI / MONGO_DB_NAME.
"""

import argparse
import asyncio
import getpass
import sys
from typing import List

from pymongo.database import Database

from .app.core import db as database
from .app.core.config import settings
from .app.core.logging_config import setup_logging
from .app.schemas.service import ServiceCreate
from .app.schemas.user import Role
from .app.services.catalog_service import CatalogService
from .app.services.user_service import UserService


SAMPLE_SERVICES: List[dict] = [
    {
        "name": "Basic Car Wash",
        "description": "Exterior wash, interior vacuum, tire shine, and window cleaning. Perfect for regular maintenance.",
        "category": "car_wash", "price": 29.99, "duration": 30, "image": "car-wash-basic.jpg",
    },
    {
        "name": "Premium Car Detailing",
        "description": "Complete interior and exterior detailing with wax coating, leather conditioning, and engine cleaning.",
        "category": "car_wash", "price": 99.99, "duration": 120, "image": "car-wash-premium.jpg",
    },
    {
        "name": "Express Car Wash",
        "description": "Quick exterior wash and dry. Great for when you're in a hurry!",
        "category": "car_wash", "price": 15.99, "duration": 15, "image": "car-wash-express.jpg",
    },
    {
        "name": "Deep Home Cleaning",
        "description": "Thorough cleaning of all rooms including kitchen, bathrooms, bedrooms, and living areas.",
        "category": "home_cleaning", "price": 149.99, "duration": 180, "image": "home-cleaning-deep.jpg",
    },
    {
        "name": "Basic Home Cleaning",
        "description": "Standard cleaning service covering dusting, vacuuming, and mopping of main areas.",
        "category": "home_cleaning", "price": 79.99, "duration": 120, "image": "home-cleaning-basic.jpg",
    },
    {
        "name": "Kitchen Deep Clean",
        "description": "Specialized kitchen cleaning including appliances, cabinets, and countertops.",
        "category": "home_cleaning", "price": 89.99, "duration": 90, "image": "kitchen-cleaning.jpg",
    },
    {
        "name": "Haircut & Styling",
        "description": "Professional haircut with styling consultation and blow-dry.",
        "category": "salon", "price": 35.00, "duration": 45, "image": "salon-haircut.jpg",
    },
    {
        "name": "Hair Coloring",
        "description": "Full hair coloring service with professional products and color consultation.",
        "category": "salon", "price": 89.99, "duration": 120, "image": "salon-color.jpg",
    },
    {
        "name": "Spa Facial Package",
        "description": "Relaxing facial treatment with cleansing, exfoliation, and moisturizing.",
        "category": "salon", "price": 79.99, "duration": 60, "image": "salon-facial.jpg",
    },
    {
        "name": "Full Spa Package",
        "description": "Complete spa experience with massage, facial, and body treatment.",
        "category": "salon", "price": 199.99, "duration": 150, "image": "salon-spa.jpg",
    },
]


async def seed_database(
    db: Database,
    admin_email: str,
    admin_password: str,
    admin_name: str = "Admin User",
    admin_phone: str = "",
) -> bool:
    """Reset the catalog and make sure the admin exists.

    Returns True if the admin account was created, False if it already
    existed.
    """
    database.init_db(db)
    db[database.SERVICES].delete_many({})
    db[database.BOOKINGS].delete_many({})
    db[database.SLOT_CLAIMS].delete_many({})

    catalog = CatalogService(db)
    for service in SAMPLE_SERVICES:
        await catalog.create_service(ServiceCreate(**service))
    print(f"[+] {len(SAMPLE_SERVICES)} services seeded")

    if db[database.USERS].find_one({"email": admin_email.lower()}):
        print(f"[=] Admin already exists, skipping creation: {admin_email}")
        return False
    await UserService(db).create_user(
        admin_name, admin_email, admin_password, admin_phone or None, role=Role.ADMIN
    )
    print(f"[+] Admin user created: {admin_email}")
    return True


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed the service catalog and admin account.")
    ap.add_argument("--admin-email", default="admin@servicebooking.com", help="Administrator email")
    ap.add_argument("--admin-password", help="Administrator password. If omitted, you'll be prompted securely.")
    ap.add_argument("--admin-name", default="Admin User")
    ap.add_argument("--admin-phone", default="")
    args = ap.parse_args()

    password = args.admin_password or getpass.getpass("Enter admin password: ")
    if not password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings.log_level)
    client = database.connect(settings)
    try:
        asyncio.run(
            seed_database(
                client[settings.mongo_db_name],
                args.admin_email,
                password,
                admin_name=args.admin_name,
                admin_phone=args.admin_phone,
            )
        )
    finally:
        database.close(client)


if __name__ == "__main__":
    main()

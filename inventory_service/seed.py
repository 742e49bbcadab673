"""Provision a demo organization.

Run with ``python -m inventory_service.seed``. Creates the organization, an
admin account, the default field aliases of every supported table and a few
SKUs with opening stock.
"""
import logging
import os
import random

from faker import Faker
from sqlalchemy.orm import Session

from shared.core.database import Base, SessionLocal, engine
from shared.models.organizations import Organization
from shared.models.users import User

from .app.crud import field_aliases_crud, transactions_crud
from .app.enum.inventory_enum import TransactionType
from .app.models import change_logs, field_aliases, inventory, transactions
from .app.models.skus import Sku
from .app.schemas.transactions_schemas import TransactionCreate

logger = logging.getLogger(__name__)

fake = Faker()

CATEGORIES = ["Electronics", "Hardware", "Office", "Packaging"]


def seed_data(sku_count: int = 10):
    db: Session = SessionLocal()
    try:
        org = Organization(name=os.getenv("SEED_ORG_NAME", "Demo Organization"))
        db.add(org)
        db.flush()

        admin = User(
            org_id=org.id,
            email=os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
            name="Administrator",
            role="admin",
            is_active=True,
        )
        admin.set_password(os.getenv("SEED_ADMIN_PASSWORD", "admin12345"))
        db.add(admin)
        db.commit()
        logger.info("Created organization %s with admin %s", org.id, admin.email)

        for table_name in field_aliases_crud.get_supported_tables():
            created = field_aliases_crud.initialize_default_field_aliases(db, org.id, table_name)
            logger.info("Seeded %d field aliases for %s", created, table_name)

        for index in range(1, sku_count + 1):
            sku = Sku(
                org_id=org.id,
                sku_code=f"SKU-{index:04d}",
                product_name=fake.catch_phrase(),
                description=fake.sentence(),
                category=random.choice(CATEGORIES),
                supplier=fake.company(),
                barcode=fake.ean13(),
            )
            db.add(sku)
            db.commit()

            transactions_crud.create_transaction(db, org.id, admin.id, TransactionCreate(
                sku_id=sku.id,
                transaction_type=TransactionType.IN,
                quantity=random.randint(10, 200),
                unit_cost=round(random.uniform(1, 100), 2),
                reference_number=f"OPEN-{index:04d}",
                notes="Opening stock",
            ))

        logger.info("Seeded %d SKUs with opening stock", sku_count)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    seed_data()

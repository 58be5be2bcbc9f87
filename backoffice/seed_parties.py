"""
Database seeding script for the company account.

Creates the ADMIN party configured as `company_party_id` plus one sample
distributor for development. Run this script after the database is set up
but before first use.
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backoffice.app.core.config import settings
from backoffice.app.db.session import AsyncSessionLocal, engine, Base
from backoffice.app.domain.ledger.party_store import PartyStore
from backoffice.app.models.party import Party
from backoffice.app.models.ledger_enums import PartyType
from backoffice.app.services.audit import log_event, AuditAction
import backoffice.app.main  # noqa: F401  registers every model with Base
from sqlalchemy import select


async def seed_parties():
    """
    Seed initial parties.

    Creates:
    - 1 ADMIN party (the company account)
    - 1 DISTRIBUTOR party
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting party seeding...")

        existing_company = await db.scalar(
            select(Party).where(Party.id == settings.company_party_id)
        )
        if existing_company:
            print(f"ℹ️  Company account {existing_company.id} already exists, skipping seeding")
            return

        company = await PartyStore.create_party(
            db, PartyType.ADMIN, name="Company", username="company", initial_balance=Decimal("0")
        )
        if company.id != settings.company_party_id:
            await db.rollback()
            print(f"❌ Company account got id {company.id}, expected COMPANY_PARTY_ID={settings.company_party_id}")
            sys.exit(1)
        print(f"✅ Created ADMIN party (id: {company.id})")

        distributor = await PartyStore.create_party(
            db, PartyType.DISTRIBUTOR, name="Sample Distributor", username="distributor"
        )
        print(f"✅ Created DISTRIBUTOR party (id: {distributor.id})")

        for party in (company, distributor):
            await log_event(
                db,
                action=AuditAction.PARTY_CREATED,
                party_id=party.id,
                reference_type="party",
                reference_id=party.id,
                metadata={"party_type": party.party_type.value, "seeded": True}
            )

        await db.commit()

        print("\n🎉 Party seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_parties())

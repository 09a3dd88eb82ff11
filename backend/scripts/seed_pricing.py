"""Seed a demo tenant with one availability slot per pricing model."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta

from sqlalchemy import select

from app.db.session import create_all, get_sessionmaker
from app.models import Availability, Provider, Tenant
from app.schemas.pricing import PricingModelType, dump_pricing_policy
from app.services.pricing_service import default_policy
from app.services.pricing_validation import validate_pricing_policy

DEMO_SLUG = "demo-studio"


async def seed_pricing() -> None:
    await create_all()
    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        existing = (
            await session.execute(select(Tenant).where(Tenant.slug == DEMO_SLUG))
        ).scalar_one_or_none()
        if existing is not None:
            print("Demo tenant already exists; nothing to seed.")
            return

        tenant = Tenant(name="Demo Studio", slug=DEMO_SLUG)
        session.add(tenant)
        await session.flush()

        provider = Provider(
            tenant_id=tenant.id,
            name="Alex Trainer",
            email="alex@example.com",
            default_hourly_rate=100.0,
        )
        session.add(provider)
        await session.flush()

        slots_created = 0
        start = date.today() + timedelta(days=1)
        for offset, model_type in enumerate(PricingModelType):
            policy = default_policy(model_type)
            validation = validate_pricing_policy(policy)
            if not validation.valid:
                print(f"Skipping {model_type.value}: {validation.errors}")
                continue
            session.add(
                Availability(
                    provider_id=provider.id,
                    date=start + timedelta(days=offset),
                    start_time="09:00",
                    end_time="10:00",
                    is_group_session=True,
                    max_capacity=10,
                    pricing_rules=dump_pricing_policy(policy),
                )
            )
            slots_created += 1

        await session.commit()
        print(f"Seeded tenant {DEMO_SLUG} with {slots_created} priced slot(s).")


def main() -> None:
    asyncio.run(seed_pricing())


if __name__ == "__main__":
    main()

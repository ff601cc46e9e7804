from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from rentflow.models import Base, Lease, LeaseStatus, Property, Tenant, Unit, UnitStatus, UnitType


@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def make_lease(session):
    """Seed a tenant on a fresh unit with a lease; returns the lease."""
    counter = {"unit": 0}

    def _make(
        first_name: str = "John",
        last_name: str = "Doe",
        phone: str | None = "0712345678",
        monthly_rent: str = "10500.00",
        service_charge: str = "5000.00",
        status: LeaseStatus = LeaseStatus.ACTIVE,
    ) -> Lease:
        prop = session.scalars(select(Property).limit(1)).first()
        if prop is None:
            prop = Property(name="Mwalimu Court", address="Plot 12, Thika Road")
            session.add(prop)
            session.flush()

        counter["unit"] += 1
        unit = Unit(
            property_id=prop.id,
            unit_number=f"A{counter['unit']}",
            unit_type=UnitType.ONE_BEDROOM,
            base_rent=Decimal(monthly_rent),
            status=UnitStatus.OCCUPIED if status == LeaseStatus.ACTIVE else UnitStatus.VACANT,
        )
        tenant = Tenant(first_name=first_name, last_name=last_name, phone=phone)
        session.add_all([unit, tenant])
        session.flush()

        lease = Lease(
            tenant_id=tenant.id,
            unit_id=unit.id,
            start_date=date(2024, 1, 1),
            monthly_rent=Decimal(monthly_rent),
            service_charge=Decimal(service_charge),
            status=status,
        )
        session.add(lease)
        session.commit()
        session.refresh(lease)
        return lease

    return _make

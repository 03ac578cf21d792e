"""
SQLAlchemy ORM models for saved acquisition projects.
"""

from datetime import datetime
from sqlalchemy import (
    Column,
    String,
    Float,
    Boolean,
    DateTime,
    Text,
)
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
    is_deleted = Column(Boolean, default=False, nullable=False)


class Project(AuditMixin, Base):
    """An acquisition scenario saved by an investor."""

    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=generate_uuid)

    # Opaque id of the owning user, checked before every write
    owner_id = Column(String(255), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    postal_code = Column(String(20))
    description = Column(Text)
    is_public = Column(Boolean, default=False, nullable=False)

    # Acquisition costs
    price = Column(Float)
    notary_fees = Column(Float)
    works = Column(Float)
    brokerage_fees = Column(Float)

    # Financing
    loan_rate = Column(Float)  # Annual rate in percent
    loan_years = Column(Float)
    insurance = Column(Float)  # Monthly

    # Computed by the calculation engine
    monthly_payment = Column(Float)
    monthly_expenses = Column(Float)


# Fields holding numbers, normalized on every update
PROJECT_NUMERIC_FIELDS = (
    "price",
    "notary_fees",
    "works",
    "brokerage_fees",
    "loan_rate",
    "loan_years",
    "insurance",
    "monthly_payment",
    "monthly_expenses",
)

PROJECT_TEXT_FIELDS = ("name", "postal_code", "description")

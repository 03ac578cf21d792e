"""
Seed the database with a demo acquisition project.

Usage: python scripts/seed_demo_project.py <owner_id>
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from viability.calculations.amortization import (
    calculate_monthly_payment,
    calculate_project_principal,
    estimate_monthly_expenses,
)
from viability.config import get_settings
from viability.db.database import get_db_context, init_db
from viability.db.models import Project

DEMO_NAME = "Two-bedroom flat, city centre"


def main():
    if len(sys.argv) < 2:
        print("Usage: python scripts/seed_demo_project.py <owner_id>")
        sys.exit(1)

    owner_id = sys.argv[1]
    settings = get_settings()

    init_db()

    with get_db_context() as db:
        existing = (
            db.query(Project)
            .filter(Project.owner_id == owner_id, Project.name == DEMO_NAME)
            .first()
        )
        if existing:
            print(f"Project '{DEMO_NAME}' already exists (ID: {existing.id})")
            return

        project = Project(
            owner_id=owner_id,
            name=DEMO_NAME,
            postal_code="69003",
            description="Rented unfurnished, tenant in place",
            price=230000,
            notary_fees=17000,
            works=3000,
            brokerage_fees=0,
            loan_rate=3.5,
            loan_years=25,
            insurance=25,
        )

        principal = calculate_project_principal(
            project.price, project.notary_fees, project.works, project.brokerage_fees
        )
        project.monthly_payment = calculate_monthly_payment(
            principal, project.loan_rate, project.loan_years
        )
        project.monthly_expenses = estimate_monthly_expenses(
            project.monthly_payment, None, settings.estimated_expense_ratio
        )

        db.add(project)
        db.flush()

        print(f"Created project: {project.name} (ID: {project.id})")
        print(f"  Principal:        {principal:,.2f}")
        print(f"  Monthly payment:  {project.monthly_payment:,.2f}")
        print(f"  Monthly expenses: {project.monthly_expenses:,.2f}")


if __name__ == "__main__":
    main()

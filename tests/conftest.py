from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from accounts.models import User
from catalog.models import Part
from commissions.services import record_payment
from companies.models import Company, CompanyUser
from customers.models import Customer
from sales.services import create_sales_order
from suppliers.models import Supplier


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        first_name="Admin",
        last_name="User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def accountant_user(db):
    return User.objects.create_user(
        email="accountant@test.com",
        password="testpass123",
        first_name="Accountant",
        last_name="User",
        role=User.Role.ACCOUNTANT,
    )


@pytest.fixture
def sales_user(db):
    return User.objects.create_user(
        email="sales@test.com",
        password="testpass123",
        first_name="Sales",
        last_name="User",
        role=User.Role.SALES,
    )


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

@pytest.fixture
def company(db):
    return Company.objects.create(name="Acme Distribution")


@pytest.fixture
def other_company(db):
    return Company.objects.create(name="Globex Trading")


@pytest.fixture
def admin_member(company, admin_user):
    return CompanyUser.objects.create(company=company, user=admin_user, is_default=True)


@pytest.fixture
def accountant_member(company, accountant_user):
    return CompanyUser.objects.create(company=company, user=accountant_user, is_default=True)


@pytest.fixture
def sales_member(company, sales_user):
    return CompanyUser.objects.create(company=company, user=sales_user, is_default=True)


# ---------------------------------------------------------------------------
# Master data
# ---------------------------------------------------------------------------

@pytest.fixture
def customer(company):
    return Customer.objects.create(company=company, name="Northwind Ltd", email="buyer@northwind.test")


@pytest.fixture
def supplier(company):
    return Supplier.objects.create(company=company, name="Bosch Parts", contact_person="Anna Weber")


@pytest.fixture
def second_supplier(company):
    return Supplier.objects.create(company=company, name="Valeo Supply")


@pytest.fixture
def part(company, supplier):
    return Part.objects.create(
        company=company,
        supplier=supplier,
        sku="BP-100",
        name="Brake pad set",
        price=Decimal("50.00"),
    )


@pytest.fixture
def second_part(company, supplier):
    return Part.objects.create(
        company=company,
        supplier=supplier,
        sku="BP-200",
        name="Brake disc",
        price=Decimal("30.00"),
    )


@pytest.fixture
def valeo_part(company, second_supplier):
    return Part.objects.create(
        company=company,
        supplier=second_supplier,
        sku="VL-010",
        name="Clutch kit",
        price=Decimal("120.00"),
    )


@pytest.fixture
def foreign_customer(other_company):
    return Customer.objects.create(company=other_company, name="Initech")


@pytest.fixture
def foreign_supplier(other_company):
    return Supplier.objects.create(company=other_company, name="Bosch Parts")


@pytest.fixture
def foreign_part(other_company, foreign_supplier):
    return Part.objects.create(
        company=other_company,
        supplier=foreign_supplier,
        sku="BP-100",
        name="Brake pad set",
        price=Decimal("50.00"),
    )


# ---------------------------------------------------------------------------
# Ledger helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def make_order(company, customer):
    """Create a sales order through the service; each line is (part, qty, price, pct)."""
    counter = {"n": 0}

    def _make(*lines, po_number=None, order_date=None, order_company=None, order_customer=None):
        counter["n"] += 1
        return create_sales_order(
            company=order_company or company,
            customer_id=(order_customer or customer).pk,
            po_number=po_number or f"PO-{counter['n']:04d}",
            order_date=order_date,
            items=[
                {
                    "part_id": line_part.pk,
                    "quantity": qty,
                    "unit_price": price,
                    "commission_percentage": pct,
                }
                for line_part, qty, price, pct in lines
            ],
        )

    return _make


@pytest.fixture
def make_payment(company, supplier):
    def _make(amount, *, payment_supplier=None, reference="", payment_date=None):
        return record_payment(
            company=company,
            supplier_id=(payment_supplier or supplier).pk,
            total_amount=amount,
            reference=reference,
            payment_date=payment_date,
        )

    return _make


@pytest.fixture
def commission_line(make_order, part):
    """One order line accruing 25.00 commission (10 x 50.00 at 5 %)."""
    order = make_order((part, 10, "50.00", "5"))
    return order.items.get()


# ---------------------------------------------------------------------------
# API clients
# ---------------------------------------------------------------------------

@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client(admin_user, admin_member):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def accountant_client(accountant_user, accountant_member):
    client = APIClient()
    client.force_authenticate(user=accountant_user)
    return client


@pytest.fixture
def sales_client(sales_user, sales_member):
    client = APIClient()
    client.force_authenticate(user=sales_user)
    return client

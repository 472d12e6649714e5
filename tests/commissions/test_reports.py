import datetime
from decimal import Decimal

import pytest

from commissions.reports import (
    get_allocations_for_payment,
    get_allocations_for_payment_item,
    get_payment_allocation_summary,
)
from commissions.services import allocate, replace_payment_items
from core.exceptions import NotFound


@pytest.fixture
def allocated_payment(company, make_order, make_payment, part, second_part):
    """A 40.00 payment split in two items, fully allocated over two orders."""
    first = make_order((second_part, 10, "30.00", "5"), po_number="PO-B").items.get()
    second = make_order((part, 10, "50.00", "5"), po_number="PO-A").items.get()
    payment = make_payment("40.00", reference="CHK-9", payment_date=datetime.date(2024, 3, 1))
    _, items = replace_payment_items(
        company=company,
        payment_id=payment.pk,
        items=[{"amount": "15.00", "description": "B"}, {"amount": "25.00", "description": "A"}],
    )
    allocate(company=company, payment_item_id=items[0].pk, sales_order_item_id=first.pk, allocated_amount="15.00")
    allocate(company=company, payment_item_id=items[1].pk, sales_order_item_id=second.pk, allocated_amount="25.00")
    payment.refresh_from_db()
    return payment


@pytest.mark.django_db
class TestAllocationsForPayment:
    def test_rows_ordered_by_po_number(self, company, allocated_payment, customer):
        rows = get_allocations_for_payment(company=company, payment_id=allocated_payment.pk)

        assert [r["po_number"] for r in rows] == ["PO-A", "PO-B"]
        first = rows[0]
        assert first["payment_id"] == allocated_payment.pk
        assert first["allocated_amount"] == Decimal("25.00")
        assert first["customer_name"] == customer.name
        assert first["part_name"] == "Brake pad set"
        assert first["sku"] == "BP-100"
        assert first["quantity"] == 10
        assert first["unit_price"] == Decimal("50.00")
        assert first["commission_percentage"] == Decimal("5")
        assert first["commission_amount"] == Decimal("25.00")

    def test_payment_item_view_is_narrower(self, company, allocated_payment):
        item = allocated_payment.items.get(description="B")

        rows = get_allocations_for_payment_item(company=company, payment_item_id=item.pk)

        assert [r["sku"] for r in rows] == ["BP-200"]
        assert rows[0]["payment_item_id"] == item.pk

    def test_payment_without_allocations(self, company, make_payment):
        payment = make_payment("10.00")

        assert get_allocations_for_payment(company=company, payment_id=payment.pk) == []

    def test_foreign_payment_is_not_found(self, other_company, allocated_payment):
        with pytest.raises(NotFound):
            get_allocations_for_payment(company=other_company, payment_id=allocated_payment.pk)
        with pytest.raises(NotFound):
            get_allocations_for_payment_item(
                company=other_company,
                payment_item_id=allocated_payment.items.first().pk,
            )


@pytest.mark.django_db
class TestPaymentAllocationSummary:
    def test_allocated_and_unallocated_per_payment(self, company, supplier, allocated_payment, make_payment):
        newer = make_payment("12.50", payment_date=datetime.date(2024, 4, 1))

        rows = get_payment_allocation_summary(company=company, supplier_id=supplier.pk)

        assert [r["payment_id"] for r in rows] == [newer.pk, allocated_payment.pk]
        assert rows[0]["allocated_amount"] == Decimal("0.00")
        assert rows[0]["unallocated_amount"] == Decimal("12.50")
        assert rows[0]["status"] == "unallocated"
        assert rows[1] == {
            "payment_id": allocated_payment.pk,
            "payment_date": datetime.date(2024, 3, 1),
            "total_amount": Decimal("40.00"),
            "reference": "CHK-9",
            "status": "fully_allocated",
            "allocated_amount": Decimal("40.00"),
            "unallocated_amount": Decimal("0.00"),
        }

    def test_foreign_supplier_is_not_found(self, company, foreign_supplier):
        with pytest.raises(NotFound):
            get_payment_allocation_summary(company=company, supplier_id=foreign_supplier.pk)

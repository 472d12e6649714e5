import datetime
from decimal import Decimal

import pytest

from commissions.balances import (
    get_commission_outstanding_by_supplier,
    get_outstanding_for_supplier,
    get_supplier_commission_summary,
)
from commissions.services import allocate
from core.exceptions import NotFound


@pytest.mark.django_db
class TestOutstandingBySupplier:
    def test_two_lines_without_allocations(self, company, supplier, make_order, part, second_part):
        make_order((part, 10, "50.00", "5"))
        make_order((second_part, 10, "30.00", "5"))

        rows = get_commission_outstanding_by_supplier(company=company)

        assert rows == [{
            "supplier_id": supplier.pk,
            "supplier_name": "Bosch Parts",
            "total_commission": Decimal("40.00"),
            "total_paid": Decimal("0.00"),
            "outstanding_amount": Decimal("40.00"),
            "order_count": 2,
        }]

    def test_order_count_counts_distinct_orders(self, company, make_order, part, second_part):
        make_order((part, 10, "50.00", "5"), (second_part, 10, "30.00", "5"))

        (row,) = get_commission_outstanding_by_supplier(company=company)

        assert row["order_count"] == 1
        assert row["total_commission"] == Decimal("40.00")

    def test_allocations_reduce_outstanding(self, company, make_payment, commission_line):
        payment = make_payment("10.00")
        allocate(
            company=company,
            payment_item_id=payment.items.get().pk,
            sales_order_item_id=commission_line.pk,
            allocated_amount="10.00",
        )

        (row,) = get_commission_outstanding_by_supplier(company=company)

        assert row["total_paid"] == Decimal("10.00")
        assert row["outstanding_amount"] == Decimal("15.00")

    def test_suppliers_without_commission_are_excluded(self, company, second_supplier, make_order, part, valeo_part):
        make_order((part, 1, "10.00", "10"))
        make_order((valeo_part, 5, "120.00", "0"))

        rows = get_commission_outstanding_by_supplier(company=company)

        assert [r["supplier_name"] for r in rows] == ["Bosch Parts"]

    def test_ordered_by_outstanding_then_name(self, company, supplier, second_supplier, make_order, part, valeo_part):
        make_order((part, 1, "100.00", "10"))
        make_order((valeo_part, 1, "100.00", "10"))
        make_order((valeo_part, 1, "100.00", "10"))

        rows = get_commission_outstanding_by_supplier(company=company)
        assert [r["supplier_name"] for r in rows] == ["Valeo Supply", "Bosch Parts"]

        make_order((part, 1, "100.00", "10"))
        rows = get_commission_outstanding_by_supplier(company=company)
        assert [r["supplier_name"] for r in rows] == ["Bosch Parts", "Valeo Supply"]

    def test_other_company_data_is_ignored(
        self, company, other_company, make_order, foreign_part, foreign_customer,
    ):
        make_order((foreign_part, 10, "50.00", "5"), order_company=other_company, order_customer=foreign_customer)

        assert get_commission_outstanding_by_supplier(company=company) == []

    def test_reads_are_repeatable(self, company, make_order, part):
        make_order((part, 3, "19.99", "7.25"))

        first = get_commission_outstanding_by_supplier(company=company)
        second = get_commission_outstanding_by_supplier(company=company)

        assert first == second
        assert first[0]["total_commission"] == Decimal("4.347825")


@pytest.mark.django_db
class TestOutstandingForSupplier:
    def test_rows_carry_order_context(self, company, supplier, customer, make_order, part):
        order = make_order((part, 10, "50.00", "5"), po_number="PO-7", order_date=datetime.date(2024, 4, 2))

        (row,) = get_outstanding_for_supplier(company=company, supplier_id=supplier.pk)

        assert row["sales_order_id"] == order.pk
        assert row["po_number"] == "PO-7"
        assert row["customer_name"] == customer.name
        assert row["order_date"] == datetime.date(2024, 4, 2)
        assert row["part_name"] == "Brake pad set"
        assert row["sku"] == "BP-100"
        assert row["quantity"] == 10
        assert row["unit_price"] == Decimal("50.00")
        assert row["commission_percentage"] == Decimal("5")
        assert row["commission_amount"] == Decimal("25.00")
        assert row["paid_amount"] == Decimal("0.00")
        assert row["outstanding_amount"] == Decimal("25.00")

    def test_newest_order_first_then_po_number(self, company, supplier, make_order, part):
        make_order((part, 1, "10.00", "10"), po_number="PO-B", order_date=datetime.date(2024, 1, 5))
        make_order((part, 1, "10.00", "10"), po_number="PO-A", order_date=datetime.date(2024, 1, 5))
        make_order((part, 1, "10.00", "10"), po_number="PO-C", order_date=datetime.date(2024, 2, 1))

        rows = get_outstanding_for_supplier(company=company, supplier_id=supplier.pk)

        assert [r["po_number"] for r in rows] == ["PO-C", "PO-A", "PO-B"]

    def test_fully_paid_and_zero_commission_lines_are_omitted(
        self, company, supplier, make_order, make_payment, part, second_part,
    ):
        paid_line = make_order((part, 10, "50.00", "5")).items.get()
        make_order((second_part, 10, "30.00", "0"))
        payment = make_payment("25.00")
        allocate(
            company=company,
            payment_item_id=payment.items.get().pk,
            sales_order_item_id=paid_line.pk,
            allocated_amount="25.00",
        )

        assert get_outstanding_for_supplier(company=company, supplier_id=supplier.pk) == []

    def test_only_lines_of_that_supplier(self, company, second_supplier, make_order, part, valeo_part):
        make_order((part, 1, "10.00", "10"), (valeo_part, 1, "120.00", "10"))

        rows = get_outstanding_for_supplier(company=company, supplier_id=second_supplier.pk)

        assert [r["sku"] for r in rows] == ["VL-010"]
        assert rows[0]["outstanding_amount"] == Decimal("12.00")

    def test_foreign_supplier_is_not_found(self, company, foreign_supplier):
        with pytest.raises(NotFound):
            get_outstanding_for_supplier(company=company, supplier_id=foreign_supplier.pk)


@pytest.mark.django_db
class TestSupplierCommissionSummary:
    def test_summary_figures(self, company, supplier, make_order, make_payment, part, second_part):
        line = make_order((part, 10, "50.00", "5"), (second_part, 10, "30.00", "5")).items.get(part=part)
        payment = make_payment("30.00")
        make_payment("5.00")
        allocate(
            company=company,
            payment_item_id=payment.items.get().pk,
            sales_order_item_id=line.pk,
            allocated_amount="20.00",
        )

        summary = get_supplier_commission_summary(company=company, supplier_id=supplier.pk)

        assert summary == {
            "supplier_id": supplier.pk,
            "supplier_name": "Bosch Parts",
            "total_generated": Decimal("40.00"),
            "total_paid": Decimal("35.00"),
            "total_allocated": Decimal("20.00"),
            "outstanding": Decimal("20.00"),
            "unallocated_payments": Decimal("15.00"),
        }

    def test_empty_supplier(self, company, second_supplier):
        summary = get_supplier_commission_summary(company=company, supplier_id=second_supplier.pk)

        assert summary["total_generated"] == 0
        assert summary["total_paid"] == 0
        assert summary["outstanding"] == 0

    def test_foreign_supplier_is_not_found(self, company, foreign_supplier):
        with pytest.raises(NotFound):
            get_supplier_commission_summary(company=company, supplier_id=foreign_supplier.pk)

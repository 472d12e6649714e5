from decimal import Decimal

import pytest

from commissions.models import CommissionAllocation, CommissionPayment
from commissions.services import allocate
from sales.models import SalesOrder

API = "/api/v1"


def _unwrap_results(payload):
    if isinstance(payload, dict) and "results" in payload:
        return payload["results"]
    return payload


@pytest.mark.django_db
class TestAuthentication:
    def test_anonymous_requests_are_rejected(self, api_client):
        response = api_client.get(f"{API}/commission-payments/")

        assert response.status_code == 401

    def test_jwt_token_pair(self, api_client, admin_user):
        response = api_client.post(
            f"{API}/auth/token/",
            {"email": "admin@test.com", "password": "testpass123"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data


@pytest.mark.django_db
class TestCommissionPaymentEndpoints:
    def test_record_payment(self, accountant_client, supplier, accountant_user):
        response = accountant_client.post(
            f"{API}/commission-payments/",
            {
                "supplier_id": str(supplier.pk),
                "payment_date": "2024-03-01",
                "total_amount": "100.00",
                "reference": "CHK-1",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == "unallocated"
        assert response.data["total_amount"] == "100.00"
        assert response.data["total_line_items"] == "100.00"
        assert response.data["remaining_amount"] == "0.00"
        payment = CommissionPayment.objects.get(pk=response.data["id"])
        assert payment.created_by == accountant_user

    def test_non_positive_total_is_rejected(self, accountant_client, supplier):
        response = accountant_client.post(
            f"{API}/commission-payments/",
            {"supplier_id": str(supplier.pk), "total_amount": "0.00"},
            format="json",
        )

        assert response.status_code == 400
        assert CommissionPayment.objects.count() == 0

    def test_foreign_supplier_is_bad_request(self, accountant_client, foreign_supplier):
        response = accountant_client.post(
            f"{API}/commission-payments/",
            {"supplier_id": str(foreign_supplier.pk), "total_amount": "10.00"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["field"] == "supplier_id"

    def test_duplicate_reference_is_conflict(self, accountant_client, supplier, make_payment):
        make_payment("10.00", reference="CHK-1")

        response = accountant_client.post(
            f"{API}/commission-payments/",
            {"supplier_id": str(supplier.pk), "total_amount": "10.00", "reference": "CHK-1"},
            format="json",
        )

        assert response.status_code == 409
        assert "detail" in response.data

    def test_sales_role_cannot_record_payments(self, sales_client, supplier):
        response = sales_client.post(
            f"{API}/commission-payments/",
            {"supplier_id": str(supplier.pk), "total_amount": "10.00"},
            format="json",
        )

        assert response.status_code == 403

    def test_sales_role_can_read_payments(self, sales_client, make_payment):
        make_payment("10.00")

        response = sales_client.get(f"{API}/commission-payments/")

        assert response.status_code == 200
        assert len(_unwrap_results(response.data)) == 1

    def test_list_filters_by_supplier(self, admin_client, supplier, second_supplier, make_payment):
        make_payment("10.00")
        make_payment("20.00", payment_supplier=second_supplier)

        response = admin_client.get(f"{API}/commission-payments/", {"supplier": str(second_supplier.pk)})

        rows = _unwrap_results(response.data)
        assert [r["supplier_name"] for r in rows] == ["Valeo Supply"]

    def test_replace_items(self, admin_client, make_payment):
        payment = make_payment("100.00")

        response = admin_client.put(
            f"{API}/commission-payments/{payment.pk}/items/",
            {"items": [{"amount": "60.00", "description": "Q1"}, {"amount": "15.25"}]},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["payment"]["total_amount"] == "75.25"
        assert [i["amount"] for i in response.data["items"]] == ["60.00", "15.25"]

        listing = admin_client.get(f"{API}/commission-payments/{payment.pk}/items/")
        assert len(listing.data) == 2

    def test_replace_items_with_allocations_is_conflict(self, admin_client, company, make_payment, commission_line):
        payment = make_payment("25.00")
        allocate(
            company=company,
            payment_item_id=payment.items.get().pk,
            sales_order_item_id=commission_line.pk,
            allocated_amount="5.00",
        )

        response = admin_client.put(
            f"{API}/commission-payments/{payment.pk}/items/",
            {"items": [{"amount": "1.00"}]},
            format="json",
        )

        assert response.status_code == 409

    def test_replace_items_requires_items(self, admin_client, make_payment):
        payment = make_payment("100.00")

        response = admin_client.put(
            f"{API}/commission-payments/{payment.pk}/items/", {"items": []}, format="json",
        )

        assert response.status_code == 400

    def test_replace_items_beyond_column_limit_is_bad_request(self, admin_client, make_payment):
        payment = make_payment("100.00")

        response = admin_client.put(
            f"{API}/commission-payments/{payment.pk}/items/",
            {"items": [{"amount": "999999999999.99"}, {"amount": "999999999999.99"}]},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["field"] == "items"
        payment.refresh_from_db()
        assert payment.total_amount == Decimal("100.00")

    def test_add_update_and_delete_single_item(self, admin_client, make_payment):
        payment = make_payment("100.00")

        created = admin_client.post(
            f"{API}/commission-payments/{payment.pk}/add-item/",
            {"amount": "5.00", "description": "Bonus"},
            format="json",
        )
        assert created.status_code == 201
        item_url = f"{API}/commission-payment-items/{created.data['id']}/"

        patched = admin_client.patch(item_url, {"amount": "7.50"}, format="json")
        assert patched.status_code == 200
        assert patched.data["amount"] == "7.50"

        deleted = admin_client.delete(item_url)
        assert deleted.status_code == 204
        assert payment.items.count() == 1

    def test_delete_payment(self, admin_client, make_payment):
        payment = make_payment("10.00")

        response = admin_client.delete(f"{API}/commission-payments/{payment.pk}/")

        assert response.status_code == 204
        assert not CommissionPayment.objects.filter(pk=payment.pk).exists()


@pytest.mark.django_db
class TestAllocationEndpoints:
    def test_allocate_and_read_back(self, accountant_client, make_payment, commission_line):
        payment = make_payment("25.00")
        item = payment.items.get()

        response = accountant_client.post(
            f"{API}/commission-allocations/",
            {
                "payment_item_id": str(item.pk),
                "sales_order_item_id": str(commission_line.pk),
                "allocated_amount": "25.00",
                "notes": "March",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["allocated_amount"] == "25.00"
        assert str(response.data["payment"]) == str(payment.pk)
        payment.refresh_from_db()
        assert payment.status == CommissionPayment.Status.FULLY_ALLOCATED

        by_payment = accountant_client.get(f"{API}/commission-payments/{payment.pk}/allocations/")
        assert by_payment.status_code == 200
        (row,) = by_payment.data
        assert row["po_number"] == commission_line.sales_order.po_number
        assert row["sku"] == "BP-100"
        assert row["commission_amount"] == "25.000000"
        assert row["allocated_amount"] == "25.00"

        by_item = accountant_client.get(f"{API}/commission-payment-items/{item.pk}/allocations/")
        assert len(by_item.data) == 1

        listing = accountant_client.get(
            f"{API}/commission-allocations/", {"payment_item__payment": str(payment.pk)},
        )
        assert len(_unwrap_results(listing.data)) == 1

    def test_over_allocation_is_bad_request(self, accountant_client, make_payment, commission_line):
        payment = make_payment("100.00")

        response = accountant_client.post(
            f"{API}/commission-allocations/",
            {
                "payment_item_id": str(payment.items.get().pk),
                "sales_order_item_id": str(commission_line.pk),
                "allocated_amount": "30.00",
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["field"] == "allocated_amount"
        assert CommissionAllocation.objects.count() == 0

    def test_unknown_sales_item_is_not_found(self, accountant_client, make_payment):
        payment = make_payment("100.00")

        response = accountant_client.post(
            f"{API}/commission-allocations/",
            {
                "payment_item_id": str(payment.items.get().pk),
                "sales_order_item_id": "00000000-0000-0000-0000-000000000000",
                "allocated_amount": "1.00",
            },
            format="json",
        )

        assert response.status_code == 404

    def test_sales_role_cannot_allocate(self, sales_client, make_payment, commission_line):
        payment = make_payment("25.00")

        response = sales_client.post(
            f"{API}/commission-allocations/",
            {
                "payment_item_id": str(payment.items.get().pk),
                "sales_order_item_id": str(commission_line.pk),
                "allocated_amount": "1.00",
            },
            format="json",
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestBalanceEndpoints:
    def test_company_outstanding(self, admin_client, supplier, make_order, part, second_part):
        make_order((part, 10, "50.00", "5"))
        make_order((second_part, 10, "30.00", "5"))

        response = admin_client.get(f"{API}/commission-outstanding/")

        assert response.status_code == 200
        assert response.data == [{
            "supplier_id": str(supplier.pk),
            "supplier_name": "Bosch Parts",
            "total_commission": "40.000000",
            "total_paid": "0.00",
            "outstanding_amount": "40.000000",
            "order_count": 2,
        }]

    def test_supplier_outstanding_and_summary(self, admin_client, supplier, commission_line, make_payment):
        make_payment("30.00")

        outstanding = admin_client.get(f"{API}/suppliers/{supplier.pk}/commission-outstanding/")
        summary = admin_client.get(f"{API}/suppliers/{supplier.pk}/commission-summary/")
        per_payment = admin_client.get(f"{API}/suppliers/{supplier.pk}/payment-allocation-summary/")

        assert outstanding.status_code == 200
        assert [Decimal(r["outstanding_amount"]) for r in outstanding.data] == [Decimal("25")]
        assert summary.data["total_generated"] == "25.000000"
        assert summary.data["total_paid"] == "30.00"
        assert summary.data["unallocated_payments"] == "30.00"
        assert per_payment.data[0]["unallocated_amount"] == "30.00"


@pytest.mark.django_db
class TestSalesOrderEndpoints:
    def test_create_replace_and_delete(self, admin_client, customer, part, second_part):
        created = admin_client.post(
            f"{API}/sales-orders/",
            {
                "customer_id": str(customer.pk),
                "po_number": "PO-55",
                "items": [
                    {"part_id": str(part.pk), "quantity": 10, "unit_price": "50.00", "commission_percentage": "5"},
                ],
            },
            format="json",
        )
        assert created.status_code == 201
        assert created.data["total_commission"] == "25.000000"
        order_url = f"{API}/sales-orders/{created.data['id']}/"

        replaced = admin_client.put(
            order_url,
            {
                "customer_id": str(customer.pk),
                "po_number": "PO-55",
                "status": "shipped",
                "items": [{"part_id": str(second_part.pk), "quantity": 2}],
            },
            format="json",
        )
        assert replaced.status_code == 200
        assert replaced.data["status"] == "shipped"
        assert replaced.data["total_amount"] == "60.00"
        assert [i["sku"] for i in replaced.data["items"]] == ["BP-200"]

        assert admin_client.patch(order_url, {"notes": "x"}, format="json").status_code == 405
        assert admin_client.delete(order_url).status_code == 204
        assert SalesOrder.objects.count() == 0

    def test_accountant_cannot_write_orders(self, accountant_client, customer, part):
        response = accountant_client.post(
            f"{API}/sales-orders/",
            {"customer_id": str(customer.pk), "po_number": "PO-1", "items": [{"part_id": str(part.pk), "quantity": 1}]},
            format="json",
        )

        assert response.status_code == 403

    def test_duplicate_po_number_is_conflict(self, sales_client, customer, make_order, part):
        make_order((part, 1, "10.00", "5"), po_number="PO-1")

        response = sales_client.post(
            f"{API}/sales-orders/",
            {"customer_id": str(customer.pk), "po_number": "PO-1", "items": [{"part_id": str(part.pk), "quantity": 1}]},
            format="json",
        )

        assert response.status_code == 409
        assert response.data["field"] == "po_number"

    @pytest.mark.parametrize(
        "line",
        [
            {"quantity": 100000, "unit_price": "9999999999.99"},
            {"quantity": 2_147_483_648, "unit_price": "0.00"},
        ],
    )
    def test_line_beyond_column_limits_is_bad_request(self, admin_client, customer, part, line):
        response = admin_client.post(
            f"{API}/sales-orders/",
            {"customer_id": str(customer.pk), "po_number": "PO-1", "items": [{"part_id": str(part.pk), **line}]},
            format="json",
        )

        assert response.status_code == 400
        assert SalesOrder.objects.count() == 0

"""Seed a demo company with orders, supplier payments and allocations."""
from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone


class Command(BaseCommand):
    help = "Seed a demo company with suppliers, parts, sales orders and commission payments"

    COMPANY_SLUG = "demo-distribution"

    DEMO_USERS = [
        {"email": "admin@ledger.test", "first_name": "Admin", "last_name": "Demo", "role": "ADMIN", "password": "admin123!"},
        {"email": "accounts@ledger.test", "first_name": "Clara", "last_name": "Hoffmann", "role": "ACCOUNTANT", "password": "accounts123!"},
        {"email": "sales@ledger.test", "first_name": "Jonas", "last_name": "Berg", "role": "SALES", "password": "sales123!"},
    ]

    SUPPLIERS = [
        ("Bosch Parts", [("BP-100", "Brake pad set", "48.50"), ("BP-200", "Brake disc", "72.00")]),
        ("Valeo Supply", [("VL-010", "Clutch kit", "189.00"), ("VL-020", "Wiper blade", "12.90")]),
    ]

    def add_arguments(self, parser):
        parser.add_argument("--flush", action="store_true", help="Delete the demo company first")

    def handle(self, *args, **options):
        from companies.models import Company

        if options["flush"]:
            self.stdout.write("Flushing demo company...")
            self._flush()

        if Company.objects.filter(slug=self.COMPANY_SLUG).exists():
            self.stdout.write(self.style.WARNING("Demo company already exists; use --flush to rebuild it."))
            return

        with transaction.atomic():
            company = Company.objects.create(name="Demo Distribution", slug=self.COMPANY_SLUG)
            users = self._create_users(company)
            customer, parts = self._create_master_data(company)
            orders = self._create_orders(company, customer, parts, users[-1])
            payments = self._create_payments(company, orders, users[1])

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete: 1 company, {len(users)} users, {len(parts)} parts, "
            f"{len(orders)} sales orders, {len(payments)} commission payments"
        ))

    def _flush(self):
        from accounts.models import User
        from commissions.models import CommissionAllocation, CommissionPayment, CommissionPaymentItem
        from companies.models import Company
        from sales.models import SalesOrder, SalesOrderItem

        company = Company.objects.filter(slug=self.COMPANY_SLUG).first()
        if company is None:
            return
        for model in [CommissionAllocation, CommissionPaymentItem, CommissionPayment, SalesOrderItem, SalesOrder]:
            model.objects.filter(company=company).delete()
        company.delete()
        User.objects.filter(email__in=[u["email"] for u in self.DEMO_USERS]).delete()

    def _create_users(self, company):
        from accounts.models import User
        from companies.models import CompanyUser

        users = []
        for ud in self.DEMO_USERS:
            user, created = User.objects.get_or_create(
                email=ud["email"],
                defaults={
                    "first_name": ud["first_name"],
                    "last_name": ud["last_name"],
                    "role": ud["role"],
                },
            )
            if created:
                user.set_password(ud["password"])
                user.save(update_fields=["password"])
                self.stdout.write(f"  User: {user.email} ({user.role})")
            CompanyUser.objects.get_or_create(company=company, user=user, defaults={"is_default": True})
            users.append(user)
        return users

    def _create_master_data(self, company):
        from catalog.models import Part
        from customers.models import Customer
        from suppliers.models import Supplier

        customer = Customer.objects.create(company=company, name="Northwind Garage", email="orders@northwind.test")
        parts = []
        for supplier_name, supplier_parts in self.SUPPLIERS:
            supplier = Supplier.objects.create(company=company, name=supplier_name)
            for sku, name, price in supplier_parts:
                parts.append(Part.objects.create(
                    company=company, supplier=supplier, sku=sku, name=name, price=Decimal(price),
                ))
        self.stdout.write(f"  Parts: {len(parts)}")
        return customer, parts

    def _create_orders(self, company, customer, parts, actor):
        from sales.services import create_sales_order

        today = timezone.localdate()
        orders = []
        for n in range(6):
            lines = [parts[n % len(parts)], parts[(n + 1) % len(parts)]]
            orders.append(create_sales_order(
                company=company,
                customer_id=customer.pk,
                po_number=f"PO-{1001 + n}",
                order_date=today - timedelta(days=7 * (6 - n)),
                items=[
                    {"part_id": part.pk, "quantity": 2 + n, "commission_percentage": "7.5"}
                    for part in lines
                ],
                actor=actor,
            ))
        self.stdout.write(f"  Sales orders: {len(orders)}")
        return orders

    def _create_payments(self, company, orders, actor):
        from commissions.services import allocate, record_payment

        payments = []
        lines_by_supplier = {}
        for order in orders[:3]:
            for line in order.items.select_related("supplier"):
                lines_by_supplier.setdefault(line.supplier, []).append(line)

        for idx, (supplier, lines) in enumerate(lines_by_supplier.items(), start=1):
            # Pay the whole first line and half of the second; leave the rest outstanding.
            first = lines[0].commission_amount.quantize(Decimal("0.01"))
            second = (lines[1].commission_amount / 2).quantize(Decimal("0.01")) if len(lines) > 1 else Decimal("0.00")
            payment = record_payment(
                company=company,
                supplier_id=supplier.pk,
                total_amount=first + second,
                reference=f"REM-{idx:03d}",
                notes="Quarterly remittance",
                actor=actor,
            )
            item = payment.items.get()
            for line, amount in zip(lines, (first, second)):
                if amount > 0:
                    allocate(
                        company=company,
                        payment_item_id=item.pk,
                        sales_order_item_id=line.pk,
                        allocated_amount=amount,
                        actor=actor,
                    )
            payments.append(payment)
        self.stdout.write(f"  Commission payments: {len(payments)}")
        return payments

"""ViewSets and API views for the commission ledger API v1."""
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from commissions import balances, reports
from commissions import services as ledger
from commissions.models import CommissionAllocation, CommissionPayment, CommissionPaymentItem
from companies.services import get_user_company
from core.exceptions import ConflictDuringTransaction, LedgerError, NotFound
from sales import services as sales_services
from sales.models import SalesOrder
from suppliers.models import Supplier

from api.v1.permissions import CanManageCommissions, CanManageSalesOrders, IsCompanyMember
from api.v1.serializers import (
    AllocationReportRowSerializer,
    CommissionAllocationCreateSerializer,
    CommissionAllocationSerializer,
    CommissionPaymentCreateSerializer,
    CommissionPaymentItemInputSerializer,
    CommissionPaymentItemSerializer,
    CommissionPaymentItemsReplaceSerializer,
    CommissionPaymentItemUpdateSerializer,
    CommissionPaymentSerializer,
    OutstandingItemSerializer,
    PaymentAllocationSummarySerializer,
    SalesOrderSerializer,
    SalesOrderWriteSerializer,
    SupplierCommissionSummarySerializer,
    SupplierOutstandingSerializer,
    SupplierSerializer,
)


# ---------------------------------------------------------------------------
# Tenant helpers
# ---------------------------------------------------------------------------

def _filter_queryset_by_company(qs, user, *, field_name: str = "company"):
    """Restrict a company-scoped queryset to the user's company.

    Users without an active membership get an empty queryset.
    """
    company = get_user_company(user)
    if company is None:
        return qs.none()
    return qs.filter(**{field_name: company})


def _require_user_company(user):
    """Return the user's company or raise an explicit permission error."""
    company = get_user_company(user)
    if company is None:
        raise PermissionDenied("No active company is linked to your account.")
    return company


def _ledger_error_response(exc: LedgerError) -> Response:
    if isinstance(exc, NotFound):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictDuringTransaction):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    body = {"detail": exc.message}
    if exc.field:
        body["field"] = exc.field
    return Response(body, status=code)


# ---------------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------------

class SupplierViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = SupplierSerializer
    queryset = Supplier.objects.all()
    permission_classes = [IsCompanyMember]
    filterset_fields = ["is_active"]
    search_fields = ["name", "contact_person", "email"]
    ordering_fields = ["name", "created_at"]

    def get_queryset(self):
        qs = super().get_queryset()
        return _filter_queryset_by_company(qs, self.request.user)

    @action(detail=True, methods=["get"], url_path="commission-outstanding")
    def commission_outstanding(self, request, pk=None):
        supplier = self.get_object()
        rows = balances.get_outstanding_for_supplier(
            company=supplier.company, supplier_id=supplier.pk,
        )
        return Response(OutstandingItemSerializer(rows, many=True).data)

    @action(detail=True, methods=["get"], url_path="commission-summary")
    def commission_summary(self, request, pk=None):
        supplier = self.get_object()
        summary = balances.get_supplier_commission_summary(
            company=supplier.company, supplier_id=supplier.pk,
        )
        return Response(SupplierCommissionSummarySerializer(summary).data)

    @action(detail=True, methods=["get"], url_path="payment-allocation-summary")
    def payment_allocation_summary(self, request, pk=None):
        supplier = self.get_object()
        rows = reports.get_payment_allocation_summary(
            company=supplier.company, supplier_id=supplier.pk,
        )
        return Response(PaymentAllocationSummarySerializer(rows, many=True).data)


class CommissionOutstandingView(APIView):
    """Outstanding commission for every supplier of the user's company."""

    permission_classes = [IsCompanyMember]

    def get(self, request):
        company = get_user_company(request.user)
        if company is None:
            return Response([])
        rows = balances.get_commission_outstanding_by_supplier(company=company)
        return Response(SupplierOutstandingSerializer(rows, many=True).data)


# ---------------------------------------------------------------------------
# Sales orders
# ---------------------------------------------------------------------------

class SalesOrderViewSet(viewsets.ModelViewSet):
    serializer_class = SalesOrderSerializer
    queryset = (
        SalesOrder.objects
        .select_related("customer")
        .prefetch_related("items", "items__part", "items__supplier")
    )
    permission_classes = [CanManageSalesOrders]
    filterset_fields = ["status", "customer"]
    search_fields = ["po_number", "customer__name"]
    ordering_fields = ["order_date", "po_number", "total_amount", "created_at"]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_serializer_class(self):
        if self.action in ("create", "update"):
            return SalesOrderWriteSerializer
        return SalesOrderSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        return _filter_queryset_by_company(qs, self.request.user)

    def _order_response(self, order, code=status.HTTP_200_OK):
        order = self.get_queryset().get(pk=order.pk)
        return Response(SalesOrderSerializer(order, context={"request": self.request}).data, status=code)

    def create(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = sales_services.create_sales_order(
                company=company,
                actor=request.user,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)

        return self._order_response(order, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        order = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = sales_services.replace_sales_order(
                company=company,
                order_id=order.pk,
                actor=request.user,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)

        return self._order_response(order)

    def destroy(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        order = self.get_object()
        try:
            sales_services.delete_sales_order(company=company, order_id=order.pk)
        except LedgerError as exc:
            return _ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Commission payments
# ---------------------------------------------------------------------------

class CommissionPaymentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = CommissionPaymentSerializer
    permission_classes = [CanManageCommissions]
    filterset_fields = ["supplier", "status"]
    search_fields = ["reference", "supplier__name"]
    ordering_fields = ["payment_date", "total_amount", "created_at"]

    def get_queryset(self):
        company = get_user_company(self.request.user)
        if company is None:
            return CommissionPayment.objects.none()
        return ledger.list_payments(company=company)

    def get_serializer_class(self):
        if self.action == "create":
            return CommissionPaymentCreateSerializer
        return CommissionPaymentSerializer

    def _payment_response(self, payment_id, code=status.HTTP_200_OK):
        payment = self.get_queryset().get(pk=payment_id)
        return Response(CommissionPaymentSerializer(payment, context={"request": self.request}).data, status=code)

    def create(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = ledger.record_payment(
                company=company,
                actor=request.user,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)

        return self._payment_response(payment.pk, status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        payment = self.get_object()
        try:
            ledger.delete_payment(company=company, payment_id=payment.pk)
        except LedgerError as exc:
            return _ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get", "put"], url_path="items")
    def items(self, request, pk=None):
        payment = self.get_object()
        if request.method == "GET":
            return Response(CommissionPaymentItemSerializer(payment.items.all(), many=True).data)

        serializer = CommissionPaymentItemsReplaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment, new_items = ledger.replace_payment_items(
                company=payment.company,
                payment_id=payment.pk,
                items=serializer.validated_data["items"],
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)

        return Response({
            "payment": CommissionPaymentSerializer(self.get_queryset().get(pk=payment.pk)).data,
            "items": CommissionPaymentItemSerializer(new_items, many=True).data,
        })

    @action(detail=True, methods=["post"], url_path="add-item")
    def add_item(self, request, pk=None):
        payment = self.get_object()
        serializer = CommissionPaymentItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = ledger.add_payment_item(
                company=payment.company,
                payment_id=payment.pk,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)
        return Response(CommissionPaymentItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="allocations")
    def allocations(self, request, pk=None):
        payment = self.get_object()
        rows = reports.get_allocations_for_payment(company=payment.company, payment_id=payment.pk)
        return Response(AllocationReportRowSerializer(rows, many=True).data)


class CommissionPaymentItemViewSet(
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = CommissionPaymentItemSerializer
    queryset = CommissionPaymentItem.objects.select_related("payment")
    permission_classes = [CanManageCommissions]
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_queryset(self):
        qs = super().get_queryset()
        return _filter_queryset_by_company(qs, self.request.user)

    def partial_update(self, request, *args, **kwargs):
        item = self.get_object()
        serializer = CommissionPaymentItemUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = ledger.update_payment_item(
                company=item.company,
                payment_item_id=item.pk,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)
        return Response(CommissionPaymentItemSerializer(item).data)

    def destroy(self, request, *args, **kwargs):
        item = self.get_object()
        try:
            ledger.delete_payment_item(company=item.company, payment_item_id=item.pk)
        except LedgerError as exc:
            return _ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"], url_path="allocations")
    def allocations(self, request, pk=None):
        item = self.get_object()
        rows = reports.get_allocations_for_payment_item(company=item.company, payment_item_id=item.pk)
        return Response(AllocationReportRowSerializer(rows, many=True).data)


# ---------------------------------------------------------------------------
# Allocations
# ---------------------------------------------------------------------------

class CommissionAllocationViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = CommissionAllocationSerializer
    queryset = CommissionAllocation.objects.select_related("payment_item")
    permission_classes = [CanManageCommissions]
    filterset_fields = ["payment_item", "sales_order_item", "payment_item__payment"]
    ordering_fields = ["allocation_date", "allocated_amount", "created_at"]

    def get_serializer_class(self):
        if self.action == "create":
            return CommissionAllocationCreateSerializer
        return CommissionAllocationSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        return _filter_queryset_by_company(qs, self.request.user)

    def create(self, request, *args, **kwargs):
        company = _require_user_company(request.user)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            allocation = ledger.allocate(
                company=company,
                actor=request.user,
                **serializer.validated_data,
            )
        except LedgerError as exc:
            return _ledger_error_response(exc)

        return Response(
            CommissionAllocationSerializer(allocation).data,
            status=status.HTTP_201_CREATED,
        )

"""Custom DRF permissions for the commission ledger API."""
from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsCompanyMember(BasePermission):
    """Allow authenticated users; tenant filtering happens in the viewsets."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)


class CanManageCommissions(BasePermission):
    """Reads for any member; writes need the ADMIN, MANAGER or ACCOUNTANT role."""

    message = "Your role does not allow recording commission payments or allocations."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.can_manage_commissions


class CanManageSalesOrders(BasePermission):
    """Reads for any member; writes need the ADMIN, MANAGER or SALES role."""

    message = "Your role does not allow editing sales orders."

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return request.user.can_manage_sales_orders

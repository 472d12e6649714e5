"""Tenant resolution helpers."""
from __future__ import annotations

from companies.models import Company, CompanyUser


def get_user_company(user) -> Company | None:
    """Return the company the user is working in (default membership first).

    Users without an active membership get ``None``; callers must then
    return nothing rather than fall back to another tenant.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return None

    membership = (
        CompanyUser.objects
        .filter(user=user, company__is_active=True)
        .order_by("-is_default", "company__name")
        .select_related("company")
        .first()
    )
    if membership:
        return membership.company
    return None

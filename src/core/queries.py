"""Small query helpers shared by the service modules."""
from django.core.exceptions import ObjectDoesNotExist, ValidationError

from core.exceptions import NotFound


def get_scoped_object(queryset, pk, *, message: str):
    """Fetch ``pk`` from an already tenant-filtered queryset.

    Missing rows, rows filtered out by the company scope and malformed
    primary keys all raise the same :class:`NotFound`.
    """
    if pk in (None, ""):
        raise NotFound(message)
    try:
        return queryset.get(pk=pk)
    except (ObjectDoesNotExist, ValidationError, ValueError, TypeError):
        raise NotFound(message)

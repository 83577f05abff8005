"""Test support for running services against mockfirestore."""

from typing import Any, Optional

from mockfirestore import CollectionReference, Query


def _where_with_filter(original):
    """Accept ``where(filter=FieldFilter(...))`` as the real client does."""

    def where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter is not None:
            field_path, op_string, value = (
                filter.field_path,
                filter.op_string,
                filter.value,
            )
        return original(self, field_path, op_string, value)

    where._unpatched = original
    return where


def patch_mockfirestore() -> None:
    """Teach mockfirestore collections and queries about ``FieldFilter``."""
    for cls in (CollectionReference, Query):
        if not hasattr(cls.where, "_unpatched"):
            cls.where = _where_with_filter(cls.where)

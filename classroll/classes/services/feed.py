"""Live, read-only feed of a class document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from google.cloud.firestore_v1.document import DocumentReference

    from ..models import Group


class RosterFeed:
    """Keeps display state in step with a class document.

    Updates arrive on Firestore's listener thread and only replace
    ``self.group``. An open ``AttendanceMatrix`` is never touched; it is
    reconciled with the roster only when it is seeded again.
    """

    def __init__(
        self,
        group_ref: DocumentReference,
        on_change: Callable[[Group | None], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        """Start listening to ``group_ref``."""
        self.group: Group | None = None
        self._on_change = on_change
        self._on_error = on_error
        self._watch = group_ref.on_snapshot(self._handle_snapshot)

    def _handle_snapshot(
        self, doc_snapshots: list[Any], changes: list[Any], read_time: Any
    ) -> None:
        try:
            group = None
            for doc in doc_snapshots:
                if doc.exists:
                    group = doc.to_dict() or {}
                    group["id"] = doc.id
                    group.setdefault("members", [])
            self.group = group
            if self._on_change:
                self._on_change(group)
        except Exception as e:
            logging.error(f"Error handling roster update: {e}")
            if self._on_error is None:
                raise
            self._on_error(e)

    @property
    def members(self) -> list[dict[str, Any]]:
        """Members currently shown for the class."""
        if self.group is None:
            return []
        return list(self.group.get("members", []))

    def unsubscribe(self) -> None:
        """Stop listening for changes."""
        self._watch.unsubscribe()

# litcal_backend/app/services/temporale/deleter.py
from __future__ import annotations

import logging

from litcal_backend.app.config.paths import get_temporale_file
from litcal_backend.app.errors import NotFoundError, ValidationError
from litcal_backend.app.schemas import DeleteResult
from litcal_backend.app.services.data_stores import i18n as i18n_store
from litcal_backend.app.services.data_stores import lectionary as lectionary_store
from litcal_backend.app.services.data_stores import temporale as temporale_store
from litcal_backend.app.services.lectionary.categories import classify
from litcal_backend.app.services.locales import LocaleResolver
from .reconciler import WriteContext

audit = logging.getLogger("litcal.audit")


def delete_event(event_key: str, ctx: WriteContext, resolver: LocaleResolver) -> DeleteResult:
    """
    Remove `event_key` from the core list, every i18n file and every
    lectionary file of its category. A weekday key with no core record is
    removed from the lectionary files only.
    """
    if not event_key:
        raise ValidationError("DELETE requires exactly one path parameter: the event_key")

    rows = temporale_store.load_events()
    pos = temporale_store.find_index(rows, event_key)

    if pos is None:
        if not classify(event_key).is_ferial():
            raise NotFoundError(f"Temporale event with key '{event_key}' not found")
        files = lectionary_store.remove_key(event_key)
        audit.info(
            "Ferial temporale event deleted from lectionary",
            extra={
                "operation": "DELETE",
                "client_ip": ctx.client_ip,
                "request_id": ctx.request_id,
                "event_key": event_key,
                "type": "ferial",
                "lectionary_files": files,
            },
        )
        return DeleteResult(
            message=f"Ferial event '{event_key}' deleted from lectionary files",
            event_key=event_key,
            type="ferial",
        )

    del rows[pos]
    temporale_store.write_events(rows)

    locales = i18n_store.remove_key(event_key, resolver.available_locales)
    files = lectionary_store.remove_key(event_key)

    audit.info(
        "Temporale event deleted",
        extra={
            "operation": "DELETE",
            "client_ip": ctx.client_ip,
            "request_id": ctx.request_id,
            "file": str(get_temporale_file()),
            "event_key": event_key,
            "i18n_locales": locales,
            "lectionary_files": files,
        },
    )
    return DeleteResult(message=f"Temporale event '{event_key}' deleted successfully", event_key=event_key)

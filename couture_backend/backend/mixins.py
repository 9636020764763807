# backend/mixins.py

from __future__ import annotations

from rest_framework.exceptions import ValidationError

from backend.query_params import parse_datetime_param


class UpdatedSinceMixin:
    """
    Incremental polling for dashboard lists.

    GET ...?updated_since=<ISO datetime>  ->  rows with updated_at >= value.
    Lists are newest-first, so a client can merge the delta into its cache.
    """

    updated_field = "updated_at"

    def filter_updated_since(self, qs):
        raw = (self.request.query_params.get("updated_since") or "").strip()
        if not raw:
            return qs
        since = parse_datetime_param(raw)
        if since is None:
            raise ValidationError({"updated_since": "Use an ISO datetime or YYYY-MM-DD."})
        return qs.filter(**{f"{self.updated_field}__gte": since})

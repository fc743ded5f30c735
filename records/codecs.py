"""
Encode/decode pairs for the structured columns.

Each structured field has an explicit pair: ``encode_*`` prepares an
in-memory value for storage and ``decode_*`` turns whatever is stored
(including legacy rows written as JSON text, or ``NULL``) back into the
Python shape callers expect.  Empty values are stored as ``NULL``.

Repositories call these at the persistence boundary; models keep the raw
column value.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from django.core.serializers.json import DjangoJSONEncoder


def _loads(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        return json.loads(raw)
    return raw


def _plain(value: Any) -> Any:
    """Round-trip through the Django encoder so datetimes, decimals and UUIDs become strings."""
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def _encode_list(values: Iterable[Any] | None) -> list[str] | None:
    if not values:
        return None
    if isinstance(values, str):
        values = [values]
    cleaned = [str(v).strip() for v in values if v is not None and str(v).strip()]
    return cleaned or None


def _decode_list(raw: Any) -> list[str]:
    value = _loads(raw)
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _encode_mapping(value: Mapping[str, Any] | None) -> dict | None:
    if not value:
        return None
    return _plain(dict(value))


def _decode_mapping(raw: Any) -> dict:
    value = _loads(raw)
    if not value:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


# Patient

def encode_allergies(values):
    return _encode_list(values)


def decode_allergies(raw) -> list[str]:
    return _decode_list(raw)


def encode_medications(values):
    return _encode_list(values)


def decode_medications(raw) -> list[str]:
    return _decode_list(raw)


def encode_medical_summary(value):
    return _encode_mapping(value)


def decode_medical_summary(raw) -> dict:
    return _decode_mapping(raw)


# Visit history

def encode_changes(value):
    return _encode_mapping(value)


def decode_changes(raw) -> dict:
    return _decode_mapping(raw)


# Super admin

def encode_permissions_override(value):
    return _encode_mapping(value)


def decode_permissions_override(raw) -> dict:
    return _decode_mapping(raw)


# Tenant

def encode_tenant_settings(value):
    return _encode_mapping(value)


def decode_tenant_settings(raw) -> dict:
    return _decode_mapping(raw)


# Personnel / visit types

def encode_specialties(values):
    return _encode_list(values)


def decode_specialties(raw) -> list[str]:
    return _decode_list(raw)


def encode_personnel_type_ids(values) -> list[int] | None:
    if not values:
        return None
    return [int(v) for v in values]


def decode_personnel_type_ids(raw) -> list[int]:
    value = _loads(raw)
    if not value:
        return []
    return [int(v) for v in value]

"""Shared request parsing and response serialization for API handlers."""
import json
from datetime import date, datetime
from typing import Any, Optional

from aiohttp import web

from core.exceptions import ValidationError
from database.models import (
    ClientPackage,
    Coach,
    Package,
    TrainingSession,
    WaitingListEntry,
)
from services.transactions import LedgerRow, LedgerSummary


# ========== Request parsing ==========

def session_maker(request: web.Request):
    """Session factory configured on the application."""
    return request.app["session_maker"]


def tenant_id(request: web.Request) -> int:
    return request["tenant_id"]


def user_id(request: web.Request) -> Optional[int]:
    return request.get("user_id")


def path_int(request: web.Request, name: str = "id") -> int:
    """Integer path parameter."""
    try:
        return int(request.match_info[name])
    except ValueError:
        raise ValidationError(name, "must be an integer")


def query_int(request: web.Request, name: str) -> Optional[int]:
    raw = request.query.get(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(name, "must be an integer")


def query_date(request: web.Request, name: str) -> Optional[date]:
    raw = request.query.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(name, "expected YYYY-MM-DD")


def query_enum(request: web.Request, name: str, enum_cls):
    """Optional enum query parameter."""
    raw = request.query.get(name)
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        raise ValidationError(name, f"unknown value '{raw}'")


def query_bool(request: web.Request, name: str) -> bool:
    return request.query.get(name, "").lower() in ("1", "true", "yes")


async def read_json(request: web.Request) -> dict:
    """JSON object body; an empty body reads as {}."""
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("body", "invalid JSON")
    if not isinstance(body, dict):
        raise ValidationError("body", "expected a JSON object")
    return body


# ========== Serialization ==========

def _iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def package_to_dict(package: Package) -> dict[str, Any]:
    return {
        "id": package.id,
        "name": package.name,
        "description": package.description,
        "total_sessions": package.total_sessions,
        "price": package.price,
        "validity_days": package.validity_days,
        "is_active": package.is_active,
    }


def client_package_to_dict(cp: ClientPackage) -> dict[str, Any]:
    """Client package with its status as seen today."""
    return {
        "id": cp.id,
        "client_id": cp.client_id,
        "package_id": cp.package_id,
        "sessions_used": cp.sessions_used,
        "sessions_remaining": cp.sessions_remaining,
        "status": cp.current_status.value,
        "purchase_date": _iso(cp.purchase_date),
        "expiry_date": _iso(cp.expiry_date),
        "days_remaining": cp.days_remaining,
        "payment_method": cp.payment_method,
        "payment_notes": cp.payment_notes,
        "paid_at": _iso(cp.paid_at),
        "renewed_from_id": cp.renewed_from_id,
    }


def transaction_to_dict(row: LedgerRow) -> dict[str, Any]:
    tx = row.transaction
    return {
        "id": tx.id,
        "type": tx.type,
        "category": tx.category,
        "status": tx.status,
        "amount": tx.amount,
        "payment_method": tx.payment_method,
        "studio_id": tx.studio_id,
        "client_id": tx.client_id,
        "reference_type": tx.reference_type,
        "reference_id": tx.reference_id,
        "description": tx.description,
        "created_by": tx.created_by,
        "created_at": _iso(tx.created_at),
        "paid_at": _iso(tx.paid_at),
        "running_balance": row.running_balance,
    }


def summary_to_dict(summary: LedgerSummary) -> dict[str, Any]:
    return {
        "income": summary.income,
        "expense": summary.expense,
        "refund": summary.refund,
        "net": summary.net,
        "start": _iso(summary.start),
        "end": _iso(summary.end),
    }


def entry_to_dict(entry: WaitingListEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "client_id": entry.client_id,
        "studio_id": entry.studio_id,
        "coach_id": entry.coach_id,
        "session_id": entry.session_id,
        "preferred_date": _iso(entry.preferred_date),
        "preferred_time_slot": entry.preferred_time_slot,
        "status": entry.status,
        "requires_approval": entry.requires_approval,
        "priority": entry.priority,
        "approved_by": entry.approved_by,
        "approved_at": _iso(entry.approved_at),
        "notified_at": _iso(entry.notified_at),
        "notification_method": entry.notification_method,
        "notes": entry.notes,
    }


def coach_to_dict(coach: Coach) -> dict[str, Any]:
    return {
        "id": coach.id,
        "studio_id": coach.studio_id,
        "name": coach.name,
        "gender": coach.gender,
        "preferred_client_gender": coach.preferred_client_gender,
    }


def session_to_dict(training: TrainingSession) -> dict[str, Any]:
    return {
        "id": training.id,
        "studio_id": training.studio_id,
        "client_id": training.client_id,
        "coach_id": training.coach_id,
        "room_id": training.room_id,
        "client_package_id": training.client_package_id,
        "start_time": _iso(training.start_time),
        "end_time": _iso(training.end_time),
        "status": training.status,
        "notes": training.notes,
    }

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from coachtrack.api.auth import get_current_user
from coachtrack.crud.plan_kinds import PlanKind, DIET, WORKOUT
from coachtrack.database import get_db
from coachtrack.schemas.session import CompletionDateRequest, CompletionResponse
from coachtrack.services import completion_service
from coachtrack.services.day_resolver import resolve_for_date, resolve_for_range, to_session_rows


def session_rows(db: Session, kind: PlanKind, client_id: int, day: Optional[date],
                 from_date: Optional[date], to_date: Optional[date]):
    """
    Day Resolver output as flat rows: one day, or a range with the newest
    day first and each day in plan order.
    """
    if day is not None:
        return to_session_rows(kind, resolve_for_date(db, kind, client_id, day))
    if from_date is not None and to_date is not None:
        rows = []
        for _, resolved in resolve_for_range(db, kind, client_id, from_date, to_date):
            rows.extend(to_session_rows(kind, resolved))
        return rows
    raise HTTPException(status_code=400, detail="Date or Date Range required")


def build_session_router(kind: PlanKind) -> APIRouter:
    """Self-service schedule and completion routes for the logged-in client."""
    router = APIRouter(prefix=f"/api/{kind.name}-sessions", tags=[f"{kind.name.title()} Sessions"])
    row_schema = kind.session_row_schema

    @router.get("", response_model=List[row_schema])
    def get_sessions(
        date: Optional[date] = Query(None),
        from_date: Optional[date] = Query(None),
        to_date: Optional[date] = Query(None),
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return session_rows(db, kind, current_user.id, date, from_date, to_date)

    @router.post("/{item_id}/complete", response_model=CompletionResponse)
    def mark_complete(
        item_id: int,
        date: Optional[date] = Form(None),
        machinePhoto: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return completion_service.mark_complete(
            db, kind, current_user.id, item_id, date, evidence=machinePhoto, require_evidence=True
        )

    @router.post("/{item_id}/incomplete", response_model=CompletionResponse)
    def mark_incomplete(
        item_id: int,
        body: CompletionDateRequest,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return completion_service.mark_incomplete(db, kind, current_user.id, item_id, body.date)

    return router


workout_session_router = build_session_router(WORKOUT)
diet_session_router = build_session_router(DIET)

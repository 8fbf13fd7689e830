from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from coachtrack.api.auth import require_trainer
from coachtrack.api.sessions import session_rows
from coachtrack.crud import user as crud_user
from coachtrack.crud import meal_log as crud_meal
from coachtrack.crud.plan_kinds import WORKOUT
from coachtrack.database import get_db
from coachtrack.exceptions import NotFoundError, ValidationError
from coachtrack.schemas.meal_log import MealLogResponse
from coachtrack.schemas.session import CompletionDateRequest, CompletionResponse, WorkoutSessionRow
from coachtrack.schemas.user import ClientCreate, ClientResponse, SessionCountResponse, SessionRenewRequest
from coachtrack.services import completion_service, session_service

router = APIRouter(
    prefix="/api/trainer",
    tags=["Trainer"],
)


def _get_own_client(db: Session, trainer_id: int, client_id: int):
    client = crud_user.get_client_for_trainer(db, trainer_id, client_id)
    if client is None:
        raise NotFoundError("Client not found or not authorized")
    return client


@router.get("/clients", response_model=List[ClientResponse])
def get_clients(
    sort: str = Query("recent"),
    filter: str = Query("active"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    """List the trainer's clients. filter: active|inactive|all, sort: recent|active."""
    client_query = crud_user.ClientQuery(search=search, status=filter, sort=sort)
    return crud_user.get_clients(db, trainer.id, client_query)


@router.post("/clients", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
def add_client(
    client: ClientCreate,
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    return crud_user.create_client(db, trainer.id, client)


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client_details(
    client_id: int,
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    return _get_own_client(db, trainer.id, client_id)


@router.get("/clients/{client_id}/meals", response_model=List[MealLogResponse])
def get_client_meals(
    client_id: int,
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    _get_own_client(db, trainer.id, client_id)
    return crud_meal.get_meals(db, client_id, crud_meal.MealLogQuery(from_date=from_date, to_date=to_date))


@router.get("/clients/{client_id}/workouts", response_model=List[WorkoutSessionRow])
def get_client_workouts(
    client_id: int,
    date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    _get_own_client(db, trainer.id, client_id)
    if date is None:
        raise ValidationError("Date is required")
    return session_rows(db, WORKOUT, client_id, date, None, None)


@router.get("/clients/{client_id}/workouts/history", response_model=List[WorkoutSessionRow])
def get_client_workouts_history(
    client_id: int,
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    if from_date is None or to_date is None:
        raise ValidationError("Date range required")
    _get_own_client(db, trainer.id, client_id)
    return session_rows(db, WORKOUT, client_id, None, from_date, to_date)


@router.post("/clients/{client_id}/workouts/{item_id}/complete", response_model=CompletionResponse)
def mark_client_workout_complete(
    client_id: int,
    item_id: int,
    date: Optional[date] = Form(None),
    machinePhoto: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    """Trainer marks on the client's behalf; cardio photo is optional here."""
    _get_own_client(db, trainer.id, client_id)
    return completion_service.mark_complete(
        db, WORKOUT, client_id, item_id, date, evidence=machinePhoto, require_evidence=False
    )


@router.post("/clients/{client_id}/workouts/{item_id}/incomplete", response_model=CompletionResponse)
def mark_client_workout_incomplete(
    client_id: int,
    item_id: int,
    body: CompletionDateRequest,
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    _get_own_client(db, trainer.id, client_id)
    return completion_service.mark_incomplete(db, WORKOUT, client_id, item_id, body.date)


@router.post("/clients/{client_id}/sessions/complete", response_model=SessionCountResponse)
def mark_session_complete(
    client_id: int,
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    return session_service.mark_session_complete(db, trainer.id, client_id)


@router.post("/clients/{client_id}/sessions/renew", response_model=SessionCountResponse)
def renew_sessions(
    client_id: int,
    body: SessionRenewRequest,
    db: Session = Depends(get_db),
    trainer=Depends(require_trainer),
):
    return session_service.add_sessions(db, trainer.id, client_id, body.sessions, body.validity)

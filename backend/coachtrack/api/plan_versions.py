from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from coachtrack.api.auth import get_current_user, require_trainer, resolve_client_id
from coachtrack.crud.plan_kinds import PlanKind, DIET, WORKOUT
from coachtrack.crud.plan_version import get_store
from coachtrack.crud.user import get_client_for_trainer
from coachtrack.database import get_db
from coachtrack.exceptions import NotFoundError
from coachtrack.schemas.plan import PlanVersionSummary


def build_plan_router(kind: PlanKind) -> APIRouter:
    """
    /clients/{client}/{kind}-plans routes. {client} is a client id or "me".
    """
    store = get_store(kind.name)
    create_schema = kind.create_schema
    response_schema = kind.response_schema
    label = kind.name.title()

    router = APIRouter(
        prefix=f"/api/clients/{{client_ref}}/{kind.name}-plans",
        tags=[f"{label} Plans"],
    )

    @router.get("/current", response_model=response_schema)
    def get_current_plan(
        client_ref: str,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        client_id = resolve_client_id(client_ref, current_user, db)
        version = store.get_current(db, client_id)
        if version is None:
            # Normal outcome: no plan assigned yet
            raise HTTPException(status_code=404, detail=f"No active {kind.name} plan found")
        return store.to_response(version)

    @router.get("/versions", response_model=List[PlanVersionSummary])
    def get_plan_versions(
        client_ref: str,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        client_id = resolve_client_id(client_ref, current_user, db)
        return [PlanVersionSummary.model_validate(v) for v in store.get_history(db, client_id)]

    @router.get("/{version_id}", response_model=response_schema)
    def get_plan_version(
        client_ref: str,
        version_id: int,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        client_id = resolve_client_id(client_ref, current_user, db)
        version = store.get_version(db, client_id, version_id)
        if version is None:
            raise NotFoundError(f"{label} plan version not found")
        return store.to_response(version)

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_plan_version(
        client_ref: str,
        payload: create_schema,
        db: Session = Depends(get_db),
        trainer=Depends(require_trainer),
    ):
        """Trainer-only. isActive=true replaces the client's current plan."""
        try:
            client_id = int(client_ref)
        except ValueError:
            raise NotFoundError("Client not found or not authorized")
        if get_client_for_trainer(db, trainer.id, client_id) is None:
            raise NotFoundError("Client not found or not authorized")

        version = store.create_version(
            db,
            client_id=client_id,
            trainer_id=trainer.id,
            title=payload.title,
            description=payload.description,
            items=payload.items,
            make_active=payload.is_active,
        )
        return store.to_response(version)

    return router


diet_router = build_plan_router(DIET)
workout_router = build_plan_router(WORKOUT)

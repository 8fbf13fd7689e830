from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coachtrack.api.auth import require_trainer
from coachtrack.crud.plan_kinds import PlanKind, DIET, WORKOUT
from coachtrack.crud.plan_version import get_store
from coachtrack.crud.template import get_template_store
from coachtrack.database import get_db
from coachtrack.exceptions import NotFoundError
from coachtrack.schemas.template import TemplateSummary, TemplateAssignRequest
from coachtrack.services import template_service


def build_template_router(kind: PlanKind) -> APIRouter:
    """/api/templates/{kind} CRUD plus instantiation into a client's plan."""
    templates = get_template_store(kind.name)
    create_schema = kind.template_create_schema
    response_schema = kind.template_response_schema

    router = APIRouter(prefix=f"/api/templates/{kind.name}", tags=["Templates"])

    @router.get("", response_model=List[TemplateSummary])
    def list_templates(db: Session = Depends(get_db), trainer=Depends(require_trainer)):
        return templates.list_for_trainer(db, trainer.id)

    @router.post("", response_model=response_schema, status_code=status.HTTP_201_CREATED)
    def create_template(payload: create_schema, db: Session = Depends(get_db), trainer=Depends(require_trainer)):
        template = templates.create(db, trainer.id, payload.name, payload.description, payload.items)
        return templates.to_response(template)

    @router.get("/{template_id}", response_model=response_schema)
    def get_template(template_id: int, db: Session = Depends(get_db), trainer=Depends(require_trainer)):
        template = templates.get(db, trainer.id, template_id)
        if template is None:
            raise NotFoundError("Template not found")
        return templates.to_response(template)

    @router.put("/{template_id}", response_model=response_schema)
    def update_template(
        template_id: int,
        payload: create_schema,
        db: Session = Depends(get_db),
        trainer=Depends(require_trainer),
    ):
        template = templates.update(db, trainer.id, template_id, payload.name, payload.description, payload.items)
        return templates.to_response(template)

    @router.delete("/{template_id}")
    def delete_template(template_id: int, db: Session = Depends(get_db), trainer=Depends(require_trainer)):
        deleted_id = templates.delete(db, trainer.id, template_id)
        return {"message": "Template deleted successfully", "id": deleted_id}

    @router.post("/{template_id}/assign", response_model=kind.response_schema, status_code=status.HTTP_201_CREATED)
    def assign_template(
        template_id: int,
        body: TemplateAssignRequest,
        db: Session = Depends(get_db),
        trainer=Depends(require_trainer),
    ):
        version = template_service.instantiate(
            db, kind, trainer.id, template_id, body.client_id,
            make_active=body.is_active, title=body.title,
        )
        return get_store(kind.name).to_response(version)

    return router


diet_template_router = build_template_router(DIET)
workout_template_router = build_template_router(WORKOUT)

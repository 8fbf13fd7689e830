import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from coachtrack.crud.plan_kinds import PlanKind, DIET, WORKOUT
from coachtrack.crud.plan_version import item_columns
from coachtrack.database import transaction
from coachtrack.exceptions import NotFoundError
from coachtrack.schemas.template import TemplateSummary

logger = logging.getLogger(__name__)

"""
Template CRUD
-------------
Trainer-owned, date-less plan blueprints. Updates replace every child
item in one transaction; deletes cascade to the items.
"""

MACRO_FIELDS = ("protein_g", "carbs_g", "fat_g", "calories_kcal")


def round_macros(columns: dict) -> dict:
    for field in MACRO_FIELDS:
        if field in columns:
            columns[field] = round(float(columns[field] or 0), 2)
    return columns


class TemplateStore:

    def __init__(self, kind: PlanKind):
        self.kind = kind
        self.model = kind.template_model
        self.item_model = kind.template_item_model

    def _build_items(self, items: Iterable) -> list:
        return [
            self.item_model(order_index=index, **round_macros(item_columns(item)))
            for index, item in enumerate(items)
        ]

    def list_for_trainer(self, db: Session, trainer_id: int) -> List[TemplateSummary]:
        Template, Item = self.model, self.item_model
        counts = (
            db.query(Item.template_id, func.count(Item.id).label("items_count"))
            .group_by(Item.template_id)
            .subquery()
        )
        rows = (
            db.query(Template, func.coalesce(counts.c.items_count, 0))
            .outerjoin(counts, counts.c.template_id == Template.id)
            .filter(Template.trainer_id == trainer_id)
            .order_by(Template.created_at.desc(), Template.id.desc())
            .all()
        )
        return [
            TemplateSummary.model_validate(template, from_attributes=True).model_copy(
                update={"items_count": count}
            )
            for template, count in rows
        ]

    def get(self, db: Session, trainer_id: int, template_id: int):
        """Ownership-scoped: None for another trainer's template."""
        return (
            db.query(self.model)
            .options(selectinload(self.model.items))
            .filter(self.model.id == template_id, self.model.trainer_id == trainer_id)
            .first()
        )

    def create(self, db: Session, trainer_id: int, name: str, description: Optional[str], items: Iterable):
        template = self.model(
            trainer_id=trainer_id,
            name=name,
            description=description,
            items=self._build_items(items),
        )
        with transaction(db, f"Failed to create {self.kind.name} template"):
            db.add(template)
        db.refresh(template)
        logger.info(f"Trainer {trainer_id} created {self.kind.name} template {template.id}")
        return template

    def update(self, db: Session, trainer_id: int, template_id: int, name: str,
               description: Optional[str], items: Iterable):
        """Rename and replace all items; NotFoundError when missing or not owned."""
        with transaction(db, f"Failed to update {self.kind.name} template"):
            template = (
                db.query(self.model)
                .filter(self.model.id == template_id, self.model.trainer_id == trainer_id)
                .with_for_update()
                .first()
            )
            if template is None:
                raise NotFoundError("Template not found or access denied")

            template.name = name
            template.description = description
            template.updated_at = datetime.utcnow()

            # Delete-all then reinsert; flush the deletes first so the new
            # rows can reuse order indices
            template.items.clear()
            db.flush()
            template.items.extend(self._build_items(items))

        db.refresh(template)
        return template

    def delete(self, db: Session, trainer_id: int, template_id: int) -> int:
        with transaction(db, f"Failed to delete {self.kind.name} template"):
            template = (
                db.query(self.model)
                .filter(self.model.id == template_id, self.model.trainer_id == trainer_id)
                .first()
            )
            if template is None:
                raise NotFoundError("Template not found")
            db.delete(template)
        logger.info(f"Trainer {trainer_id} deleted {self.kind.name} template {template_id}")
        return template_id

    def to_response(self, template):
        return self.kind.template_response_schema.model_validate(template, from_attributes=True)


diet_templates = TemplateStore(DIET)
workout_templates = TemplateStore(WORKOUT)

TEMPLATE_STORES = {"diet": diet_templates, "workout": workout_templates}


def get_template_store(kind_name: str) -> TemplateStore:
    return TEMPLATE_STORES[kind_name]

import logging
from typing import Optional

from sqlalchemy.orm import Session

from coachtrack.crud.plan_kinds import PlanKind
from coachtrack.crud.plan_version import get_store
from coachtrack.crud.template import get_template_store
from coachtrack.crud.user import get_client_for_trainer
from coachtrack.exceptions import NotFoundError

logger = logging.getLogger(__name__)

# Columns copied from a template item onto a plan item
COPY_EXCLUDE = {"id", "order_index", "template_id"}


def _item_values(template_item) -> dict:
    return {
        attr.key: getattr(template_item, attr.key)
        for attr in template_item.__mapper__.column_attrs
        if attr.key not in COPY_EXCLUDE
    }


def instantiate(
    db: Session,
    kind: PlanKind,
    trainer_id: int,
    template_id: int,
    client_id: int,
    make_active: bool = True,
    title: Optional[str] = None,
):
    """Copy a trainer's template into a new plan version for one of their clients."""
    template = get_template_store(kind.name).get(db, trainer_id, template_id)
    if template is None:
        raise NotFoundError("Template not found")
    if get_client_for_trainer(db, trainer_id, client_id) is None:
        raise NotFoundError("Client not found or not authorized")

    version = get_store(kind.name).create_version(
        db,
        client_id=client_id,
        trainer_id=trainer_id,
        title=title or template.name,
        description=template.description,
        items=[_item_values(item) for item in template.items],
        make_active=make_active,
    )
    logger.info(f"Instantiated {kind.name} template {template_id} as version {version.id} for client {client_id}")
    return version

"""
Hierarchy Resolver - finds the parent entity whose hours bound a child's hours.

Edges (child field → parent):
  user.clinic_id            → clinic
  clinic.complex_id         → complex
  complex.organization_id   → organization
  organization              → (root, no parent)
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type

from sqlmodel import Session, SQLModel

from app.exceptions import BadRequestError, NotFoundError
from app.models import Clinic, Complex, Organization, User
from app.utils import messages
from app.utils.working_hours import ENTITY_TYPES

ENTITY_MODELS: Dict[str, Type[SQLModel]] = {
    "organization": Organization,
    "complex": Complex,
    "clinic": Clinic,
    "user": User,
}

# entity_type -> (parent_type, parent reference field); None marks the root
HIERARCHY_EDGES: Dict[str, Optional[Tuple[str, str]]] = {
    "user": ("clinic", "clinic_id"),
    "clinic": ("complex", "complex_id"),
    "complex": ("organization", "organization_id"),
    "organization": None,
}


@dataclass(frozen=True)
class ParentRef:
    entity_type: str
    entity_id: int


def require_entity_type(entity_type: str) -> str:
    if entity_type not in ENTITY_TYPES:
        raise BadRequestError(messages.invalid_entity_type(entity_type), code="INVALID_ENTITY_TYPE")
    return entity_type


def get_entity_or_404(session: Session, entity_type: str, entity_id: int) -> SQLModel:
    model = ENTITY_MODELS[require_entity_type(entity_type)]
    entity = session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(
            messages.entity_not_found(entity_type, entity_id),
            code=f"{entity_type.upper()}_NOT_FOUND",
        )
    return entity


def resolve_parent(session: Session, entity_type: str, entity_id: int) -> Optional[ParentRef]:
    """
    Resolve the parent of an entity.

    Returns:
        ParentRef, or None for organizations and for children whose parent
        reference is unset (e.g. a doctor not yet assigned to a clinic).

    Raises:
        BadRequestError: unknown entity type, or a parent reference that is not a positive id
        NotFoundError: the entity, or the parent it points at, does not exist
    """
    entity = get_entity_or_404(session, entity_type, entity_id)

    edge = HIERARCHY_EDGES[entity_type]
    if edge is None:
        return None

    parent_type, field = edge
    parent_id = getattr(entity, field)
    if parent_id is None:
        return None

    if isinstance(parent_id, bool) or not isinstance(parent_id, int) or parent_id <= 0:
        raise BadRequestError(
            messages.malformed_parent_reference(entity_type, field),
            code="MALFORMED_PARENT_REFERENCE",
        )

    if session.get(ENTITY_MODELS[parent_type], parent_id) is None:
        raise NotFoundError(messages.entity_not_found(parent_type, parent_id), code="PARENT_NOT_FOUND")

    return ParentRef(entity_type=parent_type, entity_id=parent_id)


def get_entity_name(session: Session, entity_type: str, entity_id: int) -> str:
    """Display name for messages; falls back to '<Type> <id>' when the row is gone."""
    entity = session.get(ENTITY_MODELS[require_entity_type(entity_type)], entity_id)
    if entity is None:
        return f"{entity_type.capitalize()} {entity_id}"
    if isinstance(entity, User):
        return entity.full_name
    return entity.name

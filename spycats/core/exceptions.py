from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterator

from sqlalchemy.exc import SQLAlchemyError


class ErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    business_rule = "business_rule"
    conflict = "conflict"
    dependency = "dependency"
    store = "store"


class AppError(Exception):
    """Base pour les erreurs métier applicatives.

    Porte une catégorie (``kind``), un code stable et un status HTTP suggéré.
    Le mapping HTTP se fait sur la classe, jamais sur le texte du message.
    """

    kind: ErrorKind = ErrorKind.store
    code: str = "app_error"
    http_status: int = 500

    def to_dict(self) -> Dict[str, Any]:
        return {"error": str(self)}


class BadRequestError(AppError):
    kind = ErrorKind.validation
    code = "bad_request"
    http_status = 400


class InvalidBreed(BadRequestError):
    code = "invalid_breed"

    def __init__(self, breed: str):
        super().__init__(f"invalid cat breed: {breed}")
        self.breed = breed


class NotFoundError(AppError):
    kind = ErrorKind.not_found
    code = "not_found"
    http_status = 404


class BusinessRuleViolation(AppError):
    kind = ErrorKind.business_rule
    code = "business_rule_violation"
    http_status = 400


class MissionAlreadyComplete(BusinessRuleViolation):
    code = "mission_already_complete"

    def __init__(self, mission_id: int):
        super().__init__("cannot add target to completed mission")
        self.mission_id = mission_id


class CannotDeleteCompleted(BusinessRuleViolation):
    code = "target_completed"

    def __init__(self, target_id: int):
        super().__init__("cannot delete completed target")
        self.target_id = target_id


class ResourceConflict(AppError):
    kind = ErrorKind.conflict
    code = "conflict"
    http_status = 409


class MissionAssigned(ResourceConflict):
    code = "mission_assigned"

    def __init__(self, mission_id: int):
        super().__init__("cannot delete mission assigned to a cat")
        self.mission_id = mission_id


class DependencyError(AppError):
    kind = ErrorKind.dependency
    code = "dependency_error"
    http_status = 502


class RegistryUnavailable(DependencyError):
    code = "registry_unavailable"


class PersistenceError(AppError):
    kind = ErrorKind.store
    code = "persistence_error"
    http_status = 500


@contextmanager
def store_errors(message: str) -> Iterator[None]:
    """Convertit les erreurs SQLAlchemy en ``PersistenceError``."""
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(message) from e

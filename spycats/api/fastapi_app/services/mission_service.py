from __future__ import annotations

import logging
from typing import List, Optional

from spycats.core.exceptions import (
    BusinessRuleViolation,
    CannotDeleteCompleted,
    MissionAlreadyComplete,
    MissionAssigned,
    NotFoundError,
    PersistenceError,
    store_errors,
)
from spycats.core.storage.cats_repository import CatRepository
from spycats.core.storage.db_models import Mission, Target
from spycats.core.storage.missions_repository import MissionRepository, MissionWithTargets
from ..schemas.missions import MissionCreate, TargetCreate, TargetUpdate

logger = logging.getLogger("spycats.missions")


class MissionService:
    """Règles métier des missions et de leurs cibles.

    - pas de nouvelle cible sur une mission terminée ;
    - une cible terminée ne se supprime pas ;
    - une mission assignée à un chat ne se supprime pas ;
    - on n'assigne qu'un chat existant.
    """

    def __init__(self, repo: MissionRepository, cats: CatRepository):
        self.repo = repo
        self.cats = cats

    async def _ensure_cat(self, cat_id: int) -> None:
        with store_errors("failed to check cat"):
            found = await self.cats.exists(cat_id)
        if not found:
            raise BusinessRuleViolation(f"cannot assign unknown cat with id {cat_id}")

    async def create(self, payload: MissionCreate) -> MissionWithTargets:
        if payload.cat_id is not None:
            await self._ensure_cat(payload.cat_id)

        mission = Mission(cat_id=payload.cat_id, name=payload.name, is_complete=payload.is_complete)
        targets = [Target(mission_id=0, **t.model_dump()) for t in payload.targets]
        with store_errors("failed to create mission"):
            mission_id = await self.repo.create_with_targets(mission, targets)
            record = await self.repo.get(mission_id)
        if record is None:
            # Supprimée entre l'écriture et la relecture
            raise PersistenceError("failed to create mission")
        logger.info(
            "mission created with %d target(s)", len(targets), extra={"mission_id": mission_id}
        )
        return record

    async def list(self) -> List[MissionWithTargets]:
        with store_errors("failed to fetch missions"):
            return await self.repo.list_all()

    async def get(self, mission_id: int) -> Optional[MissionWithTargets]:
        with store_errors("failed to fetch mission"):
            return await self.repo.get(mission_id)

    async def mark_complete(self, mission_id: int) -> None:
        with store_errors("failed to complete mission"):
            affected = await self.repo.mark_complete(mission_id)
        if affected == 0:
            raise NotFoundError("mission not found")

    async def delete(self, mission_id: int) -> None:
        with store_errors("failed to delete mission"):
            record = await self.repo.get(mission_id)
            if record is None:
                raise NotFoundError("mission not found")
            if record.mission.cat_id is not None:
                raise MissionAssigned(mission_id)
            affected = await self.repo.delete_unassigned(mission_id)
        if affected == 0:
            # Assignée (ou supprimée) entre la vérification et la suppression
            raise MissionAssigned(mission_id)

    async def assign_cat(self, mission_id: int, cat_id: int) -> None:
        with store_errors("failed to assign cat"):
            mission = await self.repo.get(mission_id)
        if mission is None:
            raise NotFoundError("mission not found")
        await self._ensure_cat(cat_id)
        with store_errors("failed to assign cat"):
            affected = await self.repo.assign_cat(mission_id, cat_id)
        if affected == 0:
            raise NotFoundError("mission not found")
        logger.info("cat assigned", extra={"mission_id": mission_id, "cat_id": cat_id})

    # ---------- Targets ----------

    async def add_target(self, mission_id: int, payload: TargetCreate) -> int:
        with store_errors("failed to add target"):
            record = await self.repo.get(mission_id)
        if record is None:
            raise NotFoundError("mission not found")
        if record.mission.is_complete:
            raise MissionAlreadyComplete(mission_id)

        # Une cible ajoutée après coup démarre toujours « en cours »
        target = Target(
            mission_id=mission_id,
            name=payload.name,
            country=payload.country,
            notes=payload.notes,
        )
        with store_errors("failed to add target"):
            return await self.repo.create_target(target)

    async def update_target(self, target_id: int, payload: TargetUpdate) -> None:
        values = payload.model_dump(exclude_unset=True, exclude_none=True)
        with store_errors("failed to update target"):
            affected = await self.repo.update_target(target_id, values)
        if affected == 0:
            raise NotFoundError("target not found")

    async def delete_target(self, target_id: int) -> None:
        with store_errors("failed to delete target"):
            affected = await self.repo.delete_pending_target(target_id)
            if affected:
                return
            target = await self.repo.get_target(target_id)
        if target is None:
            raise NotFoundError("target not found")
        raise CannotDeleteCompleted(target_id)

from __future__ import annotations

import logging
from typing import List, Optional

from spycats.core.exceptions import InvalidBreed, NotFoundError, store_errors
from spycats.core.storage.cats_repository import CatRepository
from spycats.core.storage.db_models import Cat
from ..clients.breeds import BreedRegistry
from ..schemas.cats import CatCreate

logger = logging.getLogger("spycats.cats")


class CatService:
    def __init__(self, repo: CatRepository, registry: BreedRegistry):
        self.repo = repo
        self.registry = registry

    async def create(self, payload: CatCreate) -> int:
        """
        Valide la race auprès du registre externe puis persiste le chat.
        Race inconnue -> InvalidBreed ; registre en échec -> RegistryUnavailable.
        """
        if not await self.registry.exists(payload.breed):
            logger.info("cat rejected: unknown breed", extra={"breed": payload.breed})
            raise InvalidBreed(payload.breed)

        cat = Cat(**payload.model_dump())
        with store_errors("failed to create cat"):
            cat_id = await self.repo.create(cat)
        logger.info("cat created", extra={"cat_id": cat_id, "breed": cat.breed})
        return cat_id

    async def list(self) -> List[Cat]:
        with store_errors("failed to get cats"):
            return await self.repo.list_all()

    async def get(self, cat_id: int) -> Optional[Cat]:
        with store_errors("failed to get cat"):
            return await self.repo.get(cat_id)

    async def update_salary(self, cat_id: int, salary: float) -> None:
        with store_errors("failed to update salary"):
            affected = await self.repo.update_salary(cat_id, salary)
        if affected == 0:
            raise NotFoundError(f"cat not found with id {cat_id}")

    async def delete(self, cat_id: int) -> None:
        # Suppression idempotente : un id inconnu n'est pas une erreur
        with store_errors("failed to delete cat"):
            affected = await self.repo.delete(cat_id)
        if affected == 0:
            logger.info("delete on unknown cat ignored", extra={"cat_id": cat_id})

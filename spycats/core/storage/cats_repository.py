from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from spycats.core.storage.db_models import Cat


class CatRepository:
    """Accès à la table ``cats`` via la session de la requête."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, cat: Cat) -> int:
        self.session.add(cat)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return cat.id

    async def list_all(self) -> List[Cat]:
        rows = await self.session.execute(select(Cat).order_by(Cat.id))
        return list(rows.scalars().all())

    async def get(self, cat_id: int) -> Optional[Cat]:
        # None = absent ; une erreur de requête remonte telle quelle
        return await self.session.get(Cat, cat_id)

    async def exists(self, cat_id: int) -> bool:
        row = await self.session.execute(select(Cat.id).where(Cat.id == cat_id).limit(1))
        return row.scalar_one_or_none() is not None

    async def update_salary(self, cat_id: int, salary: float) -> int:
        """Met à jour le salaire et renvoie le nombre de lignes touchées."""
        res = await self.session.execute(
            update(Cat)
            .where(Cat.id == cat_id)
            .values(salary=salary)
        )
        await self.session.commit()
        return res.rowcount

    async def delete(self, cat_id: int) -> int:
        res = await self.session.execute(
            delete(Cat).where(Cat.id == cat_id)
        )
        await self.session.commit()
        return res.rowcount

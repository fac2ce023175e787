from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from spycats.core.storage.db_models import Mission, Target


@dataclass
class MissionWithTargets:
    """Lecture imbriquée : la mission et ses cibles triées par id."""

    mission: Mission
    targets: List[Target] = field(default_factory=list)


class MissionRepository:
    """
    Accès aux tables ``missions`` et ``targets``.
    Les écritures conditionnelles renvoient le nombre de lignes touchées,
    les lectures renvoient ``None`` quand la ligne n'existe pas.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ---------- Missions ----------

    async def create_with_targets(self, mission: Mission, targets: Iterable[Target]) -> int:
        """Insère la mission et toutes ses cibles dans une SEULE transaction."""
        try:
            self.session.add(mission)
            await self.session.flush()
            for target in targets:
                target.mission_id = mission.id
                self.session.add(target)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return mission.id

    async def get(self, mission_id: int) -> Optional[MissionWithTargets]:
        mission = await self.session.get(Mission, mission_id, populate_existing=True)
        if mission is None:
            return None
        rows = await self.session.execute(
            select(Target)
            .where(Target.mission_id == mission_id)
            .order_by(Target.id)
            .execution_options(populate_existing=True)
        )
        return MissionWithTargets(mission=mission, targets=list(rows.scalars().all()))

    async def list_all(self) -> List[MissionWithTargets]:
        missions = (
            await self.session.execute(select(Mission).order_by(Mission.id))
        ).scalars().all()
        if not missions:
            return []
        rows = await self.session.execute(
            select(Target)
            .where(Target.mission_id.in_([m.id for m in missions]))
            .order_by(Target.id)
        )
        by_mission: Dict[int, List[Target]] = defaultdict(list)
        for t in rows.scalars().all():
            by_mission[t.mission_id].append(t)
        return [MissionWithTargets(mission=m, targets=by_mission.get(m.id, [])) for m in missions]

    async def mark_complete(self, mission_id: int) -> int:
        res = await self.session.execute(
            update(Mission).where(Mission.id == mission_id).values(is_complete=True)
        )
        await self.session.commit()
        return res.rowcount

    async def assign_cat(self, mission_id: int, cat_id: int) -> int:
        res = await self.session.execute(
            update(Mission).where(Mission.id == mission_id).values(cat_id=cat_id)
        )
        await self.session.commit()
        return res.rowcount

    async def delete_unassigned(self, mission_id: int) -> int:
        # Les cibles partent avec la mission (ON DELETE CASCADE)
        res = await self.session.execute(
            delete(Mission).where(Mission.id == mission_id, Mission.cat_id.is_(None))
        )
        await self.session.commit()
        return res.rowcount

    # ---------- Targets ----------

    async def create_target(self, target: Target) -> int:
        self.session.add(target)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return target.id

    async def get_target(self, target_id: int) -> Optional[Target]:
        return await self.session.get(Target, target_id, populate_existing=True)

    async def update_target(self, target_id: int, values: Dict[str, Any]) -> int:
        """Mise à jour partielle : seules les colonnes présentes dans ``values`` changent."""
        if not values:
            return 1 if await self.get_target(target_id) is not None else 0
        res = await self.session.execute(
            update(Target).where(Target.id == target_id).values(**values)
        )
        await self.session.commit()
        return res.rowcount

    async def delete_pending_target(self, target_id: int) -> int:
        res = await self.session.execute(
            delete(Target).where(Target.id == target_id, Target.is_complete.is_(False))
        )
        await self.session.commit()
        return res.rowcount

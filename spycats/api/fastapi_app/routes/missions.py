from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from spycats.core.exceptions import NotFoundError
from ..deps import get_mission_service
from ..schemas.common import ERROR_RESPONSES, ErrorOut, MessageOut
from ..schemas.missions import (
    AssignCatRequest,
    MissionCreate,
    MissionOut,
    TargetCreate,
    TargetUpdate,
)
from ..services.mission_service import MissionService

router = APIRouter(prefix="/missions", tags=["missions"], responses=ERROR_RESPONSES)


@router.post("", response_model=MissionOut, status_code=status.HTTP_201_CREATED)
async def create_mission(payload: MissionCreate, service: MissionService = Depends(get_mission_service)):
    record = await service.create(payload)
    return MissionOut.from_record(record)


@router.get("", response_model=List[MissionOut])
async def list_missions(service: MissionService = Depends(get_mission_service)):
    return [MissionOut.from_record(r) for r in await service.list()]


# Les routes /targets/... sont déclarées avant /{mission_id} pour ne pas être
# capturées par le paramètre de chemin.
@router.patch("/targets/{target_id}", response_model=MessageOut)
async def update_target(
    target_id: int,
    payload: TargetUpdate,
    service: MissionService = Depends(get_mission_service),
):
    await service.update_target(target_id, payload)
    return MessageOut(message="target updated")


@router.delete("/targets/{target_id}", response_model=MessageOut)
async def delete_target(target_id: int, service: MissionService = Depends(get_mission_service)):
    await service.delete_target(target_id)
    return MessageOut(message="target deleted")


@router.get("/{mission_id}", response_model=MissionOut)
async def get_mission(mission_id: int, service: MissionService = Depends(get_mission_service)):
    record = await service.get(mission_id)
    if record is None:
        raise NotFoundError("mission not found")
    return MissionOut.from_record(record)


@router.put("/{mission_id}/assign", response_model=MessageOut)
async def assign_cat(
    mission_id: int,
    payload: AssignCatRequest,
    service: MissionService = Depends(get_mission_service),
):
    await service.assign_cat(mission_id, payload.cat_id)
    return MessageOut(message="cat assigned successfully")


@router.delete(
    "/{mission_id}",
    response_model=MessageOut,
    responses={409: {"model": ErrorOut, "description": "Mission assignée à un chat"}},
)
async def delete_mission(mission_id: int, service: MissionService = Depends(get_mission_service)):
    await service.delete(mission_id)
    return MessageOut(message="mission deleted")


@router.patch("/{mission_id}/complete", response_model=MessageOut)
async def mark_mission_complete(mission_id: int, service: MissionService = Depends(get_mission_service)):
    await service.mark_complete(mission_id)
    return MessageOut(message="mission marked complete")


@router.post("/{mission_id}/targets", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def add_target(
    mission_id: int,
    payload: TargetCreate,
    service: MissionService = Depends(get_mission_service),
):
    await service.add_target(mission_id, payload)
    return MessageOut(message="target added")

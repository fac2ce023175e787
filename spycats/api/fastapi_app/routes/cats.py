from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from spycats.core.exceptions import NotFoundError
from ..deps import get_cat_service
from ..schemas.cats import CatCreate, CatCreated, CatOut, SalaryUpdate
from ..schemas.common import ERROR_RESPONSES, MessageOut
from ..services.cat_service import CatService

router = APIRouter(prefix="/cats", tags=["cats"], responses=ERROR_RESPONSES)


@router.post("", response_model=CatCreated, status_code=status.HTTP_201_CREATED)
async def create_cat(payload: CatCreate, service: CatService = Depends(get_cat_service)):
    cat_id = await service.create(payload)
    return CatCreated(id=cat_id)


@router.get("", response_model=List[CatOut])
async def list_cats(service: CatService = Depends(get_cat_service)):
    rows = await service.list()
    return [CatOut.model_validate(r) for r in rows]


@router.get("/{cat_id}", response_model=CatOut)
async def get_cat(cat_id: int, service: CatService = Depends(get_cat_service)):
    cat = await service.get(cat_id)
    if cat is None:
        raise NotFoundError(f"cat not found with id {cat_id}")
    return CatOut.model_validate(cat)


@router.patch("/{cat_id}/salary", response_model=MessageOut)
async def update_salary(
    cat_id: int,
    payload: SalaryUpdate,
    service: CatService = Depends(get_cat_service),
):
    await service.update_salary(cat_id, payload.salary)
    return MessageOut(message="salary updated successfully")


@router.delete("/{cat_id}", response_model=MessageOut)
async def delete_cat(cat_id: int, service: CatService = Depends(get_cat_service)):
    await service.delete(cat_id)
    return MessageOut(message="cat deleted")

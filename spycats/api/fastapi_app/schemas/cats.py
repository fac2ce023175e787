from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CatCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50, examples=["Whiskers"])
    years_of_experience: int = Field(..., ge=0, le=50, examples=[5])
    breed: str = Field(..., min_length=1, examples=["Siamese"])
    salary: float = Field(..., ge=0, allow_inf_nan=False, examples=[50000.0])


class SalaryUpdate(BaseModel):
    salary: float = Field(..., ge=0, allow_inf_nan=False, examples=[60000.0])


class CatOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    years_of_experience: int
    breed: str
    salary: float


class CatCreated(BaseModel):
    id: int

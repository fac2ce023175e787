from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from spycats.core.storage.missions_repository import MissionWithTargets


class TargetCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Agent Smith"])
    country: str = Field(..., min_length=1, examples=["Russia"])
    notes: str = Field(default="", examples=["High priority target"])
    is_complete: StrictBool = False


class MissionCreate(BaseModel):
    cat_id: Optional[int] = Field(default=None, examples=[5])
    name: str = Field(..., min_length=1, examples=["Operation Stealth"])
    # Champ obligatoire ; une liste vide reste acceptée
    targets: List[TargetCreate]
    is_complete: StrictBool = False


class TargetUpdate(BaseModel):
    """Mise à jour partielle : les champs absents gardent leur valeur stockée."""

    is_complete: Optional[StrictBool] = Field(default=None, examples=[True])
    notes: Optional[str] = Field(default=None, examples=["Mission accomplished"])


class AssignCatRequest(BaseModel):
    cat_id: int = Field(..., ge=1, examples=[5])


class TargetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    mission_id: int
    name: str
    country: str
    notes: str
    is_complete: bool


class MissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cat_id: Optional[int] = None
    name: str
    is_complete: bool
    targets: List[TargetOut] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: MissionWithTargets) -> "MissionOut":
        m = record.mission
        return cls(
            id=m.id,
            cat_id=m.cat_id,
            name=m.name,
            is_complete=m.is_complete,
            targets=[TargetOut.model_validate(t) for t in record.targets],
        )

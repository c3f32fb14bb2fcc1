from typing import List

from pydantic import BaseModel, Field


class RepairResult(BaseModel):
    success: bool
    message: str
    updated_count: int
    batches: List[int] = Field(default_factory=list, description="Size of each committed batch")


class ClearSchoolDataRequest(BaseModel):
    """The school's own UDISE code, repeated to confirm the deletion."""

    udise: str = Field(..., min_length=11, max_length=11)


class DeleteResult(BaseModel):
    success: bool
    message: str
    deleted_count: int
    batches: List[int] = Field(default_factory=list, description="Size of each committed batch")

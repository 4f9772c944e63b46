# src/campus_hub/schemas/paper.py
"""Research paper Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class PaperCreate(BaseModel):
    """Schema for registering a paper."""

    title: str = Field(..., min_length=1, max_length=300)
    abstract: str = Field("", max_length=5000)
    authors: list[str] = Field(..., min_length=1, description="Author names as printed")
    tags: list[str] = Field(default_factory=list, max_length=20)
    doi: str | None = Field(None, max_length=100)
    pdf_url: str | None = None
    looking_for_collaborators: bool = False
    linked_user_ids: list[int] = Field(
        default_factory=list, description="Platform users who co-authored the paper"
    )


class PaperUpdate(BaseModel):
    """Partial paper update; omitted fields are left untouched."""

    title: str | None = Field(None, max_length=300)
    abstract: str | None = Field(None, max_length=5000)
    authors: list[str] | None = None
    tags: list[str] | None = None
    doi: str | None = None
    pdf_url: str | None = None
    looking_for_collaborators: bool | None = None


class PaperResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uploaded_by: int
    title: str
    abstract: str
    authors: list[str]
    doi: str | None
    pdf_url: str | None
    tags: list[str]
    citation_count: int
    looking_for_collaborators: bool
    created_at: datetime


class PaperUploader(BaseModel):
    id: int
    name: str
    profile_picture: str | None = None


class PaperWithUploader(BaseModel):
    paper: PaperResponse
    uploader: PaperUploader | None = None


class PaperDetail(PaperWithUploader):
    """A paper with the platform users linked as its authors."""

    linked_authors: list[UserSummary]

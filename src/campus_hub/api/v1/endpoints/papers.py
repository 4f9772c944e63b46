# src/campus_hub/api/v1/endpoints/papers.py
"""Research paper endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, raise_http, run_write
from campus_hub.models import Paper
from campus_hub.schemas.paper import (
    PaperCreate,
    PaperDetail,
    PaperResponse,
    PaperUpdate,
    PaperWithUploader,
)
from campus_hub.services import papers as paper_service
from campus_hub.services.errors import CampusError

router = APIRouter(prefix="/papers", tags=["papers"])


@router.post("/", response_model=PaperResponse, status_code=status.HTTP_201_CREATED)
async def upload_paper(
    paper_data: PaperCreate, current_user: CurrentUserDep, db: SessionDep
) -> Paper:
    """Register a paper and link its co-authors."""
    paper = run_write(
        db,
        lambda: paper_service.upload_paper(
            db,
            current_user,
            title=paper_data.title,
            abstract=paper_data.abstract,
            authors=paper_data.authors,
            tags=paper_data.tags,
            doi=paper_data.doi,
            pdf_url=paper_data.pdf_url,
            looking_for_collaborators=paper_data.looking_for_collaborators,
            linked_user_ids=paper_data.linked_user_ids,
        ),
    )
    db.refresh(paper)
    return paper


@router.get("/", response_model=list[PaperWithUploader])
async def search_papers(
    db: SessionDep,
    q: str | None = None,
    tag: str | None = None,
    limit: int = Query(default=paper_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> list[dict[str, Any]]:
    """Search papers by title, abstract, authors or tags."""
    return paper_service.search_papers(db, q, tag, limit)


@router.get("/collaborations", response_model=list[PaperWithUploader])
async def collaboration_opportunities(
    db: SessionDep,
    limit: int = Query(default=paper_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> list[dict[str, Any]]:
    return paper_service.get_collaboration_opportunities(db, limit)


@router.get("/by-user/{user_id}", response_model=list[PaperResponse])
async def user_papers(user_id: int, db: SessionDep) -> list[Paper]:
    return paper_service.get_user_papers(db, user_id)


@router.get("/{paper_id}", response_model=PaperDetail)
async def get_paper(paper_id: int, db: SessionDep) -> dict[str, Any]:
    try:
        return paper_service.get_paper(db, paper_id)
    except CampusError as exc:
        raise_http(exc)


@router.patch("/{paper_id}", response_model=PaperResponse)
async def update_paper(
    paper_id: int, changes: PaperUpdate, current_user: CurrentUserDep, db: SessionDep
) -> Paper:
    """Edit a paper you uploaded."""
    paper = run_write(
        db,
        lambda: paper_service.update_paper(
            db, current_user, paper_id, **changes.model_dump(exclude_unset=True)
        ),
    )
    db.refresh(paper)
    return paper


@router.delete("/{paper_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_paper(paper_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    """Delete a paper you uploaded together with its author links."""
    run_write(db, lambda: paper_service.delete_paper(db, current_user, paper_id))

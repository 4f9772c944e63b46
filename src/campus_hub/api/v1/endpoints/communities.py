# src/campus_hub/api/v1/endpoints/communities.py
"""Community-related endpoints for the Campus Hub API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Community
from campus_hub.schemas.campus import CommunityCreate, CommunityResponse, MembershipStatus
from campus_hub.services import campus

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=list[CommunityResponse])
async def list_communities(db: SessionDep) -> list[Community]:
    """List all communities."""
    return db.query(Community).order_by(Community.member_count.desc(), Community.id).all()


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(community_id: int, db: SessionDep) -> Community:
    """Get a specific community by ID."""
    community = db.get(Community, community_id)
    if not community:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )
    return community


@router.post("/", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    community_data: CommunityCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Community:
    """Create a new community."""
    community = run_write(
        db,
        lambda: campus.create_community(
            db,
            current_user,
            community_data.slug,
            community_data.name,
            community_data.description,
            community_data.type,
        ),
    )
    db.refresh(community)
    return community


@router.post("/{community_id}/join", response_model=MembershipStatus)
async def join_community(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Join a public community or request access to a private one."""
    result = run_write(db, lambda: campus.join_community(db, current_user, community_id))
    return {"status": result}


@router.post("/{community_id}/members/{user_id}/approve", response_model=MembershipStatus)
async def approve_member(
    community_id: int,
    user_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    run_write(
        db, lambda: campus.approve_join_request(db, current_user, community_id, user_id)
    )
    return {"status": "joined"}


@router.post("/{community_id}/leave", response_model=MembershipStatus)
async def leave_community(
    community_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> dict[str, str]:
    """Leave a community."""
    run_write(db, lambda: campus.leave_community(db, current_user, community_id))
    return {"status": "left"}

# src/campus_hub/api/v1/endpoints/jobs.py
"""Jobs board endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from campus_hub.api.v1.dependencies import CurrentUserDep, SessionDep, run_write
from campus_hub.models import Job, JobApplication
from campus_hub.schemas.campus import (
    JobApplicationCreate,
    JobApplicationResponse,
    JobCreate,
    JobResponse,
)
from campus_hub.services import campus

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/", response_model=list[JobResponse])
async def list_jobs(db: SessionDep) -> list[Job]:
    return db.query(Job).order_by(Job.id.desc()).all()


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int, db: SessionDep) -> Job:
    job = db.get(Job, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job


@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def post_job(body: JobCreate, current_user: CurrentUserDep, db: SessionDep) -> Job:
    job = run_write(
        db,
        lambda: campus.post_job(
            db,
            current_user,
            body.title,
            body.company,
            body.description,
            body.location,
            body.expires_at,
        ),
    )
    db.refresh(job)
    return job


@router.post(
    "/{job_id}/applications",
    response_model=JobApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply(
    job_id: int,
    body: JobApplicationCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> JobApplication:
    """Apply to a job listing."""
    application = run_write(
        db, lambda: campus.apply_to_job(db, current_user, job_id, body.cover_letter)
    )
    db.refresh(application)
    return application


@router.delete("/{job_id}/applications", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw(job_id: int, current_user: CurrentUserDep, db: SessionDep) -> None:
    run_write(db, lambda: campus.withdraw_application(db, current_user, job_id))

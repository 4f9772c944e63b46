"""Research paper registration, co-author links and paper queries."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from campus_hub.models import Paper, PaperAuthor, User
from campus_hub.services import gamification
from campus_hub.services.errors import AuthorizationError, NotFoundError, ValidationError
from campus_hub.services.scheduler import run_after

# Configure logger for this module
logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 300
ABSTRACT_MAX_LENGTH = 5000
DOI_MAX_LENGTH = 100
MAX_TAGS = 20
MAX_LINKED_AUTHORS = 20
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _clean_title(title: str) -> str:
    if not title or not title.strip():
        raise ValidationError("Title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")
    return title.strip()


def _clean_abstract(abstract: str) -> str:
    if len(abstract) > ABSTRACT_MAX_LENGTH:
        raise ValidationError(f"Abstract must not exceed {ABSTRACT_MAX_LENGTH} characters")
    return abstract.strip()


def _clean_authors(authors: list[str]) -> list[str]:
    if not authors:
        raise ValidationError("At least one author is required")
    return list(authors)


def _clean_tags(tags: list[str]) -> list[str]:
    if len(tags) > MAX_TAGS:
        raise ValidationError(f"Maximum {MAX_TAGS} tags allowed")
    return [tag.strip().lower() for tag in tags if tag.strip()]


def _clean_doi(doi: str | None) -> str | None:
    if doi and len(doi) > DOI_MAX_LENGTH:
        raise ValidationError(f"DOI must not exceed {DOI_MAX_LENGTH} characters")
    return (doi or "").strip() or None


def upload_paper(
    db: Session,
    user: User,
    title: str,
    abstract: str,
    authors: list[str],
    tags: list[str],
    doi: str | None = None,
    pdf_url: str | None = None,
    looking_for_collaborators: bool = False,
    linked_user_ids: list[int] | None = None,
) -> Paper:
    """Register a paper and link its platform co-authors.

    The uploader is always linked as an author. Up to
    ``MAX_LINKED_AUTHORS`` other users can be linked; duplicates and the
    uploader's own id are ignored. Reputation and achievement checks for the
    uploader are scheduled.

    Raises:
        ValidationError: If a field is empty or too long, or too many tags or
            co-authors are given.
        NotFoundError: If a linked user does not exist.
    """
    linked_user_ids = linked_user_ids or []
    if len(linked_user_ids) > MAX_LINKED_AUTHORS:
        raise ValidationError(f"Maximum {MAX_LINKED_AUTHORS} co-authors allowed")

    co_author_ids = list(dict.fromkeys(uid for uid in linked_user_ids if uid != user.id))
    if co_author_ids:
        found = {uid for (uid,) in db.query(User.id).filter(User.id.in_(co_author_ids))}
        missing = [uid for uid in co_author_ids if uid not in found]
        if missing:
            raise NotFoundError(f"Co-author not found: {missing[0]}")

    paper = Paper(
        uploaded_by=user.id,
        title=_clean_title(title),
        abstract=_clean_abstract(abstract),
        authors=_clean_authors(authors),
        doi=_clean_doi(doi),
        pdf_url=pdf_url or None,
        tags=_clean_tags(tags),
        citation_count=0,
        looking_for_collaborators=looking_for_collaborators,
    )
    db.add(paper)
    db.flush()

    db.add(PaperAuthor(paper_id=paper.id, user_id=user.id))
    for co_author_id in co_author_ids:
        db.add(PaperAuthor(paper_id=paper.id, user_id=co_author_id))
    db.flush()

    run_after(db, 0, gamification.award_reputation, user_id=user.id, action="paper_uploaded")
    run_after(db, 0, gamification.check_achievements, user_id=user.id)
    return paper


def _owned_paper(db: Session, user: User, paper_id: int, verb: str) -> Paper:
    paper = db.get(Paper, paper_id)
    if paper is None:
        raise NotFoundError("Paper not found")
    if paper.uploaded_by != user.id:
        raise AuthorizationError(f"Only the uploader can {verb} this paper")
    return paper


def update_paper(
    db: Session,
    user: User,
    paper_id: int,
    title: str | None = None,
    abstract: str | None = None,
    authors: list[str] | None = None,
    doi: str | None = None,
    pdf_url: str | None = None,
    tags: list[str] | None = None,
    looking_for_collaborators: bool | None = None,
) -> Paper:
    """Change the given metadata fields; ``None`` leaves a field untouched.

    An empty ``doi`` or ``pdf_url`` clears it.
    """
    paper = _owned_paper(db, user, paper_id, "edit")

    if title is not None:
        paper.title = _clean_title(title)
    if abstract is not None:
        paper.abstract = _clean_abstract(abstract)
    if authors is not None:
        paper.authors = _clean_authors(authors)
    if doi is not None:
        paper.doi = _clean_doi(doi)
    if pdf_url is not None:
        paper.pdf_url = pdf_url or None
    if tags is not None:
        paper.tags = _clean_tags(tags)
    if looking_for_collaborators is not None:
        paper.looking_for_collaborators = looking_for_collaborators
    db.flush()
    return paper


def purge_paper(db: Session, paper: Paper) -> int:
    """Delete a paper and its author links; returns the number of links removed."""
    removed = (
        db.query(PaperAuthor)
        .filter(PaperAuthor.paper_id == paper.id)
        .delete(synchronize_session="fetch")
    )
    db.delete(paper)
    db.flush()
    return removed


def delete_paper(db: Session, user: User, paper_id: int) -> None:
    """Delete the uploader's paper together with its author links."""
    paper = _owned_paper(db, user, paper_id, "delete")
    links = purge_paper(db, paper)
    logger.info("Deleted paper %s and %d author links", paper_id, links)


def _uploader_info(user: User | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "profile_picture": user.profile_picture}


def _with_uploaders(db: Session, papers: list[Paper]) -> list[dict[str, Any]]:
    uploader_ids = {paper.uploaded_by for paper in papers}
    users = {user.id: user for user in db.query(User).filter(User.id.in_(uploader_ids))}
    return [
        {"paper": paper, "uploader": _uploader_info(users.get(paper.uploaded_by))}
        for paper in papers
    ]


def get_paper(db: Session, paper_id: int) -> dict[str, Any]:
    """Return a paper with its uploader and linked platform authors."""
    paper = db.get(Paper, paper_id)
    if paper is None:
        raise NotFoundError("Paper not found")

    linked = (
        db.query(User)
        .join(PaperAuthor, PaperAuthor.user_id == User.id)
        .filter(PaperAuthor.paper_id == paper_id)
        .order_by(PaperAuthor.id)
        .all()
    )
    return {
        "paper": paper,
        "uploader": _uploader_info(db.get(User, paper.uploaded_by)),
        "linked_authors": [
            {
                "id": author.id,
                "name": author.name,
                "username": author.username,
                "profile_picture": author.profile_picture,
            }
            for author in linked
        ],
    }


def _matches(paper: Paper, term: str) -> bool:
    return (
        term in paper.title.lower()
        or term in paper.abstract.lower()
        or any(term in author.lower() for author in paper.authors)
        or any(term in tag for tag in paper.tags)
    )


def search_papers(
    db: Session, query: str | None = None, tag: str | None = None, limit: int = DEFAULT_PAGE_SIZE
) -> list[dict[str, Any]]:
    """Search title, abstract, authors and tags, newest first.

    ``tag`` must match one of the paper's tags exactly.
    """
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    term = (query or "").strip().lower()
    wanted_tag = (tag or "").strip().lower()

    results: list[Paper] = []
    for paper in db.query(Paper).order_by(Paper.id.desc()):
        if term and not _matches(paper, term):
            continue
        if wanted_tag and wanted_tag not in paper.tags:
            continue
        results.append(paper)
        if len(results) >= limit:
            break
    return _with_uploaders(db, results)


def get_user_papers(db: Session, user_id: int) -> list[Paper]:
    """Return papers the user uploaded or is linked to as a co-author, newest first."""
    linked = db.query(PaperAuthor.paper_id).filter(PaperAuthor.user_id == user_id)
    return (
        db.query(Paper)
        .filter(or_(Paper.uploaded_by == user_id, Paper.id.in_(linked)))
        .order_by(Paper.id.desc())
        .all()
    )


def get_collaboration_opportunities(
    db: Session, limit: int = DEFAULT_PAGE_SIZE
) -> list[dict[str, Any]]:
    """Return the newest papers whose uploaders are looking for collaborators."""
    papers = (
        db.query(Paper)
        .filter(Paper.looking_for_collaborators.is_(True))
        .order_by(Paper.id.desc())
        .limit(max(1, min(limit, MAX_PAGE_SIZE)))
        .all()
    )
    return _with_uploaders(db, papers)

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse

from skillpack.prompt import render_skill_context
from skillpack.references import UnknownReferenceError
from skillpack.registry import LoadedSkill, UnknownSkillError, all_skills, get_skill
from skillpack.schemas.skill import (
    ReferenceDocumentOut,
    ReferenceEntryOut,
    SkillManifestOut,
    SkillSummary,
)

log = structlog.get_logger()

router = APIRouter()


def _skill_or_404(name: str) -> LoadedSkill:
    try:
        return get_skill(name)
    except UnknownSkillError as e:
        log.info("skills.not_found", skill=name)
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))


@router.get("", response_model=list[SkillSummary])
async def list_skills():
    return [
        SkillSummary(
            name=s.manifest.name,
            description=s.manifest.description,
            reference_count=len(s.references),
        )
        for s in all_skills()
    ]


@router.get("/{name}", response_model=SkillManifestOut)
async def get_manifest(name: str):
    """Manifest as loaded: trigger description and workflow text verbatim."""
    return SkillManifestOut.from_manifest(_skill_or_404(name).manifest)


@router.get("/{name}/references", response_model=list[ReferenceEntryOut])
async def list_references(name: str):
    skill = _skill_or_404(name)
    return [
        ReferenceEntryOut(identifier=e.identifier, filename=e.filename, summary=e.summary)
        for e in skill.references.entries()
    ]


@router.get("/{name}/references/{identifier}", response_model=ReferenceDocumentOut)
async def get_reference(name: str, identifier: str):
    skill = _skill_or_404(name)
    try:
        doc = skill.references.get(identifier)
    except UnknownReferenceError as e:
        log.info("skills.reference.not_found", skill=name, identifier=identifier)
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return ReferenceDocumentOut.from_document(doc)


@router.get("/{name}/references/{identifier}/raw", response_class=PlainTextResponse)
async def get_reference_raw(name: str, identifier: str):
    skill = _skill_or_404(name)
    try:
        doc = skill.references.get(identifier)
    except UnknownReferenceError as e:
        log.info("skills.reference.not_found", skill=name, identifier=identifier)
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return PlainTextResponse(doc.body, media_type="text/markdown; charset=utf-8")


@router.get("/{name}/context", response_class=PlainTextResponse)
async def get_context(
    name: str,
    ref: Annotated[list[str] | None, Query()] = None,
):
    """Workflow text plus the full body of each ``ref``, in request order."""
    skill = _skill_or_404(name)
    try:
        text = render_skill_context(skill, ref or [])
    except UnknownReferenceError as e:
        log.info("skills.reference.not_found", skill=name, identifier=e.identifier)
        raise HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return PlainTextResponse(text, media_type="text/markdown; charset=utf-8")

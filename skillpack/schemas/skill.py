from __future__ import annotations

from pydantic import BaseModel, Field

from skillpack.skill import ReferenceDocument, SkillManifest


class ReferenceEntryOut(BaseModel):
    identifier: str
    filename: str
    summary: str = ""


class WorkflowSectionOut(BaseModel):
    heading: str
    text: str


class SkillSummary(BaseModel):
    name: str
    description: str
    reference_count: int = 0


class SkillManifestOut(BaseModel):
    name: str
    title: str
    description: str
    trigger_conditions: str
    workflow_sections: list[WorkflowSectionOut] = Field(default_factory=list)
    references: list[ReferenceEntryOut] = Field(default_factory=list)

    @classmethod
    def from_manifest(cls, manifest: SkillManifest) -> SkillManifestOut:
        return cls(
            name=manifest.name,
            title=manifest.title,
            description=manifest.description,
            trigger_conditions=manifest.trigger_conditions,
            workflow_sections=[
                WorkflowSectionOut(heading=s.heading, text=s.text) for s in manifest.workflow_sections
            ],
            references=[
                ReferenceEntryOut(identifier=e.identifier, filename=e.filename, summary=e.summary)
                for e in manifest.reference_index
            ],
        )


class ReferenceDocumentOut(BaseModel):
    identifier: str
    title: str
    body: str = Field(..., description="Full document text, unmodified")

    @classmethod
    def from_document(cls, doc: ReferenceDocument) -> ReferenceDocumentOut:
        return cls(identifier=doc.identifier, title=doc.title, body=doc.body)

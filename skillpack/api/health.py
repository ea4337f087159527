from fastapi import APIRouter

from skillpack.registry import all_skills

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "skills": len(all_skills())}

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "reranking": settings.reranking_available}


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Design Assistant search service is running"

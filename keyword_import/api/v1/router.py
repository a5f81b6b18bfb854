"""API v1 router aggregator."""

from fastapi import APIRouter

from keyword_import.api.v1.keywords.routes import router as keywords_router

api_router = APIRouter()

api_router.include_router(keywords_router, prefix="/keywords", tags=["Keywords"])

from fastapi import APIRouter

from plan_review.api.routes import reviews

api_router = APIRouter()

api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

from fastapi import APIRouter, Depends, Request

from artisanverse.core.rate_limiter import api_rate_limit
from artisanverse.core.utils import generate_response

router = APIRouter(prefix="/api/stats", tags=["stats"], dependencies=[Depends(api_rate_limit)])


@router.get("")
def marketplace_stats(request: Request):
    analytics = request.app.state.user_service.analytics()
    return generate_response(True, {"analytics": analytics}, "Statistics retrieved successfully")

from fastapi import APIRouter, Depends, Request

from artisanverse.core.rate_limiter import api_rate_limit
from artisanverse.core.utils import generate_response

router = APIRouter(prefix="/api/workshops", tags=["workshops"], dependencies=[Depends(api_rate_limit)])


@router.get("")
def list_workshops(request: Request):
    workshops = request.app.state.workshop_service.list_workshops()
    return generate_response(True, workshops, "Workshops retrieved successfully")

"""
Catalog endpoints
=================

GET /api/v1/catalog/routes          -- commuter routes a trip can use
GET /api/v1/catalog/payment-methods -- accepted payment methods
"""

from fastapi import APIRouter, Request

from src.api.middleware import limiter
from src.api.schemas import ApiResponse, RouteResponse
from src.config import settings
from src.domain.catalog import list_routes
from src.domain.enums import PAYMENT_METHODS

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get(
    "/routes",
    response_model=ApiResponse[list[RouteResponse]],
    summary="List valid routes",
)
@limiter.limit(settings.rate_limit)
async def get_routes(request: Request):
    return ApiResponse[list[RouteResponse]](
        data=[RouteResponse.model_validate(r) for r in list_routes()]
    )


@router.get(
    "/payment-methods",
    response_model=ApiResponse[list[str]],
    summary="List valid payment methods",
)
@limiter.limit(settings.rate_limit)
async def get_payment_methods(request: Request):
    return ApiResponse[list[str]](data=list(PAYMENT_METHODS))

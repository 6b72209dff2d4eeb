"""
Seller dashboard endpoints.
"""

from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID

from marketplace.models.user import User
from marketplace.services import PropertyService, SellerService
from marketplace.schemas.common import ApiResponse, error_responses
from marketplace.schemas.property import PropertyResponse
from marketplace.schemas.engagement import SellerAnalytics
from marketplace.routers.properties import to_response
from marketplace.utils.dependencies import get_current_seller_user, get_property_service, get_seller_service


router = APIRouter(prefix="/seller", tags=["Seller"], responses=error_responses(401, 403))


@router.get("/properties", response_model=ApiResponse[List[PropertyResponse]], summary="My listings")
async def my_properties(
    current_user: User = Depends(get_current_seller_user),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[List[PropertyResponse]]:
    properties = await property_service.list_owner_properties(current_user)
    return ApiResponse(data=[to_response(p) for p in properties])


@router.delete(
    "/properties/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Delete one of my listings",
    responses=error_responses(404)
)
async def delete_my_property(
    property_id: UUID,
    current_user: User = Depends(get_current_seller_user),
    property_service: PropertyService = Depends(get_property_service)
) -> ApiResponse[PropertyResponse]:
    property_obj = await property_service.delete_own_property(property_id, current_user)
    return ApiResponse(data=to_response(property_obj), message="Property deleted")


@router.get("/analytics", response_model=ApiResponse[SellerAnalytics], summary="Views and inquiries")
async def analytics(
    current_user: User = Depends(get_current_seller_user),
    seller_service: SellerService = Depends(get_seller_service)
) -> ApiResponse[SellerAnalytics]:
    return ApiResponse(data=await seller_service.get_analytics(current_user))

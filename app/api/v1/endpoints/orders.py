"""
Order Routes
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentUser, require_permission
from app.core.database import get_db
from app.models.user import User
from app.schemas.commerce import AdminOrderResponse, OrderCreate, OrderResponse, OrderStatusUpdate
from app.services import order_service


router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order",
)
async def create_order(
    data: OrderCreate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrderResponse:
    """
    Place an order for one or more courses.
    
    **Flow:**
    1. Price each line from the catalogue
    2. Store the order and clear the cart
    3. Enroll the buyer in every ordered course not yet enrolled
    
    Raises:
        HTTPException: 400 if there are no items.
        HTTPException: 404 if a product does not exist.
    """
    return await order_service.create_order(current_user, data, db)


@router.get(
    "",
    response_model=List[OrderResponse],
    summary="List my orders",
)
async def list_my_orders(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[OrderResponse]:
    return await order_service.get_user_orders(current_user, db)


@router.get(
    "/admin",
    response_model=List[AdminOrderResponse],
    summary="List all orders",
)
async def list_all_orders(
    current_user: Annotated[User, Depends(require_permission("orders", "list_all"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> List[AdminOrderResponse]:
    return await order_service.get_all_orders(db)


@router.patch(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    current_user: Annotated[User, Depends(require_permission("orders", "update_status"))],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> OrderResponse:
    return await order_service.update_order_status(order_id, data.status, db)

"""
Order Service

Placing orders, which also enrolls the buyer in every purchased course.
"""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import OrderStatus
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User
from app.schemas.commerce import OrderCreate
from app.services import cart_service, enrollment_service


logger = logging.getLogger(__name__)


async def get_order_by_id(order_id: int, db: AsyncSession) -> Order:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return order


async def create_order(user: User, data: OrderCreate, db: AsyncSession) -> Order:
    """
    Place an order.
    
    Flow:
    1. Price every line from the catalogue
    2. Store the order and its lines, clear the cart
    3. Enroll the buyer in each ordered course not already enrolled
    
    Raises:
        HTTPException: 400 if there are no items.
        HTTPException: 404 if a product does not exist.
    """
    if not data.items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order items are required",
        )

    user_id = user.id
    product_ids = {item.product_id for item in data.items}
    result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {product.id: product for product in result.scalars().all()}

    missing = sorted(product_ids - products.keys())
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product not found: {missing[0]}",
        )

    lines = [
        OrderItem(
            product_id=item.product_id,
            name=products[item.product_id].name,
            quantity=item.quantity,
            price=products[item.product_id].price,
        )
        for item in data.items
    ]
    order = Order(
        user_id=user_id,
        items=lines,
        total_price=sum(line.price * line.quantity for line in lines),
        status=OrderStatus.PENDING,
        shipping_address=data.shipping_address.model_dump() if data.shipping_address else None,
    )
    db.add(order)
    await cart_service.clear_cart(user_id, db, commit=False)
    await db.commit()
    order_id = order.id

    for product_id in dict.fromkeys(item.product_id for item in data.items):
        if await enrollment_service.find_enrollment(db, user_id, product_id) is not None:
            continue
        try:
            await enrollment_service.enroll(
                user_id,
                product_id,
                db,
                source="via order",
                extra_metadata={"order_id": order_id},
            )
        except HTTPException as exc:
            # Enrolled concurrently; the order itself stands
            if exc.status_code != status.HTTP_400_BAD_REQUEST:
                raise
            logger.info("User %s already enrolled in %s during order %s", user_id, product_id, order_id)

    return await get_order_by_id(order_id, db)


async def get_user_orders(user: User, db: AsyncSession) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.user_id == user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return list(result.scalars().all())


async def get_all_orders(db: AsyncSession) -> List[Order]:
    result = await db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()))
    return list(result.scalars().all())


async def update_order_status(order_id: int, new_status: OrderStatus, db: AsyncSession) -> Order:
    order = await get_order_by_id(order_id, db)
    order.status = new_status
    await db.commit()
    return await get_order_by_id(order_id, db)

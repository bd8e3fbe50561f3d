"""
API v1 Router

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    activities,
    auth,
    cart,
    categories,
    enrollments,
    feedback,
    messages,
    orders,
    products,
    users,
)

router = APIRouter()

# Authentication and profile
router.include_router(auth.router)

# Account administration
router.include_router(users.router)

# Catalogue
router.include_router(categories.router)
router.include_router(products.router)

# Learning
router.include_router(enrollments.router)
router.include_router(feedback.router)

# Commerce
router.include_router(cart.router)
router.include_router(cart.wishlist_router)
router.include_router(orders.router)

# Messaging and audit
router.include_router(messages.router)
router.include_router(activities.router)

from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, constr

from app.schemas.enums import UserRole


class UserProfile(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=128)
    email: constr(strip_whitespace=True, min_length=3, max_length=320)
    is_premium: bool = False
    has_priority_support: bool = False


class Viewer(BaseModel):
    """Who is asking. Built per request from the identity boundary; never trusted as a grant."""
    principal: Optional[str] = None
    authenticated: bool = False
    is_premium: bool = False
    is_admin: bool = False
    role: UserRole = UserRole.guest

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls()


class StaffMember(BaseModel):
    principal: str
    role: UserRole
    profile: Optional[UserProfile] = None


class RoleChangeIn(BaseModel):
    role: UserRole = Field(..., description="Role to grant (promote) or revoke (demote)")


class ShoppingItem(BaseModel):
    product_name: str
    product_description: str = ""
    currency: constr(strip_whitespace=True, min_length=3, max_length=3) = "usd"
    price_in_cents: int = Field(..., ge=0)
    quantity: int = Field(1, ge=1)


class CheckoutRequest(BaseModel):
    items: List[ShoppingItem] = Field(..., min_length=1)
    success_url: str
    cancel_url: str


class CheckoutSession(BaseModel):
    id: str
    url: str


class WatchHistoryIn(BaseModel):
    content_id: constr(strip_whitespace=True, min_length=1)


__all__ = [
    "UserProfile",
    "Viewer",
    "StaffMember",
    "RoleChangeIn",
    "ShoppingItem",
    "CheckoutRequest",
    "CheckoutSession",
    "WatchHistoryIn",
]

"""Data models for VulnShop services."""
from typing import Optional
from datetime import datetime

from pydantic import BaseModel


class User(BaseModel):
    """A user as posted to the users service."""
    id: int = 0
    username: str = ""
    email: str = ""
    password: Optional[str] = None


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class Product(BaseModel):
    """A catalogue entry."""
    id: int = 0
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""


class Order(BaseModel):
    """An order as posted to the orders service."""
    id: int = 0
    user_id: int = 0
    product_id: int = 0
    quantity: int = 0
    total_price: float = 0.0
    status: str = ""
    created_at: Optional[datetime] = None


class OrderStatusUpdate(BaseModel):
    status: str = ""


class XMLOrder(BaseModel):
    """Fields read from an <order> document."""
    id: int = 0
    user_id: int = 0
    product_id: int = 0
    quantity: int = 0
    total_price: float = 0.0

"""Stock data: domain models and the data sources that produce them."""

from .models import PricePoint, TrackedStock, UserProfile

__all__ = ["PricePoint", "TrackedStock", "UserProfile"]

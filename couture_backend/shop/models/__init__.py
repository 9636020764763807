from .profile import ShopProfile

__all__ = ["ShopProfile"]

from enum import Enum


class ShopRole(str, Enum):
    CEO = "CEO"
    SHOP = "SHOP"

from dataclasses import dataclass
from typing import Optional

from shopledger.core.roles import ShopRole


@dataclass(frozen=True)
class Principal:
    """
    Аутентифицированный участник запроса.

    Для магазина shop_id совпадает с его собственным id. У CEO shop_id
    равен id его учётной записи, но филиалом он не считается.
    """

    id: int
    shop_id: int
    role: ShopRole
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_ceo(self) -> bool:
        return self.role == ShopRole.CEO

    @classmethod
    def from_shop(cls, shop) -> "Principal":
        return cls(
            id=shop.id,
            shop_id=shop.id,
            role=ShopRole(shop.role),
            name=shop.name,
            email=shop.email,
        )

from __future__ import annotations
import threading
import time
from typing import Any, Dict, List, Optional

from .contracts import Order, OrderStatus, Product, User
from .errors import DuplicateEmail


class InMemoryUserStore:
    """
    Test/dummy user store. Keys by id, with an email index that enforces
    uniqueness. Records are replaced wholesale on update.
    """
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users_by_id: Dict[str, User] = {}
        self._ids_by_email: Dict[str, str] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users_by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(email)
            return self._users_by_id.get(user_id) if user_id else None

    def create(self, user: User) -> User:
        with self._lock:
            if user.email in self._ids_by_email:
                raise DuplicateEmail(user.email)
            self._users_by_id[user.id] = user
            self._ids_by_email[user.email] = user.id
            return user

    def update(self, user_id: str, **fields: Any) -> Optional[User]:
        with self._lock:
            current = self._users_by_id.get(user_id)
            if current is None:
                return None
            fields["updated_at"] = time.time()
            updated = current.model_copy(update=fields)
            self._users_by_id[user_id] = updated
            return updated


class InMemoryOrderStore:
    """Per-process order store; listings sort on created_at."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._orders: Dict[str, Order] = {}

    def create(self, order: Order) -> Order:
        with self._lock:
            self._orders[order.id] = order
            return order

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def list_by_buyer(self, buyer_id: str) -> List[Order]:
        with self._lock:
            return [o for o in self._orders.values() if o.buyer_id == buyer_id]

    def list_all(self) -> List[Order]:
        with self._lock:
            return sorted(self._orders.values(), key=lambda o: o.created_at, reverse=True)

    def count(self) -> int:
        with self._lock:
            return len(self._orders)

    def list_page(self, page: int, per_page: int) -> List[Order]:
        start = (max(1, page) - 1) * per_page
        return self.list_all()[start:start + per_page]

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                return None
            updated = current.model_copy(update={"status": status, "updated_at": time.time()})
            self._orders[order_id] = updated
            return updated


class InMemoryProductCatalog:
    def __init__(self, products: Optional[List[Product]] = None) -> None:
        self._products: Dict[str, Product] = {p.id: p for p in products or []}

    def add(self, product: Product) -> None:
        self._products[product.id] = product

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

from __future__ import annotations
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Protocol
from pydantic import BaseModel, ConfigDict, Field

# ---------- Domain Models ----------
class Role(IntEnum):
    USER = 0
    ADMIN = 1

class OrderStatus(str, Enum):
    NOT_PROCESSED = "Not Processed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

class User(BaseModel):
    id: str
    email: str
    name: str
    phone: str
    address: str
    password_hash: str
    answer_hash: str
    role: Role = Role.USER
    created_at: float
    updated_at: float

class PublicUser(BaseModel):
    """User fields that may leave the server."""
    id: str
    name: str
    email: str
    phone: str
    address: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            role=user.role,
        )

class Product(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: float = 0.0
    quantity: int = 0
    category: Optional[str] = None
    photo: Optional[bytes] = None

class ProductSummary(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: float = 0.0
    quantity: int = 0
    category: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductSummary":
        return cls(**product.model_dump(exclude={"photo"}))

class BuyerSummary(BaseModel):
    id: str
    name: Optional[str] = None

class Order(BaseModel):
    id: str
    buyer_id: str
    products: List[str] = Field(default_factory=list)
    payment: Dict[str, Any] = Field(default_factory=dict)
    status: OrderStatus = OrderStatus.NOT_PROCESSED
    created_at: float
    updated_at: float

class OrderView(BaseModel):
    id: str
    buyer: BuyerSummary
    products: List[ProductSummary] = Field(default_factory=list)
    payment: Dict[str, Any] = Field(default_factory=dict)
    status: OrderStatus
    created_at: float
    updated_at: float

class AuthenticatedIdentity(BaseModel):
    user_id: str

# ---------- Ports (Contracts) ----------
class UserStorePort(Protocol):
    """
    Persistence of user records. Emails are unique; `create` raises
    DuplicateEmail when the email is already taken.
    """
    def get_by_id(self, user_id: str) -> Optional[User]: ...
    def get_by_email(self, email: str) -> Optional[User]: ...
    def create(self, user: User) -> User: ...
    def update(self, user_id: str, **fields: Any) -> Optional[User]: ...

class OrderStorePort(Protocol):
    """
    Persistence of orders. Listings are newest first except `list_by_buyer`,
    which keeps insertion order.
    """
    def create(self, order: Order) -> Order: ...
    def get(self, order_id: str) -> Optional[Order]: ...
    def list_by_buyer(self, buyer_id: str) -> List[Order]: ...
    def list_all(self) -> List[Order]: ...
    def count(self) -> int: ...
    def list_page(self, page: int, per_page: int) -> List[Order]: ...
    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]: ...

class ProductCatalogPort(Protocol):
    def get_product(self, product_id: str) -> Optional[Product]: ...

class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...

# ---------- Service I/O ----------
class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    answer: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ForgotPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    answer: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")

class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class MessageResponse(BaseModel):
    success: bool
    message: str

class RegisterResponse(BaseModel):
    success: bool = True
    message: str
    user: PublicUser

class LoginResponse(BaseModel):
    success: bool = True
    message: str
    user: PublicUser
    token: str

class ProfileUpdateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    updated_user: PublicUser = Field(alias="updatedUser")

class AuthCheckResponse(BaseModel):
    ok: bool

class OrdersCountResponse(BaseModel):
    success: bool = True
    total: int

class OrdersPageResponse(BaseModel):
    success: bool = True
    orders: List[OrderView]

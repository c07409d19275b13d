from __future__ import annotations
import logging
import re
import time
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional

from .config import AuthConfig
from .contracts import (
    AuthenticatedIdentity, ForgotPasswordRequest, LoginRequest, LoginResponse,
    MessageResponse, Order, OrderStatus, OrderStorePort, OrderView, BuyerSummary,
    ProductCatalogPort, ProductSummary, ProfileUpdateRequest, ProfileUpdateResponse,
    PublicUser, RegisterRequest, RegisterResponse, Role, User, UserStorePort,
)
from .crypto import TokenService
from .errors import (
    BadRequestError, ConflictError, DatastoreError, DuplicateEmail,
    InvalidCredentialsError, InvalidToken, NotFoundError, StorefrontError,
    UnauthorizedError, VerificationError, WeakPasswordError,
)
from .hashing import MAX_INPUT_BYTES, CredentialHasher
from .stores import InMemoryProductCatalog

logger = logging.getLogger("authservice")

EMAIL_RE = re.compile(r"^\w+([\.-]?\w+)*@\w+([\.-]?\w+)*(\.\w{2,3})+$")
PHONE_RE = re.compile(r"^[\+]?[1-9][\d]{0,15}$")

_REGISTER_FIELDS = (
    ("name", "Name is Required"),
    ("email", "Email is Required"),
    ("password", "Password is Required"),
    ("phone", "Phone no is Required"),
    ("address", "Address is Required"),
    ("answer", "Answer is Required"),
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Registration, login, password reset, profile and order use cases.
    Every raised error is a StorefrontError; store and hashing failures are
    logged here and surfaced as a generic DatastoreError.
    """

    def __init__(
        self,
        *,
        users: UserStorePort,
        orders: OrderStorePort,
        hasher: CredentialHasher,
        tokens: TokenService,
        catalog: Optional[ProductCatalogPort] = None,
        cfg: Optional[AuthConfig] = None,
    ):
        self.users = users
        self.orders = orders
        self.hasher = hasher
        self.tokens = tokens
        self.catalog = catalog or InMemoryProductCatalog()
        self.cfg = cfg or AuthConfig()

    # --------- Credentials ----------
    def register(self, req: RegisterRequest) -> RegisterResponse:
        for field, message in _REGISTER_FIELDS:
            value = getattr(req, field)
            if value is None or not value.strip():
                raise BadRequestError(message)

        email = normalize_email(req.email)
        if not EMAIL_RE.match(email):
            raise BadRequestError("Please enter a valid email address")
        if not PHONE_RE.match(req.phone.strip()):
            raise BadRequestError("Please enter a valid phone number")
        self._check_password_size(req.password)
        self._check_size(req.answer, "Answer is too long")

        with self._failures("Error in Registration", "register"):
            if self.users.get_by_email(email) is not None:
                raise ConflictError()
            now = time.time()
            user = User(
                id=uuid.uuid4().hex,
                email=email,
                name=req.name.strip(),
                phone=req.phone.strip(),
                address=req.address.strip(),
                password_hash=self.hasher.hash(req.password),
                answer_hash=self.hasher.hash(req.answer),
                role=Role.USER,
                created_at=now,
                updated_at=now,
            )
            try:
                user = self.users.create(user)
            except DuplicateEmail:
                raise ConflictError()

        logger.info("auth.registered", extra={"user_id": user.id})
        return RegisterResponse(message="User Register Successfully", user=PublicUser.from_user(user))

    def login(self, req: LoginRequest) -> LoginResponse:
        if not req.email or not req.password:
            raise InvalidCredentialsError()

        with self._failures("Error in login", "login"):
            user = self.users.get_by_email(normalize_email(req.email))
            if user is None:
                self.hasher.dummy_verify(req.password)
                logger.info("auth.login_failed")
                raise InvalidCredentialsError()
            if not self._matches(req.password, user.password_hash, user.id):
                logger.info("auth.login_failed", extra={"user_id": user.id})
                raise InvalidCredentialsError()
            token = self.tokens.issue(user.id)

        logger.info("auth.login", extra={"user_id": user.id})
        return LoginResponse(message="login successfully", user=PublicUser.from_user(user), token=token)

    def forgot_password(self, req: ForgotPasswordRequest) -> MessageResponse:
        if not req.email:
            raise BadRequestError("Email is Required")
        if not req.answer:
            raise BadRequestError("Answer is Required")
        if not req.new_password:
            raise BadRequestError("New Password is Required")
        self._check_password_size(req.new_password)
        self._check_size(req.answer, "Answer is too long")

        with self._failures("Something went wrong", "forgot_password"):
            user = self.users.get_by_email(normalize_email(req.email))
            if user is None:
                self.hasher.dummy_verify(req.answer)
                raise NotFoundError("Wrong Email Or Answer")
            if not self._matches(req.answer, user.answer_hash, user.id):
                raise NotFoundError("Wrong Email Or Answer")
            self.users.update(user.id, password_hash=self.hasher.hash(req.new_password))

        logger.info("auth.password_reset", extra={"user_id": user.id})
        return MessageResponse(success=True, message="Password Reset Successfully")

    def update_profile(self, identity: AuthenticatedIdentity, req: ProfileUpdateRequest) -> ProfileUpdateResponse:
        if req.password and len(req.password) < self.cfg.profile_min_password_length:
            raise WeakPasswordError()
        if req.password:
            self._check_password_size(req.password)

        with self._failures("Error While Updating Profile", "update_profile"):
            user = self.users.get_by_id(identity.user_id)
            if user is None:
                raise UnauthorizedError()
            password_hash = self.hasher.hash(req.password) if req.password else user.password_hash
            updated = self.users.update(
                user.id,
                name=req.name or user.name,
                password_hash=password_hash,
                phone=req.phone or user.phone,
                address=req.address or user.address,
            )
            if updated is None:
                raise UnauthorizedError()

        logger.info("auth.profile_updated", extra={"user_id": user.id, "password_changed": bool(req.password)})
        return ProfileUpdateResponse(message="Profile Updated Successfully", updated_user=PublicUser.from_user(updated))

    # --------- Authorization ----------
    def verify_token(self, token: Optional[str]) -> AuthenticatedIdentity:
        try:
            return AuthenticatedIdentity(user_id=self.tokens.verify(token))
        except InvalidToken:
            raise UnauthorizedError()

    def authorize_admin(self, identity: AuthenticatedIdentity) -> User:
        try:
            user = self.users.get_by_id(identity.user_id)
        except Exception:
            logger.exception("auth.admin_lookup_failed", extra={"user_id": identity.user_id})
            raise UnauthorizedError()
        if user is None or user.role != Role.ADMIN:
            logger.info("auth.admin_denied", extra={"user_id": identity.user_id})
            raise UnauthorizedError()
        return user

    # --------- Orders ----------
    def list_orders(self, identity: AuthenticatedIdentity) -> List[OrderView]:
        with self._failures("Error While Getting Orders", "list_orders"):
            return [self._view(o) for o in self.orders.list_by_buyer(identity.user_id)]

    def list_all_orders(self) -> List[OrderView]:
        with self._failures("Error While Getting Orders", "list_all_orders"):
            return [self._view(o) for o in self.orders.list_all()]

    def count_orders(self) -> int:
        with self._failures("Error in order count", "count_orders"):
            return self.orders.count()

    def list_orders_page(self, page: int) -> List[OrderView]:
        if page < 1:
            raise BadRequestError("Page must be 1 or greater")
        with self._failures("Error While Getting Orders", "list_orders_page"):
            return [self._view(o) for o in self.orders.list_page(page, self.cfg.orders_per_page)]

    def update_order_status(self, order_id: str, status: OrderStatus) -> Optional[OrderView]:
        with self._failures("Error While Updating Order", "update_order_status"):
            order = self.orders.update_status(order_id, status)
            if order is None:
                # Unknown ids are a no-op that still succeeds.
                logger.warning("orders.status_unknown_order", extra={"order_id": order_id})
                return None
            view = self._view(order)

        logger.info("orders.status_updated", extra={"order_id": order_id, "status": status.value})
        return view

    # --------- Helpers ----------
    def _view(self, order: Order) -> OrderView:
        buyer = self.users.get_by_id(order.buyer_id)
        products: List[ProductSummary] = []
        for product_id in order.products:
            product = self.catalog.get_product(product_id)
            if product is not None:
                products.append(ProductSummary.from_product(product))
        return OrderView(
            id=order.id,
            buyer=BuyerSummary(id=order.buyer_id, name=buyer.name if buyer else None),
            products=products,
            payment=order.payment,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )

    def _matches(self, plaintext: str, hashed: str, user_id: str) -> bool:
        try:
            return self.hasher.verify(plaintext, hashed)
        except VerificationError:
            logger.warning("auth.unverifiable_hash", extra={"user_id": user_id})
            return False

    def _check_password_size(self, password: str) -> None:
        self._check_size(password, "Password is too long")

    def _check_size(self, value: str, message: str) -> None:
        # anything hashed with bcrypt must fit its input limit
        if len(value.encode("utf-8")) > MAX_INPUT_BYTES:
            raise BadRequestError(message)

    @contextmanager
    def _failures(self, message: str, op: str) -> Iterator[None]:
        try:
            yield
        except StorefrontError:
            raise
        except Exception as ex:
            logger.exception("usecase.failed", extra={"op": op})
            raise DatastoreError(message) from ex

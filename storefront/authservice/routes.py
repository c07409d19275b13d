from __future__ import annotations
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, status
from .contracts import (
    AuthCheckResponse, AuthenticatedIdentity, ForgotPasswordRequest, LoginRequest,
    LoginResponse, MessageResponse, OrderStatusUpdate, OrdersCountResponse,
    OrdersPageResponse, OrderView, ProfileUpdateRequest, ProfileUpdateResponse,
    RegisterRequest, RegisterResponse,
)
from .deps import get_auth_service, require_admin, require_authenticated
from .service import AuthService
from ..settings import API_PREFIX

router = APIRouter(prefix=API_PREFIX, tags=["auth"])

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.register(req)

@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.login(req)

@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(req: ForgotPasswordRequest, svc: AuthService = Depends(get_auth_service)):
    return svc.forgot_password(req)

@router.get("/user-auth", response_model=AuthCheckResponse)
def user_auth(identity: AuthenticatedIdentity = Depends(require_authenticated)):
    return AuthCheckResponse(ok=True)

@router.get("/admin-auth", response_model=AuthCheckResponse, dependencies=[Depends(require_admin)])
def admin_auth():
    return AuthCheckResponse(ok=True)

@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    req: ProfileUpdateRequest,
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.update_profile(identity, req)

@router.get("/orders", response_model=List[OrderView])
def orders(
    identity: AuthenticatedIdentity = Depends(require_authenticated),
    svc: AuthService = Depends(get_auth_service),
):
    return svc.list_orders(identity)

@router.get("/all-orders", response_model=List[OrderView], dependencies=[Depends(require_admin)])
def all_orders(svc: AuthService = Depends(get_auth_service)):
    return svc.list_all_orders()

@router.get("/orders-count", response_model=OrdersCountResponse, dependencies=[Depends(require_admin)])
def orders_count(svc: AuthService = Depends(get_auth_service)):
    return OrdersCountResponse(total=svc.count_orders())

@router.get("/orders-list/{page}", response_model=OrdersPageResponse, dependencies=[Depends(require_admin)])
def orders_list(page: int = Path(..., ge=1), svc: AuthService = Depends(get_auth_service)):
    return OrdersPageResponse(orders=svc.list_orders_page(page))

@router.put("/order-status/{order_id}", response_model=Optional[OrderView], dependencies=[Depends(require_admin)])
def order_status(order_id: str, body: OrderStatusUpdate, svc: AuthService = Depends(get_auth_service)):
    return svc.update_order_status(order_id, body.status)

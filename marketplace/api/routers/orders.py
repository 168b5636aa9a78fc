# marketplace/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from marketplace.api import http_error
from marketplace.api.deps import get_order_service
from marketplace.domain.errors import MarketplaceError
from marketplace.domain.schemas import DeliveryConfirm, OrderCreate, OrderOut, OrderStatusUpdate
from marketplace.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderOut, status_code=201)
def place_order(
    payload: OrderCreate,
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Składa zamówienie z koszyka klienta (jedna transakcja).
    Potwierdzenie mailem wysyłane asynchronicznie po commicie.
    """
    try:
        return svc.place_order(user_id, payload)
    except MarketplaceError as e:
        raise http_error(e)


@router.get("/", response_model=List[OrderOut])
def list_my_orders(
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_customer_orders(user_id)


@router.get("/vendor", response_model=List[OrderOut])
def list_vendor_orders(
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Zamówienia ze wszystkich sklepów sprzedawcy.
    """
    return svc.list_vendor_orders(user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except MarketplaceError as e:
        raise http_error(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.update_status(order_id, user_id, payload.status)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except MarketplaceError as e:
        raise http_error(e)


@router.post("/{order_id}/confirm-delivery", response_model=OrderOut)
def confirm_delivery(
    order_id: str,
    payload: DeliveryConfirm,
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    """
    Potwierdzenie dostawy kodem OTP podanym przez klienta.
    """
    try:
        return svc.confirm_delivery(order_id, payload.otp, user_id=user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except MarketplaceError as e:
        raise http_error(e)

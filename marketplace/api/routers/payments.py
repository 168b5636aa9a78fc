# marketplace/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException, Query

from marketplace.api import http_error
from marketplace.api.deps import get_gateway_client, get_order_service
from marketplace.domain.errors import MarketplaceError
from marketplace.domain.schemas import GatewayOrderCreate, GatewayOrderOut, PaymentOut
from marketplace.services.gateway_client import GatewayClient
from marketplace.services.order_service import OrderService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/gateway-orders", response_model=GatewayOrderOut, status_code=201)
def create_gateway_order(
    payload: GatewayOrderCreate,
    client: GatewayClient = Depends(get_gateway_client),
):
    """
    Tworzy zamówienie w bramce płatności przed checkoutem.
    """
    try:
        return client.create_order(payload.amount, payload.currency)
    except MarketplaceError as e:
        raise http_error(e)


@router.get("/order/{order_id}", response_model=PaymentOut)
def get_order_payment(
    order_id: str,
    user_id: str = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_payment(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except MarketplaceError as e:
        raise http_error(e)

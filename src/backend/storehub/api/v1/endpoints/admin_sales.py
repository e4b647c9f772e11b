from typing import Optional

from fastapi import APIRouter, Depends

from storehub.api.v1.deps import get_owner_context
from storehub.schemas.order import OrderStatusUpdateRequest
from storehub.services.sales import CustomerService, DashboardService, OrderService, PaymentService
from storehub.tenancy import TenantContext

router = APIRouter(prefix="/admin", tags=["Admin Sales"])


@router.get("/orders")
def list_orders(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    customer: Optional[str] = None,
    ctx: TenantContext = Depends(get_owner_context),
):
    return OrderService.list_orders(ctx, page=page, limit=limit, status=status, customer=customer)


@router.get("/orders/{order_id}")
def get_order(order_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return OrderService.get_order(ctx, order_id)


@router.put("/orders/{order_id}/status")
def update_order_status(
    order_id: str, request: OrderStatusUpdateRequest, ctx: TenantContext = Depends(get_owner_context)
):
    return OrderService.update_status(ctx, order_id, request)


@router.get("/customers")
def list_customers(
    page: int = 1, limit: int = 20, search: Optional[str] = None, ctx: TenantContext = Depends(get_owner_context)
):
    return CustomerService.list_customers(ctx, page=page, limit=limit, search=search)


@router.get("/customers/{customer_id}")
def get_customer(customer_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return CustomerService.get_customer(ctx, customer_id)


@router.get("/payments")
def list_payments(
    page: int = 1, limit: int = 20, status: Optional[str] = None, ctx: TenantContext = Depends(get_owner_context)
):
    return PaymentService.list_payments(ctx, page=page, limit=limit, status=status)


@router.get("/payments/{payment_id}")
def get_payment(payment_id: str, ctx: TenantContext = Depends(get_owner_context)):
    return PaymentService.get_payment(ctx, payment_id)


@router.get("/stats")
def get_stats(ctx: TenantContext = Depends(get_owner_context)):
    return DashboardService.get_stats(ctx)

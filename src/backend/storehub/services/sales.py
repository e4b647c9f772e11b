from typing import Optional

from storehub.models.mongodb.enums import OrderStatus, PaymentStatus, ProductStatus
from storehub.schemas.order import OrderStatusUpdateRequest
from storehub.services.utils import get_or_404, handle_write_errors, paginate, parse_object_id
from storehub.tenancy import TenantContext
from storehub.utils.logger import get_logger

logger = get_logger(__name__)


class OrderService:
    @staticmethod
    def list_orders(
        ctx: TenantContext,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        customer: Optional[str] = None,
    ) -> dict:
        queryset = ctx.orders.objects()
        if status:
            queryset = queryset.filter(status=status)
        if customer:
            queryset = queryset.filter(customer=parse_object_id(customer, "customer"))
        return paginate(queryset.order_by("-created_at"), page, limit)

    @staticmethod
    def get_order(ctx: TenantContext, order_id: str) -> dict:
        return get_or_404(ctx.orders, order_id).to_serializable_dict()

    @staticmethod
    def update_status(ctx: TenantContext, order_id: str, request: OrderStatusUpdateRequest) -> dict:
        order = get_or_404(ctx.orders, order_id)
        previous = order.status
        with handle_write_errors():
            order = ctx.orders.update(order_id, **request.model_dump(exclude_none=True))
        logger.info(f"Order {order.order_number} moved from {previous} to {order.status} for tenant {ctx.tenant_id}")
        return order.to_serializable_dict()


class CustomerService:
    @staticmethod
    def list_customers(ctx: TenantContext, page: int = 1, limit: int = 20, search: Optional[str] = None) -> dict:
        queryset = ctx.customers.objects()
        if search:
            queryset = queryset.filter(name__icontains=search)
        return paginate(queryset.order_by("-created_at"), page, limit)

    @staticmethod
    def get_customer(ctx: TenantContext, customer_id: str) -> dict:
        customer = get_or_404(ctx.customers, customer_id)
        data = customer.to_serializable_dict()
        data["recent_orders"] = [
            order.to_serializable_dict()
            for order in ctx.orders.objects(customer=customer.pk).order_by("-created_at").limit(5)
        ]
        return data


class PaymentService:
    @staticmethod
    def list_payments(ctx: TenantContext, page: int = 1, limit: int = 20, status: Optional[str] = None) -> dict:
        queryset = ctx.payments.objects()
        if status:
            queryset = queryset.filter(status=status)
        return paginate(queryset.order_by("-created_at"), page, limit)

    @staticmethod
    def get_payment(ctx: TenantContext, payment_id: str) -> dict:
        return get_or_404(ctx.payments, payment_id).to_serializable_dict()


class DashboardService:
    @staticmethod
    def get_stats(ctx: TenantContext) -> dict:
        completed = ctx.payments.objects(status=PaymentStatus.COMPLETED.value)
        return {
            "products": {
                "total": ctx.products.count(),
                "active": ctx.products.count(status=ProductStatus.ACTIVE.value),
            },
            "orders": {
                "total": ctx.orders.count(),
                "pending": ctx.orders.count(status=OrderStatus.PENDING.value),
                "delivered": ctx.orders.count(status=OrderStatus.DELIVERED.value),
            },
            "customers": ctx.customers.count(),
            "categories": ctx.categories.count(),
            "revenue": sum(payment.amount or 0 for payment in completed),
        }

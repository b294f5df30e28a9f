"""Order maintenance use cases"""
from .create_order import CreateOrder
from .get_order import GetOrder
from .update_order import UpdateOrder
from .delete_order import DeleteOrder
from .list_orders import ListOrders
from .get_filter_options import GetOrderFilterOptions
from .dtos import (
    OrderItemInputDTO,
    CreateOrderCommandDTO,
    UpdateOrderCommandDTO,
    OrderItemDTO,
    OrderResponseDTO,
    DeleteOrderResponseDTO,
    ListOrdersQueryDTO,
    ListOrdersResponseDTO,
    OrderFilterOptionsDTO,
)

__all__ = [
    "CreateOrder",
    "GetOrder",
    "UpdateOrder",
    "DeleteOrder",
    "ListOrders",
    "GetOrderFilterOptions",
    "OrderItemInputDTO",
    "CreateOrderCommandDTO",
    "UpdateOrderCommandDTO",
    "OrderItemDTO",
    "OrderResponseDTO",
    "DeleteOrderResponseDTO",
    "ListOrdersQueryDTO",
    "ListOrdersResponseDTO",
    "OrderFilterOptionsDTO",
]

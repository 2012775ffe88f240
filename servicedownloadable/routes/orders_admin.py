from fastapi import APIRouter, Depends, HTTPException

from servicedownloadable.dependencies.auth import require_admin
from servicedownloadable.dependencies.services import get_order_lifecycle
from servicedownloadable.models.user import User
from servicedownloadable.schemas.order_schemas import OrderCreate
from servicedownloadable.services.order_lifecycle import OrderLifecycle

router = APIRouter()


@router.post("/")
def create_order(
    payload: OrderCreate,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    admin: User = Depends(require_admin),
):
    order = lifecycle.create_order(payload.client_id, payload.product_id, payload.config)
    return lifecycle.to_api_array(order, identity=admin)


@router.get("/{order_id}")
def get_order(
    order_id: int,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    admin: User = Depends(require_admin),
):
    order = lifecycle.orders.get_existing_by_id(order_id, "Order not found")
    return lifecycle.to_api_array(order, identity=admin)


# Status changes
@router.post("/{order_id}/{action}")
def change_order_status(
    order_id: int,
    action: str,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    admin: User = Depends(require_admin),
):
    transitions = {
        "activate": lifecycle.activate_order,
        "renew": lifecycle.renew_order,
        "suspend": lifecycle.suspend_order,
        "unsuspend": lifecycle.unsuspend_order,
        "cancel": lifecycle.cancel_order,
        "uncancel": lifecycle.uncancel_order,
    }
    order = lifecycle.orders.get_existing_by_id(order_id, "Order not found")

    if action not in transitions:
        raise HTTPException(404, "Unknown order action")

    order = transitions[action](order)
    return lifecycle.to_api_array(order, identity=admin)


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    admin: User = Depends(require_admin),
):
    order = lifecycle.orders.get_existing_by_id(order_id, "Order not found")
    lifecycle.delete_order(order)
    return True

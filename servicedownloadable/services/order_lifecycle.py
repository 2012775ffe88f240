# servicedownloadable/services/order_lifecycle.py
import json
import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session

from servicedownloadable.config import settings
from servicedownloadable.constants.order_status import ALLOWED_TRANSITIONS, PENDING
from servicedownloadable.constants.product_types import DOWNLOADABLE
from servicedownloadable.exceptions import BusinessRuleError
from servicedownloadable.models.client_order import ClientOrder
from servicedownloadable.models.product import Product
from servicedownloadable.models.user import User
from servicedownloadable.repository import Repository
from servicedownloadable.schemas.product_config import ProductConfig
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.services.order_resolver import OrderServiceResolver

logger = logging.getLogger(__name__)


class OrderLifecycle:
    """
    Order state machine. Each transition is forwarded to the service
    handler of the order's product type; only downloadable products
    have one, other types just change status.
    """

    def __init__(self, session: Session, uploads_path: Optional[str] = None):
        self.session = session
        self.resolver = OrderServiceResolver(session)
        self.downloadable = DownloadableService(
            session,
            uploads_path=uploads_path or settings.uploads_path,
            resolver=self.resolver,
        )

        self.orders = Repository(session, ClientOrder)
        self.products = Repository(session, Product)
        self.clients = Repository(session, User)

    def _handler(self, order: ClientOrder) -> Optional[DownloadableService]:
        if order.product_type == DOWNLOADABLE:
            return self.downloadable
        return None

    def get_order_service(self, order: ClientOrder):
        return self.resolver.get_order_service(order)

    def create_order(self, client_id: int, product_id: int, config: Optional[dict] = None) -> ClientOrder:
        self.clients.get_existing_by_id(client_id, "Client not found")
        product = self.products.get_existing_by_id(product_id, "Product not found")

        data = dict(config or {})
        if product.type == DOWNLOADABLE:
            data = self.downloadable.attach_order_config(product, data)
            self.downloadable.validate_order_data(data)

        order = ClientOrder(
            client_id=client_id,
            product_id=product.id,
            product_type=product.type,
            title=product.title,
            status=PENDING,
            config=json.dumps(data),
        )
        self.orders.store(order)

        logger.info("Created order %s for client %s", order.id, client_id)
        return order

    def _transition(self, order: ClientOrder, action: str) -> ClientOrder:
        self._check_allowed(order, action)
        _, new_status = ALLOWED_TRANSITIONS[action]

        handler = self._handler(order)
        if handler is not None:
            getattr(handler, f"action_{action}")(order)

        order.status = new_status
        self.orders.store(order)

        logger.info("Order %s: %s, status %s", order.id, action, new_status)
        return order

    def _check_allowed(self, order: ClientOrder, action: str) -> None:
        allowed_from, _ = ALLOWED_TRANSITIONS[action]
        if order.status not in allowed_from:
            raise BusinessRuleError(f"Order #{order.id} is {order.status}, cannot {action} it")

    def _provision(self, order: ClientOrder) -> None:
        """Bind a service record unless the order already has one."""
        handler = self._handler(order)
        if handler is not None and self.get_order_service(order) is None:
            service = handler.action_create(order)
            order.service_id = service.id
            order.service_type = order.product_type

        if order.activated_at is None:
            order.activated_at = datetime.utcnow()

    def activate_order(self, order: ClientOrder) -> ClientOrder:
        self._check_allowed(order, "activate")
        self._provision(order)
        return self._transition(order, "activate")

    def renew_order(self, order: ClientOrder) -> ClientOrder:
        return self._transition(order, "renew")

    def suspend_order(self, order: ClientOrder) -> ClientOrder:
        return self._transition(order, "suspend")

    def unsuspend_order(self, order: ClientOrder) -> ClientOrder:
        return self._transition(order, "unsuspend")

    def cancel_order(self, order: ClientOrder) -> ClientOrder:
        return self._transition(order, "cancel")

    def uncancel_order(self, order: ClientOrder) -> ClientOrder:
        # cancelled while still pending: no service bound yet
        self._check_allowed(order, "uncancel")
        self._provision(order)
        return self._transition(order, "uncancel")

    def delete_order(self, order: ClientOrder) -> None:
        handler = self._handler(order)
        if handler is not None:
            handler.action_delete(order)

        order_id = order.id
        self.orders.trash(order)
        logger.info("Deleted order %s", order_id)

    def to_api_array(self, order: ClientOrder, identity: Optional[User] = None) -> dict:
        result = {
            "id": order.id,
            "client_id": order.client_id,
            "product_id": order.product_id,
            "product_type": order.product_type,
            "title": order.title,
            "status": order.status,
            "config": ProductConfig.from_json(order.config).to_dict(),
            "activated_at": order.activated_at,
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }

        handler = self._handler(order)
        service = self.get_order_service(order)
        if handler is not None and service is not None:
            result["service"] = handler.to_api_array(service, identity=identity)

        return result

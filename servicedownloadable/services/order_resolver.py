from typing import Optional

from sqlmodel import Session, SQLModel

from servicedownloadable.models.client_order import ClientOrder
from servicedownloadable.models.service_downloadable import ServiceDownloadable


class OrderServiceResolver:
    """Finds the service record bound to an order, whatever its type."""

    SERVICE_MODELS = {
        "downloadable": ServiceDownloadable,
    }

    def __init__(self, session: Session):
        self.session = session

    def get_order_service(self, order: ClientOrder) -> Optional[SQLModel]:
        model = self.SERVICE_MODELS.get(order.service_type)
        if model is None or order.service_id is None:
            return None
        return self.session.get(model, order.service_id)

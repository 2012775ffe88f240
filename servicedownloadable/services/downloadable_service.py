# servicedownloadable/services/downloadable_service.py
import logging
from typing import Optional

from fastapi import UploadFile
from sqlmodel import Session

from servicedownloadable.config import settings
from servicedownloadable.constants.order_status import ACTIVE
from servicedownloadable.exceptions import (
    BusinessRuleError,
    ConfigurationError,
    NotFoundError,
    ServiceUnavailableError,
    ValidationError,
)
from servicedownloadable.models.client_order import ClientOrder
from servicedownloadable.models.product import Product
from servicedownloadable.models.service_downloadable import ServiceDownloadable
from servicedownloadable.models.user import User
from servicedownloadable.repository import Repository
from servicedownloadable.schemas.product_config import ProductConfig
from servicedownloadable.services.file_storage import (
    FileDownload,
    file_exists,
    file_path,
    save_upload,
)
from servicedownloadable.services.order_resolver import OrderServiceResolver
from servicedownloadable.utils.validation import check_required_params

logger = logging.getLogger(__name__)

FILE_UNAVAILABLE = "File cannot be downloaded at the moment. Please contact support."


class DownloadableService:
    """
    One file per product, copied onto each order when it is activated.

    Admins may fetch the product file at any time; clients only through an
    active order they own, and each client download bumps the counter on
    the order's service record.
    """

    def __init__(
        self,
        session: Session,
        uploads_path: Optional[str] = None,
        resolver: Optional[OrderServiceResolver] = None,
    ):
        self.session = session
        self.uploads_path = uploads_path or settings.uploads_path
        self.resolver = resolver or OrderServiceResolver(session)

        self.products = Repository(session, Product)
        self.orders = Repository(session, ClientOrder)
        self.services = Repository(session, ServiceDownloadable)

    # -------------------------------
    # Product configuration
    # -------------------------------

    def upload_product_file(self, product: Product, upload: Optional[UploadFile]) -> bool:
        if upload is None or not upload.filename:
            raise ValidationError("File was not uploaded.")

        filename = save_upload(self.uploads_path, upload)

        config = ProductConfig.from_json(product.config).merge({"filename": filename})
        product.config = config.to_json()
        self.products.store(product)

        logger.info("Uploaded new file for product %s", product.id)

        if config.update_orders:
            self._update_orders_file(product, filename)

        return True

    def _update_orders_file(self, product: Product, filename: str) -> int:
        orders = self.orders.find(product_id=product.id)

        for order in orders:
            order.config = ProductConfig.from_json(order.config).merge({"filename": filename}).to_json()
            self.orders.store(order)

            service = self.resolver.get_order_service(order)
            if isinstance(service, ServiceDownloadable):
                service.filename = filename
                self.services.store(service)

        logger.info("Updated file of %s orders for product %s", len(orders), product.id)
        return len(orders)

    def save_product_config(self, product: Product, data: dict) -> bool:
        options = {k: v for k, v in data.items() if k != "id" and v is not None}

        config = ProductConfig.from_json(product.config).merge(options)
        product.config = config.to_json()
        self.products.store(product)

        logger.info("Updated product %s configuration", product.id)
        return True

    # -------------------------------
    # Order provisioning
    # -------------------------------

    def validate_order_data(self, data: dict) -> None:
        check_required_params({"filename": "Filename is missing in product config"}, data)

    def attach_order_config(self, product: Product, data: dict) -> dict:
        config = ProductConfig.from_json(product.config)
        if not config.filename:
            raise ConfigurationError("Product is not configured completely.")

        merged = {**config.to_dict(), **data}
        merged["filename"] = config.filename
        return merged

    def action_create(self, order: ClientOrder) -> ServiceDownloadable:
        config = ProductConfig.from_json(order.config)
        if not config.filename:
            raise ConfigurationError(f"Order #{order.id} config is missing")

        service = ServiceDownloadable(
            client_id=order.client_id,
            order_id=order.id,
            filename=config.filename,
            downloads=0,
        )
        self.services.store(service)

        logger.info("Created downloadable service %s for order %s", service.id, order.id)
        return service

    def action_activate(self, order: ClientOrder) -> bool:
        return True

    def action_renew(self, order: ClientOrder) -> bool:
        return True

    def action_suspend(self, order: ClientOrder) -> bool:
        return True

    def action_unsuspend(self, order: ClientOrder) -> bool:
        return True

    def action_cancel(self, order: ClientOrder) -> bool:
        return True

    def action_uncancel(self, order: ClientOrder) -> bool:
        return True

    def action_delete(self, order: ClientOrder) -> None:
        service = self.resolver.get_order_service(order)
        if isinstance(service, ServiceDownloadable):
            self.services.trash(service)
            logger.info("Removed downloadable service of order %s", order.id)

    def update_product_file(
        self,
        service: ServiceDownloadable,
        order: ClientOrder,
        upload: Optional[UploadFile],
    ) -> bool:
        if upload is None or not upload.filename:
            raise ValidationError("File was not uploaded.")

        filename = save_upload(self.uploads_path, upload)

        order.config = ProductConfig.from_json(order.config).merge({"filename": filename}).to_json()
        self.orders.store(order)

        service.filename = filename
        self.services.store(service)

        logger.info("Uploaded new file for order %s", order.id)
        return True

    def to_api_array(
        self,
        service: ServiceDownloadable,
        deep: bool = False,
        identity: Optional[User] = None,
    ) -> dict:
        result = {
            "path": self.get_file_path(service.filename),
            "filename": service.filename,
        }
        if identity is not None and identity.is_admin:
            result["downloads"] = service.downloads
        return result

    # -------------------------------
    # Download gate
    # -------------------------------

    def get_file_path(self, filename: str) -> str:
        return file_path(self.uploads_path, filename)

    def send_product_file(self, product: Product) -> FileDownload:
        config = ProductConfig.from_json(product.config)
        if not config.filename:
            raise ConfigurationError("No file associated with this product")

        if not file_exists(self.uploads_path, config.filename):
            raise ServiceUnavailableError(FILE_UNAVAILABLE)

        logger.info("Downloaded product %s file by admin", product.id)
        return FileDownload(self.get_file_path(config.filename), config.filename)

    def get_client_order(self, order_id, client_id: int) -> ClientOrder:
        try:
            order_id = int(order_id)
        except (TypeError, ValueError):
            raise NotFoundError("Order not found")

        # filtering on the owner too: someone else's order is just "not found"
        order = self.orders.find_one(id=order_id, client_id=client_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def send_file(self, order_id, client_id: int) -> FileDownload:
        if order_id is None or (isinstance(order_id, str) and order_id.strip() == ""):
            raise ValidationError("Order ID is required")

        order = self.get_client_order(order_id, client_id)

        service = self.resolver.get_order_service(order)
        if not isinstance(service, ServiceDownloadable) or order.status != ACTIVE:
            raise BusinessRuleError("Order is not activated")

        return self.send_service_file(service)

    def send_service_file(self, service: ServiceDownloadable) -> FileDownload:
        if not file_exists(self.uploads_path, service.filename):
            raise ServiceUnavailableError(FILE_UNAVAILABLE)

        service.downloads += 1
        self.services.store(service)

        logger.info("Downloaded service %s file", service.id)
        return FileDownload(self.get_file_path(service.filename), service.filename)

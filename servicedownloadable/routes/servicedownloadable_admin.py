from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from servicedownloadable.dependencies.auth import require_admin
from servicedownloadable.dependencies.services import get_downloadable_service
from servicedownloadable.exceptions import BusinessRuleError
from servicedownloadable.models.service_downloadable import ServiceDownloadable
from servicedownloadable.models.user import User
from servicedownloadable.schemas.servicedownloadable_schemas import ConfigSaveSchema, ProductFileSchema
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.utils.responses import file_response
from servicedownloadable.utils.validation import check_required_params

router = APIRouter()


# -------------------------------
# Upload product file
# -------------------------------
@router.post("/upload")
def upload(
    id: Optional[int] = Form(None),
    file_data: Optional[UploadFile] = File(None),
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    check_required_params({"id": "Product ID is missing"}, {"id": id})
    product = service.products.get_existing_by_id(id, "Product not found")

    return service.upload_product_file(product, file_data)


# -------------------------------
# Replace the file of one order
# -------------------------------
@router.post("/update")
def update(
    order_id: Optional[int] = Form(None),
    file_data: Optional[UploadFile] = File(None),
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    check_required_params({"order_id": "Order ID is missing"}, {"order_id": order_id})
    order = service.orders.get_existing_by_id(order_id, "Order not found")

    service_downloadable = service.resolver.get_order_service(order)
    if not isinstance(service_downloadable, ServiceDownloadable):
        raise BusinessRuleError("Order is not activated")

    return service.update_product_file(service_downloadable, order, file_data)


@router.post("/config_save")
def config_save(
    payload: ConfigSaveSchema,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    data = payload.model_dump(exclude_none=True)
    check_required_params({"id": "Product ID is missing"}, data)
    product = service.products.get_existing_by_id(payload.id, "Product not found")

    return service.save_product_config(product, data)


@router.post("/send_file")
def send_file(
    payload: ProductFileSchema,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    check_required_params({"id": "Product ID is missing"}, payload.model_dump())
    product = service.products.get_existing_by_id(payload.id, "Product not found")

    return file_response(service.send_product_file(product))

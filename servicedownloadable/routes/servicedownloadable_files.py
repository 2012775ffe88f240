from fastapi import APIRouter, Depends

from servicedownloadable.dependencies.auth import require_admin
from servicedownloadable.dependencies.services import get_downloadable_service
from servicedownloadable.models.user import User
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.utils.responses import file_response

router = APIRouter()


# Direct link used by the admin panel
@router.get("/get-file/{id}")
def get_download(
    id: int,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    product = service.products.get_existing_by_id(id, "Product not found")
    return file_response(service.send_product_file(product))

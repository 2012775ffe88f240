from fastapi import APIRouter, Depends

from servicedownloadable.dependencies.auth import require_client
from servicedownloadable.dependencies.services import get_downloadable_service
from servicedownloadable.models.user import User
from servicedownloadable.schemas.servicedownloadable_schemas import ClientSendFileSchema
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.utils.responses import file_response

router = APIRouter()


@router.post("/send_file")
def send_file(
    payload: ClientSendFileSchema,
    service: DownloadableService = Depends(get_downloadable_service),
    current_user: User = Depends(require_client),
):
    return file_response(service.send_file(payload.order_id, current_user.id))

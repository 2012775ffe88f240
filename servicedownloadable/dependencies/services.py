from fastapi import Depends
from sqlmodel import Session

from servicedownloadable.config import settings
from servicedownloadable.database import get_session
from servicedownloadable.services.downloadable_service import DownloadableService
from servicedownloadable.services.order_lifecycle import OrderLifecycle


def get_downloadable_service(session: Session = Depends(get_session)) -> DownloadableService:
    return DownloadableService(session, uploads_path=settings.uploads_path)


def get_order_lifecycle(session: Session = Depends(get_session)) -> OrderLifecycle:
    return OrderLifecycle(session, uploads_path=settings.uploads_path)

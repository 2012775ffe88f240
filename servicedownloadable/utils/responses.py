from fastapi.responses import FileResponse

from servicedownloadable.services.file_storage import FileDownload


def file_response(download: FileDownload) -> FileResponse:
    return FileResponse(
        path=download.path,
        filename=download.filename,
        media_type="application/octet-stream",
    )

"""Tokenized download endpoints."""
import re

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from server.core.config.general_config import SERVER_DIR
from server.core.context import AppContext, get_context
from server.core.errors import NotFoundError
from server.core.models.api_models import DownloadLink, DownloadPageResponse

router = APIRouter()

templates = Jinja2Templates(directory=str(SERVER_DIR / "templates"))

ITEM_INDEX_PATTERN = re.compile(r"[0-9]{1,9}")


@router.get("/download-pdf/{token}", response_model=None)
def download_page(token: str, request: Request, context: AppContext = Depends(get_context)) -> Response:
    """Purchase summary with one link per file, as HTML or as JSON for `Accept: application/json`."""
    page = context.delivery.resolve_bundle_page(token)
    record = page.record
    body = DownloadPageResponse(
        customer=record.customer,
        order_id=record.order_id,
        package_id=record.package_id,
        items=[
            DownloadLink(index=link.index, title=link.item.title, description=link.item.description, url=link.url)
            for link in page.links
        ],
        downloaded=record.downloaded,
        downloaded_at=record.downloaded_at,
    )
    if "application/json" in request.headers.get("accept", ""):
        return JSONResponse(body.model_dump(mode="json", by_alias=True))
    return templates.TemplateResponse(request, "download_page.html", {"page": body})


@router.get("/download-file/{token}/{item_index}", response_model=None)
def download_file(token: str, item_index: str, context: AppContext = Depends(get_context)) -> FileResponse:
    """Stream one purchased file as an attachment. The index is 1-based."""
    if not ITEM_INDEX_PATTERN.fullmatch(item_index):
        raise NotFoundError("File not found")
    resolved = context.delivery.resolve_item(token, int(item_index))
    return FileResponse(resolved.path, media_type=resolved.media_type, filename=resolved.download_name)

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from object_gateway.services.render import ListingRenderer
from object_gateway.services.storage import PRESIGN_TTL, ObjectLister, to_key

router = APIRouter()


def get_lister(request: Request) -> ObjectLister:
    """
    FastAPI dependency returning the bucket view created at startup.
    """
    return request.app.state.lister


def get_renderer(request: Request) -> ListingRenderer:
    return request.app.state.renderer


@router.get("/{path:path}")
def browse(
    request: Request,
    lister: ObjectLister = Depends(get_lister),
    renderer: ListingRenderer = Depends(get_renderer),
):
    """
    Serve a directory listing or redirect to an object.

    Paths ending with "/" (including the root) are listed as HTML.
    Any other path is treated as an object key and answered with a
    308 redirect to a temporary link. Storage and render failures are
    turned into plain-text 500 responses by the registered error handler.
    """
    # Declared as a plain `def`: boto3 blocks, so FastAPI runs it in its thread pool
    path = request.url.path

    if path.endswith("/"):
        entries = lister.list_by_prefix(path)
        return HTMLResponse(renderer.render(path, entries))

    link = lister.get_temporary_link(to_key(path), PRESIGN_TTL)
    return RedirectResponse(link, status_code=308)

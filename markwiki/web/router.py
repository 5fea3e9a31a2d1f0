from datetime import datetime
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from markwiki.config import Settings, get_settings
from markwiki.database.client import DatabaseClient
from markwiki.web.dependencies import get_database_client
from markwiki.web.rendering import page_location, render_markdown, templates


router = APIRouter(tags=["Wiki"])


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    database: DatabaseClient = Depends(get_database_client),
):
    reply = await database.all_pages()
    return templates.TemplateResponse(
        request, "index.html", {"title": "Wiki home", "pages": reply.pages}
    )


@router.get("/wiki/{page}", response_class=HTMLResponse)
async def page_rendering(
    page: str,
    request: Request,
    database: DatabaseClient = Depends(get_database_client),
    settings: Settings = Depends(get_settings),
):
    reply = await database.get_page(page)
    context = {
        "title": page,
        "id": reply.id,
        "newPage": "no" if reply.found else "yes",
        "rawContent": reply.raw_content,
        "content": render_markdown(reply.raw_content, settings.MARKDOWN_EXTENSIONS),
        "timestamp": datetime.now().isoformat(),
    }
    return templates.TemplateResponse(request, "page.html", context)


@router.post("/save")
async def page_update(
    title: str = Form(...),
    markdown: str = Form(""),
    page_id: int = Form(-1, alias="id"),
    new_page: str = Form("no", alias="newPage"),
    database: DatabaseClient = Depends(get_database_client),
) -> RedirectResponse:
    if new_page == "yes":
        await database.create_page(title, markdown)
    else:
        await database.save_page(page_id, markdown)

    return RedirectResponse(page_location(title), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/create")
async def page_create(name: str = Form("")) -> RedirectResponse:
    location = page_location(name) if name else "/"
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/delete")
async def page_deletion(
    page_id: int = Form(..., alias="id"),
    database: DatabaseClient = Depends(get_database_client),
) -> RedirectResponse:
    await database.delete_page(page_id)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)

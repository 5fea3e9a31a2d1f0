from pathlib import Path
from urllib.parse import quote

import markdown
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_markdown(text: str, extensions: list[str] | None = None) -> str:
    return markdown.markdown(text, extensions=extensions or [])


def page_location(name: str) -> str:
    return "/wiki/" + quote(name, safe="")

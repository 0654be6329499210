import os
from typing import Callable, Dict, List, Optional
from fastapi import Request
from fastapi.templating import Jinja2Templates
from models.user import User

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def render_index(
    request: Request,
    users: List[User],
    asset_url: Callable[[str], str],
    flash: Optional[Dict[str, str]] = None,
):
    return templates.TemplateResponse(
        request, "users/index.html", {"users": users, "asset_url": asset_url, "flash": flash}
    )


def render_create_form(
    request: Request,
    errors: Optional[Dict[str, List[str]]] = None,
    old_input: Optional[Dict[str, str]] = None,
    flash: Optional[Dict[str, str]] = None,
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "users/create.html",
        {"errors": errors or {}, "values": old_input or {}, "flash": flash},
        status_code=status_code,
    )


def render_edit_form(
    request: Request,
    user: User,
    asset_url: Callable[[str], str],
    errors: Optional[Dict[str, List[str]]] = None,
    old_input: Optional[Dict[str, str]] = None,
    flash: Optional[Dict[str, str]] = None,
    status_code: int = 200,
):
    """Pre-fills from the rejected submission when there is one, else from the stored record."""
    values = old_input if old_input is not None else {
        "name": user.name,
        "email": user.email,
        "mobile": user.mobile,
        "address": user.address,
    }
    return templates.TemplateResponse(
        request,
        "users/edit.html",
        {
            "user": user,
            "asset_url": asset_url,
            "errors": errors or {},
            "values": values,
            "flash": flash,
        },
        status_code=status_code,
    )


def render_not_found(request: Request, message: str):
    return templates.TemplateResponse(request, "errors/404.html", {"message": message}, status_code=404)

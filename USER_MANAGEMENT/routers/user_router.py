import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from core.database import get_db
from core.exceptions import ValidationError, StorageError, PersistenceError
from providers.storage_provider import get_storage_provider
from schemas.user_schema import UserForm, ImageUpload
from services.user_service import UserService
from views.user_views import render_index, render_create_form, render_edit_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def get_storage():
    return get_storage_provider()


def flash(request: Request, level: str, message: str) -> None:
    request.session["flash"] = {"level": level, "message": message}


def pop_flash(request: Request):
    return request.session.pop("flash", None)


def redirect_to_index() -> RedirectResponse:
    return RedirectResponse("/users", status_code=303)


def index(request: Request, db: Session = Depends(get_db), storage=Depends(get_storage)):
    users = UserService.list_users(db)
    return render_index(request, users, storage.url, flash=pop_flash(request))


def create(request: Request):
    return render_create_form(request)


async def store(request: Request, db: Session = Depends(get_db), storage=Depends(get_storage)):
    form_data = await request.form()
    form = UserForm.from_form(form_data)
    image_upload = await ImageUpload.from_form(form_data)
    try:
        UserService.create_user(db, storage, form, image_upload)
    except ValidationError as e:
        return render_create_form(request, errors=e.errors, old_input=form.model_dump(), status_code=422)
    except (StorageError, PersistenceError) as e:
        logger.error(f"Create user aborted: {e}")
        return render_create_form(
            request,
            old_input=form.model_dump(),
            flash={"level": "error", "message": "User could not be created. Please try again."},
            status_code=500,
        )

    flash(request, "success", "User created successfully.")
    return redirect_to_index()


def edit(user_id: int, request: Request, db: Session = Depends(get_db), storage=Depends(get_storage)):
    user = UserService.get_user(db, user_id)
    return render_edit_form(request, user, storage.url)


async def update(user_id: int, request: Request, db: Session = Depends(get_db), storage=Depends(get_storage)):
    user = UserService.get_user(db, user_id)
    form_data = await request.form()
    form = UserForm.from_form(form_data)
    image_upload = await ImageUpload.from_form(form_data)
    try:
        UserService.update_user(db, storage, user_id, form, image_upload)
    except ValidationError as e:
        return render_edit_form(request, user, storage.url, errors=e.errors, old_input=form.model_dump(), status_code=422)
    except (StorageError, PersistenceError) as e:
        logger.error(f"Update user {user_id} aborted: {e}")
        db.refresh(user)
        return render_edit_form(
            request,
            user,
            storage.url,
            old_input=form.model_dump(),
            flash={"level": "error", "message": "User could not be updated. Please try again."},
            status_code=500,
        )

    flash(request, "success", "User updated successfully.")
    return redirect_to_index()


def destroy(user_id: int, request: Request, db: Session = Depends(get_db), storage=Depends(get_storage)):
    try:
        UserService.delete_user(db, storage, user_id)
    except PersistenceError as e:
        logger.error(f"Delete user {user_id} aborted: {e}")
        flash(request, "error", "User could not be deleted. Please try again.")
        return redirect_to_index()

    flash(request, "success", "User deleted successfully.")
    return redirect_to_index()


# (methods, path, handler, route name)
USER_ROUTES = [
    (["GET"],          "/users",                    index,   "users.index"),
    (["GET"],          "/users/create",             create,  "users.create"),
    (["POST"],         "/users",                    store,   "users.store"),
    (["GET"],          "/users/{user_id}/edit",     edit,    "users.edit"),
    (["PUT", "PATCH"], "/users/{user_id}",          update,  "users.update"),
    (["DELETE"],       "/users/{user_id}",          destroy, "users.destroy"),
]

for methods, path, handler, name in USER_ROUTES:
    router.add_api_route(path, handler, methods=methods, name=name, include_in_schema=False)

import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
from core.config import LOG_LEVEL, SECRET_KEY, UPLOAD_BASE_PATH, PUBLIC_STORAGE_URL, PROFILE_IMAGE_COLLECTION
from core.database import init_db
from core.exceptions import NotFoundError
from core.middleware import MethodOverrideMiddleware
from routers.user_router import router as user_router
from views.user_views import render_not_found

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

os.makedirs(os.path.join(UPLOAD_BASE_PATH, PROFILE_IMAGE_COLLECTION), exist_ok=True)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting user management app...")
    init_db()
    logger.info("Database tables created")

    yield

    logger.info("User management app stopped")

app = FastAPI(title="User Management", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)
app.add_middleware(MethodOverrideMiddleware)

app.mount(PUBLIC_STORAGE_URL, StaticFiles(directory=UPLOAD_BASE_PATH), name="storage")

app.include_router(user_router)

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"Not found: {request.method} {request.url.path}")
    return render_not_found(request, str(exc))

@app.exception_handler(RequestValidationError)
async def path_validation_handler(request: Request, exc: RequestValidationError):
    # forms are parsed by hand, so only a malformed path id lands here
    if all(error.get("loc", ("",))[0] == "path" for error in exc.errors()):
        logger.info(f"Not found: {request.method} {request.url.path}")
        return render_not_found(request, f"User {request.path_params.get('user_id', '')} not found")
    return await request_validation_exception_handler(request, exc)

@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse("/users", status_code=303)

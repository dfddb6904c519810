import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.core.config import settings
from taskboard.core.errors import AppError
from taskboard.db.session import init_db, SessionLocal
from taskboard.models import User, GlobalRole
from taskboard.security import hash_password
from taskboard.routers import auth, projects, tasks, users

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

app = FastAPI(title="Taskboard — project & task collaboration API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        errors.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg"))
    return JSONResponse(status_code=400, content={"message": "Validation error", "errors": errors})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    body = {"message": "Internal Server Error"}
    if settings.DEBUG:
        body["detail"] = repr(exc)
    return JSONResponse(status_code=500, content=body)

@app.on_event("startup")
async def on_startup() -> None:
    init_db()
    if not (settings.SEED_ADMIN_EMAIL and settings.SEED_ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        # seed the first admin if the users table is empty
        if db.query(User).count() == 0:
            db.add(User(name="Administrator", email=settings.SEED_ADMIN_EMAIL.lower(),
                        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
                        role=GlobalRole.admin))
            db.commit()
            logger.info("seeded admin account %s", settings.SEED_ADMIN_EMAIL)
    finally:
        db.close()

@app.get("/")
def index():
    return {"message": f"Project Management API - {API_PREFIX}"}

# Routers
app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)
app.include_router(projects.router, prefix=API_PREFIX)
app.include_router(tasks.router, prefix=API_PREFIX)

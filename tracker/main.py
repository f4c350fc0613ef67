import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from tracker.core.config import settings
from tracker.core.errors import TrackerError, Unauthorized
from tracker.db.base import Base
from tracker.db.session import engine
from tracker.routers import api, auth, dashboard, users

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    # Pages send anonymous visitors to the login form; the API answers with JSON
    if isinstance(exc, Unauthorized) and not request.url.path.startswith("/api"):
        return RedirectResponse(url="/login?error=login_required", status_code=status.HTTP_303_SEE_OTHER)
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong, please try again"})

app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(api.router)
app.include_router(users.router)

@app.get("/health")
async def health():
    return {"status": "healthy"}

# Create tables on startup (no migrations yet)
@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("Application startup")

import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from app.routers import auth, admin_users, offers, criativos, landing_pages, account, dashboard
from app.auth.session import SessionContext
from app.config import settings
from app.errors import RemoteOperationError, InvalidOrExpiredLink
from app.models.landing_page import AssociationIntegrityError
from app.services.activity import track_logins


# Configure logging
if settings.log_format == "json":
    import json as json_mod

    class JsonFormatter(logging.Formatter):
        def format(self, record):
            log_data = {
                "timestamp": self.formatTime(record),
                "level": record.levelname,
                "message": record.getMessage(),
                "module": record.module,
                "request_id": getattr(record, "request_id", None),
            }
            if record.exc_info:
                log_data["exception"] = self.formatException(record.exc_info)
            return json_mod.dumps(log_data)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.root.handlers = [handler]

logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logger = logging.getLogger("swipefile")

TRANSIENT_ERROR_NOTICE = "Não foi possível concluir a operação. Tente novamente."


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

# Create FastAPI application
app = FastAPI(
    title="Swipe File API",
    description="Subscription-gated catalogue of offers, creatives and landing pages",
    version="1.0.0",
    debug=settings.debug,
)

# One session context per application; login tracking listens to it
app.state.session_context = SessionContext()
app.state.session_context.subscribe(track_logins)

# Configure CORS
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RemoteOperationError)
async def remote_operation_error_handler(request: Request, exc: RemoteOperationError):
    logger.error("Remote operation failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": TRANSIENT_ERROR_NOTICE})


@app.exception_handler(InvalidOrExpiredLink)
async def invalid_link_handler(request: Request, exc: InvalidOrExpiredLink):
    return JSONResponse(status_code=400, content={"detail": exc.message, "redirect": "/login"})


@app.exception_handler(AssociationIntegrityError)
async def association_integrity_handler(request: Request, exc: AssociationIntegrityError):
    logger.error("Landing page association integrity violation: %s", exc)
    return JSONResponse(status_code=500, content={"detail": "Inconsistent landing page association"})


# Include routers
app.include_router(auth.router)
app.include_router(admin_users.router)
app.include_router(offers.router)
app.include_router(criativos.router)
app.include_router(landing_pages.router)
app.include_router(account.router)
app.include_router(dashboard.router)

# Public thumbnails
app.mount("/storage", StaticFiles(directory=str(settings.upload_base_dir), check_dir=False), name="storage")


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": "1.0.0"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=settings.debug)

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from applyform.api import routes_applications
from applyform.api.deps import get_store
from applyform.core.config import get_settings
from applyform.core.errors import ApplicationFormError
from applyform.core.logging import get_logger, setup_logging
from applyform.services.session_store import SessionStore

settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.app_name,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

origins = settings.cors_origins_list
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Browsers refuse credentialed requests against a wildcard origin.
    allow_credentials="*" not in origins,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Content-Type", "Accept"],
)


@app.exception_handler(ApplicationFormError)
async def application_form_error_handler(request: Request, exc: ApplicationFormError):
    logger.warning(
        "Unhandled form error",
        extra={"extra": {"path": request.url.path, "error": type(exc).__name__}},
    )
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.get("/healthz")
def healthz(store: SessionStore = Depends(get_store)):
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "submission_mode": settings.submission_mode,
        "open_sessions": len(store),
    }


app.include_router(routes_applications.router)


def run() -> None:
    import uvicorn

    uvicorn.run("applyform.api.main:app", host=settings.api_host, port=settings.api_port, log_config=None)

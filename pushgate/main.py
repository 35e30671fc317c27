import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pushgate import __version__
from pushgate.config import settings
from pushgate.response import error_response
from pushgate.routers import channels

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="pushgate",
    description="Compose and deliver group-chat webhook notifications across channels.",
    version=__version__,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

# CORS
_cors_origins = (
    [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if settings.cors_origins
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Exception Handlers ---


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.status_code, exc.detail),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        clean = {k: v for k, v in err.items() if k != "ctx"}
        if "msg" in clean:
            clean["msg"] = str(clean["msg"])
        errors.append(clean)
    content = error_response(422, "Validation error")
    content["error"]["details"] = errors
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logging.getLogger(__name__).error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_response(500, "Internal server error"),
    )


# --- Routes ---

api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(channels.router)
app.include_router(api_v1)


@app.get("/", summary="API root")
async def root():
    return {"name": settings.app_name, "status": "ok", "version": __version__}


@app.get("/health", summary="Health check")
async def health_ping():
    return {"status": "healthy", "version": __version__}

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from api.config import create_db, get_settings
from api.routes.auth_routes import auth_routes
from api.routes.progress_routes import progress_routes
from api.routes.user_routes import user_routes
from api.services.errors import ProgressWriteConflict, UserNotFound
from api.utils.logger import clear_log_context, configure_logging, set_request_id
from learning.errors import ProgressError

settings = get_settings()
logger = configure_logging()
create_db()

app = FastAPI(title="Evolutia API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, detail, code: str | None = None, headers=None) -> JSONResponse:
    content = {"detail": detail}
    if code:
        content["code"] = code
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.middleware("http")
async def request_context(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    target = f"{request.method} {request.url.path}"
    try:
        response: Response = await call_next(request)
        logger.info("%s -> %s", target, response.status_code)
    except Exception:
        logger.exception("request failed %s", target)
        raise
    finally:
        clear_log_context()
    response.headers["x-request-id"] = rid
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("http error status=%s path=%s detail=%s", exc.status_code, request.url.path, exc.detail)
    return _error(exc.status_code, exc.detail, headers=exc.headers)


@app.exception_handler(ProgressError)
async def progress_error_handler(request: Request, exc: ProgressError) -> JSONResponse:
    logger.warning("rejected progress update code=%s module_id=%s path=%s", exc.code, exc.module_id, request.url.path)
    return _error(HTTP_400_BAD_REQUEST, exc.message, exc.code)


@app.exception_handler(UserNotFound)
async def user_not_found_handler(request: Request, exc: UserNotFound) -> JSONResponse:
    logger.warning("token refers to missing user_id=%s path=%s", exc.user_id, request.url.path)
    return _error(HTTP_404_NOT_FOUND, "User not found", "user_not_found")


@app.exception_handler(ProgressWriteConflict)
async def write_conflict_handler(request: Request, exc: ProgressWriteConflict) -> JSONResponse:
    logger.error("progress write abandoned user_id=%s attempts=%s", exc.user_id, exc.attempts)
    return _error(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("invalid request path=%s errors=%s", request.url.path, exc.errors())
    return _error(HTTP_422_UNPROCESSABLE_ENTITY, jsonable_encoder(exc.errors()), "validation_error")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # internal details stay in the log
    logger.exception("unhandled error path=%s", request.url.path)
    return _error(HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


@app.get("/")
def health():
    return {"message": "Evolutia API is Healthy"}


app.include_router(auth_routes, prefix="/auth")
app.include_router(user_routes)
app.include_router(progress_routes)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)

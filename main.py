import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

import auth
import students
import weekly
from config import configure_logging, settings
from database import init_db
from responses import ApiResponse

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Course Administration API", version="1.0.0")

init_db()

app.add_middleware(SessionMiddleware, secret_key=settings.secret_key)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(auth.router, tags=["auth"])
app.include_router(students.router, tags=["students"])
app.include_router(weekly.router, tags=["weekly"])


def _error_field(request: Request) -> str:
    return "error" if request.url.path.startswith(weekly.router.prefix) else "message"


# ========== Error envelopes ==========
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = ApiResponse.fail(status_code=exc.status_code, **{_error_field(request): str(exc.detail)})
    return response.to_json_response()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
    return ApiResponse.fail(**{_error_field(request): "Invalid request body"}).to_json_response()


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return ApiResponse.fail(status_code=500, **{_error_field(request): "Server error"}).to_json_response()


@app.get("/", tags=["health"])
def read_root():
    return {"success": True, "message": "Course administration API is running", "version": app.version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="127.0.0.1", port=8000)

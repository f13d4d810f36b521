import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exam_portal.config import settings
from exam_portal.database import init_db
from exam_portal.errors import ExamPortalError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ExamPortalError)
async def domain_error_handler(request: Request, exc: ExamPortalError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are a 400 with the first problem as message"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message, "details": jsonable_errors(errors)})


def jsonable_errors(errors):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in errors]


@app.on_event("startup")
async def startup_event():
    """Initialize database on startup"""
    init_db()
    logger.info("%s is starting...", settings.app_name)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.api_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
from exam_portal.routes import auth, questions, submission  # noqa: E402

app.include_router(questions.router, prefix="/api/questions", tags=["Questions"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(submission.router, prefix="/api/submission", tags=["Submission"])


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn

    uvicorn.run("exam_portal.main:app", host=settings.host, port=settings.port, reload=settings.debug)

"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from estimator.config import get_settings
from estimator.database import init_db
from estimator.errors import EstimatorError
from estimator.routers import auth, complexity, dashboard, estimations, hour_mapping, projects, screen_types, screens

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Screen estimation API started (env=%s)", settings.app_env)
    yield


app = FastAPI(
    title="Screen Estimation Service",
    description="Projects, screens, complexity and screen type masters, hour mapping and estimations",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EstimatorError)
async def estimator_error_handler(request: Request, exc: EstimatorError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(screens.router)
app.include_router(complexity.router)
app.include_router(screen_types.router)
app.include_router(hour_mapping.router)
app.include_router(estimations.router)
app.include_router(dashboard.router)


@app.get("/health")
async def health():
    return {"status": "ok"}

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.courses import router as courses_router
from app.api.v1.handicaps import router as handicaps_router
from app.api.v1.health import router as health_router
from app.api.v1.players import router as players_router
from app.api.v1.scores import router as scores_router
from app.api.v1.standings import router as standings_router
from app.api.v1.tournaments import router as tournaments_router
from app.core.exceptions import AppError
from app.core.logging import configure_logging
from app.core.settings import settings

configure_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)

app = FastAPI(title=settings.PROJECT_NAME)

# Local dev: allow Vite dev server to call the API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(
    health_router,
    prefix=settings.API_V1_STR,
    tags=["Health"],
)
app.include_router(
    courses_router,
    prefix=settings.API_V1_STR,
    tags=["Courses"],
)
app.include_router(
    players_router,
    prefix=settings.API_V1_STR,
    tags=["Players"],
)
app.include_router(
    tournaments_router,
    prefix=settings.API_V1_STR,
    tags=["Tournaments"],
)
app.include_router(
    scores_router,
    prefix=settings.API_V1_STR,
    tags=["Scores"],
)
app.include_router(
    handicaps_router,
    prefix=settings.API_V1_STR,
    tags=["Handicaps"],
)
app.include_router(
    standings_router,
    prefix=settings.API_V1_STR,
    tags=["Standings"],
)

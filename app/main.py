import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import select_backend
from app.errors import register_exception_handlers
from app.routers.activity_logs import router as activity_logs_router
from app.routers.addresses import router as addresses_router
from app.routers.auth import router as auth_router
from app.routers.businesses import router as businesses_router
from app.routers.dashboard import router as dashboard_router
from app.routers.households import router as households_router
from app.routers.members import router as members_router
from app.routers.road_development import router as road_development_router
from app.routers.road_lamps import router as road_lamps_router
from app.routers.roads import router as roads_router
from app.routers.sub_roads import router as sub_roads_router
from app.routers.sub_sub_roads import router as sub_sub_roads_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Pick the store once; every request session comes from this backend
    backend = select_backend(settings)
    await backend.prepare()
    app.state.backend = backend
    logger.info("Village records API ready (%s backend)", backend.name)

    yield

    await backend.dispose()


app = FastAPI(title="V-Track Village Records", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health(request: Request):
    return {"status": "ok", "backend": request.app.state.backend.name}


app.include_router(auth_router)
app.include_router(activity_logs_router)
app.include_router(roads_router)
app.include_router(sub_roads_router)
app.include_router(sub_sub_roads_router)
app.include_router(addresses_router)
app.include_router(households_router)
app.include_router(members_router)
app.include_router(businesses_router)
app.include_router(road_lamps_router)
app.include_router(road_development_router)
app.include_router(dashboard_router)

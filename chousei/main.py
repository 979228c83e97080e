import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chousei.config import get_settings
from chousei.controllers.entries import router as entries_router
from chousei.controllers.events import router as events_router
from chousei.controllers.health import router as health_router
from chousei.errors import register_exception_handlers
from chousei.lifespan import lifespan
from chousei.middleware import HTTPLogMiddleware

settings = get_settings()

app = FastAPI(title="Chousei Scheduling API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_origin_regex=settings.cors.origins_regex or None,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.debug.request:
    logging.getLogger("chousei.http").setLevel(logging.DEBUG)
    app.add_middleware(HTTPLogMiddleware)

register_exception_handlers(app)

app.include_router(health_router)
app.include_router(events_router)
app.include_router(entries_router)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cookingdb.api.routes import router as api_router
from cookingdb.config import settings
from cookingdb.logging import configure_logging, get_logger

app = FastAPI(title="CookingDB Recipe Engine")
logger = get_logger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    configure_logging()
    logger.info("startup: %s env=%s", settings.app_name, settings.env)


app.include_router(api_router)

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from waypoint.config import settings  # noqa: E402
from waypoint.dependencies import get_container  # noqa: E402
from waypoint.routers import chat_router, events_router, markers_router, remote_tools_router  # noqa: E402

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = app.dependency_overrides.get(get_container, get_container)()
    await container.startup()
    try:
        yield
    finally:
        await container.shutdown()


app = FastAPI(title="Waypoint Travel Assistant API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router, prefix="/api", tags=["chat"])
app.include_router(markers_router, prefix="/api", tags=["markers"])
app.include_router(events_router, prefix="/api", tags=["events"])
app.include_router(remote_tools_router, prefix="/api", tags=["tools"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


def run():
    import uvicorn

    uvicorn.run("waypoint.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

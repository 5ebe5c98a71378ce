import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .middleware.logging import LoggingMiddleware
from .routers import calendar as calendar_router
from .services.calendar_facade import build_calendar


app = FastAPI(title="panchang-calendar", version="0.1.0")

app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        max_age=86400,
    )
else:
    allowed = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        max_age=86400,
    )

app.add_middleware(LoggingMiddleware)

# One calendar per process; its caches live as long as the app.
app.state.calendar = build_calendar()

app.include_router(calendar_router.router)


@app.get("/__health")
def health():
    return {"ok": True}

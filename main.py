# main.py

import json
import logging

from dotenv import load_dotenv

load_dotenv()  # ← Must precede any import depending on .env

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import get_settings
from core.errors import RequestValidationError, SynthesisError
from core.planner import Collaborators, plan_trip

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def create_app(app_settings=None, collaborators: Collaborators | None = None) -> FastAPI:
    """Build the API; tests pass their own settings and fake collaborators."""
    app_settings = app_settings or settings
    app = FastAPI(title="Budget Itinerary Planner API")
    app.state.settings = app_settings
    app.state.collaborators = collaborators

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return JSONResponse(
                {"error": "Method not allowed"}, status_code=405, headers=exc.headers
            )
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/itinerary")
    async def generate_itinerary_endpoint(request: Request):
        try:
            raw = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return JSONResponse(
                {"error": "Request body is not valid JSON", "details": str(e)},
                status_code=400,
            )

        try:
            # plan_trip does blocking I/O
            itinerary = await run_in_threadpool(
                plan_trip, raw, app.state.settings, app.state.collaborators
            )
        except RequestValidationError as e:
            return JSONResponse(
                {"error": str(e), "details": type(e).__name__}, status_code=400
            )
        except SynthesisError:
            logger.exception("Itinerary synthesis failed")
            return JSONResponse({"error": "Itinerary synthesis failed"}, status_code=500)
        except Exception:
            logger.exception("Unexpected error while planning")
            return JSONResponse({"error": "Itinerary synthesis failed"}, status_code=500)

        return JSONResponse(itinerary.to_dict())

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())

"""
Hot Topic Studio HTTP API.

Thin JSON layer over NewsAggregator:
    GET  /api/hot-topics?platform=baidu|google|yahoo
    POST /api/generate-content
    GET  /api/test
"""

import datetime
import logging
import os
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.errors import InputValidationError
from src.hot_topics import NewsAggregator, build_aggregator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    topic: Optional[str] = None
    source: Optional[str] = None
    platform: Optional[str] = None
    originalNews: Optional[Dict[str, Any]] = None  # pylint: disable=invalid-name


def _json_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": message}
    )


def create_app(aggregator: Optional[NewsAggregator] = None) -> FastAPI:
    """Builds the API around an aggregator (wired from config when omitted)."""
    aggregator = aggregator or build_aggregator()

    app = FastAPI(
        title="Hot Topic Studio API",
        version="1.0.0",
        description="Hot topics from Baidu, Google and Yahoo with generated content.",
    )

    _cors = os.getenv("CORS_ORIGINS", "*").strip()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if _cors == "*" else [o.strip() for o in _cors.split(",") if o.strip()],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InputValidationError)
    async def input_error_handler(_: Request, exc: InputValidationError):
        return _json_error(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(_: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed request body: %s", exc.errors())
        return _json_error(400, "Invalid request body")

    @app.get("/api/hot-topics")
    def hot_topics(platform: str = Query("baidu")):
        """Ordered topic list for a platform."""
        try:
            topics = aggregator.get_topics(platform)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to fetch hot topics: %s", e)
            return _json_error(500, "Failed to fetch hot topics")
        return {"success": True, "data": topics}

    @app.post("/api/generate-content")
    def generate_content(body: GenerateRequest):
        """Text and image for one topic."""
        if not body.topic or not body.topic.strip():
            raise InputValidationError("Missing topic")

        topic: Dict[str, Any] = dict(body.originalNews or {})
        topic["title"] = body.topic

        try:
            content = aggregator.generate_for_topic(topic, body.platform, source=body.source)
        except InputValidationError:
            raise
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Failed to generate content: %s", e)
            return _json_error(500, "Failed to generate content")

        return {
            "success": True,
            "data": {
                "text": content["text"],
                "imageUrl": content["image_url"],
                "imagePrompt": content["image_prompt"],
            },
        }

    @app.get("/api/test")
    def api_test():
        return {
            "success": True,
            "message": "API is working!",
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }

    return app


def main():
    """Runs the API server."""
    uvicorn.run(
        "src.app:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )


if __name__ == "__main__":
    main()

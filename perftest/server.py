"""
HTTP front end for the perf test: one button's worth of API.

POST /run executes a full CDN vs. S3 comparison and returns the report. Only
one run may be in flight; a second request while one is running gets 409.
"""

from typing import Callable

import structlog
from fastapi import FastAPI, HTTPException, Response

from .errors import ExtractionError, TransportError
from .fetcher import HTTPFetcher
from .perf_test import run_perf_test

logger = structlog.get_logger(__name__)


def create_app(fetcher_factory: Callable[[], HTTPFetcher] = HTTPFetcher) -> FastAPI:
    app = FastAPI(title="Rally Rd Performance Test")
    app.state.is_running = False

    @app.post("/run")
    async def run():
        """Run the CDN vs. S3 comparison and return `{message, data}`."""
        if app.state.is_running:
            logger.warning("run_rejected_already_running")
            raise HTTPException(status_code=409, detail="A performance test is already running")

        app.state.is_running = True
        try:
            async with fetcher_factory() as fetcher:
                outcome = await run_perf_test(fetcher)
        except TransportError as e:
            logger.error("run_failed_transport", error=str(e), status_code=e.status_code)
            raise HTTPException(status_code=502, detail=str(e))
        except ExtractionError as e:
            logger.error("run_failed_extraction", error=str(e), path=e.path)
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            logger.error("run_failed", error=str(e), exc_info=True)
            raise HTTPException(status_code=500, detail=f"Performance test failed: {str(e)}")
        finally:
            app.state.is_running = False

        logger.info("run_completed", message=outcome.message)
        # Comparison values may be NaN or Infinity, which the stdlib JSON encoder rejects.
        return Response(content=outcome.to_json(), media_type="application/json")

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "running": app.state.is_running}

    return app


app = create_app()

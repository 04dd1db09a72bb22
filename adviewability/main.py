"""
FastAPI application entry point.
Measures viewability of elements in posted page snapshots.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException

from adviewability.config import settings
from adviewability.errors import CrossOriginAccessError, ViewabilityError
from adviewability.host.snapshot import SnapshotHost
from adviewability.models import (
    MeasureRequest,
    MeasureResponse,
    ReplayRequest,
    ReplayResponse,
)
from adviewability.monitor.scheduler import ManualScheduler
from adviewability.monitor.state import VisibilityCheckState
from adviewability.monitor.viewability_monitor import ViewabilityMonitor
from adviewability.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info(
        "Starting Viewability Engine",
        version="1.0.0",
        poll_interval_ms=settings.poll_interval_ms,
    )
    yield
    logger.info("Shutting down Viewability Engine")


app = FastAPI(
    title="Viewability Engine",
    description="MRC viewability measurement for nested-frame ad placements",
    version="1.0.0",
    lifespan=lifespan,
)


# ============== Health Endpoints ==============

@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


# ============== Viewability API ==============

@app.post("/viewability/measure", response_model=MeasureResponse)
async def measure(request: MeasureRequest) -> MeasureResponse:
    """Take a single viewability sample of one element."""
    if not request.snapshot.has_element(request.element_id):
        raise HTTPException(status_code=404, detail=f"Unknown element: {request.element_id}")

    host = SnapshotHost(request.snapshot)
    monitor = ViewabilityMonitor(host, ManualScheduler())
    accepted = monitor.accepted_percentage_for(host.get_bounding_rect(request.element_id).area)

    try:
        sample = monitor.evaluate(request.element_id, accepted)
    except CrossOriginAccessError as e:
        logger.warning("Measurement blocked by cross-origin frame", element_id=request.element_id)
        raise HTTPException(status_code=403, detail=str(e))
    except ViewabilityError as e:
        logger.error("Measurement failed", element_id=request.element_id, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return MeasureResponse(
        element_id=request.element_id,
        accepted_viewable_percentage=accepted,
        sample=sample.to_dict(),
    )


@app.post("/viewability/replay", response_model=ReplayResponse)
async def replay(request: ReplayRequest) -> ReplayResponse:
    """
    Replay a timeline of snapshots through a monitoring session.

    Snapshot N is the page as seen by tick N. Replay ends early once the
    session stops (verdict reached outside debug mode, or a permanent error).
    """
    for index, frame in enumerate(request.frames):
        if not frame.has_element(request.element_id):
            raise HTTPException(
                status_code=404,
                detail=f"Element {request.element_id} missing from frame {index}",
            )

    host = SnapshotHost(request.frames[0])
    scheduler = ManualScheduler()
    monitor = ViewabilityMonitor(host, scheduler, debug_mode=request.debug_mode)

    statuses: list[VisibilityCheckState] = []
    session = monitor.check_viewability(request.element_id, statuses.append)

    for frame in request.frames:
        if not session.running:
            break
        host.load(frame)
        scheduler.advance(session.interval_ms)
    session.stop()

    final = statuses[-1]
    logger.info(
        "Timeline replayed",
        element_id=request.element_id,
        ticks=len(statuses),
        viewable=final.viewability_status,
    )
    return ReplayResponse(
        element_id=request.element_id,
        viewable=final.viewability_status,
        ticks=len(statuses),
        duration_ms=final.duration,
        statuses=statuses,
    )


def run_server():
    """Run the FastAPI server (for CLI entry point)."""
    import uvicorn
    uvicorn.run("adviewability.main:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    run_server()

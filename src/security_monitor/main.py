"""FastAPI control surface for the continuous security monitor."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import load_config, resolve_log_level
from .errors import ConcurrentScanRejected
from .models import Finding, MonitorStatus, ScanReport, StartRequest
from .monitor import SecurityMonitor

# Configure logging
logging.basicConfig(level=resolve_log_level())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _monitor is not None:
        await asyncio.to_thread(_monitor.close)


app = FastAPI(
    lifespan=lifespan,
    title="Security Monitor",
    description="Continuous scanning of a source tree for suspicious patterns and credentials",
    version="0.1.0",
)

# CORS - allow common development origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://localhost:8000",
    ],
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)

_monitor: Optional[SecurityMonitor] = None


def get_monitor() -> SecurityMonitor:
    """Return the process-wide monitor, creating it from config on first use."""
    global _monitor
    if _monitor is None:
        _monitor = SecurityMonitor(load_config())
    return _monitor


def set_monitor(monitor: Optional[SecurityMonitor]) -> None:
    global _monitor
    _monitor = monitor


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post("/scan", response_model=ScanReport)
async def scan() -> ScanReport:
    """Run one scan cycle. Returns 409 if a cycle is already running."""
    monitor = get_monitor()
    try:
        return await asyncio.to_thread(monitor.scan_once)
    except ConcurrentScanRejected as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        raise HTTPException(status_code=500, detail=f"Scan failed: {str(e)}")


@app.post("/start", response_model=MonitorStatus)
async def start(request: Optional[StartRequest] = None) -> MonitorStatus:
    """Start recurring monitoring; a no-op if already running."""
    monitor = get_monitor()
    interval = request.interval_seconds if request else None
    await asyncio.to_thread(monitor.start, interval)
    return monitor.status()


@app.post("/stop", response_model=MonitorStatus)
async def stop() -> MonitorStatus:
    monitor = get_monitor()
    monitor.stop()
    return monitor.status()


@app.get("/status", response_model=MonitorStatus)
async def status() -> MonitorStatus:
    return get_monitor().status()


@app.post("/test", response_model=Finding)
async def test_alert() -> Finding:
    """Send a synthetic finding through the normal dispatch path."""
    return get_monitor().generate_test_finding()

"""
FastAPI application: backend for the grade lookup.

Run as a script to build any missing data then serve:
    python app/app.py

Or run as a module if data/grades.json is already built:
    uvicorn app.app:app --reload

Endpoints:
    GET /api/courses/search?query=<text>[&limit=10]
        returns: [{"suggestion": str, "type": "course" | "professor"}, ...]
    GET /api/courses/search?course=<course code>
        returns: [SectionRecord, ...] for that course, newest first
    GET /api/courses/search?professor=<name>
        returns: [SectionRecord, ...] taught by that instructor, newest first
    GET /health

Exactly one of query / course / professor selects the behaviour.

Logs each search and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException, Query

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from grades.config import GRADES_FILE, LOG_DIR
from grades.models import SectionRecord, Suggestion
from grades.search import SuggestionIndex
from grades.store import GradeStore

LOG_FILE = LOG_DIR / "app.log"


def _setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# Data orchestration
# ---------------------------------------------------------------------------

def _ensure_data() -> None:
    """Run the ETL step if grades.json has not been built yet."""
    if not GRADES_FILE.exists():
        log.info("[1/1] grades.json missing, running ETL pipeline…")
        from etl.pipeline import run as run_pipeline
        records = run_pipeline()
        log.info("  Built %d sections → grades.json", len(records))
    else:
        log.info("[1/1] grades.json exists, skipping.")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_store: GradeStore | None = None
_index: SuggestionIndex | None = None


def init_search(store: GradeStore) -> None:
    """Install the store and build the suggestion index over it."""
    global _store, _index
    _store = store
    _index = SuggestionIndex(store)
    log.info("  Suggestion index ready: %d entries.", len(_index.entries))


@asynccontextmanager
async def lifespan(_: FastAPI):
    log.info("Loading grade data…")
    store = GradeStore.load()
    log.info("  %d sections loaded.", len(store.records))
    init_search(store)

    yield  # server runs here


app = FastAPI(title="UTA Grades", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "sections": len(_store.records) if _store else 0,
        "courses": len(_store.courses()) if _store else 0,
        "professors": len(_store.professors()) if _store else 0,
    }


@app.get("/api/courses/search", response_model=None)
def search(
    query: str | None = None,
    course: str | None = None,
    professor: str | None = None,
    limit: int = Query(10, ge=1, le=50),
) -> list[Suggestion] | list[SectionRecord]:
    given = [name for name, value in (("query", query), ("course", course), ("professor", professor))
             if value is not None]
    if len(given) != 1:
        raise HTTPException(
            status_code=400,
            detail="Provide exactly one of 'query', 'course' or 'professor'.",
        )
    if _store is None or _index is None:
        raise HTTPException(status_code=503, detail="Grade data not loaded.")

    t0 = time.perf_counter()

    if query is not None:
        if not query.strip():
            raise HTTPException(status_code=400, detail="Query must not be empty.")
        results = _index.query(query, limit=limit)
    elif course is not None:
        results = _store.sections_for_course(course)
    else:
        results = _store.sections_for_professor(professor)

    elapsed = time.perf_counter() - t0
    log.info("search %s=%r  hits=%d  %.3fs", given[0], query or course or professor, len(results), elapsed)
    return results


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host="0.0.0.0", port=8000, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== UTA Grades: starting up ===")
    _ensure_data()
    log.info("=== All data ready, launching server on http://0.0.0.0:8000 ===")
    _launch_server()

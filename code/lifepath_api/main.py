import logging

from fastapi import FastAPI, HTTPException

from lifepath.catalog import PathCatalog
from lifepath.schemas import ValidationError
from lifepath.simulator import SimulationCache, Simulator

from lifepath_api.core.config import CATALOG_PATH, LOG_LEVEL, SIMULATION_CACHE_SIZE
from lifepath_api.core.models import (
    CatalogResponse,
    CompareRequest,
    CompareResponse,
    EvaluateRequest,
    EvaluateResponse,
)
from lifepath_api.core.pipeline import list_paths, run_compare, run_evaluate

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="LifePath Advisor API")

catalog = PathCatalog.from_json(CATALOG_PATH)
simulator = Simulator(SimulationCache(max_entries=SIMULATION_CACHE_SIZE or None))


@app.get("/health")
def health():
    return {"status": "ok", "paths": len(catalog), "cachedSimulations": len(simulator.cache)}


@app.get("/career-paths", response_model=CatalogResponse)
def career_paths():
    return list_paths(catalog)


@app.post("/career-paths/compare", response_model=CompareResponse)
def compare(payload: CompareRequest):
    try:
        return run_compare(payload, catalog, simulator)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail={"error": "Invalid request", "reason": str(exc)})
    except Exception:
        logger.exception("compare failed")
        raise HTTPException(status_code=500, detail={"error": "Server error while comparing career paths"})


@app.post("/career-advisor/evaluate", response_model=EvaluateResponse)
def evaluate(payload: EvaluateRequest):
    try:
        return run_evaluate(payload, catalog, simulator)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail={"error": "Invalid request", "reason": str(exc)})
    except Exception:
        logger.exception("evaluate failed")
        raise HTTPException(status_code=500, detail={"error": "Failed to evaluate career paths"})

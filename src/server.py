"""
FastAPI server for the PawPrint matching service.

Exposes:
  - GET /health - Health check
  - POST /run-graph - Execute a graph (search, scan_match, home_feed)
  - GET /docs - Interactive API documentation (Swagger UI)
  - GET /openapi.json - OpenAPI schema
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Callable, Dict, Any, Optional, Annotated
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

from src.config import config, validate_config
from src.utils.errors import GraphExecutionError
from src.utils.logging_config import logger, setup_logging

from src.graphs.home_feed import create_home_feed_graph
from src.graphs.scan_match import create_scan_match_graph
from src.graphs.search import create_search_graph
from src.tools.llm_client import is_llm_configured

setup_logging(debug=config.DEBUG)

# ============================================================
# VALIDATE CONFIGURATION AT STARTUP
# ============================================================
try:
    config_status = validate_config()
    logger.info("Configuration validated successfully")
    for key, value in config_status.items():
        logger.info(f"  {key}: {value}")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    exit(1)

GRAPH_FACTORIES: Dict[str, Callable[[], Any]] = {
    "search": create_search_graph,
    "scan_match": create_scan_match_graph,
    "home_feed": create_home_feed_graph,
}

# Graph runs happen off the request thread so they can be bounded by GRAPH_TIMEOUT.
graph_executor = ThreadPoolExecutor(thread_name_prefix="graph")

# ============================================================
# FASTAPI APPLICATION
# ============================================================
app = FastAPI(
    title="PawPrint Matching Service",
    description="Search, photo-scan matching and home feed for lost and found pets",
    version="1.0.0",
)

origins = [
    "http://localhost:8081",  # Expo dev server
    "http://localhost:19006",  # Expo web
    "http://localhost:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# REQUEST/RESPONSE MODELS
# ============================================================
class GraphRequest(BaseModel):
    """
    Request body for /run-graph endpoint.

    Attributes:
        graph (str): One of 'search', 'scan_match', 'home_feed'.
        input (dict): Input state for the graph.
    """
    graph: str
    input: Dict[str, Any]


class GraphResponse(BaseModel):
    """
    Response body for /run-graph endpoint.

    Attributes:
        success (bool): Whether the graph executed
        graph (str): Name of the graph that was executed
        data (dict): Final graph state
        error (Optional[str]): Error message if something went wrong
    """
    success: bool
    graph: str
    data: Dict[str, Any] = {}
    error: Optional[str] = None


# ============================================================
# MIDDLEWARE
# ============================================================
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add an X-Process-Time header with the request duration in seconds."""
    start_time = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = str(time.time() - start_time)
    return response


# ============================================================
# ROUTES
# ============================================================

@app.get("/health", tags=["System"])
async def health_check() -> Dict[str, str]:
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy"}


@app.post("/run-graph", response_model=GraphResponse, tags=["Graphs"])
def run_graph(
    request: GraphRequest,
    authorization: Annotated[Optional[str], Header()] = None,
) -> GraphResponse:
    """
    Execute a graph and return its final state.

    Supported graphs:
      - search: Multi-criteria report filtering
      - scan_match: Photo (or probe) matching against stored reports
      - home_feed: Nearby urgent/recent/found sections and reunions

    Raises:
        HTTPException: 401 on bad token, 400 on unknown graph, 500 on
                       execution failure, 504 on timeout.
    """
    if config.AI_SERVICE_TOKEN:
        expected = f"Bearer {config.AI_SERVICE_TOKEN}"
        if authorization != expected:
            logger.warning("Unauthorized request: invalid or missing token")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
            )

    logger.info(f"Received request for graph: {request.graph}")
    logger.debug(f"Input keys: {list(request.input.keys())}")

    factory = GRAPH_FACTORIES.get(request.graph)
    if factory is None:
        logger.error(f"Unknown graph: {request.graph}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown graph: {request.graph}. "
                   f"Valid options: {', '.join(GRAPH_FACTORIES)}",
        )

    start_time = time.time()
    try:
        graph = factory()
        future = graph_executor.submit(graph.invoke, request.input)
        result = future.result(timeout=config.GRAPH_TIMEOUT)
    except (FuturesTimeoutError, TimeoutError):
        execution_time = time.time() - start_time
        logger.error(f"{request.graph} graph timed out after {execution_time:.2f}s")
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"Graph execution timed out after {config.GRAPH_TIMEOUT}s",
        )
    except GraphExecutionError as e:
        logger.error(f"{request.graph} graph could not be built: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Graph execution failed: {str(e)}",
        )
    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(f"{request.graph} graph failed after {execution_time:.2f}s: {str(e)}")
        logger.exception("Full traceback:")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Graph execution failed: {str(e)}",
        )

    execution_time = time.time() - start_time
    logger.info(
        "run-graph summary: graph=%s input_keys=%s success=%s time=%.2fs",
        request.graph,
        list(request.input.keys()),
        True,
        execution_time,
    )
    return GraphResponse(success=True, graph=request.graph, data=result, error=None)


@app.get("/", tags=["System"])
async def root() -> Dict[str, str]:
    """Service information and documentation links."""
    return {
        "service": "PawPrint Matching Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return HTTP errors in a consistent format."""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "status_code": exc.status_code,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all handler; never leaks internal error messages to clients."""
    logger.error(f"Unhandled exception: {str(exc)}")
    logger.exception("Full traceback:")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "Internal server error",
            "status_code": 500,
        },
    )


# ============================================================
# STARTUP EVENTS
# ============================================================

@app.on_event("startup")
async def startup_event():
    """Log startup configuration."""
    logger.info("=" * 60)
    logger.info("PawPrint Matching Service starting up")
    logger.info(f"Firebase Project: {config.FIREBASE_PROJECT_ID}")
    logger.info(f"Debug Mode: {config.DEBUG}")
    logger.info(f"Photo analysis: {'enabled' if is_llm_configured() else 'disabled (probe required)'}")
    logger.info(f"Graph Timeout: {config.GRAPH_TIMEOUT}s")
    logger.info(f"Max Reports: {config.MAX_REPORTS}")
    logger.info(
        f"Radii: near-me {config.NEAR_ME_RADIUS_KM}km, search {config.DEFAULT_SEARCH_RADIUS_KM}km"
    )
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("PawPrint Matching Service shutting down")


# ============================================================
# ENTRY POINT
# ============================================================

if __name__ == "__main__":
    """Run with: python -m uvicorn src.server:app --reload"""
    import uvicorn
    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="info" if not config.DEBUG else "debug",
    )

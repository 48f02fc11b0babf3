import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import config, graph, schemas
from .auth import require_graph_token
from .errors import EnumerationTimeout, GraphEngineError, LoadError
from .store import GraphStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> GraphStore:
    return request.app.state.store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "ERROR", "message": message})


class BodySizeLimitMiddleware:
    """Rejects request bodies over MAX_BODY_BYTES.

    A declared Content-Length is checked up front; chunked bodies are counted
    as they are read and fail with 413 once they cross the limit.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        limit = config.MAX_BODY_BYTES
        too_large = f"Request body exceeds {limit} bytes"
        length = dict(scope["headers"]).get(b"content-length", b"")
        if length.isdigit() and int(length) > limit:
            await _error(413, too_large)(scope, receive, send)
            return

        received = 0

        async def limited_receive():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise HTTPException(413, too_large)
            return message

        await self.app(scope, limited_receive, send)


router = APIRouter(dependencies=[Depends(require_graph_token)])


@router.post("/graph/warmup", response_model=schemas.StatusOut, response_model_exclude_none=True)
def warmup(store: GraphStore = Depends(get_store)):
    if store.is_loaded:
        return {"status": "OK", "graph": "ready", "generation": store.generation}
    return {"status": "WAIT", "message": "Graph has not been built yet"}


@router.post("/build-graph", response_model=schemas.BuildGraphOut)
def build_graph(body: schemas.BuildGraphIn | None = None, store: GraphStore = Depends(get_store)):
    body = body or schemas.BuildGraphIn()
    result = graph.build_graph(
        store,
        [a.model_dump() for a in body.applications],
        body.users_by_id,
    )
    return {"nodes": result.node_count, "relationships": result.edge_count}


@router.post("/graph/chains", response_model=schemas.ChainsOut)
def chains(store: GraphStore = Depends(get_store)):
    found = graph.find_chains(store)
    return {"chains": [
        schemas.ChainOut(people=c.people, length=c.length, avg_priority=c.avg_priority) for c in found
    ]}


@router.post("/graph/summary", response_model=schemas.SummaryOut)
def summary(store: GraphStore = Depends(get_store)):
    rows = graph.summarize(store)
    return {"relationships": [
        {"from_name": r.from_label, "to_name": r.to_label, "priority": r.priority} for r in rows
    ]}


def create_app(store: GraphStore | None = None) -> FastAPI:
    app = FastAPI(title="Graph Engine")
    app.state.store = store if store is not None else GraphStore(config.DUPLICATE_EDGE_POLICY)

    app.add_middleware(BodySizeLimitMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(_request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ()))
        return _error(422, f"{where}: {first.get('msg', 'invalid request')}")

    @app.exception_handler(LoadError)
    async def load_error(_request: Request, exc: LoadError):
        logger.warning("Graph build rejected: %s", exc)
        return _error(400, str(exc))

    @app.exception_handler(EnumerationTimeout)
    async def enumeration_timeout(_request: Request, exc: EnumerationTimeout):
        logger.warning("Chain search aborted: %s", exc)
        return _error(503, str(exc))

    @app.exception_handler(GraphEngineError)
    async def engine_error(_request: Request, exc: GraphEngineError):
        logger.error("Graph engine failure: %s", exc, exc_info=exc)
        return _error(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error(_request: Request, exc: Exception):
        logger.error("Unhandled error: %s", exc, exc_info=exc)
        return _error(500, str(exc) or "Unknown error")

    @app.get("/health", response_model=schemas.StatusOut, response_model_exclude_none=True)
    def health(store: GraphStore = Depends(get_store)):
        # liveness only; whether a graph has been built is reported, readiness lives in /graph/warmup
        return {"status": "OK", "graph": "ready" if store.is_loaded else "empty", "generation": store.generation}

    app.include_router(router)
    return app


app = create_app()

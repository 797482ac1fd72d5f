import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import GatewaySettings, cors_origins, server_port
from errors import CorrectionError
from gateway import ModelGateway

# Routers
from routers.analyze import router as analyze_router
from routers.health import router as health_router

logger = logging.getLogger("correttore-verifiche")
logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.gateway.settings
    logger.info("ZAI_API_KEY present: %s", settings.has_api_key)
    logger.info("ZAI_API_BASE_URL: %s", settings.base_url)
    yield
    app.state.gateway.close()


app = FastAPI(title="Correttore Verifiche – Correction API", lifespan=lifespan)

# Created here, not in lifespan, so TestClient(app) without a `with` block still works.
# The HTTP client inside is only built on the first model call.
app.state.gateway = ModelGateway(GatewaySettings.from_env())

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(error: str, details=None, key: str = "details") -> dict:
    body = {"error": error}
    if details:
        body[key] = details
    return body


@app.exception_handler(CorrectionError)
async def correction_error_handler(request: Request, exc: CorrectionError):
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.details))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=_error_body("Richiesta non valida.", problems))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=_error_body("Errore durante l'analisi.", "Errore sconosciuto", key="message"),
    )


# Register routers
app.include_router(analyze_router)  # /api/analyze
app.include_router(health_router)  # /health, /debug


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=server_port())

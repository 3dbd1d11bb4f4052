# fidelidade/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from fidelidade.infrastructure.config import get_settings
from fidelidade.interfaces.api.errors import registrar_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from fidelidade.infrastructure.duckdb_connection import get_connection
    get_connection()  # valida conexao e cria schema no startup
    yield


app = FastAPI(
    title="Fidelidade API",
    debug=get_settings().debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)

registrar_handlers(app)


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response  # type: ignore[return-value]


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

from fidelidade.interfaces.api.routes.beneficiario_routes import router as beneficiario_router  # noqa: E402
from fidelidade.interfaces.api.routes.perfil_routes import router as perfil_router  # noqa: E402
from fidelidade.interfaces.api.routes.vagas_routes import router as vagas_router  # noqa: E402

app.include_router(perfil_router, prefix="/api")
app.include_router(beneficiario_router, prefix="/api")
app.include_router(vagas_router, prefix="/api")

# fidelidade/interfaces/api/errors.py
"""Traducao de ErroDominio para respostas HTTP. Nenhum erro de dominio vaza como 500."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fidelidade.domain.erros import (
    ErroAcessoNegado,
    ErroConflito,
    ErroDominio,
    ErroEstadoInvalido,
    ErroLimiteExcedido,
    ErroNaoEncontrado,
    ErroPersistencia,
    ErroValidacao,
)
from fidelidade.infrastructure.log import log

STATUS_POR_ERRO: dict[type[ErroDominio], int] = {
    ErroValidacao: 422,
    ErroConflito: 409,
    ErroLimiteExcedido: 400,
    ErroEstadoInvalido: 400,
    ErroNaoEncontrado: 404,
    ErroAcessoNegado: 403,
    ErroPersistencia: 500,
}


def status_http(erro: ErroDominio) -> int:
    for tipo, status in STATUS_POR_ERRO.items():
        if isinstance(erro, tipo):
            return status
    return 400


async def erro_dominio_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, ErroDominio):
        raise exc
    status = status_http(exc)
    if status >= 500:
        log(f"Erro interno em {request.method} {request.url.path}: {exc.mensagem}")
        return JSONResponse(status_code=status, content={"detail": "Erro interno"})
    return JSONResponse(status_code=status, content={"detail": exc.mensagem})


def registrar_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ErroDominio, erro_dominio_handler)

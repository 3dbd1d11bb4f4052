# fidelidade/domain/erros.py
"""Taxonomia de erros de dominio.

Servicos levantam estas excecoes; a camada HTTP as traduz em respostas
(interfaces/api/errors.py). Value objects continuam levantando ValueError,
convertido em ErroValidacao pelos servicos.
"""
from __future__ import annotations


class ErroDominio(Exception):
    """Base de todos os erros esperados do dominio."""

    def __init__(self, mensagem: str) -> None:
        super().__init__(mensagem)
        self.mensagem = mensagem


class ErroValidacao(ErroDominio):
    """Entrada mal formada: data, CPF, nome. Detectado antes de tocar o repositorio."""


class ErroConflito(ErroDominio):
    """CPF duplicado no mesmo perfil+programa."""


class ErroLimiteExcedido(ErroDominio):
    """Teto de vagas do programa atingido no cadastro."""


class ErroEstadoInvalido(ErroDominio):
    """Operacao invalida para o estado atual do registro."""


class ErroNaoEncontrado(ErroDominio):
    pass


class ErroAcessoNegado(ErroDominio):
    pass


class ErroPersistencia(ErroDominio):
    """Falha de armazenamento que nao e violacao de unicidade."""

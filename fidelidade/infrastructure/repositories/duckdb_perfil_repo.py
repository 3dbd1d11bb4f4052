# fidelidade/infrastructure/repositories/duckdb_perfil_repo.py
from __future__ import annotations

import duckdb

from fidelidade.domain.beneficiario.value_objects import CPF
from fidelidade.domain.calendario import FUSO_BRASIL
from fidelidade.domain.erros import ErroConflito, ErroPersistencia
from fidelidade.domain.perfil.entities import Perfil


class DuckDBPerfilRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def buscar_por_id(self, perfil_id: str) -> Perfil | None:
        row = self._conn.execute(
            "SELECT id, usuario_id, nome, cpf, criado_em FROM perfil WHERE id = ?",
            [perfil_id],
        ).fetchone()
        return self._hidratar(row) if row else None

    def listar_por_usuario(self, usuario_id: str) -> list[Perfil]:
        rows = self._conn.execute(
            """SELECT id, usuario_id, nome, cpf, criado_em FROM perfil
               WHERE usuario_id = ? ORDER BY criado_em""",
            [usuario_id],
        ).fetchall()
        return [self._hidratar(r) for r in rows]

    def existe_cpf(self, usuario_id: str, cpf: CPF) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM perfil WHERE usuario_id = ? AND cpf = ? LIMIT 1",
            [usuario_id, cpf.valor],
        ).fetchone()
        return row is not None

    def criar(self, perfil: Perfil) -> Perfil:
        criado_em = perfil.criado_em
        if criado_em is not None and criado_em.tzinfo is not None:
            criado_em = criado_em.astimezone(FUSO_BRASIL).replace(tzinfo=None)
        try:
            self._conn.execute(
                "INSERT INTO perfil (id, usuario_id, nome, cpf, criado_em) VALUES (?, ?, ?, ?, ?)",
                [perfil.id, perfil.usuario_id, perfil.nome, perfil.cpf.valor, criado_em],
            )
        except duckdb.ConstraintException as err:
            raise ErroConflito("CPF ja cadastrado") from err
        except duckdb.Error as err:
            raise ErroPersistencia(f"Falha de armazenamento: {err}") from err
        return perfil

    def excluir(self, perfil_id: str) -> None:
        self._conn.execute("DELETE FROM perfil WHERE id = ?", [perfil_id])

    def _hidratar(self, row: tuple) -> Perfil:  # type: ignore[type-arg]
        return Perfil(
            id=str(row[0]),
            usuario_id=str(row[1]),
            nome=str(row[2]),
            cpf=CPF(str(row[3])),
            criado_em=row[4].replace(tzinfo=FUSO_BRASIL) if row[4] else None,
        )

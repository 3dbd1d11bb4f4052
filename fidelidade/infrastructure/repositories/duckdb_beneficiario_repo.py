# fidelidade/infrastructure/repositories/duckdb_beneficiario_repo.py
#
# DuckDB implementation of BeneficiarioRepository.
#
# Design decisions:
#   - transacao() wraps BEGIN/COMMIT/ROLLBACK on the repo's connection and is
#     re-entrant: a service that already opened a transaction can call helpers
#     that open their own without nesting BEGIN (DuckDB rejects nested BEGIN).
#   - Storage errors never leave this module as duckdb exceptions. A UNIQUE
#     violation (perfil_id, programa, cpf) becomes ErroConflito; anything else
#     becomes ErroPersistencia.
#   - data_alteracao is stored as a naive TIMESTAMP in Brazil wall-clock and
#     re-attached to FUSO_BRASIL on read, so both halves of a pair compare
#     equal bit-for-bit after a round trip.
#   - atualizar() only writes the cpf column when it actually changed: DuckDB
#     rewrites indexed columns as delete+insert, which we keep out of the
#     multi-statement substitution transactions.
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime

import duckdb

from fidelidade.domain.beneficiario.entities import Beneficiario
from fidelidade.domain.beneficiario.enums import Programa, Status
from fidelidade.domain.beneficiario.value_objects import CPF
from fidelidade.domain.calendario import FUSO_BRASIL
from fidelidade.domain.erros import ErroConflito, ErroPersistencia

_COLUNAS = """id, perfil_id, programa, nome, cpf, data_emissao, status,
              data_alteracao, substituicao_id, nome_anterior, cpf_anterior,
              data_emissao_anterior, criado_em"""


def _para_banco(instante: datetime | None) -> datetime | None:
    if instante is None:
        return None
    if instante.tzinfo is not None:
        instante = instante.astimezone(FUSO_BRASIL)
    return instante.replace(tzinfo=None)


def _do_banco(instante: datetime | None) -> datetime | None:
    if instante is None:
        return None
    return instante.replace(tzinfo=FUSO_BRASIL)


class DuckDBBeneficiarioRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn
        self._em_transacao = False

    @contextmanager
    def transacao(self) -> Iterator[None]:
        if self._em_transacao:
            yield
            return
        self._conn.begin()
        self._em_transacao = True
        try:
            yield
        except BaseException:
            self._conn.rollback()
            raise
        else:
            try:
                self._conn.commit()
            except duckdb.Error as err:
                raise ErroPersistencia(f"Falha ao confirmar transacao: {err}") from err
        finally:
            self._em_transacao = False

    def buscar_por_id(self, beneficiario_id: str) -> Beneficiario | None:
        row = self._fetchone(
            f"SELECT {_COLUNAS} FROM beneficiario WHERE id = ?",  # noqa: S608
            [beneficiario_id],
        )
        return self._hidratar(row) if row else None

    def listar_por_perfil(self, perfil_id: str, programa: Programa | None = None) -> list[Beneficiario]:
        sql = f"SELECT {_COLUNAS} FROM beneficiario WHERE perfil_id = ?"  # noqa: S608
        params: list[object] = [perfil_id]
        if programa is not None:
            sql += " AND programa = ?"
            params.append(programa.value)
        sql += " ORDER BY criado_em DESC"
        return [self._hidratar(r) for r in self._fetchall(sql, params)]

    def listar_pendentes_azul(self, perfil_id: str | None = None) -> list[Beneficiario]:
        sql = (
            f"SELECT {_COLUNAS} FROM beneficiario "  # noqa: S608
            "WHERE programa = ? AND status = ?"
        )
        params: list[object] = [Programa.AZUL.value, Status.PENDENTE.value]
        if perfil_id is not None:
            sql += " AND perfil_id = ?"
            params.append(perfil_id)
        sql += " ORDER BY criado_em"
        return [self._hidratar(r) for r in self._fetchall(sql, params)]

    def buscar_par(self, beneficiario: Beneficiario) -> Beneficiario | None:
        """Outra metade da troca AZUL. Prefere substituicao_id; registros sem ele
        casam por (cpf_anterior, data_alteracao)."""
        if beneficiario.substituicao_id is not None:
            row = self._fetchone(
                f"SELECT {_COLUNAS} FROM beneficiario "  # noqa: S608
                "WHERE substituicao_id = ? AND id <> ? LIMIT 1",
                [beneficiario.substituicao_id, beneficiario.id],
            )
            return self._hidratar(row) if row else None

        if beneficiario.data_alteracao is None:
            return None

        if beneficiario.cpf_anterior is not None:
            filtro, cpf = "cpf = ?", beneficiario.cpf_anterior.valor
        else:
            filtro, cpf = "cpf_anterior = ?", beneficiario.cpf.valor

        row = self._fetchone(
            f"SELECT {_COLUNAS} FROM beneficiario "  # noqa: S608
            f"WHERE perfil_id = ? AND programa = ? AND {filtro} "
            "AND data_alteracao = ? AND id <> ? LIMIT 1",
            [
                beneficiario.perfil_id,
                Programa.AZUL.value,
                cpf,
                _para_banco(beneficiario.data_alteracao),
                beneficiario.id,
            ],
        )
        return self._hidratar(row) if row else None

    def existe_cpf(
        self,
        perfil_id: str,
        programa: Programa,
        cpf: CPF,
        excluir_id: str | None = None,
    ) -> bool:
        sql = "SELECT 1 FROM beneficiario WHERE perfil_id = ? AND programa = ? AND cpf = ?"
        params: list[object] = [perfil_id, programa.value, cpf.valor]
        if excluir_id is not None:
            sql += " AND id <> ?"
            params.append(excluir_id)
        return self._fetchone(sql + " LIMIT 1", params) is not None

    def contar_por_periodo(self, perfil_id: str, programa: Programa, inicio: date, fim: date) -> int:
        """Registros com data_emissao em [inicio, fim], inclusive."""
        row = self._fetchone(
            """SELECT count(*) FROM beneficiario
               WHERE perfil_id = ? AND programa = ?
                 AND data_emissao BETWEEN ? AND ?""",
            [perfil_id, programa.value, inicio, fim],
        )
        return int(row[0]) if row else 0

    def criar(self, beneficiario: Beneficiario) -> Beneficiario:
        self._executar(
            f"INSERT INTO beneficiario ({_COLUNAS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
            [
                beneficiario.id,
                beneficiario.perfil_id,
                beneficiario.programa.value,
                beneficiario.nome,
                beneficiario.cpf.valor,
                beneficiario.data_emissao,
                beneficiario.status.value,
                _para_banco(beneficiario.data_alteracao),
                beneficiario.substituicao_id,
                beneficiario.nome_anterior,
                beneficiario.cpf_anterior.valor if beneficiario.cpf_anterior else None,
                beneficiario.data_emissao_anterior,
                _para_banco(beneficiario.criado_em),
            ],
        )
        return beneficiario

    def atualizar(self, beneficiario: Beneficiario) -> Beneficiario:
        """Persiste os campos mutaveis. programa e perfil_id nunca mudam."""
        atual = self._fetchone("SELECT cpf FROM beneficiario WHERE id = ?", [beneficiario.id])
        if atual is None:
            raise ErroPersistencia(f"Beneficiario {beneficiario.id} nao existe mais")

        # cpf so entra no SET quando muda: coluna indexada vira delete+insert
        mudou_cpf = str(atual[0]) != beneficiario.cpf.valor
        self._executar(
            f"""UPDATE beneficiario SET
                   nome = ?, data_emissao = ?, status = ?, data_alteracao = ?,
                   substituicao_id = ?, nome_anterior = ?, cpf_anterior = ?,
                   data_emissao_anterior = ?{", cpf = ?" if mudou_cpf else ""}
               WHERE id = ?""",  # noqa: S608
            [
                beneficiario.nome,
                beneficiario.data_emissao,
                beneficiario.status.value,
                _para_banco(beneficiario.data_alteracao),
                beneficiario.substituicao_id,
                beneficiario.nome_anterior,
                beneficiario.cpf_anterior.valor if beneficiario.cpf_anterior else None,
                beneficiario.data_emissao_anterior,
                *([beneficiario.cpf.valor] if mudou_cpf else []),
                beneficiario.id,
            ],
        )
        return beneficiario

    def excluir(self, beneficiario_id: str) -> None:
        self._executar("DELETE FROM beneficiario WHERE id = ?", [beneficiario_id])

    def excluir_por_programa(self, perfil_id: str, programa: Programa) -> int:
        antes = self._contar("WHERE perfil_id = ? AND programa = ?", [perfil_id, programa.value])
        self._executar(
            "DELETE FROM beneficiario WHERE perfil_id = ? AND programa = ?",
            [perfil_id, programa.value],
        )
        return antes

    def excluir_por_perfil(self, perfil_id: str) -> int:
        antes = self._contar("WHERE perfil_id = ?", [perfil_id])
        self._executar("DELETE FROM beneficiario WHERE perfil_id = ?", [perfil_id])
        return antes

    def _contar(self, where: str, params: list[object]) -> int:
        row = self._fetchone(f"SELECT count(*) FROM beneficiario {where}", params)  # noqa: S608
        return int(row[0]) if row else 0

    def _executar(self, sql: str, params: list[object]) -> None:
        try:
            self._conn.execute(sql, params)
        except duckdb.ConstraintException as err:
            raise ErroConflito("CPF ja cadastrado") from err
        except duckdb.Error as err:
            raise ErroPersistencia(f"Falha de armazenamento: {err}") from err

    def _fetchone(self, sql: str, params: list[object]) -> tuple | None:  # type: ignore[type-arg]
        try:
            return self._conn.execute(sql, params).fetchone()
        except duckdb.Error as err:
            raise ErroPersistencia(f"Falha de leitura: {err}") from err

    def _fetchall(self, sql: str, params: list[object]) -> list[tuple]:  # type: ignore[type-arg]
        try:
            return self._conn.execute(sql, params).fetchall()
        except duckdb.Error as err:
            raise ErroPersistencia(f"Falha de leitura: {err}") from err

    def _hidratar(self, row: tuple) -> Beneficiario:  # type: ignore[type-arg]
        """Mapeia row do DuckDB para entidade de dominio.
        Colunas: id(0), perfil_id(1), programa(2), nome(3), cpf(4),
        data_emissao(5), status(6), data_alteracao(7), substituicao_id(8),
        nome_anterior(9), cpf_anterior(10), data_emissao_anterior(11),
        criado_em(12)"""
        return Beneficiario(
            id=str(row[0]),
            perfil_id=str(row[1]),
            programa=Programa(str(row[2])),
            nome=str(row[3]),
            cpf=CPF(str(row[4])),
            data_emissao=row[5],
            status=Status(str(row[6])),
            data_alteracao=_do_banco(row[7]),
            substituicao_id=str(row[8]) if row[8] else None,
            nome_anterior=str(row[9]) if row[9] else None,
            cpf_anterior=CPF(str(row[10])) if row[10] else None,
            data_emissao_anterior=row[11] if isinstance(row[11], date) else None,
            criado_em=_do_banco(row[12]),
        )

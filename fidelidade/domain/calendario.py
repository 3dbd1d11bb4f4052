# fidelidade/domain/calendario.py
#
# Normalizacao de datas para comparacoes por dia de calendario.
#
# Design decisions:
#   - The whole system reasons in Brazil's calendar. FUSO_BRASIL is a fixed
#     UTC-3 offset (Brazil has no DST since 2019), so "today" does not depend
#     on the host timezone and no tzdata lookup is needed.
#   - Every rule compares datetime.date values. Instants (datetime) are only
#     kept where two records must share the exact same value (data_alteracao);
#     para_dia() truncates them before any comparison.
#   - parse_data() accepts the canonical YYYY-MM-DD form and falls back to
#     datetime.fromisoformat for full timestamps. Strict YYYY-MM-DD checking is
#     a boundary concern (BeneficiarioService), not done here.
#
# Invariant: para_dia(a) == para_dia(b) iff a and b fall on the same calendar
# day in FUSO_BRASIL.
from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

FUSO_BRASIL = timezone(timedelta(hours=-3), "BRT")

_DATA_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_data(valor: str) -> date:
    """YYYY-MM-DD vira o proprio dia; qualquer outro formato ISO cai no parse generico.

    Raises:
        ValueError: se o texto nao for uma data reconhecivel.
    """
    texto = valor.strip()
    m = _DATA_RE.match(texto)
    if m:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return para_dia(datetime.fromisoformat(texto))


def is_data_canonica(valor: str) -> bool:
    """True se o texto esta exatamente no formato YYYY-MM-DD."""
    return _DATA_RE.match(valor.strip()) is not None


def para_dia(valor: date | datetime | str) -> date:
    """Trunca para o dia de calendario no fuso de Brasilia."""
    if isinstance(valor, str):
        return parse_data(valor)
    # datetime e subclasse de date: checar primeiro
    if isinstance(valor, datetime):
        if valor.tzinfo is not None:
            valor = valor.astimezone(FUSO_BRASIL)
        return valor.date()
    return valor


def agora_brasil() -> datetime:
    return datetime.now(FUSO_BRASIL)


def hoje_brasil() -> date:
    return agora_brasil().date()


def somar_anos(dia: date, anos: int) -> date:
    """Soma anos de calendario. 29/02 em ano nao bissexto vira 01/03."""
    try:
        return dia.replace(year=dia.year + anos)
    except ValueError:
        return date(dia.year + anos, 3, 1)


def dias_entre(inicio: date | datetime, fim: date | datetime) -> int:
    """Dias de calendario de inicio ate fim (negativo se fim < inicio)."""
    return (para_dia(fim) - para_dia(inicio)).days

# fidelidade/domain/beneficiario/value_objects.py
from __future__ import annotations

import re
from dataclasses import dataclass


def _verificar_cpf(digitos: str) -> bool:
    """Algoritmo padrao brasileiro de verificacao de CPF."""
    pesos_1 = [10, 9, 8, 7, 6, 5, 4, 3, 2]
    soma = sum(int(digitos[i]) * pesos_1[i] for i in range(9))
    resto = soma % 11
    d1 = 0 if resto < 2 else 11 - resto
    if int(digitos[9]) != d1:
        return False

    pesos_2 = [11, 10, 9, 8, 7, 6, 5, 4, 3, 2]
    soma = sum(int(digitos[i]) * pesos_2[i] for i in range(10))
    resto = soma % 11
    d2 = 0 if resto < 2 else 11 - resto
    return int(digitos[10]) == d2


@dataclass(frozen=True)
class CPF:
    """Value Object imutavel para CPF. NUNCA expoe valor completo em repr/str (LGPD)."""
    _valor: str  # sempre 11 digitos

    def __init__(self, raw: str) -> None:
        digitos = "".join(c for c in raw if c.isdigit())
        if len(digitos) != 11:
            raise ValueError(f"CPF invalido: comprimento {len(digitos)}, esperado 11")
        if len(set(digitos)) == 1:
            raise ValueError("CPF invalido: todos digitos iguais")
        if not _verificar_cpf(digitos):
            raise ValueError("CPF invalido: digitos verificadores incorretos")
        object.__setattr__(self, "_valor", digitos)

    @property
    def valor(self) -> str:
        """11 digitos sem formatacao. Usar com cuidado, nunca logar."""
        return self._valor

    @property
    def mascarado(self) -> str:
        """***.XXX.XXX-**, formato seguro para logs."""
        d = self._valor
        return f"***.{d[3:6]}.{d[6:9]}-**"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CPF):
            return NotImplemented
        return self._valor == other._valor

    def __hash__(self) -> int:
        return hash(self._valor)

    def __repr__(self) -> str:
        return f"CPF({self.mascarado!r})"

    def __str__(self) -> str:
        return self.mascarado


_NOME_RE = re.compile(r"^[A-Za-zÀ-ÖØ-öø-ÿ'\-\s]+$")


@dataclass(frozen=True)
class NomeBeneficiario:
    """Nome trimado, 4 a 60 caracteres, letras (com acento), espaco, hifen e apostrofo."""

    valor: str

    def __post_init__(self) -> None:
        stripped = self.valor.strip()
        if len(stripped) < 4 or len(stripped) > 60:
            raise ValueError("Nome invalido: deve ter entre 4 e 60 caracteres")
        if not _NOME_RE.match(stripped):
            raise ValueError("Nome invalido: use apenas letras, espacos, hifen e apostrofo")
        object.__setattr__(self, "valor", stripped)

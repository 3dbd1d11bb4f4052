# fidelidade/infrastructure/log.py
#
# Shared logger for the service.
#
# Design decisions:
#   - Single log() function, one line per event, so reconciliation and
#     substitution messages read the same in the server output.
#   - Timestamps use Brazil wall-clock (calendario.FUSO_BRASIL), the same clock
#     every eligibility rule uses, so a log line can be checked against the
#     status it produced.
#   - No external dependencies: plain stdout with flush for immediate visibility.
#   - CPFs must only be passed here already masked (CPF.mascarado).
from __future__ import annotations

import sys

from fidelidade.domain.calendario import agora_brasil


def log(message: str) -> None:
    """Write a timestamped log line to stdout."""
    instante = agora_brasil().strftime("%Y-%m-%d %H:%M:%S")
    sys.stdout.write(f"[fidelidade {instante}] {message}\n")
    sys.stdout.flush()

from __future__ import annotations

import logging
from dataclasses import replace
from functools import cmp_to_key
from typing import List, Sequence

from dto import ScenarioResult

logger = logging.getLogger(__name__)


def compare_scenarios(a: ScenarioResult, b: ScenarioResult) -> int:
    """
    Ordem total do ranking: elegiveis antes de inelegiveis (independente do valor),
    depois imposto_total crescente. Empate retorna 0 (sort estavel preserva a ordem de entrada).
    """
    if a.elegivel != b.elegivel:
        return -1 if a.elegivel else 1
    if a.imposto_total < b.imposto_total:
        return -1
    if a.imposto_total > b.imposto_total:
        return 1
    return 0


def rank_scenarios(scenarios: Sequence[ScenarioResult]) -> List[ScenarioResult]:
    """Ordena e marca `melhor` (primeiro, se elegivel) e `pior` (ultimo, sempre) em novos registros."""
    ordered = sorted(scenarios, key=cmp_to_key(compare_scenarios))
    if not ordered:
        return []

    ordered = [replace(s, melhor=False, pior=False) for s in ordered]
    if ordered[0].elegivel:
        ordered[0] = replace(ordered[0], melhor=True)
    ordered[-1] = replace(ordered[-1], pior=True)

    if ordered[0].melhor:
        logger.info("melhor cenário: %s (R$ %.2f)", ordered[0].nome, ordered[0].imposto_total)
    else:
        logger.info("nenhum cenário elegível entre %d avaliados", len(ordered))
    return ordered

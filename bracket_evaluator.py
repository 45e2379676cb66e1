from __future__ import annotations

from typing import Tuple

from legal_constants import Faixa, TabelaProgressiva


def escolher_faixa(base: float, tabela: TabelaProgressiva) -> Tuple[Faixa, int]:
    """Seleciona a primeira faixa cujo limite superior cobre a base (indice 1-based); acima do topo, a ultima."""
    for idx, faixa in enumerate(tabela.faixas, start=1):
        if base <= faixa.limite_superior:
            return faixa, idx
    return tabela.faixas[-1], len(tabela.faixas)


def imposto_progressivo(base: float, tabela: TabelaProgressiva) -> float:
    """base * aliquota_nominal - parcela_deduzir da faixa, nunca negativo."""
    faixa, _ = escolher_faixa(base, tabela)
    return max(0.0, base * faixa.aliquota_nominal - faixa.parcela_deduzir)

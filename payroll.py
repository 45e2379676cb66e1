from __future__ import annotations

from bracket_evaluator import imposto_progressivo
from dto import ProLaboreAnalysis
from legal_constants import LegalConstants


def calcular_inss(base: float, constantes: LegalConstants) -> float:
    """Contribuicao do segurado; acima do teto vale a contribuicao fixa do teto."""
    if base <= 0:
        return 0.0
    if base > constantes.teto_inss:
        return constantes.contribuicao_teto_inss
    return imposto_progressivo(base, constantes.tabela_inss)


def calcular_irrf(base_apos_inss: float, constantes: LegalConstants, dependentes: int = 0) -> float:
    """Faixa escolhida pela base liquida de INSS; a deducao por dependente sai do imposto apurado."""
    if base_apos_inss <= constantes.tabela_irpf.primeira.limite_superior:
        return 0.0
    deducao_dependentes = max(0, int(dependentes)) * constantes.deducao_dependente
    return max(0.0, imposto_progressivo(base_apos_inss, constantes.tabela_irpf) - deducao_dependentes)


def calcular_cpp(base: float, constantes: LegalConstants) -> float:
    return max(0.0, base) * constantes.aliquota_cpp


def analisar_pro_labore(base: float, constantes: LegalConstants) -> ProLaboreAnalysis:
    inss = calcular_inss(base, constantes)
    irrf = calcular_irrf(base - inss, constantes)
    return ProLaboreAnalysis(
        valor_base=base,
        valor_inss=inss,
        valor_irrf=irrf,
        valor_liquido=base - inss - irrf,
    )

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from dto import Activity
from formatters import formatar_reais
from legal_constants import LegalConstants


@dataclass(frozen=True)
class EligibilityResult:
    regime: str
    elegivel: bool
    nota: str
    reasons: List[str]


def elegibilidade_mei(
    receita_anual_projetada: float,
    atividades: Sequence[Activity],
    constantes: LegalConstants,
) -> EligibilityResult:
    """
    MEI exige receita anual projetada dentro do limite E todas as atividades permitidas.
    O motivo de faturamento tem precedencia na nota.
    """
    reasons: List[str] = []
    limite = constantes.mei.limite_anual
    if receita_anual_projetada > limite:
        reasons.append(
            f"Faturamento anual projetado ({formatar_reais(receita_anual_projetada)}) excede o limite do MEI "
            f"({formatar_reais(limite)})."
        )
    bloqueadas = [a.nome for a in atividades if not a.elegivel_mei]
    if bloqueadas:
        reasons.append(f"Possui atividades não permitidas no MEI: {', '.join(bloqueadas)}.")

    if reasons:
        return EligibilityResult(regime="MEI", elegivel=False, nota=reasons[0], reasons=reasons)
    return EligibilityResult(
        regime="MEI",
        elegivel=True,
        nota=f"Faturamento dentro do limite anual de {formatar_reais(limite)} e atividades permitidas.",
        reasons=[],
    )


def elegibilidade_simples(rbt12: float, constantes: LegalConstants) -> EligibilityResult:
    limite = constantes.limite_simples
    if rbt12 > limite:
        motivo = f"RBT12 ({formatar_reais(rbt12)}) acima do limite do Simples ({formatar_reais(limite)})."
        return EligibilityResult(regime="Simples Nacional", elegivel=False, nota=motivo, reasons=[motivo])
    return EligibilityResult(
        regime="Simples Nacional",
        elegivel=True,
        nota=f"RBT12 dentro do limite de {formatar_reais(limite)}.",
        reasons=[],
    )


def elegibilidade_equiparacao_hospitalar(equiparacao_hospitalar: bool) -> EligibilityResult:
    if equiparacao_hospitalar:
        return EligibilityResult(
            regime="Lucro Presumido Equiparação Hospitalar",
            elegivel=True,
            nota="Empresa atende requisitos ANVISA para equiparação hospitalar.",
            reasons=[],
        )
    motivo = (
        "Requer: estrutura cirúrgica, alvará sanitário, conformidade com Lei 9.249/95. "
        "Economia potencial significativa."
    )
    return EligibilityResult(
        regime="Lucro Presumido Equiparação Hospitalar", elegivel=False, nota=motivo, reasons=[motivo]
    )


def elegibilidade_uniprofissional(sociedade_uniprofissional: bool) -> EligibilityResult:
    if sociedade_uniprofissional:
        return EligibilityResult(
            regime="Lucro Presumido Uniprofissional (ISS Fixo)",
            elegivel=True,
            nota="Empresa cadastrada como Sociedade Uniprofissional. ISS Fixo aplicável.",
            reasons=[],
        )
    motivo = "Requer registro como Sociedade Uniprofissional (SUP) no município. Consulte legislação local."
    return EligibilityResult(
        regime="Lucro Presumido Uniprofissional (ISS Fixo)", elegivel=False, nota=motivo, reasons=[motivo]
    )

from __future__ import annotations

from dataclasses import dataclass

from legal_constants import LegalConstants


@dataclass(frozen=True)
class FatorR:
    folha_efetiva: float
    razao: float
    qualifica_anexo_iii: bool


def resolver_fator_r(folha: float, receita_mensal: float, constantes: LegalConstants) -> FatorR:
    """
    Fator R = folha / receita. A folha nunca e considerada abaixo de um salario minimo
    (pro-labore minimo obrigatorio do socio).
    """
    folha_efetiva = max(float(folha), constantes.salario_minimo)
    razao = folha_efetiva / receita_mensal if receita_mensal > 0 else 0.0
    return FatorR(
        folha_efetiva=folha_efetiva,
        razao=razao,
        qualifica_anexo_iii=razao >= constantes.fator_r_limite,
    )


def anexo_ajustado(anexo: str, fator_r: FatorR) -> str:
    # Somente V -> III; nunca o inverso.
    if anexo == "V" and fator_r.qualifica_anexo_iii:
        return "III"
    return anexo


def pro_labore_alvo(receita_mensal: float, constantes: LegalConstants) -> float:
    return max(receita_mensal * constantes.fator_r_limite, constantes.salario_minimo)

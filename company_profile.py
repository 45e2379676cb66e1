from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from dto import Activity, ScenarioInput
from legal_constants import LegalConstants
from regime_utils import TIPO_SERVICO, canonicalize_anexo, canonicalize_tipo_atividade

ATIVIDADE_PADRAO_NOME = "Serviços (genérico)"


@dataclass(frozen=True)
class CompanyProfile:
    tipo_cliente: str
    atividades: Tuple[Activity, ...]
    receita_mensal: float
    rbt12_informado: float
    rbt12: float
    folha_pagamento: float
    aliquota_iss: float  # percentual
    aliquota_icms: float  # percentual
    numero_socios: int
    iss_fixo_mensal_por_socio: float
    iss_fixo_mensal: float
    margem_lucro_real: float
    equiparacao_hospitalar: bool
    sociedade_uniprofissional: bool
    pis_cofins_monofasico: bool
    ruleset_id: str
    assumptions: Tuple[str, ...]

    @property
    def receita_anual_projetada(self) -> float:
        return self.rbt12


def _non_negative(value: float, campo: str) -> float:
    numeric = float(value)
    if numeric < 0:
        raise ValueError(f"{campo} não pode ser negativo.")
    return numeric


def _normalize_activity(atividade: Activity, idx: int) -> Activity:
    nome = str(atividade.nome or "").strip() or f"Atividade {idx}"
    return Activity(
        nome=nome,
        receita=_non_negative(atividade.receita, f"receita da atividade '{nome}'"),
        tipo=canonicalize_tipo_atividade(atividade.tipo),
        anexo_simples=canonicalize_anexo(atividade.anexo_simples),
        elegivel_mei=bool(atividade.elegivel_mei),
    )


def normalize_company_profile(inp: ScenarioInput, constantes: LegalConstants) -> CompanyProfile:
    """
    Resolve todos os campos opcionais do input em um perfil completo.
    Defaults sao explicitos e retornados em `assumptions`; nenhuma calculadora redefine valores.
    """
    assumptions: List[str] = []
    padroes = constantes.padroes

    receita_informada = _non_negative(inp.receita_mensal, "receita_mensal")
    if inp.atividades:
        atividades = tuple(_normalize_activity(a, idx) for idx, a in enumerate(inp.atividades, start=1))
        receita_mensal = sum(a.receita for a in atividades)
        if receita_informada > 0 and abs(receita_informada - receita_mensal) > 0.005:
            assumptions.append(
                f"Receita mensal informada (R$ {receita_informada:,.2f}) substituída pela soma das atividades "
                f"(R$ {receita_mensal:,.2f})."
            )
    else:
        receita_mensal = receita_informada
        atividades = (
            Activity(
                nome=ATIVIDADE_PADRAO_NOME,
                receita=receita_mensal,
                tipo=TIPO_SERVICO,
                anexo_simples="III",
                elegivel_mei=True,
            ),
        )
        assumptions.append("Nenhuma atividade informada; assumida atividade de serviço genérica (Anexo III, MEI).")

    rbt12_informado = _non_negative(inp.rbt12, "rbt12")
    if rbt12_informado > 0:
        rbt12 = rbt12_informado
    else:
        rbt12 = receita_mensal * 12
        assumptions.append("RBT12 não informado; assumido igual à receita mensal x 12.")

    folha = _non_negative(inp.folha_pagamento, "folha_pagamento")

    if inp.aliquota_iss is None:
        aliquota_iss = padroes.aliquota_iss_percentual
        assumptions.append(f"Alíquota de ISS não informada; assumida em {aliquota_iss:.2f}%.")
    else:
        aliquota_iss = _non_negative(inp.aliquota_iss, "aliquota_iss")

    if inp.aliquota_icms is None:
        aliquota_icms = padroes.aliquota_icms_percentual
        assumptions.append(f"Alíquota de ICMS não informada; assumida em {aliquota_icms:.2f}%.")
    else:
        aliquota_icms = _non_negative(inp.aliquota_icms, "aliquota_icms")

    # 0 ou negativo equivale a nao informado
    if inp.numero_socios is None or int(inp.numero_socios) < 1:
        numero_socios = padroes.numero_socios
        assumptions.append(f"Número de sócios não informado; assumido {numero_socios}.")
    else:
        numero_socios = int(inp.numero_socios)

    if inp.margem_lucro_real is None:
        margem = padroes.margem_lucro_real
        assumptions.append(f"Margem de lucro não informada; assumida em {margem * 100:.0f}% para o Lucro Real.")
    else:
        margem = float(inp.margem_lucro_real)
        if not (0.0 <= margem <= 1.0):
            raise ValueError("margem_lucro_real deve estar entre 0 e 1.")

    if inp.iss_fixo_mensal_por_socio is None:
        iss_fixo_por_socio = padroes.iss_fixo_mensal_por_socio
        assumptions.append(f"ISS fixo por sócio não informado; assumido R$ {iss_fixo_por_socio:,.2f}/mês.")
    else:
        iss_fixo_por_socio = _non_negative(inp.iss_fixo_mensal_por_socio, "iss_fixo_mensal_por_socio")

    return CompanyProfile(
        tipo_cliente=str(inp.tipo_cliente or "").strip(),
        atividades=atividades,
        receita_mensal=receita_mensal,
        rbt12_informado=rbt12_informado,
        rbt12=rbt12,
        folha_pagamento=folha,
        aliquota_iss=aliquota_iss,
        aliquota_icms=aliquota_icms,
        numero_socios=numero_socios,
        iss_fixo_mensal_por_socio=iss_fixo_por_socio,
        iss_fixo_mensal=iss_fixo_por_socio * numero_socios,
        margem_lucro_real=margem,
        equiparacao_hospitalar=bool(inp.equiparacao_hospitalar),
        sociedade_uniprofissional=bool(inp.sociedade_uniprofissional),
        pis_cofins_monofasico=bool(inp.pis_cofins_monofasico),
        ruleset_id=constantes.ruleset_id,
        assumptions=tuple(assumptions),
    )

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from regime_utils import RegimeKind, ScenarioCategory, TIPO_CLIENTE_ABERTURA, parse_bool


@dataclass(frozen=True)
class Activity:
    nome: str
    receita: float  # mensal
    tipo: str  # comercio | servico | industria (aliases aceitos na normalizacao)
    anexo_simples: str  # I | II | III | IV | V
    elegivel_mei: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Activity":
        anexo = payload.get("simplesAnnex")
        if anexo is None:
            anexo = payload.get("simplesAnexo")
        return cls(
            nome=str(payload.get("name") or "").strip(),
            receita=float(payload.get("revenue") or 0.0),
            tipo=str(payload.get("type") or ""),
            anexo_simples=str(anexo or ""),
            elegivel_mei=parse_bool(payload.get("isMeiEligible")),
        )


@dataclass(frozen=True)
class ScenarioInput:
    tipo_cliente: str = TIPO_CLIENTE_ABERTURA
    receita_mensal: float = 0.0
    rbt12: float = 0.0
    folha_pagamento: float = 0.0
    aliquota_iss: Optional[float] = None  # percentual (ex: 4.0)
    aliquota_icms: Optional[float] = None  # percentual
    numero_socios: Optional[int] = None
    equiparacao_hospitalar: bool = False
    sociedade_uniprofissional: bool = False
    pis_cofins_monofasico: bool = False  # revenda de produtos com PIS/COFINS concentrado
    margem_lucro_real: Optional[float] = None  # decimal (ex: 0.30)
    iss_fixo_mensal_por_socio: Optional[float] = None
    atividades: Tuple[Activity, ...] = ()
    ruleset_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScenarioInput":
        """Converte o contrato JSON (camelCase) em ScenarioInput. Ausentes ficam para a normalizacao."""

        def optional_float(key: str) -> Optional[float]:
            value = payload.get(key)
            return None if value is None else float(value)

        atividades_raw = payload.get("activities") or []
        if not isinstance(atividades_raw, list):
            raise ValueError("activities deve ser uma lista.")
        socios = payload.get("numberOfPartners")
        return cls(
            tipo_cliente=str(payload.get("clientType") or TIPO_CLIENTE_ABERTURA),
            receita_mensal=float(payload.get("monthlyRevenue") or 0.0),
            rbt12=float(payload.get("rbt12") or 0.0),
            folha_pagamento=float(payload.get("payrollExpenses") or 0.0),
            aliquota_iss=optional_float("issRate"),
            aliquota_icms=optional_float("icmsRate"),
            numero_socios=None if socios is None else int(socios),
            equiparacao_hospitalar=parse_bool(payload.get("isHospitalEquivalent")),
            sociedade_uniprofissional=parse_bool(payload.get("isUniprofessionalSociety")),
            pis_cofins_monofasico=parse_bool(payload.get("isMonophasicPisCofins")),
            margem_lucro_real=optional_float("realProfitMargin"),
            iss_fixo_mensal_por_socio=optional_float("issFixoPerPartner"),
            atividades=tuple(Activity.from_payload(item) for item in atividades_raw),
            ruleset_id=payload.get("rulesetId"),
        )


@dataclass(frozen=True)
class TaxLine:
    descricao: str
    aliquota_percentual: float
    valor: float


@dataclass(frozen=True)
class ProLaboreAnalysis:
    valor_base: float
    valor_inss: float
    valor_irrf: float
    valor_liquido: float


@dataclass(frozen=True)
class ScenarioResult:
    nome: str
    categoria: ScenarioCategory
    tipo_regime: RegimeKind
    elegivel: bool
    nota_elegibilidade: str
    imposto_total: float
    aliquota_efetiva_percentual: float
    lucro_liquido_distribuivel: float
    tributos: Tuple[TaxLine, ...]
    analise_pro_labore: Optional[ProLaboreAnalysis] = None
    observacoes: str = ""
    melhor: bool = False
    pior: bool = False
    detalhes: Dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["categoria"] = self.categoria.value
        payload["tipo_regime"] = self.tipo_regime.value
        payload["tributos"] = [asdict(t) for t in self.tributos]
        return payload

from __future__ import annotations

import os
from copy import deepcopy
from typing import Any, Dict, List

from regime_utils import TIPO_CLIENTE_ABERTURA, TIPO_CLIENTE_TRANSFERENCIA

DEMO_ENV_VAR = "TSE_DEMO"


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def resolve_demo_mode(toggle_enabled: bool = False) -> bool:
    """
    Resolve o modo DEMO por OR entre variavel de ambiente e toggle da UI.
    """
    return _is_truthy(os.getenv(DEMO_ENV_VAR)) or bool(toggle_enabled)


_EXEMPLOS: Dict[str, Dict[str, Any]] = {
    "mei": {
        "clientType": TIPO_CLIENTE_ABERTURA,
        "monthlyRevenue": 5000.0,
        "activities": [
            {"name": "Comércio de Roupas", "revenue": 5000.0, "type": "comercio", "simplesAnnex": "I", "isMeiEligible": True},
        ],
    },
    "bar_quadra": {
        "clientType": TIPO_CLIENTE_ABERTURA,
        "monthlyRevenue": 10000.0,
        "rbt12": 0.0,
        "activities": [
            {"name": "Bar", "revenue": 5000.0, "type": "comercio", "simplesAnnex": "I", "isMeiEligible": True},
            {"name": "Quadra", "revenue": 5000.0, "type": "servico", "simplesAnnex": "III", "isMeiEligible": True},
        ],
    },
    "professor": {
        "clientType": TIPO_CLIENTE_ABERTURA,
        "monthlyRevenue": 6000.0,
        "rbt12": 72000.0,
        "activities": [
            {"name": "Bar", "revenue": 2000.0, "type": "comercio", "simplesAnnex": "I", "isMeiEligible": True},
            {"name": "Quadra", "revenue": 2000.0, "type": "servico", "simplesAnnex": "III", "isMeiEligible": True},
            {"name": "Professor", "revenue": 2000.0, "type": "servico", "simplesAnnex": "III", "isMeiEligible": False},
        ],
    },
    "consultoria": {
        "clientType": TIPO_CLIENTE_TRANSFERENCIA,
        "monthlyRevenue": 30000.0,
        "rbt12": 360000.0,
        "payrollExpenses": 9000.0,
        "issRate": 5.0,
        "numberOfPartners": 2,
        "activities": [
            {"name": "Consultoria", "revenue": 30000.0, "type": "servico", "simplesAnnex": "V", "isMeiEligible": False},
        ],
    },
    "clinica": {
        "clientType": TIPO_CLIENTE_TRANSFERENCIA,
        "monthlyRevenue": 80000.0,
        "rbt12": 960000.0,
        "payrollExpenses": 15000.0,
        "issRate": 3.0,
        "numberOfPartners": 3,
        "isHospitalEquivalent": True,
        "activities": [
            {"name": "Clínica Médica", "revenue": 80000.0, "type": "servico", "simplesAnnex": "V", "isMeiEligible": False},
        ],
    },
}


def demo_example_keys() -> List[str]:
    return list(_EXEMPLOS)


def demo_example_payload(example_key: str) -> Dict[str, Any]:
    """
    Monta payload de exemplo (contrato camelCase) para pre-preenchimento da UI/CLI.
    """
    key = (example_key or "").strip().lower()
    if key not in _EXEMPLOS:
        raise ValueError(f"Exemplo DEMO desconhecido: {example_key}")
    return deepcopy(_EXEMPLOS[key])

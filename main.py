import argparse
import json
import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

from dto import ScenarioInput
from input_utils import parse_atividade, parse_percentual, parse_valor
from regime_utils import TIPO_CLIENTE_ABERTURA
from ruleset_loader import resolve_ruleset_id
from tax_engine import ScenarioService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calcula e ranqueia cenários tributários (PF, MEI, Simples, Presumido, Real)."
    )
    parser.add_argument("--input", help="Arquivo JSON com o payload (monthlyRevenue, activities, ...).")
    parser.add_argument("--receita", type=parse_valor, help="Receita mensal (R$).")
    parser.add_argument("--rbt12", type=parse_valor, help="Receita bruta dos últimos 12 meses (R$).")
    parser.add_argument("--folha", type=parse_valor, help="Folha de pagamento mensal (R$).")
    parser.add_argument("--iss", type=parse_percentual, help="Alíquota de ISS (ex: 4 ou 4%%).")
    parser.add_argument("--socios", type=int, help="Número de sócios.")
    parser.add_argument("--hospitalar", action="store_true", help="Empresa com equiparação hospitalar.")
    parser.add_argument("--uniprofissional", action="store_true", help="Sociedade Uniprofissional (ISS fixo).")
    parser.add_argument("--monofasico", action="store_true", help="Revenda com PIS/COFINS monofásico (Presumido).")
    parser.add_argument(
        "--atividade",
        action="append",
        type=parse_atividade,
        default=[],
        metavar="NOME:RECEITA:TIPO:ANEXO[:mei]",
        help="Atividade da empresa (repetível).",
    )
    parser.add_argument("--ruleset-id", default=None)
    parser.add_argument("--json", action="store_true", help="Saída em JSON.")
    parser.add_argument("--verbose", action="store_true")
    return parser


def _load_payload(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8-sig") as f:
        payload = json.load(f)
    if not isinstance(payload, dict):
        raise ValueError(f"Arquivo '{path}' deve conter objeto JSON.")
    return payload


def build_input(args: argparse.Namespace) -> ScenarioInput:
    """Payload do arquivo (se houver) sobrescrito pelas flags explicitas."""
    payload: Dict[str, Any] = _load_payload(args.input) if args.input else {"clientType": TIPO_CLIENTE_ABERTURA}
    overrides = {
        "monthlyRevenue": args.receita,
        "rbt12": args.rbt12,
        "payrollExpenses": args.folha,
        "issRate": args.iss,
        "numberOfPartners": args.socios,
    }
    for key, value in overrides.items():
        if value is not None:
            payload[key] = value
    if args.hospitalar:
        payload["isHospitalEquivalent"] = True
    if args.uniprofissional:
        payload["isUniprofessionalSociety"] = True
    if args.monofasico:
        payload["isMonophasicPisCofins"] = True
    payload["rulesetId"] = resolve_ruleset_id(args.ruleset_id or payload.get("rulesetId"))

    inp = ScenarioInput.from_payload(payload)
    if args.atividade:
        inp = replace(inp, atividades=tuple(args.atividade))
    return inp


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    try:
        inp = build_input(args)
        out = ScenarioService().analyze(inp)
    except (ValueError, FileNotFoundError) as exc:
        logger.error("Erro ao calcular cenários: %s", exc)
        return 2

    if args.json:
        print(json.dumps(out.to_event(), ensure_ascii=False, indent=2))
    else:
        print(out.relatorio_texto)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

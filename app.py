from typing import Any, Dict, List

import streamlit as st

from demo_config import demo_example_keys, demo_example_payload, resolve_demo_mode
from dto import ScenarioInput
from input_utils import parse_percentual
from regime_utils import ANEXOS_VALIDOS, TIPO_CLIENTE_ABERTURA, TIPO_CLIENTE_TRANSFERENCIA, TIPOS_ATIVIDADE
from ruleset_loader import resolve_ruleset_id
from tax_engine import ScenarioOutput, ScenarioService

_ATIVIDADE_VAZIA = {"name": "Serviços (genérico)", "revenue": 0.0, "type": "servico", "simplesAnnex": "III", "isMeiEligible": True}


def _atividades_tabela(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    atividades = payload.get("activities")
    if not isinstance(atividades, list) or not atividades:
        return [dict(_ATIVIDADE_VAZIA, revenue=float(payload.get("monthlyRevenue") or 0.0))]
    tabela: List[Dict[str, Any]] = []
    for item in atividades:
        tabela.append(
            {
                "name": item.get("name", ""),
                "revenue": float(item.get("revenue") or 0.0),
                "type": item.get("type", "servico"),
                "simplesAnnex": item.get("simplesAnnex") or item.get("simplesAnexo") or "III",
                "isMeiEligible": bool(item.get("isMeiEligible", False)),
            }
        )
    return tabela


def _renderizar_resultado(out: ScenarioOutput) -> None:
    st.subheader("Ranking de cenários")
    st.dataframe(
        [
            {
                "Cenário": c.nome + (" 🏆" if c.melhor else ""),
                "Categoria": c.categoria.value.upper(),
                "Elegível": "Sim" if c.elegivel else "Não",
                "Imposto (R$)": round(c.imposto_total, 2),
                "Carga efetiva (%)": round(c.aliquota_efetiva_percentual, 2),
                "Lucro distribuível (R$)": round(c.lucro_liquido_distribuivel, 2),
                "Nota": c.nota_elegibilidade,
            }
            for c in out.cenarios
        ],
        hide_index=True,
        width="stretch",
    )

    st.subheader("Detalhamento")
    for cenario in out.cenarios:
        with st.expander(f"{cenario.nome} | R$ {cenario.imposto_total:,.2f}"):
            st.write(cenario.nota_elegibilidade)
            st.dataframe(
                [
                    {"Tributo": t.descricao, "Alíquota (%)": round(t.aliquota_percentual, 2), "Valor (R$)": round(t.valor, 2)}
                    for t in cenario.tributos
                ],
                hide_index=True,
                width="stretch",
            )
            if cenario.analise_pro_labore is not None:
                pl = cenario.analise_pro_labore
                st.caption(
                    f"Pró-labore: base R$ {pl.valor_base:,.2f} | INSS R$ {pl.valor_inss:,.2f} | "
                    f"IRRF R$ {pl.valor_irrf:,.2f} | líquido R$ {pl.valor_liquido:,.2f}"
                )
            if cenario.observacoes:
                st.caption(cenario.observacoes)

    if out.profile.assumptions:
        st.subheader("Premissas aplicadas")
        for item in out.profile.assumptions:
            st.write(f"- {item}")

    st.download_button(
        "Baixar relatório (TXT)",
        data=out.relatorio_texto,
        file_name="cenarios_tributarios.txt",
        mime="text/plain",
    )


st.set_page_config(page_title="Tax Scenario Engine", layout="wide")
st.title("Tax Scenario Engine")

if "carregado" not in st.session_state:
    st.session_state["carregado"] = None
if "demo_toggle" not in st.session_state:
    st.session_state["demo_toggle"] = False

with st.sidebar:
    demo_toggle = st.toggle("Modo DEMO", key="demo_toggle")
    demo_mode = resolve_demo_mode(demo_toggle)
    if demo_mode:
        st.caption("Exemplos prontos:")
        for key in demo_example_keys():
            if st.button(f"Carregar Exemplo - {key}", use_container_width=True, key=f"demo_exemplo_{key}"):
                st.session_state["carregado"] = demo_example_payload(key)
                st.rerun()

    st.markdown("---")
    ruleset_id = st.text_input("Ruleset", value=resolve_ruleset_id())

carregado: Dict[str, Any] = st.session_state["carregado"] or {}

col1, col2 = st.columns(2)
with col1:
    tipos_cliente = [TIPO_CLIENTE_ABERTURA, TIPO_CLIENTE_TRANSFERENCIA]
    tipo_default = carregado.get("clientType", TIPO_CLIENTE_ABERTURA)
    tipo_cliente = st.selectbox(
        "Tipo de cliente",
        tipos_cliente,
        index=tipos_cliente.index(tipo_default) if tipo_default in tipos_cliente else 0,
    )
    rbt12 = st.number_input(
        "RBT12 (R$, 0 = receita mensal x 12)",
        min_value=0.0,
        value=float(carregado.get("rbt12") or 0.0),
        step=10000.0,
        format="%.2f",
    )
    folha = st.number_input(
        "Folha de pagamento mensal (R$)",
        min_value=0.0,
        value=float(carregado.get("payrollExpenses") or 0.0),
        step=500.0,
        format="%.2f",
    )
with col2:
    iss_txt = st.text_input("Alíquota de ISS (%)", value=str(carregado.get("issRate", "")))
    socios = st.number_input("Número de sócios", min_value=1, value=int(carregado.get("numberOfPartners") or 1), step=1)
    hospitalar = st.checkbox("Equiparação hospitalar", value=bool(carregado.get("isHospitalEquivalent", False)))
    sup = st.checkbox("Sociedade Uniprofissional (ISS fixo)", value=bool(carregado.get("isUniprofessionalSociety", False)))
    monofasico = st.checkbox(
        "PIS/COFINS monofásico na revenda", value=bool(carregado.get("isMonophasicPisCofins", False))
    )

st.subheader("Atividades")
atividades = st.data_editor(
    _atividades_tabela(carregado),
    num_rows="dynamic",
    width="stretch",
    column_config={
        "name": st.column_config.TextColumn("Atividade"),
        "revenue": st.column_config.NumberColumn("Receita mensal (R$)", min_value=0.0, format="%.2f"),
        "type": st.column_config.SelectboxColumn("Tipo", options=list(TIPOS_ATIVIDADE)),
        "simplesAnnex": st.column_config.SelectboxColumn("Anexo", options=list(ANEXOS_VALIDOS)),
        "isMeiEligible": st.column_config.CheckboxColumn("Permitida no MEI"),
    },
)

if st.button("Calcular cenários", type="primary"):
    try:
        payload: Dict[str, Any] = {
            "clientType": tipo_cliente,
            "rbt12": rbt12,
            "payrollExpenses": folha,
            "numberOfPartners": int(socios),
            "isHospitalEquivalent": hospitalar,
            "isUniprofessionalSociety": sup,
            "isMonophasicPisCofins": monofasico,
            "activities": [a for a in atividades if str(a.get("name") or "").strip()],
            "rulesetId": ruleset_id,
        }
        if iss_txt.strip():
            payload["issRate"] = parse_percentual(iss_txt)
        out = ScenarioService().analyze(ScenarioInput.from_payload(payload))
    except (ValueError, FileNotFoundError) as exc:
        st.error(str(exc))
    else:
        _renderizar_resultado(out)

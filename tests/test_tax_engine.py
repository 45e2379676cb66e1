import unittest
from dataclasses import replace

from demo_config import demo_example_payload
from dto import ScenarioInput
from legal_constants import load_legal_constants
from regime_utils import RegimeKind, ScenarioCategory
from tax_engine import (
    NOME_PRESUMIDO_HOSPITALAR,
    NOME_PRESUMIDO_SUP,
    ScenarioService,
    generate_scenarios,
)


def _por_nome(cenarios):
    return {c.nome: c for c in cenarios}


def _linhas(cenario):
    return {t.descricao: t.valor for t in cenario.tributos}


class ScenarioDefaultInputTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cenarios = generate_scenarios(ScenarioInput(receita_mensal=10000.0))
        self.por_nome = _por_nome(self.cenarios)

    def test_simples_anexo_iii_com_pro_labore(self) -> None:
        simples = self.por_nome["Simples Nacional Anexo III"]
        self.assertEqual(simples.tipo_regime, RegimeKind.SIMPLES_SINGLE)
        linhas = _linhas(simples)
        self.assertAlmostEqual(linhas["DAS (Anexo III)"], 600.0, places=2)
        self.assertAlmostEqual(linhas["INSS Pró-labore"], 229.41, places=2)
        self.assertAlmostEqual(simples.imposto_total, 840.04425, places=4)
        self.assertAlmostEqual(simples.lucro_liquido_distribuivel, 6600.0, places=4)
        self.assertAlmostEqual(simples.aliquota_efetiva_percentual, 8.4004425, places=6)
        self.assertTrue(simples.melhor)

    def test_mei_inelegivel_por_faturamento(self) -> None:
        mei = self.por_nome["MEI"]
        self.assertFalse(mei.elegivel)
        self.assertIn("R$ 81.000,00", mei.nota_elegibilidade)

    def test_cenarios_pf_presentes(self) -> None:
        pf = [c for c in self.cenarios if c.categoria == ScenarioCategory.PF]
        self.assertEqual({c.tipo_regime for c in pf}, {RegimeKind.CARNE_LEAO, RegimeKind.CLT})
        clt = self.por_nome["CLT (Simulação como Empregado)"]
        self.assertAlmostEqual(clt.lucro_liquido_distribuivel, 10000.0 - 951.64 - 1579.569, places=3)

    def test_somente_servico_gera_simulacoes_do_presumido(self) -> None:
        self.assertIn(NOME_PRESUMIDO_HOSPITALAR, self.por_nome)
        self.assertIn(NOME_PRESUMIDO_SUP, self.por_nome)
        self.assertEqual(self.por_nome["Lucro Presumido"].tipo_regime, RegimeKind.PRESUMED)


class ScenarioBarQuadraTests(unittest.TestCase):
    def setUp(self) -> None:
        self.cenarios = generate_scenarios(ScenarioInput.from_payload(demo_example_payload("bar_quadra")))
        self.por_nome = _por_nome(self.cenarios)

    def test_quantidade_de_cenarios(self) -> None:
        self.assertEqual(len(self.cenarios), 8)

    def test_simples_misto(self) -> None:
        simples = self.por_nome["Simples Nacional (Misto: Anexos I + III)"]
        self.assertEqual(simples.tipo_regime, RegimeKind.SIMPLES_MIXED)
        linhas = _linhas(simples)
        self.assertAlmostEqual(linhas["DAS Anexo I (Bar)"], 200.0, places=2)
        self.assertAlmostEqual(linhas["DAS Anexo III (Quadra)"], 300.0, places=2)
        self.assertAlmostEqual(simples.imposto_total, 740.04425, places=4)

    def test_mei_inelegivel_com_nota(self) -> None:
        mei = self.por_nome["MEI"]
        self.assertFalse(mei.elegivel)
        self.assertEqual(
            mei.nota_elegibilidade,
            "Faturamento anual projetado (R$ 120.000,00) excede o limite do MEI (R$ 81.000,00).",
        )
        self.assertAlmostEqual(mei.imposto_total, 81.90, places=2)

    def test_presumido_real_e_pf(self) -> None:
        presumido = self.por_nome["Lucro Presumido (Misto)"]
        self.assertEqual(presumido.tipo_regime, RegimeKind.PRESUMED_MIXED)
        self.assertAlmostEqual(presumido.imposto_total, 1480.45, places=2)
        self.assertAlmostEqual(_linhas(presumido)["CPP Patronal"], 303.60, places=2)
        self.assertAlmostEqual(self.por_nome["Lucro Real (Estimativa)"].imposto_total, 2262.45, places=2)
        self.assertAlmostEqual(self.por_nome["Carnê-Leão (Pessoa Física)"].imposto_total, 3024.09445, places=4)
        self.assertAlmostEqual(self.por_nome["CLT (Simulação como Empregado)"].imposto_total, 6011.209, places=3)

    def test_mei_inelegivel_com_rbt12_informado(self) -> None:
        payload = demo_example_payload("bar_quadra")
        payload["rbt12"] = 100000.0
        mei = _por_nome(generate_scenarios(ScenarioInput.from_payload(payload)))["MEI"]
        self.assertFalse(mei.elegivel)
        self.assertEqual(
            mei.nota_elegibilidade,
            "Faturamento anual projetado (R$ 100.000,00) excede o limite do MEI (R$ 81.000,00).",
        )

    def test_simulacoes_presumido_inelegiveis(self) -> None:
        hosp = self.por_nome[NOME_PRESUMIDO_HOSPITALAR]
        sup = self.por_nome[NOME_PRESUMIDO_SUP]
        self.assertFalse(hosp.elegivel)
        self.assertFalse(sup.elegivel)
        self.assertAlmostEqual(hosp.imposto_total, 1210.45, places=2)
        self.assertAlmostEqual(sup.imposto_total, 1580.45, places=2)
        self.assertAlmostEqual(_linhas(sup)["ISS Fixo (SUP)"], 300.0, places=2)

    def test_ranking(self) -> None:
        elegiveis = [c.elegivel for c in self.cenarios]
        self.assertEqual(elegiveis, sorted(elegiveis, reverse=True))
        for anterior, atual in zip(self.cenarios, self.cenarios[1:]):
            if anterior.elegivel == atual.elegivel:
                self.assertLessEqual(anterior.imposto_total, atual.imposto_total)
        self.assertEqual(self.cenarios[0].nome, "Simples Nacional (Misto: Anexos I + III)")
        self.assertTrue(self.cenarios[0].melhor)
        self.assertEqual(self.cenarios[-1].nome, NOME_PRESUMIDO_SUP)
        self.assertTrue(self.cenarios[-1].pior)


class ScenarioServiceTests(unittest.TestCase):
    def test_sem_receita_de_servico_nao_gera_simulacoes(self) -> None:
        payload = demo_example_payload("mei")
        nomes = [c.nome for c in generate_scenarios(ScenarioInput.from_payload(payload))]
        self.assertNotIn(NOME_PRESUMIDO_HOSPITALAR, nomes)
        self.assertNotIn(NOME_PRESUMIDO_SUP, nomes)
        self.assertEqual(len(nomes), 6)

    def test_mei_elegivel_e_melhor(self) -> None:
        cenarios = generate_scenarios(ScenarioInput.from_payload(demo_example_payload("mei")))
        self.assertEqual(cenarios[0].tipo_regime, RegimeKind.MEI)
        self.assertTrue(cenarios[0].melhor)
        self.assertAlmostEqual(cenarios[0].imposto_total, 76.90, places=2)

    def test_atividade_nao_permitida_bloqueia_mei(self) -> None:
        cenarios = generate_scenarios(ScenarioInput.from_payload(demo_example_payload("professor")))
        mei = _por_nome(cenarios)["MEI"]
        self.assertFalse(mei.elegivel)
        self.assertEqual(mei.nota_elegibilidade, "Possui atividades não permitidas no MEI: Professor.")

    def test_fator_r_move_consultoria_para_anexo_iii(self) -> None:
        cenarios = generate_scenarios(ScenarioInput.from_payload(demo_example_payload("consultoria")))
        simples = _por_nome(cenarios)["Simples Nacional Anexo III"]
        self.assertAlmostEqual(_linhas(simples)["DAS (Anexo III)"], 2580.0, places=2)

    def test_anexo_iv_inclui_cpp(self) -> None:
        payload = {
            "monthlyRevenue": 10000.0,
            "activities": [{"name": "Obras", "revenue": 10000.0, "type": "servico", "simplesAnnex": "IV"}],
        }
        simples = _por_nome(generate_scenarios(ScenarioInput.from_payload(payload)))["Simples Nacional Anexo IV"]
        linhas = _linhas(simples)
        self.assertAlmostEqual(linhas["DAS (Anexo IV)"], 450.0, places=2)
        self.assertAlmostEqual(linhas["CPP Patronal (Anexo IV)"], 560.0, places=2)

    def test_equiparacao_ligada_remove_simulacao_hospitalar(self) -> None:
        cenarios = generate_scenarios(ScenarioInput.from_payload(demo_example_payload("clinica")))
        nomes = [c.nome for c in cenarios]
        self.assertNotIn(NOME_PRESUMIDO_HOSPITALAR, nomes)
        self.assertIn(NOME_PRESUMIDO_SUP, nomes)

    def test_socios_zero_no_payload_nao_interrompe(self) -> None:
        payload = {"monthlyRevenue": 10000.0, "numberOfPartners": 0}
        cenarios = generate_scenarios(ScenarioInput.from_payload(payload))
        self.assertEqual(len(cenarios), 8)
        sup = _por_nome(cenarios)[NOME_PRESUMIDO_SUP]
        self.assertAlmostEqual(_linhas(sup)["ISS Fixo (SUP)"], 300.0, places=2)

    def test_monofasico_no_payload(self) -> None:
        payload = demo_example_payload("bar_quadra")
        payload["isMonophasicPisCofins"] = True
        saida = ScenarioService().analyze(ScenarioInput.from_payload(payload))
        presumido = _por_nome(saida.cenarios)["Lucro Presumido (Misto)"]
        self.assertIn("PIS/COFINS (Monofásico na revenda)", _linhas(presumido))
        self.assertAlmostEqual(_linhas(presumido)["PIS/COFINS (Monofásico na revenda)"], 182.5, places=2)

    def test_receita_zero_sem_divisao_por_zero(self) -> None:
        cenarios = generate_scenarios(ScenarioInput())
        self.assertTrue(all(c.aliquota_efetiva_percentual == 0.0 for c in cenarios))

    def test_execucao_idempotente(self) -> None:
        inp = ScenarioInput.from_payload(demo_example_payload("bar_quadra"))
        service = ScenarioService()
        self.assertEqual(service.run(inp), service.run(inp))

    def test_constantes_injetadas(self) -> None:
        base = load_legal_constants()
        constantes = replace(base, mei=replace(base.mei, limite_anual=200000.0))
        cenarios = ScenarioService(constantes).run(ScenarioInput(receita_mensal=10000.0))
        mei = _por_nome(cenarios)["MEI"]
        self.assertTrue(mei.elegivel)
        self.assertTrue(mei.melhor)
        self.assertEqual(base.mei.limite_anual, 81000.0)

    def test_analyze_gera_relatorio_e_evento(self) -> None:
        out = ScenarioService().analyze(ScenarioInput(receita_mensal=10000.0))
        self.assertIn("=== RANKING DE CENÁRIOS ===", out.relatorio_texto)
        self.assertIn("[MELHOR]", out.relatorio_texto)
        evento = out.to_event()
        self.assertEqual(evento["ruleset_id"], "BR_TAX_2025_V1")
        self.assertEqual(len(evento["cenarios"]), len(out.cenarios))
        self.assertTrue(evento["assumptions"])


if __name__ == "__main__":
    unittest.main()

import unittest

from dto import ScenarioInput
from formatters import formatar_percentual, formatar_reais
from report_formatters import (
    render_cenario_detalhe,
    render_perfil_section,
    render_ranking_section,
    render_relatorio_cenarios,
)
from tax_engine import ScenarioService


class FormattersTests(unittest.TestCase):
    def test_formatar_reais_ptbr(self) -> None:
        self.assertEqual(formatar_reais(81000), "R$ 81.000,00")
        self.assertEqual(formatar_reais(1234567.891), "R$ 1.234.567,89")
        self.assertEqual(formatar_reais(-0.001), "R$ 0,00")

    def test_formatar_percentual(self) -> None:
        self.assertEqual(formatar_percentual(0.1137), "11,37%")
        self.assertEqual(formatar_percentual(11.37, ja_percentual=True), "11,37%")
        self.assertEqual(formatar_percentual(0.28, casas=0), "28%")


class ReportFormattersTests(unittest.TestCase):
    def setUp(self) -> None:
        service = ScenarioService()
        inp = ScenarioInput(receita_mensal=10000.0)
        self.profile = service.build_profile(inp)
        self.cenarios = service.run(inp)

    def test_perfil_lista_atividades_e_premissas(self) -> None:
        txt = render_perfil_section(self.profile)
        self.assertIn("=== PERFIL NORMALIZADO ===", txt)
        self.assertIn("Serviços (genérico) | servico | Anexo III | R$ 10.000,00 | MEI", txt)
        self.assertIn("Premissas:", txt)

    def test_ranking_marca_melhor_e_pior(self) -> None:
        txt = render_ranking_section(self.cenarios)
        self.assertIn("1. Simples Nacional Anexo III [MELHOR] | Sim | R$ 840,04 | 8,40%", txt)
        self.assertIn("[PIOR]", txt)
        self.assertNotIn("{", txt)

    def test_ranking_vazio(self) -> None:
        self.assertIn("Sem cenários calculados.", render_ranking_section([]))

    def test_detalhe_sem_dict_cru(self) -> None:
        txt = render_cenario_detalhe(self.cenarios[0])
        self.assertIn("--- Simples Nacional Anexo III (PJ) ---", txt)
        self.assertIn("DAS (Anexo III) (6,00%): R$ 600,00", txt)
        self.assertIn("Pró-labore: base R$ 2.800,00", txt)
        self.assertNotIn("{", txt)
        self.assertNotIn("}", txt)

    def test_relatorio_completo(self) -> None:
        txt = render_relatorio_cenarios(self.profile, self.cenarios)
        self.assertIn("=== DETALHAMENTO ===", txt)
        for cenario in self.cenarios:
            self.assertIn(cenario.nome, txt)


if __name__ == "__main__":
    unittest.main()

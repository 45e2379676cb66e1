import unittest

from dto import Activity
from legal_constants import load_legal_constants
from regimes import calcular_lucro_real


class LucroRealTests(unittest.TestCase):
    def setUp(self) -> None:
        self.c = load_legal_constants()

    def test_estimativa_com_adicional(self) -> None:
        atividades = [Activity(nome="Engenharia", receita=100000.0, tipo="servico", anexo_simples="III")]
        imposto, det = calcular_lucro_real(atividades, self.c, margem_lucro=0.30, aliquota_iss=4.0, aliquota_icms=0.0)
        self.assertAlmostEqual(det["lucro_estimado"], 30000.0, places=2)
        self.assertAlmostEqual(det["irpj"], 4500.0, places=2)
        self.assertAlmostEqual(det["adicional_irpj"], 1000.0, places=2)
        self.assertAlmostEqual(det["csll"], 2700.0, places=2)
        self.assertAlmostEqual(det["pis_cofins"], 9250.0, places=2)
        self.assertAlmostEqual(det["iss"], 4000.0, places=2)
        self.assertAlmostEqual(imposto, 21450.0, places=2)
        self.assertEqual(det["tributos"][0].descricao, "PIS/COFINS (Não Cumulativo)")

    def test_margem_zero_mantem_pis_cofins(self) -> None:
        atividades = [Activity(nome="Loja", receita=10000.0, tipo="comercio", anexo_simples="I")]
        imposto, det = calcular_lucro_real(atividades, self.c, margem_lucro=0.0, aliquota_iss=4.0, aliquota_icms=0.0)
        self.assertEqual(det["irpj"], 0.0)
        self.assertEqual(det["csll"], 0.0)
        self.assertAlmostEqual(imposto, 925.0, places=2)
        self.assertNotIn("ISS", [t.descricao for t in det["tributos"]])


if __name__ == "__main__":
    unittest.main()

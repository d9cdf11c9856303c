"""Unit tests for the rule-based fallback scoring."""

from pathlib import Path
import sys
import unittest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
BACKEND_ROOT = PROJECT_ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from ml.fallback import (
    CASH_ADVANCE_CLUSTER,
    DEFAULT_CLUSTER,
    HIGH_RISK_CLUSTER,
    INACTIVE_CLUSTER,
    PREMIUM_CLUSTER,
    STABLE_REVOLVER_CLUSTER,
    assign_credit_cluster,
    churn_message,
    count_add_on_services,
    credit_ratios,
    decide_churn,
    score_churn_knn,
    score_churn_logreg,
)
from ml.interpreter import SegmentCatalog
from ml.schema import ChurnPredictionRequest, CreditSegmentationRequest
from models.enums import RiskLevel


def _churn_request(**overrides) -> ChurnPredictionRequest:
    payload = {
        "adulto_mayor": 0,
        "meses_como_cliente": 60,
        "cargo_mensual": 50.0,
        "tiene_pareja": "Yes",
        "dependientes": "No",
        "tipo_internet": "DSL",
        "seguridad_en_linea": "Yes",
        "respaldo_en_linea": "Yes",
        "proteccion_dispositivo": "Yes",
        "soporte_tecnico": "Yes",
        "tipo_contrato": "Two year",
        "facturacion_electronica": "Yes",
        "metodo_pago": "Credit card (automatic)",
    }
    payload.update(overrides)
    return ChurnPredictionRequest(**payload)


def _high_risk_churn_request() -> ChurnPredictionRequest:
    return _churn_request(
        adulto_mayor=1,
        meses_como_cliente=3,
        cargo_mensual=110.0,
        tiene_pareja="No",
        tipo_internet="Fiber optic",
        seguridad_en_linea="No",
        respaldo_en_linea="No",
        proteccion_dispositivo="No",
        soporte_tecnico="No",
        tipo_contrato="Month-to-month",
        facturacion_electronica="No",
        metodo_pago="Electronic check",
    )


def _credit_request(**overrides) -> CreditSegmentationRequest:
    payload = {
        "Saldo": 1000.0,
        "Frecuencia_Saldo": 0.9,
        "Compras_Totales": 800.0,
        "Compras_Contado": 500.0,
        "Compras_Cuotas": 300.0,
        "Avances_Efectivo": 0.0,
        "Frecuencia_Compras": 0.5,
        "Frec_Compras_Contado": 0.3,
        "Frec_Compras_Cuotas": 0.3,
        "Frec_Avances": 0.0,
        "Transacciones_Avance": 0.0,
        "Transacciones_Compra": 12.0,
        "Limite_Credito": 5000.0,
        "Pagos_Realizados": 800.0,
        "Pago_Minimo": 150.0,
        "Pct_Pago_Completo": 0.2,
    }
    payload.update(overrides)
    return CreditSegmentationRequest(**payload)


BRANCH_REQUESTS = {
    "premium": _credit_request(
        Saldo=500.0, Limite_Credito=5000.0, Frecuencia_Compras=0.9, Pct_Pago_Completo=0.8, Avances_Efectivo=0.0
    ),
    "stable": _credit_request(
        Saldo=2000.0, Limite_Credito=5000.0, Pagos_Realizados=1500.0, Frecuencia_Compras=0.5, Avances_Efectivo=200.0
    ),
    "cash_advance": _credit_request(
        Saldo=1000.0, Avances_Efectivo=600.0, Pagos_Realizados=100.0, Frecuencia_Compras=0.1
    ),
    "high_risk": _credit_request(
        Saldo=4500.0,
        Limite_Credito=5000.0,
        Pagos_Realizados=500.0,
        Pct_Pago_Completo=0.0,
        Frecuencia_Compras=0.1,
        Avances_Efectivo=0.0,
    ),
    "inactive": _credit_request(
        Saldo=100.0, Pagos_Realizados=10.0, Frecuencia_Compras=0.05, Pct_Pago_Completo=0.0, Avances_Efectivo=0.0
    ),
    "no_rule": _credit_request(
        Saldo=2000.0, Pagos_Realizados=200.0, Frecuencia_Compras=0.4, Avances_Efectivo=200.0, Pct_Pago_Completo=0.3
    ),
}


class ChurnKnnFallbackTests(unittest.TestCase):
    """Validate the additive KNN churn heuristic."""

    def test_month_to_month_fibre_scenario_predicts_churn(self) -> None:
        """New month-to-month fibre customers paying by e-check churn."""
        request = _churn_request(
            tipo_contrato="Month-to-month",
            tipo_internet="Fiber optic",
            metodo_pago="Electronic check",
            meses_como_cliente=3,
            cargo_mensual=110.0,
            seguridad_en_linea="No",
            respaldo_en_linea="No",
            proteccion_dispositivo="No",
            soporte_tecnico="No",
        )
        score = score_churn_knn(request)
        self.assertGreater(score, 0.5)
        prediction, probability = decide_churn(score)
        self.assertEqual(prediction, 1)
        self.assertEqual(probability, 0.99)
        self.assertIn("alta probabilidad de abandonar", churn_message(prediction, probability))

    def test_loyal_customer_scores_low(self) -> None:
        """Two-year contracts with every add-on score at the contract base."""
        score = score_churn_knn(_churn_request())
        self.assertAlmostEqual(score, 0.05)
        prediction, probability = decide_churn(score)
        self.assertEqual(prediction, 0)
        self.assertAlmostEqual(probability, 0.95)

    def test_add_on_count(self) -> None:
        """Only `Yes` add-ons are counted."""
        request = _churn_request(seguridad_en_linea="No internet service", respaldo_en_linea="No")
        self.assertEqual(count_add_on_services(request), 2)

    def test_score_is_deterministic(self) -> None:
        """Repeated calls with the same input agree exactly."""
        request = _high_risk_churn_request()
        self.assertEqual(score_churn_knn(request), score_churn_knn(request))


class ChurnLogRegFallbackTests(unittest.TestCase):
    """Validate the logistic churn heuristic."""

    def test_high_risk_profile(self) -> None:
        """Risky profile lands in the high-confidence churn tier."""
        probability = score_churn_logreg(_high_risk_churn_request())
        self.assertAlmostEqual(probability, 0.8375, places=3)
        prediction, class_probability = decide_churn(probability)
        self.assertEqual(prediction, 1)
        self.assertGreaterEqual(class_probability, 0.7)

    def test_low_risk_profile_is_clamped(self) -> None:
        """Very low logits are clamped to at least 0.01 before thresholding."""
        probability = score_churn_logreg(_churn_request())
        self.assertLess(probability, 0.05)
        prediction, class_probability = decide_churn(probability)
        self.assertEqual(prediction, 0)
        self.assertLessEqual(class_probability, 0.99)

    def test_probability_is_bounded(self) -> None:
        """Logistic output stays within (0, 1) for extreme charges."""
        probability = score_churn_logreg(_churn_request(cargo_mensual=1e6))
        self.assertGreater(probability, 0.0)
        self.assertLessEqual(probability, 1.0)


class ChurnDecisionTests(unittest.TestCase):
    """Validate clamping, thresholding and message tiers."""

    def test_class_conditional_probability(self) -> None:
        """Reported probability belongs to the predicted class."""
        self.assertEqual(decide_churn(0.8), (1, 0.8))
        prediction, probability = decide_churn(0.2)
        self.assertEqual(prediction, 0)
        self.assertAlmostEqual(probability, 0.8)

    def test_threshold_is_inclusive(self) -> None:
        """A score of exactly 0.5 predicts churn."""
        self.assertEqual(decide_churn(0.5), (1, 0.5))

    def test_scores_are_clamped(self) -> None:
        """Scores outside [0.01, 0.99] are clamped."""
        self.assertEqual(decide_churn(3.0), (1, 0.99))
        prediction, probability = decide_churn(-1.0)
        self.assertEqual(prediction, 0)
        self.assertAlmostEqual(probability, 0.99)

    def test_nan_score_does_not_raise(self) -> None:
        """A NaN score resolves to the lowest churn score."""
        prediction, probability = decide_churn(float("nan"))
        self.assertEqual(prediction, 0)
        self.assertAlmostEqual(probability, 0.99)

    def test_message_tiers(self) -> None:
        """Messages follow the three confidence tiers."""
        self.assertIn("alta", churn_message(1, 0.7))
        self.assertIn("moderada de abandonar", churn_message(1, 0.6))
        self.assertIn("baja probabilidad", churn_message(0, 0.8))
        self.assertIn("moderada-baja", churn_message(0, 0.6))


class CreditFallbackTests(unittest.TestCase):
    """Validate ordered credit segmentation rules."""

    def test_premium_scenario_ignores_magnitudes(self) -> None:
        """Premium ratios map to cluster 0 at any scale."""
        for factor in (1.0, 1000.0):
            request = _credit_request(
                Saldo=500.0 * factor,
                Limite_Credito=5000.0 * factor,
                Pagos_Realizados=400.0 * factor,
                Avances_Efectivo=10.0 * factor,
                Frecuencia_Compras=0.9,
                Pct_Pago_Completo=0.8,
            )
            self.assertEqual(assign_credit_cluster(request), PREMIUM_CLUSTER)

    def test_each_branch(self) -> None:
        """Each rule branch is reachable."""
        expected = {
            "premium": PREMIUM_CLUSTER,
            "stable": STABLE_REVOLVER_CLUSTER,
            "cash_advance": CASH_ADVANCE_CLUSTER,
            "high_risk": HIGH_RISK_CLUSTER,
            "inactive": INACTIVE_CLUSTER,
            "no_rule": DEFAULT_CLUSTER,
        }
        for name, cluster in expected.items():
            with self.subTest(branch=name):
                self.assertEqual(assign_credit_cluster(BRANCH_REQUESTS[name]), cluster)

    def test_zero_balance_and_limit_do_not_raise(self) -> None:
        """Zero denominators are treated as 1."""
        request = _credit_request(Saldo=0.0, Limite_Credito=0.0, Pagos_Realizados=0.0, Avances_Efectivo=0.0)
        self.assertEqual(credit_ratios(request), (0.0, 0.0, 0.0))
        self.assertIn(assign_credit_cluster(request), range(5))

    def test_branch_risk_matches_segment_catalog(self) -> None:
        """Clusters produced by the rules describe a consistent risk level."""
        catalog = SegmentCatalog()
        expected_risk = {
            "premium": RiskLevel.LOW,
            "stable": RiskLevel.MEDIUM,
            "cash_advance": RiskLevel.HIGH,
            "high_risk": RiskLevel.HIGH,
            "inactive": RiskLevel.LOW,
        }
        for name, risk in expected_risk.items():
            with self.subTest(branch=name):
                segment = catalog.describe(assign_credit_cluster(BRANCH_REQUESTS[name]))
                self.assertEqual(segment.risk, risk)
        self.assertEqual(catalog.describe(HIGH_RISK_CLUSTER).risk.value, "alto")


if __name__ == "__main__":
    unittest.main()

"""Rule-based fallback scoring used when model artifacts are unavailable.

Every function here is deterministic and free of I/O so the prediction
endpoints keep answering without any artifact on disk.
"""

from __future__ import annotations

import math
from typing import Tuple

from .schema import ChurnPredictionRequest, CreditSegmentationRequest


CHURN_THRESHOLD = 0.5
MIN_CHURN_SCORE = 0.01
MAX_CHURN_SCORE = 0.99

HIGH_CONFIDENCE = 0.7
LOW_RESIDUAL_RISK = 0.3

PREMIUM_CLUSTER = 0
STABLE_REVOLVER_CLUSTER = 1
CASH_ADVANCE_CLUSTER = 2
HIGH_RISK_CLUSTER = 3
INACTIVE_CLUSTER = 4
DEFAULT_CLUSTER = STABLE_REVOLVER_CLUSTER

_ADD_ON_FIELDS = ("seguridad_en_linea", "respaldo_en_linea", "proteccion_dispositivo", "soporte_tecnico")

_KNN_CONTRACT_SCORE = {"Month-to-month": 0.30, "One year": 0.10}
_LOGREG_CONTRACT_LOGIT = {"Month-to-month": 1.2, "One year": 0.3}
_LOGREG_PAYMENT_LOGIT = {"Electronic check": 0.8, "Mailed check": 0.4}
_LOGREG_INTERNET_LOGIT = {"Fiber optic": 0.4, "DSL": 0.1}
_LOGREG_ADD_ON_LOGIT = {
    "seguridad_en_linea": -0.2,
    "respaldo_en_linea": -0.15,
    "proteccion_dispositivo": -0.15,
    "soporte_tecnico": -0.25,
}


def count_add_on_services(request: ChurnPredictionRequest) -> int:
    """Count the add-on services the customer subscribes to."""
    return sum(1 for field in _ADD_ON_FIELDS if getattr(request, field) == "Yes")


def score_churn_knn(request: ChurnPredictionRequest) -> float:
    """Additive churn score approximating the KNN model."""
    score = _KNN_CONTRACT_SCORE.get(request.tipo_contrato, 0.05)

    if request.tipo_internet == "Fiber optic":
        score += 0.15
    if request.metodo_pago == "Electronic check":
        score += 0.20

    score += (len(_ADD_ON_FIELDS) - count_add_on_services(request)) * 0.10

    if request.meses_como_cliente < 12:
        score += 0.20
    elif request.meses_como_cliente < 24:
        score += 0.10

    if request.cargo_mensual > 100:
        score += 0.15
    elif request.cargo_mensual < 30:
        score += 0.10

    if request.facturacion_electronica == "No":
        score += 0.10
    return score


def churn_logit(request: ChurnPredictionRequest) -> float:
    """Log-odds of churn from fixed logistic-regression style coefficients."""
    logit = -2.5
    logit += -0.02 * request.meses_como_cliente
    logit += 0.01 * request.cargo_mensual
    logit += 0.3 * request.adulto_mayor

    logit += _LOGREG_CONTRACT_LOGIT.get(request.tipo_contrato, -0.5)
    logit += _LOGREG_PAYMENT_LOGIT.get(request.metodo_pago, -0.2)
    logit += _LOGREG_INTERNET_LOGIT.get(request.tipo_internet, -0.3)

    for field, weight in _LOGREG_ADD_ON_LOGIT.items():
        if getattr(request, field) == "Yes":
            logit += weight

    if request.facturacion_electronica == "No":
        logit += 0.3
    if request.tiene_pareja == "No":
        logit += 0.1
    if request.dependientes == "Yes":
        logit -= 0.1
    return logit


def _logistic(value: float) -> float:
    # Two branches keep math.exp from overflowing on extreme logits.
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    exp_value = math.exp(value)
    return exp_value / (1.0 + exp_value)


def score_churn_logreg(request: ChurnPredictionRequest) -> float:
    """Churn probability approximating the logistic regression model."""
    return _logistic(churn_logit(request))


def decide_churn(score: float) -> Tuple[int, float]:
    """Clamp a churn score and return (prediction, probability of the predicted class)."""
    if math.isnan(score):
        score = MIN_CHURN_SCORE
    churn_probability = min(MAX_CHURN_SCORE, max(MIN_CHURN_SCORE, score))
    prediction = 1 if churn_probability >= CHURN_THRESHOLD else 0
    class_probability = churn_probability if prediction == 1 else 1.0 - churn_probability
    return prediction, class_probability


def churn_message(prediction: int, class_probability: float) -> str:
    """Explain a churn decision in one of the three confidence tiers."""
    if prediction == 1:
        if class_probability >= HIGH_CONFIDENCE:
            return "El cliente tiene alta probabilidad de abandonar el servicio."
        return "El cliente tiene probabilidad moderada de abandonar el servicio."

    if 1.0 - class_probability <= LOW_RESIDUAL_RISK:
        return "El cliente tiene baja probabilidad de abandonar el servicio."
    return "El cliente tiene probabilidad moderada-baja de abandonar el servicio."


def credit_ratios(request: CreditSegmentationRequest) -> Tuple[float, float, float]:
    """Return (balance/limit, payments/balance, cash advance/balance); zero denominators count as 1."""
    balance = request.Saldo or 1.0
    balance_ratio = request.Saldo / (request.Limite_Credito or 1.0)
    payment_ratio = request.Pagos_Realizados / balance
    cash_advance_ratio = request.Avances_Efectivo / balance
    return balance_ratio, payment_ratio, cash_advance_ratio


def assign_credit_cluster(request: CreditSegmentationRequest) -> int:
    """Assign a customer segment with ordered rules; the first match wins."""
    balance_ratio, payment_ratio, cash_advance_ratio = credit_ratios(request)
    purchase_frequency = request.Frecuencia_Compras
    full_payment = request.Pct_Pago_Completo

    if balance_ratio < 0.3 and purchase_frequency > 0.6 and full_payment > 0.5 and cash_advance_ratio < 0.1:
        return PREMIUM_CLUSTER
    if balance_ratio < 0.7 and payment_ratio > 0.5 and purchase_frequency > 0.3 and cash_advance_ratio < 0.3:
        return STABLE_REVOLVER_CLUSTER
    if cash_advance_ratio > 0.4 or (balance_ratio > 0.6 and request.Avances_Efectivo > request.Saldo * 0.3):
        return CASH_ADVANCE_CLUSTER
    if balance_ratio > 0.7 and payment_ratio < 0.3 and full_payment < 0.2 and purchase_frequency < 0.3:
        return HIGH_RISK_CLUSTER
    if purchase_frequency < 0.2 and balance_ratio < 0.2:
        return INACTIVE_CLUSTER
    return DEFAULT_CLUSTER

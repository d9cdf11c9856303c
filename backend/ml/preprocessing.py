"""Feature encoding for churn and credit segmentation models.

The transforms below reproduce the preprocessing applied when the artifacts
were trained. Column order, scaling constants and the dropped reference
category of every one-hot group are fixed by the paired artifact; change
them only together with a new artifact.

Churn (21 columns)
    Min-max scaling ``value * scale + min`` for the three numeric fields,
    followed by drop-first one-hot groups.

Credit (16 columns)
    Standard scaling ``(value - mean) / std`` over the raw usage fields.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .schema import ChurnPredictionRequest, CreditSegmentationRequest


# (field, scale, min) as fitted by MinMaxScaler.
CHURN_NUMERIC_SCALING: List[Tuple[str, float, float]] = [
    ("adulto_mayor", 1.0, 0.0),
    ("meses_como_cliente", 0.01388889, 0.0),
    ("cargo_mensual", 0.01001502, -0.18828242),
]

# (field, encoded categories); the first category of each field is dropped.
CHURN_CATEGORICAL_GROUPS: List[Tuple[str, List[str]]] = [
    ("tiene_pareja", ["Yes"]),
    ("dependientes", ["Yes"]),
    ("tipo_internet", ["Fiber optic", "No"]),
    ("seguridad_en_linea", ["No internet service", "Yes"]),
    ("respaldo_en_linea", ["No internet service", "Yes"]),
    ("proteccion_dispositivo", ["No internet service", "Yes"]),
    ("soporte_tecnico", ["No internet service", "Yes"]),
    ("tipo_contrato", ["One year", "Two year"]),
    ("facturacion_electronica", ["Yes"]),
    ("metodo_pago", ["Credit card (automatic)", "Electronic check", "Mailed check"]),
]

CHURN_FEATURE_NAMES: List[str] = [name for name, _, _ in CHURN_NUMERIC_SCALING] + [
    "{0}_{1}".format(field, category)
    for field, categories in CHURN_CATEGORICAL_GROUPS
    for category in categories
]

# (field, mean, std) from the credit-card training set.
CREDIT_STANDARD_SCALING: List[Tuple[str, float, float]] = [
    ("Saldo", 1564.474828, 2081.531879),
    ("Frecuencia_Saldo", 0.877271, 0.236904),
    ("Compras_Totales", 1003.204834, 2136.634782),
    ("Compras_Contado", 592.437371, 1659.887917),
    ("Compras_Cuotas", 411.067645, 904.338115),
    ("Avances_Efectivo", 978.871112, 2097.163877),
    ("Frecuencia_Compras", 0.490351, 0.401371),
    ("Frec_Compras_Contado", 0.202458, 0.298336),
    ("Frec_Compras_Cuotas", 0.364437, 0.397448),
    ("Frec_Avances", 0.135144, 0.200121),
    ("Transacciones_Avance", 3.248827, 6.824647),
    ("Transacciones_Compra", 14.709832, 24.857649),
    ("Limite_Credito", 4494.449450, 3638.815725),
    ("Pagos_Realizados", 1733.143852, 2895.063757),
    ("Pago_Minimo", 864.206542, 2330.588021),
    ("Pct_Pago_Completo", 0.153715, 0.292499),
]

CREDIT_FEATURE_NAMES: List[str] = [name for name, _, _ in CREDIT_STANDARD_SCALING]

CHURN_FEATURE_COUNT = len(CHURN_FEATURE_NAMES)
CREDIT_FEATURE_COUNT = len(CREDIT_FEATURE_NAMES)


def sanitize_vector(values: Sequence[float]) -> np.ndarray:
    """Return a float vector with NaN and infinite entries replaced by 0."""
    array = np.asarray(values, dtype=np.float64)
    return np.nan_to_num(array, nan=0.0, posinf=0.0, neginf=0.0)


def _min_max(value: float, scale: float, minimum: float) -> float:
    return float(value) * scale + minimum


def _standard(value: float, mean: float, std: float) -> float:
    if std == 0:
        return float("nan")
    return (float(value) - mean) / std


def encode_churn_features(request: ChurnPredictionRequest) -> np.ndarray:
    """Encode a churn request into the 21-column vector the churn models expect."""
    values: List[float] = [
        _min_max(getattr(request, field), scale, minimum) for field, scale, minimum in CHURN_NUMERIC_SCALING
    ]
    for field, categories in CHURN_CATEGORICAL_GROUPS:
        raw = getattr(request, field)
        values.extend(1.0 if raw == category else 0.0 for category in categories)
    return np.asarray(values, dtype=np.float64)


def encode_credit_features(request: CreditSegmentationRequest) -> np.ndarray:
    """Encode a credit request into the 16-column standardized vector."""
    values = [_standard(getattr(request, field), mean, std) for field, mean, std in CREDIT_STANDARD_SCALING]
    return np.asarray(values, dtype=np.float64)


def features_to_dict(names: Sequence[str], vector: Sequence[float]) -> Dict[str, float]:
    """Pair encoded values with their column names for diagnostics."""
    return {name: round(float(value), 6) for name, value in zip(names, sanitize_vector(vector))}

"""Schema definitions for prediction requests and responses."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field

from models.enums import PredictionSource, RiskLevel


YesNo = Literal["Yes", "No"]
AddOnService = Literal["Yes", "No", "No internet service"]
InternetType = Literal["DSL", "Fiber optic", "No"]
ContractType = Literal["Month-to-month", "One year", "Two year"]
PaymentMethod = Literal[
    "Bank transfer (automatic)",
    "Credit card (automatic)",
    "Electronic check",
    "Mailed check",
]


class ChurnPredictionRequest(BaseModel):
    """Customer attributes used by both churn models."""

    adulto_mayor: int = Field(..., ge=0, le=1)
    meses_como_cliente: int = Field(..., ge=0)
    cargo_mensual: float = Field(..., ge=0)
    tiene_pareja: YesNo
    dependientes: YesNo
    tipo_internet: InternetType
    seguridad_en_linea: AddOnService
    respaldo_en_linea: AddOnService
    proteccion_dispositivo: AddOnService
    soporte_tecnico: AddOnService
    tipo_contrato: ContractType
    facturacion_electronica: YesNo
    metodo_pago: PaymentMethod


class CreditSegmentationRequest(BaseModel):
    """Credit-card usage profile used by the segmentation model."""

    Saldo: float = Field(..., ge=0)
    Frecuencia_Saldo: float = Field(..., ge=0, le=1)
    Compras_Totales: float = Field(..., ge=0)
    Compras_Contado: float = Field(..., ge=0)
    Compras_Cuotas: float = Field(..., ge=0)
    Avances_Efectivo: float = Field(..., ge=0)
    Frecuencia_Compras: float = Field(..., ge=0, le=1)
    Frec_Compras_Contado: float = Field(..., ge=0, le=1)
    Frec_Compras_Cuotas: float = Field(..., ge=0, le=1)
    Frec_Avances: float = Field(..., ge=0, le=1)
    Transacciones_Avance: float = Field(..., ge=0)
    Transacciones_Compra: float = Field(..., ge=0)
    Limite_Credito: float = Field(..., ge=0)
    Pagos_Realizados: float = Field(..., ge=0)
    Pago_Minimo: float = Field(..., ge=0)
    Pct_Pago_Completo: float = Field(..., ge=0, le=1)


class ChurnPredictionResult(BaseModel):
    """Churn prediction response shared by the model and fallback paths."""

    model: Literal["knn", "logistic_regression"]
    prediction: Literal[0, 1]
    probability: float = Field(..., ge=0, le=1)
    message: str
    source: PredictionSource = PredictionSource.MODEL


class SegmentDescriptor(BaseModel):
    """Human-readable description of a customer segment."""

    cluster: int
    name: str = Field(..., min_length=1)
    description: str = Field(default="")
    risk: RiskLevel = RiskLevel.MEDIUM
    customer_type: str = Field(..., min_length=1)
    recommendation: str = Field(default="")


class CreditSegmentationResult(BaseModel):
    """Credit segmentation response shared by the model and fallback paths."""

    model: Literal["kmeans"] = "kmeans"
    cluster: int
    segment: SegmentDescriptor
    source: PredictionSource = PredictionSource.MODEL
    normalized_features: Optional[Dict[str, float]] = None

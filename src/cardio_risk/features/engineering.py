"""Feature engineering -- map form input onto the classifier's numeric schema."""

import logging
import math

from cardio_risk.schemas import PredictionInput, ServiceInput

logger = logging.getLogger(__name__)

# The service encodes 1 = female, 2 = male; anything unmapped is sent as male.
GENDER_CODES = {"female": 1, "male": 2, "other": 2}
DEFAULT_GENDER_CODE = 2

DEFAULT_BMI = 25.0
DEFAULT_HEIGHT_CM = 170.0

# Not collected by the form.
DEFAULT_ALCOHOL = 0
DEFAULT_ACTIVE = 1


def _encode_gender(gender: str) -> int:
    return GENDER_CODES.get(gender.lower(), DEFAULT_GENDER_CODE)


def _cholesterol_tier(cholesterol_mg_dl: float) -> int:
    """Bucket total cholesterol into the service's 1-3 scale.

    Tiers: normal (<200), above normal (200-240), well above normal (>240).
    """
    if cholesterol_mg_dl > 240:
        return 3
    if cholesterol_mg_dl >= 200:
        return 2
    return 1


def _glucose_tier(diabetes: bool) -> int:
    return 2 if diabetes else 1


def _body_measurements(data: PredictionInput) -> tuple[float, float, float]:
    """Resolve (bmi, height, weight), deriving weight from BMI when absent.

    BMI = weight / (height / 100) ** 2, so the missing weight is
    bmi * (height / 100) ** 2 rounded half up.
    """
    bmi = data.bmi or DEFAULT_BMI
    height = data.height or DEFAULT_HEIGHT_CM
    weight = data.weight or float(math.floor(bmi * (height / 100) ** 2 + 0.5))
    return bmi, height, weight


def to_service_input(data: PredictionInput) -> ServiceInput:
    """Translate a form submission into the classifier's feature vector.

    The mapping is total: missing optional measurements are filled with
    defaults and nothing is rejected.

    Parameters
    ----------
    data : PredictionInput
        Patient data as entered in the assessment form.

    Returns
    -------
    ServiceInput
        Numeric-coded features for ``POST /predict``.
    """
    bmi, height, weight = _body_measurements(data)

    service_input = ServiceInput(
        age=data.age,
        gender=_encode_gender(data.gender),
        height=height,
        weight=weight,
        ap_hi=data.blood_pressure_systolic,
        ap_lo=data.blood_pressure_diastolic,
        cholesterol=_cholesterol_tier(data.cholesterol),
        gluc=_glucose_tier(data.diabetes),
        smoke=1 if data.smoking else 0,
        alco=DEFAULT_ALCOHOL,
        active=DEFAULT_ACTIVE,
        bmi=bmi,
    )
    logger.debug("Engineered service input: %s", service_input.model_dump())
    return service_input

from .models import HormoneField, KidneyDiseaseStage, LiverDiseaseType, ReferenceRange, SafetyLimits, Severity


THYROID_REFERENCE_RANGES = {
    "TSH": ReferenceRange(low=0.4, high=4.5, units="mIU/L"),
    HormoneField.T3: ReferenceRange(low=80, high=200, units="ng/dl"),
    HormoneField.T4: ReferenceRange(low=5.0, high=12.0, units="μg/dl"),
    HormoneField.FT3: ReferenceRange(low=2.3, high=4.2, units="pg/ml"),
    HormoneField.FT4: ReferenceRange(low=0.8, high=1.8, units="ng/dl"),
}

# TSH brackets (mIU/L), lower bound inclusive
HYPOTHYROID_TSH_THRESHOLDS = {
    Severity.SEVERE: 20.0,
    Severity.MODERATE: 10.0,
    Severity.MILD: 4.5,
}
HYPERTHYROID_TSH_THRESHOLDS = {
    Severity.SEVERE: 0.1,
    Severity.MODERATE: 0.2,
    Severity.MILD: 0.4,
}
DIAGNOSIS_STRONG_TSH = 10.0
METHIMAZOLE_TSH_CEILING = 0.1

# mcg per kg of body weight
LEVOTHYROXINE_MULTIPLIERS = {
    Severity.SEVERE: 1.6,
    Severity.MODERATE: 1.4,
    Severity.MILD: 1.2,
}

# (hormone, label, fractional increase when below reference low), evaluation order
HORMONE_LOW_ADJUSTMENTS = (
    (HormoneField.FT4, "Free T4", 0.15),
    (HormoneField.FT3, "Free T3", 0.10),
    (HormoneField.T4, "Total T4", 0.10),
    (HormoneField.T3, "Total T3", 0.05),
)

PREGNANCY_MULTIPLIERS = {
    1: 1.5,
    2: 1.4,
    3: 1.3,
    None: 1.4,
}
PREGNANCY_TARGET_TSH = {
    1: 2.5,
    2: 3.0,
    3: 3.0,
    None: 3.0,
}

HEART_DISEASE_MULTIPLIERS = {
    "high_risk": 0.75,
    "low_risk": 0.9,
}
OSTEOPOROSIS_MULTIPLIER = 0.9
ESTROGEN_THERAPY_MULTIPLIER = 1.15
GI_ABSORPTION_MULTIPLIER = 1.2
LOW_WEIGHT_MULTIPLIER = 0.9

# None stands for an unspecified type / stage
LIVER_DISEASE_ADJUSTMENTS = {
    LiverDiseaseType.CIRRHOSIS: (
        0.9, "Cirrhosis detected – reduce LT4 dose by 10%; monitor free T4 and T3 closely."),
    LiverDiseaseType.CHOLESTATIC: (
        1.15, "Cholestatic liver disease – increase LT4 dose by 15%; elevated TBG expected."),
    LiverDiseaseType.NAFLD: (
        1.1, "NAFLD detected – mild increase in LT4 dose (10%) may be required."),
    LiverDiseaseType.HEPATITIS: (
        1.0, "Hepatitis – transient effect on thyroid metabolism; no routine dose change, monitor TSH."),
    LiverDiseaseType.POST_TRANSPLANT: (
        1.0, "Post-liver transplant – recheck thyroid function and titrate as metabolism normalizes."),
    LiverDiseaseType.OTHER: (
        0.9, "Unspecified liver disease – apply conservative 10% reduction."),
    None: (
        0.9, "Unspecified liver disease – apply conservative 10% reduction."),
}

_SEVERE_CKD = (0.85, "Severe CKD or ESRD – reduce LT4 dose by 15%; monitor TSH and free T4 frequently.")
_MILD_CKD = (1.0, "Mild CKD – no dose change needed; monitor thyroid function periodically.")
_UNSPECIFIED_CKD = (0.9, "Unspecified kidney disease – apply conservative 10% dose reduction.")

KIDNEY_DISEASE_ADJUSTMENTS = {
    KidneyDiseaseStage.STAGE_1: _MILD_CKD,
    KidneyDiseaseStage.STAGE_2: _MILD_CKD,
    KidneyDiseaseStage.STAGE_3: (
        0.9, "Moderate CKD – reduce LT4 dose by 10%; metabolism may be slowed."),
    KidneyDiseaseStage.STAGE_4: _SEVERE_CKD,
    KidneyDiseaseStage.STAGE_5: _SEVERE_CKD,
    KidneyDiseaseStage.ESRD: _SEVERE_CKD,
    KidneyDiseaseStage.POST_TRANSPLANT: (
        1.0, "Post kidney transplant – re-evaluate LT4 dose as metabolism normalizes."),
    KidneyDiseaseStage.OTHER: _UNSPECIFIED_CKD,
    None: _UNSPECIFIED_CKD,
}

LOW_WEIGHT_THRESHOLD_KG = 45
ELDERLY_AGE_THRESHOLD = 60
LOW_TSH_THRESHOLD = 0.1

MAX_DOSE_CHANGE = {
    "standard": 25.0,
    "conservative": 12.5,
}

# symptom count -> mcg removed from the dose
SYMPTOM_DOSE_REDUCTION = {
    1: 12.5,
    2: 25.0,
}
SYMPTOM_DOSE_FLOOR = 25.0

DEFAULT_SAFETY_LIMITS = SafetyLimits()

# Levothyroxine ladder in 12.5 mcg steps
AVAILABLE_DOSES = (
    25, 37.5, 50, 62.5, 75, 87.5, 100, 112.5, 125, 137.5, 150, 162.5, 175, 187.5, 200,
)
COMMERCIAL_TABLETS = (25, 50, 75, 88, 100, 112, 125, 137, 150, 175, 200)
ROUNDING_BOUNDS = (25, 200)
PREFER_LOWER_WITHIN = 6.25
PREFER_UPPER_WITHIN = 1.0

FOLLOW_UP_WEEKS = {
    "normal": 12,
    Severity.MILD: 6,
    Severity.MODERATE: 5,
    Severity.SEVERE: 4,
}

# Methimazole
METHIMAZOLE_ROUNDING_STEP = 5
SUBCLINICAL_TREATMENT_AGE = 65
SUBCLINICAL_DOSE = 5.0
ELDERLY_HYPERTHYROID_AGE = 65
PEDIATRIC_MAX_AGE = 18
PEDIATRIC_DOSING = {
    "standard": (0.35, 30.0),  # mg/kg/day, daily cap
    "severe": (0.7, 40.0),
}
FT3_DISPROPORTIONATE_RATIO = 1.5
FT3_VERY_HIGH_RATIO = 1.8
FT4_RATIO_BANDS = {
    Severity.MILD: 1.0,
    Severity.MODERATE: 1.5,
    Severity.SEVERE: 2.0,
}
FT4_RATIO_BORDERLINE = 1.9
FT4_RATIO_VERY_SEVERE = 3.0

# TSH-only methimazole estimate for 0.1 < TSH < 0.4, when hormone dosing does not apply
TSH_TIER_METHIMAZOLE_DOSES = {
    Severity.MILD: 5.0,
    Severity.MODERATE: 10.0,
    Severity.SEVERE: 15.0,
}
HYPERTHYROID_FOLLOW_UP_WEEKS = {
    Severity.MILD: 4,
    Severity.MODERATE: 3,
    Severity.SEVERE: 2,
}

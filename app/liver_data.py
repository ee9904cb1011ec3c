# Liver panel feature definitions.
# Each entry carries:
# 1. The validator acceptance range (inclusive) and its display unit.
# 2. The reference ceiling used to normalize the raw value into [0, 1].
#    These ceilings are clinical upper-normal values and intentionally differ
#    from the validator ranges (albumin 7 g/dL is accepted, then clamps to 1.0).
# 3. Direction: "high" when an elevated value is adverse, "low" when a
#    depressed value is adverse.
# 4. Feature importance weight. The lab weights sum to 1.0; age carries none.

LAB_FEATURES = {
    "albumin": {
        "alias": "albumin",
        "label": "Albumin",
        "unit": "g/dL",
        "range": (0, 10),
        "ceiling": 5.5,      # Normal: 3.5-5.5 g/dL
        "direction": "low",
        "weight": 0.25,
    },
    "alkaline_phosphatase": {
        "alias": "alkalinePhosphatase",
        "label": "Alkaline Phosphatase",
        "unit": "U/L",
        "range": (0, 500),
        "ceiling": 120,      # Normal: <120 U/L
        "direction": "high",
        "weight": 0.18,
    },
    "alamine_aminotransferase": {
        "alias": "alamiNotransaminase",
        "label": "ALAT",
        "unit": "U/L",
        "range": (0, 500),
        "ceiling": 65,       # Normal: <65 U/L
        "direction": "high",
        "weight": 0.16,
    },
    "aspartate_aminotransferase": {
        "alias": "aspartateAminotransaminase",
        "label": "ASAT",
        "unit": "U/L",
        "range": (0, 500),
        "ceiling": 65,       # Normal: <65 U/L
        "direction": "high",
        "weight": 0.15,
    },
    "bilirubin": {
        "alias": "bilirubin",
        "label": "Bilirubin",
        "unit": "mg/dL",
        "range": (0, 20),
        "ceiling": 1.2,      # Normal: <1.2 mg/dL
        "direction": "high",
        "weight": 0.12,
    },
    "cholesterol": {
        "alias": "cholesterol",
        "label": "Cholesterol",
        "unit": "mg/dL",
        "range": (0, 400),
        "ceiling": 200,      # Normal: <200 mg/dL
        "direction": "high",
        "weight": 0.06,
    },
    "albumin_globulin_ratio": {
        "alias": "albuminGlobulinRatio",
        "label": "Albumin/Globulin Ratio",
        "unit": "",
        "range": (0, 5),
        "ceiling": 2.0,      # Normal: >1.0
        "direction": "low",
        "weight": 0.04,
    },
    "platelets_count": {
        "alias": "plateletsCount",
        "label": "Platelets Count",
        "unit": "K/uL",
        "range": (0, 1000),
        "ceiling": 400,      # Normal: 150-400 K/uL
        "direction": "low",
        "weight": 0.02,
    },
    "prothrombin_time": {
        "alias": "prothrombinTime",
        "label": "Prothrombin Time",
        "unit": "seconds",
        "range": (0, 50),
        "ceiling": 13,       # Normal: 11-13.5 seconds
        "direction": "high",
        "weight": 0.02,
    },
    "age": {
        "alias": "age",
        "label": "Age",
        "unit": "years",
        "range": (1, 150),
        "ceiling": 80,
        "direction": "high",
        # Validated and normalized, but not part of the weighted sum
        "weight": 0.0,
    },
}

FEATURE_NAMES = list(LAB_FEATURES.keys())

FEATURE_WEIGHTS = {name: feature["weight"] for name, feature in LAB_FEATURES.items()}
REFERENCE_CEILINGS = {name: feature["ceiling"] for name, feature in LAB_FEATURES.items()}
LOW_ADVERSE_FEATURES = {name for name, feature in LAB_FEATURES.items() if feature["direction"] == "low"}

# CSV header aliases, matched after trimming and lower-casing.
CSV_COLUMN_ALIASES = {
    "age": ["age", "umur", "usia"],
    "gender": ["gender", "jenis kelamin", "sex"],
    "albumin": ["albumin"],
    "alkaline_phosphatase": ["alkaline phosphatase", "alkalinephosphatase", "alk phos", "alkphos"],
    "alamine_aminotransferase": ["alat", "alanine aminotransferase", "alt"],
    "aspartate_aminotransferase": ["asat", "aspartate aminotransferase", "ast"],
    "bilirubin": ["bilirubin"],
    "cholesterol": ["cholesterol"],
    "albumin_globulin_ratio": ["albumin/globulin ratio", "albuminglobulinratio", "albuminglobularratio", "a/g ratio"],
    "platelets_count": ["platelets", "platelet count", "platelets count"],
    "prothrombin_time": ["prothrombin time", "prothrombintime", "prothombintime", "pt", "inr"],
    "name": ["name", "nama", "patient name", "patient_name"],
}

# Every lab feature must be present as a column; name and gender are optional.
REQUIRED_CSV_FIELDS = ["age"] + [name for name in FEATURE_NAMES if name != "age"]

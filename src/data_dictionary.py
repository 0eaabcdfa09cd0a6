"""
src/data_dictionary.py

A mapping of institution column -> description used by the Streamlit UI
(help text on the filters, the profile card and the what-if sliders).
"""

DATA_DICTIONARY = {
    "unitid": "Unique identifier for the institution (IPEDS unit id).",
    "year": "Cohort year the record describes.",
    "institution_name": "Institution name.",
    "state": "Two-letter state code.",
    "sector": "Control of the institution: Public, Private nonprofit or For-profit.",
    "school_size_category": "Enrollment size band: Small, Medium or Large.",
    "longitude": "Campus longitude in degrees.",
    "latitude": "Campus latitude in degrees.",
    "actual_grad_rate": "Observed graduation rate (0–100).",
    "admission_rate": "Share of applicants admitted (0–1).",
    "retention_rate": "Share of first-year students returning (0–1).",
    "pell_percentage": "Share of undergraduates receiving a Pell grant (0–100).",
    "student_faculty_ratio": "Students per instructional faculty member.",
    "spending_per_student": "Instructional spending per full-time student (USD).",
    "predicted_grad_rate": "Model-predicted graduation rate (0–100), one column per model.",
    "risk_category": "Model-assigned risk of low graduation: Low, Medium or High, one column per model.",
}


def describe(column: str) -> str:
    """Look up a column, folding per-model columns onto their base name."""
    if column in DATA_DICTIONARY:
        return DATA_DICTIONARY[column]
    for base in ("predicted_grad_rate", "risk_category"):
        if column.startswith(base + "_"):
            model = column[len(base) + 1:]
            return f"{DATA_DICTIONARY[base]} ({model})"
    return ""

DEFAULT_CONFIG = {
    # -----------------------------
    # REPORT SELECTION & THRESHOLDS
    # -----------------------------
    "reports": {
        "include": [],             # empty = all registered reports
        "high_cost_limit": 50,
        "min_group_size": {
            "readmission_by_outcome": 10,
            "procedure_effectiveness": 5,
            "gender_condition": 5,
            "cost_effectiveness": 3,
            "readmission_risk": 10,
        },
    },

    # -----------------------------
    # OUTPUT CONTROL
    # -----------------------------
    "output": {
        "markdown": True,          # md is SOURCE OF TRUTH
        "csv": True,
        "visuals": True,
        "pdf": False,              # opt-in, ReportLab
        "max_table_rows": 50,      # rendering cap only, never affects data
    },

    "output_dir": "runs",

    # -----------------------------
    # METADATA (OPTIONAL)
    # -----------------------------
    "metadata": {
        "framework": "Hospital Analysis",
        "version": "v1.0",
    },
}

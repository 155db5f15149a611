from typing import Dict, List

import pandas as pd
from pydantic import BaseModel, Field

from ..utils.validation import InputValidator


class TableSchema(BaseModel):
    name: str
    key: List[str]
    unique_key: bool = True
    required_columns: List[str] = Field(default_factory=list)
    date_columns: List[str] = Field(default_factory=list)

    def check_frame(self, df: pd.DataFrame) -> None:
        columns = list(dict.fromkeys(self.key + self.required_columns + self.date_columns))
        InputValidator.require_columns(df, columns, self.name)


class JoinStep(BaseModel):
    name: str
    right: str
    on: str
    how: str = "left"
    expect_unique_left: bool = False
    expect_unique_right: bool = False
    drop_columns: List[str] = Field(default_factory=list)
    rename_columns: Dict[str, str] = Field(default_factory=dict)


class Substitution(BaseModel):
    column: str
    value: str
    reason: str = ""


class ResolutionPolicy(BaseModel):
    drop_columns: List[str] = Field(default_factory=list)
    substitutions: List[Substitution] = Field(default_factory=list)
    missing_label: str = "Missing"
    missing_columns: List[str] = Field(default_factory=list)
    carry_forward_columns: List[str] = Field(default_factory=list)
    carry_forward_group: str = "complaint_id"
    required_columns: List[str] = Field(default_factory=list)

    def rule_assignments(self) -> Dict[str, List[str]]:
        """Return column -> rules it is assigned to (rules 2-5)."""
        assigned: Dict[str, List[str]] = {}
        groups = [
            ("semantic_substitution", [s.column for s in self.substitutions]),
            ("explicit_unknown", self.missing_columns),
            ("carry_forward", self.carry_forward_columns),
            ("required", self.required_columns),
        ]
        for rule, columns in groups:
            for col in columns:
                assigned.setdefault(col, []).append(rule)
        return assigned

    def overlapping_columns(self) -> Dict[str, List[str]]:
        return {c: r for c, r in self.rule_assignments().items() if len(r) > 1}


class FeatureSpec(BaseModel):
    columns: List[str]
    renames: Dict[str, str] = Field(default_factory=dict)
    categorical: List[str] = Field(default_factory=list)
    sort_by: List[str] = Field(default_factory=list)

    def output_names(self) -> List[str]:
        return [self.renames.get(c, c) for c in self.columns]


# ==================== DEFAULT LAYOUTS ====================

COMPLAINTS = dict(
    name="complaints",
    key=["complaint_id"],
    unique_key=True,
    required_columns=[
        "as_of_date",
        "incident_date",
        "incident_hour",
        "incident_borough",
        "incident_precinct",
        "location_type_of_incident",
        "reason_for_police_contact",
        "outcome_of_police_encounter",
    ],
    date_columns=["as_of_date", "incident_date", "ccrb_received_date", "close_date"],
)

ALLEGATIONS = dict(
    name="allegations",
    key=["complaint_id", "allegation_record_identity"],
    unique_key=True,
    required_columns=[
        "as_of_date",
        "tax_id",
        "officer_rank_at_incident",
        "fado_type",
        "allegation",
        "ccrb_allegation_disposition",
        "officer_days_on_force_at_incident",
        "victim_age_range_at_incident",
        "victim_gender",
        "victim_race",
    ],
    date_columns=["as_of_date"],
)

PENALTIES = dict(
    name="penalties",
    key=["complaint_id"],
    unique_key=False,
    required_columns=["as_of_date", "tax_id", "ccrb_recommended_penalty", "nypd_officer_penalty"],
    date_columns=["as_of_date", "apu_closing_date", "non_apu_nypd_penalty_report_date"],
)

OFFICERS = dict(
    name="officers",
    key=["tax_id"],
    unique_key=True,
    required_columns=[
        "as_of_date",
        "officer_race",
        "officer_gender",
        "current_rank",
        "active_per_last_reported_status",
    ],
    date_columns=["as_of_date", "last_reported_active_date"],
)


def default_tables() -> Dict[str, TableSchema]:
    return {t["name"]: TableSchema(**t) for t in (COMPLAINTS, ALLEGATIONS, PENALTIES, OFFICERS)}


def default_joins() -> List[JoinStep]:
    return [
        JoinStep(
            name="complaint_allegation",
            right="allegations",
            on="complaint_id",
            how="left",
            expect_unique_left=True,
            drop_columns=["as_of_date_y"],
            rename_columns={"as_of_date_x": "as_of_date"},
        ),
        JoinStep(
            name="penalty",
            right="penalties",
            on="complaint_id",
            how="inner",
            drop_columns=["as_of_date_y", "tax_id_y"],
            rename_columns={"as_of_date_x": "as_of_date", "tax_id_x": "tax_id"},
        ),
        JoinStep(
            name="officer",
            right="officers",
            on="tax_id",
            how="left",
            expect_unique_right=True,
            drop_columns=["as_of_date_y"],
            rename_columns={"as_of_date_x": "as_of_date"},
        ),
    ]


def default_policy() -> ResolutionPolicy:
    return ResolutionPolicy(
        drop_columns=[
            # fine-grained duplicate of victim_race
            "victim_ethnicity",
            "officer_command_at_incident",
            "as_of_date",
            "ccrb_received_date",
            "close_date",
            "complaint_status",
            "case_type",
            "apu_plea_agreed_penalty",
            "apu_trial_commissioner_recommended_penalty",
            "apu_case_status",
            "apu_closing_date",
            "non_apu_nypd_penalty_report_date",
            "last_reported_active_date",
            "total_complaints",
        ],
        substitutions=[
            Substitution(
                column="nypd_officer_penalty",
                value="No penalty",
                reason="no final NYPD penalty on record means none was imposed",
            ),
            Substitution(
                column="ccrb_recommended_penalty",
                value="No recommendation",
                reason="CCRB issued no penalty recommendation",
            ),
        ],
        missing_columns=[
            "victim_age_range_at_incident",
            "victim_gender",
            "victim_race",
            "reason_for_police_contact",
            "outcome_of_police_encounter",
            "officer_race",
            "officer_gender",
            "current_rank",
            "active_per_last_reported_status",
        ],
        carry_forward_columns=[
            "incident_borough",
            "incident_precinct",
            "location_type_of_incident",
            "incident_hour",
            "incident_date",
            "officer_rank_at_incident",
        ],
        required_columns=[
            "complaint_id",
            "tax_id",
            "allegation_record_identity",
            "fado_type",
            "allegation",
            "ccrb_allegation_disposition",
            "officer_days_on_force_at_incident",
        ],
    )


def default_features() -> FeatureSpec:
    return FeatureSpec(
        columns=[
            "complaint_id",
            "tax_id",
            "allegation_record_identity",
            "incident_date",
            "incident_hour",
            "incident_borough",
            "incident_precinct",
            "location_type_of_incident",
            "reason_for_police_contact",
            "outcome_of_police_encounter",
            "fado_type",
            "allegation",
            "ccrb_allegation_disposition",
            "officer_rank_at_incident",
            "officer_days_on_force_at_incident",
            "victim_age_range_at_incident",
            "victim_gender",
            "victim_race",
            "officer_race",
            "officer_gender",
            "current_rank",
            "active_per_last_reported_status",
            "ccrb_recommended_penalty",
            "nypd_officer_penalty",
        ],
        renames={
            "incident_borough": "borough",
            "incident_precinct": "precinct",
            "location_type_of_incident": "location_type",
            "reason_for_police_contact": "contact_reason",
            "outcome_of_police_encounter": "encounter_outcome",
            "tax_id": "officer_id",
            "allegation_record_identity": "allegation_id",
            "officer_rank_at_incident": "officer_rank",
            "officer_days_on_force_at_incident": "days_on_force",
            "ccrb_allegation_disposition": "ccrb_disposition",
            "victim_age_range_at_incident": "victim_age_range",
            "ccrb_recommended_penalty": "ccrb_penalty",
            "nypd_officer_penalty": "nypd_penalty",
            "active_per_last_reported_status": "officer_active",
            "current_rank": "officer_current_rank",
        },
        categorical=[
            "incident_hour",
            "borough",
            "precinct",
            "location_type",
            "contact_reason",
            "encounter_outcome",
            "fado_type",
            "allegation",
            "ccrb_disposition",
            "officer_rank",
            "victim_age_range",
            "victim_gender",
            "victim_race",
            "officer_race",
            "officer_gender",
            "officer_current_rank",
            "officer_active",
            "ccrb_penalty",
            "nypd_penalty",
        ],
        sort_by=["complaint_id", "officer_id", "allegation_id"],
    )

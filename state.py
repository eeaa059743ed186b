"""
Calculator State
Raw calculator inputs, the edits a user can make to them, and the
recompute step that turns them into display values
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from calculator import PeptideCalculator, format_number
from config import Config
from presets import (
    CUSTOM_PEPTIDE_ID,
    PEPTIDE_PRESETS,
    TypicalDose,
    get_peptide_by_id,
    get_syringe_spec,
)
from syringe import generate_syringe_label, generate_syringe_svg


def default_peptide_id() -> str:
    return Config.DEFAULT_PEPTIDE


def default_syringe_id() -> str:
    return Config.DEFAULT_SYRINGE


DOSE_UNITS = ("mg", "mcg")


def coerce_number(value: Any) -> Optional[float]:
    """Parse a user-entered number; anything unparseable counts as missing"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class CalculatorState:
    """Everything the user can edit; derived values are never stored here"""
    selected_peptide_id: str = field(default_factory=default_peptide_id)
    custom_peptide_name: str = ""
    mg_in_vial: Optional[float] = 10
    water_ml: Optional[float] = 2
    desired_dose: Optional[float] = 2.5
    dose_unit: str = "mg"
    syringe_size: str = field(default_factory=default_syringe_id)

    @property
    def peptide(self):
        return get_peptide_by_id(self.selected_peptide_id) or PEPTIDE_PRESETS[CUSTOM_PEPTIDE_ID]

    @property
    def syringe_spec(self):
        return get_syringe_spec(self.syringe_size)

    @property
    def peptide_name(self) -> str:
        if self.selected_peptide_id == CUSTOM_PEPTIDE_ID:
            return self.custom_peptide_name or "Custom"
        return self.peptide.name

    def select_peptide(self, peptide_id: str) -> None:
        """Switch peptide; a real preset also loads its vial and dose defaults"""
        self.selected_peptide_id = peptide_id
        preset = get_peptide_by_id(peptide_id)
        if preset and preset.id != CUSTOM_PEPTIDE_ID:
            self.mg_in_vial = preset.default_vial_mg
            self.water_ml = preset.default_water_ml
            self.desired_dose = preset.default_dose
            self.dose_unit = preset.default_dose_unit

    def select_typical_dose(self, dose: TypicalDose) -> None:
        self.desired_dose = dose.amount
        self.dose_unit = dose.unit

    def toggle_dose_unit(self) -> None:
        """Switch between mg and mcg, converting the dose so it stays the same amount"""
        if self.dose_unit == "mg":
            if self.desired_dose is not None:
                self.desired_dose = self.desired_dose * 1000
            self.dose_unit = "mcg"
        else:
            if self.desired_dose is not None:
                self.desired_dose = self.desired_dose / 1000
            self.dose_unit = "mg"

    def reset_to_defaults(self) -> None:
        self.select_peptide(default_peptide_id())
        self.syringe_size = default_syringe_id()

    def restore(self, data: Optional[Dict[str, Any]]) -> "CalculatorState":
        """Apply a saved snapshot; missing or empty fields keep their current value"""
        if not data:
            return self
        if data.get("selectedPeptideId"):
            self.selected_peptide_id = str(data["selectedPeptideId"])
        if data.get("customPeptideName"):
            self.custom_peptide_name = str(data["customPeptideName"])
        for key, attr in (("mgInVial", "mg_in_vial"), ("waterMl", "water_ml"), ("desiredDose", "desired_dose")):
            number = coerce_number(data.get(key))
            if number:
                setattr(self, attr, number)
        if data.get("doseUnit") in DOSE_UNITS:
            self.dose_unit = data["doseUnit"]
        if data.get("syringeSize"):
            self.syringe_size = str(data["syringeSize"])
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedPeptideId": self.selected_peptide_id,
            "customPeptideName": self.custom_peptide_name,
            "mgInVial": self.mg_in_vial,
            "waterMl": self.water_ml,
            "desiredDose": self.desired_dose,
            "doseUnit": self.dose_unit,
            "syringeSize": self.syringe_size,
        }


def state_from_dict(data: Optional[Dict[str, Any]]) -> CalculatorState:
    """Build a state from a snapshot on top of the defaults"""
    return CalculatorState().restore(data)


def state_from_request(data: Dict[str, Any]) -> CalculatorState:
    """
    Build a state from a form/API payload

    Unlike restore(), every numeric field is taken as given: an empty or
    unparseable value becomes None so the calculators report it as missing.
    """
    state = CalculatorState()
    state.selected_peptide_id = str(data.get("selectedPeptideId") or default_peptide_id())
    state.custom_peptide_name = str(data.get("customPeptideName") or "")
    state.mg_in_vial = coerce_number(data.get("mgInVial"))
    state.water_ml = coerce_number(data.get("waterMl"))
    state.desired_dose = coerce_number(data.get("desiredDose"))
    state.dose_unit = data.get("doseUnit") if data.get("doseUnit") in DOSE_UNITS else "mg"
    state.syringe_size = str(data.get("syringeSize") or default_syringe_id())
    return state


def default_config_name(state: CalculatorState) -> str:
    mg = format_number(state.mg_in_vial) if state.mg_in_vial is not None else "-"
    ml = format_number(state.water_ml) if state.water_ml is not None else "-"
    return f"{state.peptide_name} - {mg}mg/{ml}mL"


def config_from_state(state: CalculatorState, name: str) -> Dict[str, Any]:
    """Saved-configuration record for the current inputs"""
    return {
        "name": name.strip(),
        "peptide": {
            "id": state.selected_peptide_id,
            "customName": state.custom_peptide_name,
        },
        "vial": {
            "mgInVial": state.mg_in_vial,
            "waterMl": state.water_ml,
        },
        "dose": {
            "amount": state.desired_dose,
            "unit": state.dose_unit,
            "syringeSize": state.syringe_size,
        },
    }


def state_from_config(config: Dict[str, Any]) -> CalculatorState:
    """Load a saved configuration back into calculator inputs"""
    peptide = config.get("peptide") or {}
    vial = config.get("vial") or {}
    dose = config.get("dose") or {}
    return CalculatorState(
        selected_peptide_id=peptide.get("id") or CUSTOM_PEPTIDE_ID,
        custom_peptide_name=peptide.get("customName") or "",
        mg_in_vial=vial.get("mgInVial"),
        water_ml=vial.get("waterMl"),
        desired_dose=dose.get("amount"),
        dose_unit=dose.get("unit") if dose.get("unit") in DOSE_UNITS else "mg",
        syringe_size=dose.get("syringeSize") or default_syringe_id(),
    )


def recompute(state: CalculatorState) -> Dict[str, Any]:
    """Every derived display value for the current inputs"""
    calc = PeptideCalculator
    syringe_spec = state.syringe_spec

    concentration = calc.calculate_concentration(state.mg_in_vial, state.water_ml)
    draw = calc.calculate_draw_volume(state.desired_dose, state.dose_unit, concentration, syringe_spec)
    doses = calc.calculate_doses_per_vial(state.mg_in_vial, state.desired_dose, state.dose_unit)
    validation = calc.validate_inputs(
        state.mg_in_vial, state.water_ml, state.desired_dose, state.dose_unit, syringe_spec
    )

    if draw:
        svg = generate_syringe_svg(syringe_spec.id, draw.fill_percentage, draw.units, draw.exceeds_syringe)
        label = generate_syringe_label(draw.units, draw.ml, draw.exceeds_syringe)
    else:
        svg = generate_syringe_svg(syringe_spec.id, 0, 0)
        label = generate_syringe_label(0, 0, False)

    return {
        "peptide": state.peptide.to_dict(),
        "syringe": syringe_spec.to_dict(),
        "concentration": concentration.to_dict() if concentration else None,
        "drawVolume": draw.to_dict() if draw else None,
        "dosesPerVial": doses.to_dict() if doses else None,
        "validation": validation.to_dict(),
        "syringeSvg": svg,
        "syringeLabel": label,
    }


def recompute_and_persist(state: CalculatorState, store) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Recompute derived values and save the raw inputs to the last-state slot

    Call after every change to the state. Only raw inputs are persisted.
    """
    derived = recompute(state)
    persisted = state.to_dict()
    store.save_state(persisted)
    return derived, persisted

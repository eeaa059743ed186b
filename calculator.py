"""
Peptide Calculator
Handles reconstitution, syringe draw and dose-count calculations

All calculations are pure functions of their inputs. Bad input never raises:
a calculation whose inputs are missing or non-positive returns None.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# Insulin syringe convention: 100 units = 1 ml
UNITS_PER_ML = 100
MCG_PER_MG = 1000

HIGH_CONCENTRATION_MG_PER_ML = 10
LOW_CONCENTRATION_MG_PER_ML = 0.5
MIN_MEASURABLE_UNITS = 3

# Relative tolerance used to absorb float error in remainder math
_REMAINDER_REL_TOL = 1e-9


def round_to(value: float, decimals: int) -> float:
    """
    Round to a fixed number of decimal places, half away from zero

    Scales by 10^decimals, rounds to the nearest integer and scales back.
    The built-in round() rounds half to even and must not be used here.
    """
    factor = math.pow(10, decimals)
    scaled = value * factor
    if not math.isfinite(scaled):
        return value
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / factor


def _is_positive(value: Optional[float]) -> bool:
    if value is None or isinstance(value, bool):
        return False
    return math.isfinite(value) and value > 0


@dataclass(frozen=True)
class Concentration:
    """Solution strength after reconstitution, display-rounded per field"""
    mg_per_ml: float
    mcg_per_ml: float
    mcg_per_unit: float
    mg_per_unit: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "mgPerMl": self.mg_per_ml,
            "mcgPerMl": self.mcg_per_ml,
            "mcgPerUnit": self.mcg_per_unit,
            "mgPerUnit": self.mg_per_unit,
        }


@dataclass(frozen=True)
class DrawResult:
    """How far to draw the syringe for one dose"""
    units: float
    ml: float
    fill_percentage: float
    exceeds_syringe: bool
    dose_mcg: float
    dose_mg: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "units": self.units,
            "ml": self.ml,
            "fillPercentage": self.fill_percentage,
            "exceedsSyringe": self.exceeds_syringe,
            "doseMcg": self.dose_mcg,
            "doseMg": self.dose_mg,
        }


@dataclass(frozen=True)
class DoseCountResult:
    full_doses: int
    exact_doses: float
    remainder_mg: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fullDoses": self.full_doses,
            "exactDoses": self.exact_doses,
            "remainderMg": self.remainder_mg,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Errors block a calculation, warnings are advisory only"""
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "isValid": self.is_valid,
            "hasWarnings": self.has_warnings,
        }


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' for whole values"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class PeptideCalculator:
    """Calculate peptide reconstitution and dosing"""

    @staticmethod
    def calculate_concentration(
        peptide_mass_mg: Optional[float],
        diluent_volume_ml: Optional[float]
    ) -> Optional[Concentration]:
        """
        Calculate concentration after reconstitution

        Args:
            peptide_mass_mg: Amount of peptide in the vial (mg)
            diluent_volume_ml: Amount of bacteriostatic water added (ml)

        Returns:
            Concentration in mg/ml, mcg/ml, mcg/unit and mg/unit,
            or None when either input is missing or not positive
        """
        if not _is_positive(peptide_mass_mg) or not _is_positive(diluent_volume_ml):
            return None

        mg_per_ml = peptide_mass_mg / diluent_volume_ml
        mcg_per_ml = mg_per_ml * MCG_PER_MG
        mcg_per_unit = mcg_per_ml / UNITS_PER_ML
        mg_per_unit = mg_per_ml / UNITS_PER_ML

        return Concentration(
            mg_per_ml=round_to(mg_per_ml, 4),
            mcg_per_ml=round_to(mcg_per_ml, 2),
            mcg_per_unit=round_to(mcg_per_unit, 4),
            mg_per_unit=round_to(mg_per_unit, 6),
        )

    @staticmethod
    def calculate_draw_volume(
        desired_dose: Optional[float],
        dose_unit: str,
        concentration: Optional[Concentration],
        syringe_spec: Any
    ) -> Optional[DrawResult]:
        """
        Calculate the syringe draw for a desired dose

        Args:
            desired_dose: Dose per injection
            dose_unit: "mg" or "mcg"
            concentration: Output of calculate_concentration
            syringe_spec: Syringe with a total_units capacity

        Returns:
            Draw in units and ml with fill level, or None
        """
        if concentration is None or not _is_positive(desired_dose):
            return None
        # Too dilute to show at 0.01 mcg/ml
        if concentration.mcg_per_ml <= 0:
            return None

        dose_mcg = desired_dose * MCG_PER_MG if dose_unit == "mg" else desired_dose

        # Divides by the display-rounded mcg/ml field
        required_ml = dose_mcg / concentration.mcg_per_ml
        required_units = required_ml * UNITS_PER_ML

        fill_percentage = required_units / syringe_spec.total_units * 100
        exceeds_syringe = required_units > syringe_spec.total_units

        return DrawResult(
            units=round_to(required_units, 1),
            ml=round_to(required_ml, 3),
            fill_percentage=min(fill_percentage, 100),
            exceeds_syringe=exceeds_syringe,
            dose_mcg=round_to(dose_mcg, 2),
            dose_mg=round_to(dose_mcg / MCG_PER_MG, 4),
        )

    @staticmethod
    def calculate_doses_per_vial(
        vial_mass_mg: Optional[float],
        desired_dose: Optional[float],
        dose_unit: str
    ) -> Optional[DoseCountResult]:
        """
        Calculate how many doses are in a vial

        Args:
            vial_mass_mg: Total peptide in the vial (mg)
            desired_dose: Dose per injection
            dose_unit: "mg" or "mcg"

        Returns:
            Full doses, fractional dose count and leftover mg, or None
        """
        if not _is_positive(vial_mass_mg) or not _is_positive(desired_dose):
            return None

        dose_mg = desired_dose / MCG_PER_MG if dose_unit == "mcg" else desired_dose

        total_doses = vial_mass_mg / dose_mg
        full_doses = math.floor(total_doses)
        remainder = math.fmod(vial_mass_mg, dose_mg)

        # Keep the remainder inside [0, dose_mg)
        if remainder < 0:
            remainder = 0.0
        elif math.isclose(remainder, dose_mg, rel_tol=_REMAINDER_REL_TOL):
            remainder = 0.0
            # Count the dose the zeroed remainder stood for
            if math.isclose(total_doses, full_doses + 1, rel_tol=_REMAINDER_REL_TOL):
                full_doses += 1

        return DoseCountResult(
            full_doses=int(full_doses),
            exact_doses=round_to(total_doses, 2),
            remainder_mg=round_to(remainder, 4),
        )

    @staticmethod
    def validate_inputs(
        vial_mass_mg: Optional[float],
        diluent_volume_ml: Optional[float],
        desired_dose: Optional[float],
        dose_unit: str,
        syringe_spec: Any
    ) -> ValidationResult:
        """
        Validate calculator inputs

        Basic checks run first and all of them are reported. Concentration
        and draw checks only run when the basic checks pass.
        """
        warnings = []
        errors = []

        if not _is_positive(vial_mass_mg):
            errors.append("peptide amount must be positive")
        if not _is_positive(diluent_volume_ml):
            errors.append("water amount must be positive")
        if not _is_positive(desired_dose):
            errors.append("dose must be positive")

        if errors:
            return ValidationResult(warnings=tuple(warnings), errors=tuple(errors))

        calc = PeptideCalculator
        concentration = calc.calculate_concentration(vial_mass_mg, diluent_volume_ml)

        if concentration.mg_per_ml > HIGH_CONCENTRATION_MG_PER_ML:
            warnings.append("concentration too high, consider more diluent")
        elif concentration.mg_per_ml < LOW_CONCENTRATION_MG_PER_ML:
            warnings.append("concentration too low, may need larger injection volumes")

        draw = calc.calculate_draw_volume(desired_dose, dose_unit, concentration, syringe_spec)
        if draw is not None:
            if draw.units < MIN_MEASURABLE_UNITS:
                warnings.append("volume below 3 units, hard to measure accurately")
            if draw.exceeds_syringe:
                errors.append(
                    f"Dose requires {format_number(draw.units)} units but syringe holds "
                    f"{format_number(syringe_spec.total_units)} units. "
                    f"Use a larger syringe or split the dose."
                )

        return ValidationResult(warnings=tuple(warnings), errors=tuple(errors))

    @staticmethod
    def full_reconstitution_report(
        peptide_name: str,
        mg_peptide: float,
        ml_water: float,
        desired_dose: float,
        dose_unit: str,
        syringe_spec: Any
    ) -> Dict[str, Any]:
        """
        Generate a complete reconstitution and dosing report

        Returns:
            Dictionary with every derived value (None where undefined)
        """
        calc = PeptideCalculator

        concentration = calc.calculate_concentration(mg_peptide, ml_water)
        draw = calc.calculate_draw_volume(desired_dose, dose_unit, concentration, syringe_spec)
        doses = calc.calculate_doses_per_vial(mg_peptide, desired_dose, dose_unit)
        validation = calc.validate_inputs(mg_peptide, ml_water, desired_dose, dose_unit, syringe_spec)

        return {
            "peptide": peptide_name,
            "vial_size_mg": mg_peptide,
            "water_added_ml": ml_water,
            "dose": desired_dose,
            "dose_unit": dose_unit,
            "syringe": syringe_spec.label,
            "concentration": concentration,
            "draw": draw,
            "doses": doses,
            "validation": validation,
        }

    @staticmethod
    def print_reconstitution_report(report: Dict[str, Any]) -> None:
        """Print a formatted reconstitution report"""
        concentration = report["concentration"]
        draw = report["draw"]
        doses = report["doses"]
        validation = report["validation"]

        print(f"\n{'='*60}")
        print(f"PEPTIDE RECONSTITUTION REPORT: {report['peptide']}")
        print(f"{'='*60}")
        print(f"\nVIAL PREPARATION:")
        print(f"  • Peptide amount: {report['vial_size_mg']} mg")
        print(f"  • Bacteriostatic water: {report['water_added_ml']} ml")
        if concentration:
            print(f"  • Concentration: {concentration.mg_per_ml} mg/ml ({concentration.mcg_per_ml} mcg/ml)")
            print(f"  • Per unit: {concentration.mcg_per_unit} mcg")
        print(f"\nDOSING INSTRUCTIONS:")
        print(f"  • Target dose: {report['dose']} {report['dose_unit']}")
        print(f"  • Syringe: {report['syringe']}")
        if draw:
            print(f"  • Draw to: {draw.units} units ({draw.ml} ml)")
        if doses:
            print(f"\nVIAL LIFESPAN:")
            print(f"  • Full doses: {doses.full_doses} ({doses.exact_doses} exact)")
            print(f"  • Leftover: {doses.remainder_mg} mg")
        for error in validation.errors:
            print(f"\n❌ {error}")
        for warning in validation.warnings:
            print(f"\n⚠ {warning}")
        print(f"{'='*60}\n")

"""
Unit tests for the dosing calculation engine.

Reference scenario: tirzepatide 10 mg vial + 2 mL water (5 mg/mL),
2.5 mg dose on a 1.0 mL / 100 unit insulin syringe.
"""

import pytest

from calculator import (
    Concentration,
    PeptideCalculator,
    ValidationResult,
    format_number,
    round_to,
)
from presets import SYRINGE_SPECS

calc = PeptideCalculator
SYRINGE_1ML = SYRINGE_SPECS["1.0"]
SYRINGE_HALF_ML = SYRINGE_SPECS["0.5"]


# ─── round_to ─────────────────────────────────────────────────────────────────

class TestRoundTo:
    """Half-away-from-zero rounding on the scaled value"""

    def test_half_rounds_up_not_to_even(self):
        assert round_to(2.5, 0) == 3.0
        assert round_to(0.125, 2) == 0.13

    def test_negative_half_rounds_away_from_zero(self):
        assert round_to(-2.5, 0) == -3.0

    def test_decimal_places(self):
        assert round_to(1.23456789, 4) == 1.2346
        assert round_to(1666.6666666, 2) == 1666.67

    def test_whole_numbers_unchanged(self):
        assert round_to(5.0, 4) == 5.0

    def test_value_too_large_to_scale_is_returned_as_is(self):
        assert round_to(1e305, 4) == 1e305


class TestFormatNumber:

    def test_whole_value_has_no_decimal(self):
        assert format_number(240.0) == "240"

    def test_fraction_kept(self):
        assert format_number(62.5) == "62.5"


# ─── calculate_concentration ──────────────────────────────────────────────────

class TestConcentration:

    def test_reference_vial(self):
        c = calc.calculate_concentration(10, 2)
        assert c == Concentration(mg_per_ml=5.0, mcg_per_ml=5000.0, mcg_per_unit=50.0, mg_per_unit=0.05)

    def test_per_field_rounding(self):
        c = calc.calculate_concentration(5, 3)
        assert c.mg_per_ml == 1.6667
        assert c.mcg_per_ml == 1666.67
        assert c.mcg_per_unit == 16.6667
        assert c.mg_per_unit == 0.016667

    @pytest.mark.parametrize("mass,water", [
        (0, 2), (10, 0), (-1, 2), (10, -2), (None, 2), (10, None), (None, None),
    ])
    def test_non_positive_or_missing_is_undefined(self, mass, water):
        assert calc.calculate_concentration(mass, water) is None

    @pytest.mark.parametrize("mass,water", [(5, 3), (10, 2), (7, 1.3), (2, 0.7), (50, 5)])
    def test_mcg_field_tracks_mg_field_within_rounding(self, mass, water):
        c = calc.calculate_concentration(mass, water)
        assert abs(c.mcg_per_ml - round_to(c.mg_per_ml * 1000, 2)) <= 0.055

    def test_huge_vial_does_not_raise(self):
        c = calc.calculate_concentration(1e305, 1)
        assert c.mg_per_ml == 1e305

    def test_repeat_calls_identical(self):
        assert calc.calculate_concentration(7, 1.3) == calc.calculate_concentration(7, 1.3)

    def test_to_dict_keys(self):
        assert calc.calculate_concentration(10, 2).to_dict() == {
            "mgPerMl": 5.0, "mcgPerMl": 5000.0, "mcgPerUnit": 50.0, "mgPerUnit": 0.05,
        }


# ─── calculate_draw_volume ────────────────────────────────────────────────────

class TestDrawVolume:

    def test_reference_draw(self):
        c = calc.calculate_concentration(10, 2)
        draw = calc.calculate_draw_volume(2.5, "mg", c, SYRINGE_1ML)
        assert draw.units == 50.0
        assert draw.ml == 0.5
        assert draw.fill_percentage == 50
        assert draw.exceeds_syringe is False
        assert draw.dose_mcg == 2500.0
        assert draw.dose_mg == 2.5

    def test_overflow_clamps_fill_but_flags_excess(self):
        c = calc.calculate_concentration(10, 2)
        draw = calc.calculate_draw_volume(12, "mg", c, SYRINGE_1ML)
        assert draw.dose_mcg == 12000.0
        assert draw.ml == 2.4
        assert draw.units == 240.0
        assert draw.exceeds_syringe is True
        assert draw.fill_percentage == 100

    def test_exactly_full_syringe_does_not_exceed(self):
        c = calc.calculate_concentration(10, 2)
        draw = calc.calculate_draw_volume(2.5, "mg", c, SYRINGE_HALF_ML)
        assert draw.units == 50.0
        assert draw.fill_percentage == 100
        assert draw.exceeds_syringe is False

    def test_mcg_dose(self):
        c = calc.calculate_concentration(5, 2)
        draw = calc.calculate_draw_volume(250, "mcg", c, SYRINGE_1ML)
        assert draw.dose_mcg == 250.0
        assert draw.dose_mg == 0.25
        assert draw.ml == 0.1
        assert draw.units == 10.0

    def test_uses_rounded_mcg_per_ml(self):
        c = calc.calculate_concentration(5, 3)  # 1666.67 mcg/ml after rounding
        draw = calc.calculate_draw_volume(1, "mg", c, SYRINGE_1ML)
        assert draw.ml == round_to(1000 / 1666.67, 3)
        assert draw.units == round_to(1000 / 1666.67 * 100, 1)

    def test_fill_percentage_not_rounded(self):
        c = calc.calculate_concentration(5, 3)
        draw = calc.calculate_draw_volume(1, "mg", c, SYRINGE_1ML)
        assert draw.fill_percentage == 1000 / 1666.67 * 100 / 100 * 100

    @pytest.mark.parametrize("dose", [0, -1, None])
    def test_missing_dose_is_undefined(self, dose):
        c = calc.calculate_concentration(10, 2)
        assert calc.calculate_draw_volume(dose, "mg", c, SYRINGE_1ML) is None

    def test_missing_concentration_is_undefined(self):
        assert calc.calculate_draw_volume(2.5, "mg", None, SYRINGE_1ML) is None

    def test_too_dilute_to_show_is_undefined(self):
        # 0.000001 mg/ml rounds to 0.00 mcg/ml
        c = calc.calculate_concentration(0.001, 1000)
        assert c.mcg_per_ml == 0.0
        assert calc.calculate_draw_volume(1, "mcg", c, SYRINGE_1ML) is None


# ─── calculate_doses_per_vial ─────────────────────────────────────────────────

class TestDosesPerVial:

    def test_even_split(self):
        doses = calc.calculate_doses_per_vial(10, 2.5, "mg")
        assert doses.full_doses == 4
        assert doses.exact_doses == 4.0
        assert doses.remainder_mg == 0.0

    def test_with_remainder(self):
        doses = calc.calculate_doses_per_vial(10, 3, "mg")
        assert doses.full_doses == 3
        assert doses.exact_doses == 3.33
        assert doses.remainder_mg == 1.0

    def test_mcg_dose(self):
        doses = calc.calculate_doses_per_vial(5, 250, "mcg")
        assert doses.full_doses == 20
        assert doses.remainder_mg == 0.0

    def test_float_remainder_near_dose_snaps_to_zero(self):
        # fmod(1, 0.1) is 0.0999... in binary floating point
        doses = calc.calculate_doses_per_vial(1, 0.1, "mg")
        assert doses.full_doses == 10
        assert doses.remainder_mg == 0.0

    def test_float_error_below_whole_count_counts_full_dose(self):
        # 0.3 / 0.1 == 2.9999999999999996
        doses = calc.calculate_doses_per_vial(0.3, 0.1, "mg")
        assert doses.full_doses == 3
        assert doses.exact_doses == 3.0
        assert doses.remainder_mg == 0.0

    def test_remainder_in_range(self):
        doses = calc.calculate_doses_per_vial(7.3, 0.7, "mg")
        assert 0 <= doses.remainder_mg < 0.7

    @pytest.mark.parametrize("mass,dose", [(0, 1), (10, 0), (-5, 1), (None, 1), (10, None)])
    def test_missing_inputs_are_undefined(self, mass, dose):
        assert calc.calculate_doses_per_vial(mass, dose, "mg") is None


# ─── validate_inputs ──────────────────────────────────────────────────────────

class TestValidateInputs:

    def test_clean_inputs(self):
        result = calc.validate_inputs(10, 2, 2.5, "mg", SYRINGE_1ML)
        assert result == ValidationResult(warnings=(), errors=())
        assert result.is_valid is True
        assert result.has_warnings is False

    def test_high_concentration_warns_but_is_valid(self):
        result = calc.validate_inputs(20, 1, 2.5, "mg", SYRINGE_1ML)
        assert result.warnings == ("concentration too high, consider more diluent",)
        assert result.is_valid is True
        assert result.has_warnings is True

    def test_low_concentration_warns(self):
        result = calc.validate_inputs(1, 3, 0.1, "mg", SYRINGE_1ML)
        assert "concentration too low, may need larger injection volumes" in result.warnings

    def test_small_volume_warns(self):
        result = calc.validate_inputs(10, 1, 100, "mcg", SYRINGE_1ML)
        assert result.warnings == ("volume below 3 units, hard to measure accurately",)

    def test_zero_mass_short_circuits(self):
        result = calc.validate_inputs(0, 2, 2.5, "mg", SYRINGE_1ML)
        assert result.errors == ("peptide amount must be positive",)
        assert result.warnings == ()
        assert result.is_valid is False
        assert result.has_warnings is False

    def test_all_basic_errors_in_order(self):
        result = calc.validate_inputs(None, 0, -1, "mg", SYRINGE_1ML)
        assert result.errors == (
            "peptide amount must be positive",
            "water amount must be positive",
            "dose must be positive",
        )

    def test_overflow_is_an_error(self):
        result = calc.validate_inputs(10, 2, 12, "mg", SYRINGE_1ML)
        assert result.errors == (
            "Dose requires 240 units but syringe holds 100 units. "
            "Use a larger syringe or split the dose.",
        )
        assert result.is_valid is False

    def test_overflow_with_warning(self):
        # 20 mg/ml warns; 75 units overflows the 50 unit barrel
        result = calc.validate_inputs(20, 1, 15, "mg", SYRINGE_HALF_ML)
        assert result.is_valid is False
        assert result.has_warnings is True

    def test_too_dilute_warns_without_draw_checks(self):
        result = calc.validate_inputs(0.001, 1000, 1, "mcg", SYRINGE_1ML)
        assert result.warnings == ("concentration too low, may need larger injection volumes",)
        assert result.is_valid is True

    def test_to_dict(self):
        data = calc.validate_inputs(20, 1, 2.5, "mg", SYRINGE_1ML).to_dict()
        assert data["isValid"] is True
        assert data["hasWarnings"] is True
        assert data["errors"] == []


class TestFullReport:

    def test_report_contains_all_results(self):
        report = calc.full_reconstitution_report("Tirzepatide", 10, 2, 2.5, "mg", SYRINGE_1ML)
        assert report["concentration"].mg_per_ml == 5.0
        assert report["draw"].units == 50.0
        assert report["doses"].full_doses == 4
        assert report["validation"].is_valid

    def test_print_report(self, capsys):
        report = calc.full_reconstitution_report("Tirzepatide", 10, 2, 12, "mg", SYRINGE_1ML)
        calc.print_reconstitution_report(report)
        out = capsys.readouterr().out
        assert "Tirzepatide" in out
        assert "Draw to: 240.0 units" in out
        assert "Use a larger syringe" in out

#!/usr/bin/env python3
"""
Peptide Calculator CLI
Command-line dosing calculator with saved configurations
"""

import sys
from typing import Optional

from calculator import PeptideCalculator
from config import Config
from database import CalculatorStore
from models import get_session
from presets import SYRINGE_SPECS, get_all_peptides
from state import (
    config_from_state,
    default_config_name,
    recompute_and_persist,
    state_from_config,
    state_from_dict,
)


class PeptideCalculatorCLI:
    """Command-line interface for the dosing calculator"""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize CLI with a store and the last saved state"""
        self.db_url = db_url or Config.DATABASE_URL
        self.session = get_session(self.db_url)
        self.store = CalculatorStore(self.session)
        self.state = state_from_dict(self.store.get_last_state())

    def run(self):
        """Main CLI loop"""
        print("\n" + "="*60)
        print("PEPTIDE DILUTION CALCULATOR")
        print("="*60)

        while True:
            print("\nMAIN MENU:")
            print("1. Show current calculation")
            print("2. Enter vial and dose")
            print("3. Use a peptide preset")
            print("4. Toggle dose unit (mg/mcg)")
            print("5. Choose syringe")
            print("6. Save configuration")
            print("7. List saved configurations")
            print("8. Load configuration")
            print("9. Delete configuration")
            print("0. Exit")

            choice = input("\nSelect option (0-9): ").strip()

            if choice == "1":
                self.show_calculation()
            elif choice == "2":
                self.enter_values()
            elif choice == "3":
                self.use_preset()
            elif choice == "4":
                self.state.toggle_dose_unit()
                self.show_calculation()
            elif choice == "5":
                self.choose_syringe()
            elif choice == "6":
                self.save_configuration()
            elif choice == "7":
                self.list_configurations()
            elif choice == "8":
                self.load_configuration()
            elif choice == "9":
                self.delete_configuration()
            elif choice == "0":
                print("\nGoodbye!")
                break
            else:
                print("Invalid option. Please try again.")

    def show_calculation(self):
        """Recompute, save the last state, and print the report"""
        recompute_and_persist(self.state, self.store)
        report = PeptideCalculator.full_reconstitution_report(
            self.state.peptide_name,
            self.state.mg_in_vial,
            self.state.water_ml,
            self.state.desired_dose,
            self.state.dose_unit,
            self.state.syringe_spec,
        )
        PeptideCalculator.print_reconstitution_report(report)

    def enter_values(self):
        """Prompt for vial and dose, keeping current values on empty input"""
        try:
            self.state.mg_in_vial = self._ask_float("Peptide in vial (mg)", self.state.mg_in_vial)
            self.state.water_ml = self._ask_float("Bacteriostatic water (ml)", self.state.water_ml)
            self.state.desired_dose = self._ask_float(
                f"Desired dose ({self.state.dose_unit})", self.state.desired_dose
            )
        except ValueError as e:
            print(f"\n⚠ Error: {e}")
            return
        self.show_calculation()

    def use_preset(self):
        """Pick a peptide preset and optionally one of its typical doses"""
        peptides = get_all_peptides()
        print("\n" + "="*60)
        print("PEPTIDE PRESETS")
        print("="*60)
        for i, p in enumerate(peptides, 1):
            brand = f" ({p.brand_names})" if p.brand_names else ""
            print(f"{i}. {p.name}{brand} - {p.category}")

        try:
            idx = int(input("\nSelect peptide (number): ")) - 1
            if idx < 0:
                raise IndexError("selection out of range")
            peptide = peptides[idx]
        except (ValueError, IndexError) as e:
            print(f"\n⚠ Error: {e}")
            return

        self.state.select_peptide(peptide.id)
        print(f"\n{peptide.name}: {peptide.frequency}")
        print(f"  {peptide.notes}")

        if peptide.typical_doses:
            print("\nTypical doses:")
            for i, dose in enumerate(peptide.typical_doses, 1):
                print(f"{i}. {dose.amount} {dose.unit} - {dose.label}")
            pick = input("Select a typical dose (number, blank to keep default): ").strip()
            if pick:
                try:
                    self.state.select_typical_dose(peptide.typical_doses[int(pick) - 1])
                except (ValueError, IndexError) as e:
                    print(f"\n⚠ Error: {e}")

        self.show_calculation()

    def choose_syringe(self):
        syringes = list(SYRINGE_SPECS.values())
        for i, s in enumerate(syringes, 1):
            print(f"{i}. {s.label}")
        try:
            idx = int(input("\nSelect syringe (number): ")) - 1
            if idx < 0:
                raise IndexError("selection out of range")
            self.state.syringe_size = syringes[idx].id
        except (ValueError, IndexError) as e:
            print(f"\n⚠ Error: {e}")
            return
        self.show_calculation()

    def save_configuration(self):
        suggested = default_config_name(self.state)
        name = input(f"\nName [{suggested}]: ").strip() or suggested
        saved = self.store.save_config(config_from_state(self.state, name))
        if saved:
            print(f"\n✓ Configuration saved! (ID: {saved['id']})")
        else:
            print("\n⚠ Could not save configuration.")

    def list_configurations(self):
        configs = self.store.get_all_configs()
        if not configs:
            print("\n⚠ No saved configurations.")
            return []

        print("\n" + "="*60)
        print("SAVED CONFIGURATIONS")
        print("="*60)
        for i, c in enumerate(configs, 1):
            print(f"{i}. {c['name']}")
            print(f"   {c['vial']['mgInVial']} mg / {c['vial']['waterMl']} ml, "
                  f"dose {c['dose']['amount']} {c['dose']['unit']}, syringe {c['dose']['syringeSize']} ml")
        return configs

    def _pick_configuration(self, prompt: str):
        configs = self.list_configurations()
        if not configs:
            return None
        try:
            idx = int(input(prompt)) - 1
            if idx < 0:
                raise IndexError("selection out of range")
            return configs[idx]
        except (ValueError, IndexError) as e:
            print(f"\n⚠ Error: {e}")
            return None

    def load_configuration(self):
        config = self._pick_configuration("\nLoad configuration (number): ")
        if config:
            self.state = state_from_config(config)
            self.show_calculation()

    def delete_configuration(self):
        config = self._pick_configuration("\nDelete configuration (number): ")
        if not config:
            return
        confirm = input(f"Delete '{config['name']}'? (y/n): ").strip().lower()
        if confirm == "y" and self.store.delete_config(config["id"]):
            print("\n✓ Configuration deleted.")

    @staticmethod
    def _ask_float(prompt: str, current: Optional[float]) -> Optional[float]:
        raw = input(f"{prompt} [{current}]: ").strip()
        if not raw:
            return current
        return float(raw)

    def close(self):
        """Close database session"""
        self.session.close()


def main():
    """Run CLI application"""
    cli = PeptideCalculatorCLI()

    try:
        cli.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted by user. Exiting...")
    finally:
        cli.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Peptide and Syringe Presets
Static catalogs of common peptides (vial sizes, typical doses) and the
supported insulin syringe barrels
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TypicalDose:
    amount: float
    unit: str  # "mg" or "mcg"
    label: str

    def to_dict(self):
        return {"amount": self.amount, "unit": self.unit, "label": self.label}


@dataclass(frozen=True)
class PeptidePreset:
    """Reconstitution defaults and dosing notes for a peptide"""
    id: str
    name: str
    brand_names: str
    category: str
    common_vial_sizes: Tuple[float, ...]
    default_vial_mg: float
    default_water_ml: float
    typical_doses: Tuple[TypicalDose, ...]
    default_dose: float
    default_dose_unit: str
    frequency: str
    notes: str
    color: str

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "brandNames": self.brand_names,
            "category": self.category,
            "commonVialSizes": list(self.common_vial_sizes),
            "defaultVialMg": self.default_vial_mg,
            "defaultWaterMl": self.default_water_ml,
            "typicalDoses": [d.to_dict() for d in self.typical_doses],
            "defaultDose": self.default_dose,
            "defaultDoseUnit": self.default_dose_unit,
            "frequency": self.frequency,
            "notes": self.notes,
            "color": self.color,
        }


@dataclass(frozen=True)
class SyringeSpec:
    """Insulin syringe barrel (100 units = 1 ml on every size)"""
    id: str
    label: str
    total_ml: float
    total_units: int
    major_tick_every: int
    minor_tick_every: int
    unit_to_ml: float
    description: str

    def to_dict(self):
        return {
            "id": self.id,
            "label": self.label,
            "totalMl": self.total_ml,
            "totalUnits": self.total_units,
            "majorTickEvery": self.major_tick_every,
            "minorTickEvery": self.minor_tick_every,
            "unitToMl": self.unit_to_ml,
            "description": self.description,
        }


CUSTOM_PEPTIDE_ID = "custom"
DEFAULT_SYRINGE_ID = "1.0"


def _doses(*rows) -> Tuple[TypicalDose, ...]:
    return tuple(TypicalDose(amount, unit, label) for amount, unit, label in rows)


_PEPTIDES = [
    PeptidePreset(
        id="tirzepatide",
        name="Tirzepatide",
        brand_names="Mounjaro, Zepbound",
        category="GLP-1/GIP Agonist",
        common_vial_sizes=(5, 10, 15, 30),
        default_vial_mg=10,
        default_water_ml=2,
        typical_doses=_doses(
            (2.5, "mg", "Starting dose (weeks 1-4)"),
            (5, "mg", "Week 5-8"),
            (7.5, "mg", "Week 9-12"),
            (10, "mg", "Week 13-16"),
            (12.5, "mg", "Week 17-20"),
            (15, "mg", "Maximum dose"),
        ),
        default_dose=2.5,
        default_dose_unit="mg",
        frequency="Once weekly",
        notes="Titrate up every 4 weeks as tolerated. Inject subcutaneously in abdomen, thigh, or upper arm.",
        color="#4F46E5",
    ),
    PeptidePreset(
        id="semaglutide",
        name="Semaglutide",
        brand_names="Ozempic, Wegovy",
        category="GLP-1 Agonist",
        common_vial_sizes=(3, 5, 10),
        default_vial_mg=5,
        default_water_ml=2,
        typical_doses=_doses(
            (0.25, "mg", "Week 1-4"),
            (0.5, "mg", "Week 5-8"),
            (1, "mg", "Week 9-12"),
            (1.7, "mg", "Week 13-16 (Wegovy)"),
            (2.4, "mg", "Maximum (Wegovy)"),
        ),
        default_dose=0.25,
        default_dose_unit="mg",
        frequency="Once weekly",
        notes="Start low and increase monthly. Inject subcutaneously.",
        color="#059669",
    ),
    PeptidePreset(
        id="retatrutide",
        name="Retatrutide",
        brand_names="Investigational",
        category="GLP-1/GIP/Glucagon Triple Agonist",
        common_vial_sizes=(5, 10, 15),
        default_vial_mg=10,
        default_water_ml=2,
        typical_doses=_doses(
            (1, "mg", "Starting dose"),
            (2, "mg", "Week 5-8"),
            (4, "mg", "Week 9-12"),
            (8, "mg", "Week 17-24"),
            (12, "mg", "Maximum studied"),
        ),
        default_dose=1,
        default_dose_unit="mg",
        frequency="Once weekly",
        notes="Triple-agonist peptide. Titrate slowly every 4 weeks.",
        color="#DC2626",
    ),
    PeptidePreset(
        id="bpc157",
        name="BPC-157",
        brand_names="Body Protection Compound",
        category="Healing Peptide",
        common_vial_sizes=(5, 10),
        default_vial_mg=5,
        default_water_ml=2,
        typical_doses=_doses(
            (250, "mcg", "Low dose"),
            (500, "mcg", "Standard dose"),
            (750, "mcg", "Higher dose"),
        ),
        default_dose=250,
        default_dose_unit="mcg",
        frequency="Once or twice daily",
        notes="Often dosed 1-2x daily. Can inject near injury site or subcutaneously.",
        color="#7C3AED",
    ),
    PeptidePreset(
        id="tb500",
        name="TB-500",
        brand_names="Thymosin Beta-4",
        category="Healing Peptide",
        common_vial_sizes=(2, 5, 10),
        default_vial_mg=5,
        default_water_ml=2,
        typical_doses=_doses(
            (2, "mg", "Maintenance"),
            (2.5, "mg", "Loading (2x/week)"),
            (5, "mg", "Loading (1x/week)"),
        ),
        default_dose=2.5,
        default_dose_unit="mg",
        frequency="1-2x weekly",
        notes="Loading phase: 2x/week for 4-6 weeks, then maintenance 1x/week.",
        color="#0891B2",
    ),
    PeptidePreset(
        id="ipamorelin",
        name="Ipamorelin",
        brand_names="",
        category="Growth Hormone Secretagogue",
        common_vial_sizes=(2, 5),
        default_vial_mg=5,
        default_water_ml=2,
        typical_doses=_doses(
            (100, "mcg", "Low dose"),
            (200, "mcg", "Standard dose"),
            (300, "mcg", "Higher dose"),
        ),
        default_dose=200,
        default_dose_unit="mcg",
        frequency="2-3x daily",
        notes="Often combined with CJC-1295 no DAC. Best taken on empty stomach.",
        color="#BE185D",
    ),
    PeptidePreset(
        id="cjc1295dac",
        name="CJC-1295 with DAC",
        brand_names="",
        category="Growth Hormone Releasing Hormone",
        common_vial_sizes=(2, 5),
        default_vial_mg=2,
        default_water_ml=2,
        typical_doses=_doses(
            (1, "mg", "Standard (1-2x/week)"),
            (2, "mg", "Higher dose"),
        ),
        default_dose=1,
        default_dose_unit="mg",
        frequency="1-2x weekly",
        notes="Long-acting due to DAC modification. Once or twice weekly dosing.",
        color="#EA580C",
    ),
    PeptidePreset(
        id="ghkcu",
        name="GHK-Cu",
        brand_names="Copper Peptide",
        category="Healing/Anti-aging Peptide",
        common_vial_sizes=(50, 100),
        default_vial_mg=50,
        default_water_ml=5,
        typical_doses=_doses(
            (1, "mg", "Standard dose"),
            (2, "mg", "Higher dose"),
        ),
        default_dose=1,
        default_dose_unit="mg",
        frequency="Daily",
        notes="Can be used topically or via injection. Often used for skin/hair.",
        color="#CA8A04",
    ),
    PeptidePreset(
        id=CUSTOM_PEPTIDE_ID,
        name="Custom Peptide",
        brand_names="",
        category="User Defined",
        common_vial_sizes=(),
        default_vial_mg=5,
        default_water_ml=2,
        typical_doses=(),
        default_dose=1,
        default_dose_unit="mg",
        frequency="",
        notes="Enter your own values for custom peptides.",
        color="#6B7280",
    ),
]

PEPTIDE_PRESETS: Mapping[str, PeptidePreset] = MappingProxyType({p.id: p for p in _PEPTIDES})

SYRINGE_SPECS: Mapping[str, SyringeSpec] = MappingProxyType({
    "0.5": SyringeSpec(
        id="0.5",
        label="0.5 mL (50 units)",
        total_ml=0.5,
        total_units=50,
        major_tick_every=5,
        minor_tick_every=1,
        unit_to_ml=0.01,
        description="Standard insulin syringe, 50 units total",
    ),
    "1.0": SyringeSpec(
        id="1.0",
        label="1.0 mL (100 units)",
        total_ml=1.0,
        total_units=100,
        major_tick_every=10,
        minor_tick_every=2,
        unit_to_ml=0.01,
        description="Standard insulin syringe, 100 units total",
    ),
})


def get_peptide_by_id(peptide_id: str) -> Optional[PeptidePreset]:
    """Get peptide preset by ID"""
    return PEPTIDE_PRESETS.get(peptide_id)


def get_all_peptides() -> List[PeptidePreset]:
    """All peptide presets in catalog order, excluding the custom entry"""
    return [p for p in PEPTIDE_PRESETS.values() if p.id != CUSTOM_PEPTIDE_ID]


def get_syringe_spec(syringe_id: str) -> SyringeSpec:
    """Get syringe spec by ID, falling back to the 1.0 ml barrel"""
    return SYRINGE_SPECS.get(syringe_id) or SYRINGE_SPECS[DEFAULT_SYRINGE_ID]

"""
Fuel reference data for combustion calculations.

Contains the elemental composition and heating values of common gaseous,
liquid and solid fuels, plus helpers for defining custom fuels from a
chemical formula. Element counts are moles of each element per mole of
fuel (the formula coefficients), not mass fractions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


class FuelType(str, Enum):
    """Phase of a fuel; decides how its flow rate is measured."""

    GAS = "Gas"
    LIQUID = "Liquid"
    SOLID = "Solid"

    @classmethod
    def parse(cls, value: str | FuelType) -> FuelType:
        """Accept 'gas', 'Gas', 'GAS' or an existing member."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown fuel type '{value}'. Valid: {valid}")


# Standard atomic masses (g/mol) of the elements a fuel may contain
ATOMIC_MASSES: dict[str, float] = {
    "C": 12.011,
    "H": 1.008,
    "O": 15.999,
    "N": 14.007,
    "S": 32.06,
}

_FORMULA_RE = re.compile(r"(?:[A-Z][a-z]?(?:\d+(?:\.\d+)?)?)+")
_ELEMENT_RE = re.compile(r"([A-Z][a-z]?)(\d+(?:\.\d+)?)?")
_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")


def parse_formula(formula: str) -> dict[str, float]:
    """
    Split a chemical formula into element counts.

    Args:
        formula: Formula such as "CH4", "CH3OH" or "CH0.8O0.1"

    Returns:
        Mapping of element symbol to count, for C, H, O, N and S

    Raises:
        ValueError: If the formula is malformed or has other elements

    Examples:
        >>> parse_formula("CH3OH")
        {'C': 1.0, 'H': 4.0, 'O': 1.0}
    """
    text = formula.strip()
    if not text or not _FORMULA_RE.fullmatch(text):
        raise ValueError(f"Malformed formula '{formula}'")

    counts: dict[str, float] = {}
    for element, number in _ELEMENT_RE.findall(text):
        if element not in ATOMIC_MASSES:
            supported = ", ".join(ATOMIC_MASSES)
            raise ValueError(
                f"Element '{element}' in '{formula}' not supported. "
                f"Supported: {supported}"
            )
        counts[element] = counts.get(element, 0.0) + (float(number) if number else 1.0)
    return counts


def formula_symbol(formula: str) -> str:
    """Display form of a formula with subscript digits (CH4 -> CH₄)."""
    return formula.translate(_SUBSCRIPTS)


def formula_molar_mass(formula: str) -> float:
    """Molar mass (g/mol) from the element counts of a formula."""
    return sum(ATOMIC_MASSES[el] * n for el, n in parse_formula(formula).items())


@dataclass(frozen=True)
class Fuel:
    """
    A combustible substance.

    Attributes:
        name: Fuel name/identifier
        formula: Chemical formula (approximate for blends and solids)
        fuel_type: Gas, Liquid or Solid
        molar_mass: Molar mass (g/mol)
        c, h, o, n, s: Moles of each element per mole of fuel
        ash_content: Ash (weight %)
        moisture_content: Moisture (weight %)
        heating_value: Lower heating value (MJ/kg)
        hhv: Higher heating value (MJ/kg)
        symbol: Display formula, derived from ``formula`` when empty
    """

    name: str
    formula: str
    fuel_type: FuelType
    molar_mass: float  # g/mol
    c: float = 0.0
    h: float = 0.0
    o: float = 0.0
    n: float = 0.0
    s: float = 0.0
    ash_content: float = 0.0  # wt %
    moisture_content: float = 0.0  # wt %
    heating_value: float = 0.0  # MJ/kg (LHV)
    hhv: float = 0.0  # MJ/kg
    symbol: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fuel_type", FuelType.parse(self.fuel_type))
        if not self.symbol:
            object.__setattr__(self, "symbol", formula_symbol(self.formula))

    @property
    def stoich_o2_ratio(self) -> float:
        """Moles of O2 needed per mole of fuel for complete combustion."""
        return self.c + self.h / 4.0 + self.s - self.o / 2.0

    @property
    def combustible_fraction(self) -> float:
        """Mass fraction left after removing ash and moisture."""
        return 1.0 - (self.ash_content + self.moisture_content) / 100.0

    @property
    def effective_lhv(self) -> float:
        """LHV discounted by the fuel's own moisture (MJ/kg)."""
        return self.heating_value * (1.0 - self.moisture_content / 100.0)

    @property
    def is_gas(self) -> bool:
        return self.fuel_type is FuelType.GAS


def make_custom_fuel(
    name: str,
    formula: str,
    fuel_type: str | FuelType,
    heating_value: float,
    hhv: float,
    molar_mass: Optional[float] = None,
    ash_content: float = 0.0,
    moisture_content: float = 0.0,
) -> Fuel:
    """
    Create a user-defined fuel from its formula.

    Element counts are read from the formula. The molar mass defaults to
    the formula mass when not given.

    Raises:
        ValueError: If the name is empty or the formula cannot be parsed
    """
    name = name.strip()
    if not name:
        raise ValueError("Custom fuel needs a name")
    counts = parse_formula(formula)
    if molar_mass is None:
        molar_mass = formula_molar_mass(formula)
    return Fuel(
        name=name,
        formula=formula.strip(),
        fuel_type=FuelType.parse(fuel_type),
        molar_mass=float(molar_mass),
        c=counts.get("C", 0.0),
        h=counts.get("H", 0.0),
        o=counts.get("O", 0.0),
        n=counts.get("N", 0.0),
        s=counts.get("S", 0.0),
        ash_content=float(ash_content),
        moisture_content=float(moisture_content),
        heating_value=float(heating_value),
        hhv=float(hhv),
    )


# =============================================================================
# Built-in fuels
# =============================================================================

METHANE = Fuel(
    name="Methane",
    formula="CH4",
    fuel_type=FuelType.GAS,
    molar_mass=16.04,
    c=1, h=4,
    heating_value=50.0,
    hhv=55.5,
)

ETHANE = Fuel(
    name="Ethane",
    formula="C2H6",
    fuel_type=FuelType.GAS,
    molar_mass=30.07,
    c=2, h=6,
    heating_value=47.5,
    hhv=51.9,
)

PROPANE = Fuel(
    name="Propane",
    formula="C3H8",
    fuel_type=FuelType.GAS,
    molar_mass=44.10,
    c=3, h=8,
    heating_value=46.35,
    hhv=50.35,
)

BUTANE = Fuel(
    name="Butane",
    formula="C4H10",
    fuel_type=FuelType.GAS,
    molar_mass=58.12,
    c=4, h=10,
    heating_value=45.75,
    hhv=49.5,
)

HYDROGEN = Fuel(
    name="Hydrogen",
    formula="H2",
    fuel_type=FuelType.GAS,
    molar_mass=2.016,
    h=2,
    heating_value=120.0,
    hhv=141.8,
)

CARBON_MONOXIDE = Fuel(
    name="Carbon Monoxide",
    formula="CO",
    fuel_type=FuelType.GAS,
    molar_mass=28.01,
    c=1, o=1,
    heating_value=10.1,
    hhv=10.1,
)

HYDROGEN_SULFIDE = Fuel(
    name="Hydrogen Sulfide",
    formula="H2S",
    fuel_type=FuelType.GAS,
    molar_mass=34.08,
    h=2, s=1,
    heating_value=15.2,
    hhv=16.5,
)

METHANOL = Fuel(
    name="Methanol",
    formula="CH3OH",
    fuel_type=FuelType.LIQUID,
    molar_mass=32.04,
    c=1, h=4, o=1,
    heating_value=19.9,
    hhv=22.7,
)

ETHANOL = Fuel(
    name="Ethanol",
    formula="C2H5OH",
    fuel_type=FuelType.LIQUID,
    molar_mass=46.07,
    c=2, h=6, o=1,
    heating_value=26.8,
    hhv=29.7,
)

DIESEL = Fuel(
    name="Diesel",
    formula="C12H23",  # surrogate
    fuel_type=FuelType.LIQUID,
    molar_mass=167.3,
    c=12, h=23,
    heating_value=42.6,
    hhv=45.6,
)

GASOLINE = Fuel(
    name="Gasoline",
    formula="C8H18",  # iso-octane surrogate
    fuel_type=FuelType.LIQUID,
    molar_mass=114.23,
    c=8, h=18,
    heating_value=44.3,
    hhv=47.8,
)

BITUMINOUS_COAL = Fuel(
    name="Bituminous Coal",
    formula="CH0.8O0.1N0.015S0.01",  # per mole of carbon
    fuel_type=FuelType.SOLID,
    molar_mass=14.95,
    c=1, h=0.8, o=0.1, n=0.015, s=0.01,
    ash_content=10.0,
    moisture_content=8.0,
    heating_value=27.0,
    hhv=28.5,
)

WOOD = Fuel(
    name="Wood",
    formula="C6H10O5",  # cellulose
    fuel_type=FuelType.SOLID,
    molar_mass=162.14,
    c=6, h=10, o=5,
    ash_content=1.0,
    moisture_content=15.0,
    heating_value=17.0,
    hhv=18.5,
)

BUILTIN_FUELS: tuple[Fuel, ...] = (
    METHANE,
    ETHANE,
    PROPANE,
    BUTANE,
    HYDROGEN,
    CARBON_MONOXIDE,
    HYDROGEN_SULFIDE,
    METHANOL,
    ETHANOL,
    DIESEL,
    GASOLINE,
    BITUMINOUS_COAL,
    WOOD,
)


# =============================================================================
# Catalog
# =============================================================================

class FuelCatalog:
    """
    Named collection of fuels.

    Lookups are case-insensitive and fall back to the formula when no fuel
    has that name. Custom fuels can be registered at runtime; registered
    fuels are never replaced.

    Example:
        >>> catalog = FuelCatalog.with_builtin_fuels()
        >>> catalog.get("methane").molar_mass
        16.04
        >>> catalog.get("CH4").name
        'Methane'
    """

    def __init__(self, fuels: tuple[Fuel, ...] | list[Fuel] = ()) -> None:
        self._fuels: dict[str, Fuel] = {}
        self._custom: set[str] = set()
        for fuel in fuels:
            self.register(fuel, custom=False)

    @classmethod
    def with_builtin_fuels(cls) -> FuelCatalog:
        return cls(BUILTIN_FUELS)

    def register(self, fuel: Fuel, custom: bool = True) -> Fuel:
        """
        Add a fuel to the catalog.

        Args:
            fuel: Fuel to add
            custom: Mark the fuel as user-defined

        Raises:
            ValueError: If a fuel with the same name exists
        """
        key = fuel.name.lower()
        if key in self._fuels:
            raise ValueError(f"Fuel '{fuel.name}' already exists")
        self._fuels[key] = fuel
        if custom:
            self._custom.add(key)
            logger.info(f"Registered custom fuel '{fuel.name}' ({fuel.formula})")
        return fuel

    def get(self, name: str) -> Fuel:
        """
        Get a fuel by name, or by formula if the formula is unique.

        Raises:
            KeyError: If no fuel matches
        """
        key = name.strip().lower()
        if key in self._fuels:
            return self._fuels[key]

        by_formula = [f for f in self._fuels.values() if f.formula.lower() == key]
        if len(by_formula) == 1:
            return by_formula[0]

        available = ", ".join(self.names())
        raise KeyError(f"Unknown fuel '{name}'. Available: {available}")

    def names(self) -> list[str]:
        return [fuel.name for fuel in self._fuels.values()]

    def fuels(self) -> list[Fuel]:
        return list(self._fuels.values())

    def custom_fuels(self) -> list[Fuel]:
        """Fuels registered at runtime, in registration order."""
        return [f for key, f in self._fuels.items() if key in self._custom]

    def is_custom(self, name: str) -> bool:
        return name.strip().lower() in self._custom

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.get(name)
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[Fuel]:
        return iter(list(self._fuels.values()))

    def __len__(self) -> int:
        return len(self._fuels)

    def __repr__(self) -> str:
        return f"FuelCatalog(fuels={len(self)}, custom={len(self._custom)})"


def default_catalog() -> FuelCatalog:
    """Fresh catalog holding the built-in fuels."""
    return FuelCatalog.with_builtin_fuels()

"""
Fuel mixtures.

A mixture is an ordered list of fuels with weight percentages. Its phase
content decides whether the fuel flow rate is volumetric or mass-based.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from combustion_calc.core.fuels import Fuel, FuelType


class FlowBasis(str, Enum):
    """How a fuel flow rate is measured, with its display unit."""

    VOLUMETRIC = "volumetric"
    MASS = "mass"

    @property
    def fuel_unit(self) -> str:
        return "m³/h" if self is FlowBasis.VOLUMETRIC else "kg/h"


@dataclass(frozen=True)
class MixtureComponent:
    """
    One fuel of a mixture.

    Attributes:
        fuel: Fuel reference
        percentage: Weight percentage in the mixture (0-100)
    """

    fuel: Fuel
    percentage: float

    @property
    def weight_fraction(self) -> float:
        return self.percentage / 100.0


@dataclass(frozen=True)
class Mixture:
    """
    Ordered, immutable collection of mixture components.

    The mixture does not validate itself; the engine checks the percentage
    sum and fuel data before calculating.

    Example:
        >>> mix = Mixture.from_pairs([(METHANE, 90.0), (PROPANE, 10.0)])
        >>> mix.flow_basis
        <FlowBasis.VOLUMETRIC: 'volumetric'>
    """

    components: tuple[MixtureComponent, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[Fuel, float]]) -> Mixture:
        return cls(tuple(MixtureComponent(fuel, float(pct)) for fuel, pct in pairs))

    @classmethod
    def single(cls, fuel: Fuel) -> Mixture:
        """Mixture of one fuel at 100 %."""
        return cls((MixtureComponent(fuel, 100.0),))

    @property
    def total_percentage(self) -> float:
        return sum(c.percentage for c in self.components)

    @property
    def phases(self) -> set[FuelType]:
        return {c.fuel.fuel_type for c in self.components}

    @property
    def is_mixed_phase(self) -> bool:
        return len(self.phases) > 1

    @property
    def flow_basis(self) -> FlowBasis:
        """Mass flow if any fuel is solid or liquid, volumetric otherwise."""
        if self.phases & {FuelType.SOLID, FuelType.LIQUID}:
            return FlowBasis.MASS
        return FlowBasis.VOLUMETRIC

    def __iter__(self) -> Iterator[MixtureComponent]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

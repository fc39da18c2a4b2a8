"""
Error taxonomy for combustion calculations.

Every failure of a calculation is terminal: the engine raises one of these
and returns no partial result. Each class carries a stable ``code`` so the
error can cross a process or thread boundary as a plain record.
"""

from __future__ import annotations


class EngineError(ValueError):
    """Base class for all calculation failures."""

    code = "EngineError"

    def to_dict(self) -> dict[str, str]:
        """Plain record for transport (e.g. JSON)."""
        return {"code": self.code, "message": str(self)}


class InvalidFuelData(EngineError):
    """A referenced fuel is missing or has an out-of-range field."""

    code = "InvalidFuelData"


class IncompatibleFuelPhases(InvalidFuelData):
    """Mixture spans several phases while the phase policy rejects that."""

    code = "IncompatibleFuelPhases"


class MixtureImbalance(EngineError):
    """Component percentages do not sum to 100 within tolerance."""

    code = "MixtureImbalance"


class InvalidProcessConditions(EngineError):
    """A process-condition field is missing, non-finite or out of range."""

    code = "InvalidProcessConditions"


class InvalidFuelComposition(EngineError):
    """Stoichiometric oxygen demand of the mixture is not positive."""

    code = "InvalidFuelComposition"


class ComputationDegenerate(EngineError):
    """A derived divisor is zero or a derived value is not finite."""

    code = "ComputationDegenerate"


ERROR_TYPES: dict[str, type[EngineError]] = {
    cls.code: cls
    for cls in (
        EngineError,
        InvalidFuelData,
        IncompatibleFuelPhases,
        MixtureImbalance,
        InvalidProcessConditions,
        InvalidFuelComposition,
        ComputationDegenerate,
    )
}

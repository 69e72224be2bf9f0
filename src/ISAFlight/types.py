from dataclasses import dataclass

from ISAFlight.utils.models import CIStrEnum


class _AliasedUnit(CIStrEnum):
    """Unit symbol enumeration that also accepts the unit names spelled out
    (e.g. "feet" for "ft")."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            value = cls._aliases().get(value.lower(), value)
        return super()._missing_(value)


class LengthUnit(_AliasedUnit):
    METERS = 'm'
    FEET = 'ft'

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {'meters': 'm', 'feet': 'ft'}


class SpeedUnit(_AliasedUnit):
    MPS = 'm/s'
    KNOTS = 'kt'

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {'mps': 'm/s', 'knots': 'kt'}


class TemperatureUnit(_AliasedUnit):
    KELVIN = 'K'
    CELSIUS = 'C'

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {'kelvin': 'K', 'celsius': 'C'}


@dataclass(frozen=True)
class DisplayUnits:
    """Units in which a flight condition presents its magnitudes.

    These only affect presentation: the underlying physical state is the same
    whatever the units. Pressure, density, viscosity and dynamic pressure are
    always SI."""

    feet: bool = False
    """Show lengths in feet (True) or meters (False)."""

    knots: bool = False
    """Show speeds in knots (True) or meters per second (False)."""

    celsius: bool = False
    """Show temperatures in degrees Celsius (True) or Kelvin (False)."""

    @property
    def length_label(self) -> str:
        return 'ft' if self.feet else 'm'

    @property
    def speed_label(self) -> str:
        return 'kt' if self.knots else 'm/s'

    @property
    def temperature_label(self) -> str:
        return 'C' if self.celsius else 'K'


SI_UNITS = DisplayUnits()
"""Meters, meters per second and Kelvin."""

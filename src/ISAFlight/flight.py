# TODO: Remove this when we migrate to Python 3.14+.
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import ClassVar

import numpy as np

from ISAFlight import atmosphere
from ISAFlight.config import default_units, solver_settings
from ISAFlight.constants import a0, kappa, p0, rho0
from ISAFlight.errors import (
    InvalidInputCountError,
    InvalidInputPairError,
    UnsupportedRegimeError,
)
from ISAFlight.types import SI_UNITS, DisplayUnits
from ISAFlight.units import (
    FEET_TO_METERS,
    celsius_to_kelvin,
    feet_to_meters,
    kelvin_to_celsius,
    knots_to_mps,
    meters_to_feet,
    mps_to_knots,
)

logger = logging.getLogger(__name__)

# Exponents of the subsonic compressible pitot relation for air.
_HALF_KAPPA_M1 = (kappa - 1) / 2  # 0.2
_KAPPA_RATIO = kappa / (kappa - 1)  # 3.5

_SPEED_FIELDS = ('eas', 'cas', 'tas')


# Flight condition inputs. Each variant is one of the pairs of quantities
# from which a flight condition can be solved, with values expressed in the
# display units passed to `FlightCondition.solve`.


@dataclass(frozen=True)
class _InputPair:
    mach_divides: ClassVar[bool] = False

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not np.isfinite(value):
                raise ValueError(f'{f.name} must be finite, not {value}.')
            if f.name != 'altitude' and value < 0:
                raise ValueError(f'{f.name} must be non-negative, not {value}.')
        if self.mach_divides and getattr(self, 'mach') == 0:
            raise ValueError(f'mach must be positive for {type(self).__name__}.')


@dataclass(frozen=True)
class MachAltitude(_InputPair):
    mach: float
    altitude: float


@dataclass(frozen=True)
class MachEAS(_InputPair):
    mach_divides: ClassVar[bool] = True

    mach: float
    eas: float


@dataclass(frozen=True)
class MachCAS(_InputPair):
    mach_divides: ClassVar[bool] = True

    mach: float
    cas: float


@dataclass(frozen=True)
class AltitudeEAS(_InputPair):
    altitude: float
    eas: float


@dataclass(frozen=True)
class AltitudeCAS(_InputPair):
    altitude: float
    cas: float


@dataclass(frozen=True)
class AltitudeTAS(_InputPair):
    altitude: float
    tas: float


FlightInputs = (
    MachAltitude | MachEAS | MachCAS | AltitudeEAS | AltitudeCAS | AltitudeTAS
)

_INPUT_PAIRS: dict[frozenset[str], type[FlightInputs]] = {
    frozenset(f.name for f in fields(cls)): cls
    for cls in (MachAltitude, MachEAS, MachCAS, AltitudeEAS, AltitudeCAS, AltitudeTAS)
}


def make_inputs(
    *,
    mach: float | None = None,
    altitude: float | None = None,
    eas: float | None = None,
    cas: float | None = None,
    tas: float | None = None,
) -> FlightInputs:
    """Build flight condition inputs from exactly two of Mach number,
    altitude, equivalent, calibrated and true airspeed.

    Raises
    ------
    InvalidInputCountError
        If the number of values given is not two.
    InvalidInputPairError
        If the two values given do not define a flight condition. Supported
        pairs are Mach/altitude, Mach/EAS, Mach/CAS, altitude/EAS,
        altitude/CAS and altitude/TAS.
    """
    candidates = dict(mach=mach, altitude=altitude, eas=eas, cas=cas, tas=tas)
    given = {k: v for k, v in candidates.items() if v is not None}
    if len(given) != 2:
        raise InvalidInputCountError(
            'From the available input options for Mach number, altitude, EAS, '
            f'CAS and TAS, 2 must be defined instead of {len(given)}.'
        )
    pair = _INPUT_PAIRS.get(frozenset(given))
    if pair is None:
        raise InvalidInputPairError(
            f'Pair of values {sorted(given)} is not valid to define a flight '
            'condition.'
        )
    return pair(**given)


def _pitot_term(ratio: float) -> float:
    """Compressible impact pressure term (1 + 0.2 M^2)^3.5 - 1 for a Mach
    number, or for the ratio CAS/a0."""
    return (1 + _HALF_KAPPA_M1 * ratio**2) ** _KAPPA_RATIO - 1


def _inverse_pitot_term(term: float) -> float:
    return float(np.sqrt(((term + 1) ** (1 / _KAPPA_RATIO) - 1) / _HALF_KAPPA_M1))


def _check_subsonic(mach: float) -> None:
    limit = solver_settings().max_cas_mach
    if mach >= limit:
        raise UnsupportedRegimeError(
            f'Calibrated airspeed is only supported below Mach {limit}, '
            f'not at Mach {mach}.'
        )


@dataclass(frozen=True)
class FlightCondition:
    """Atmospheric and aerodynamic data for a flight condition.

    Instances are normally created by `FlightCondition.solve` or
    `FlightCondition.from_inputs`, which guarantee that all values are
    consistent with each other under the ISA model. Lengths, speeds and
    temperatures are expressed in the display units in `units`; all other
    quantities are SI."""

    mach: float
    """Mach number."""

    altitude: float
    """Altitude [ft or m]."""

    eas: float
    """Equivalent airspeed [kt or m/s]."""

    cas: float
    """Calibrated airspeed [kt or m/s]."""

    tas: float
    """True airspeed [kt or m/s]."""

    sound_speed: float
    """Speed of sound [kt or m/s]."""

    pressure: float
    """Static pressure [Pa]."""

    temperature: float
    """Static temperature [C or K]."""

    density: float
    """Air density [kg/m^3]."""

    viscosity: float
    """Dynamic viscosity [Pa s]."""

    kinematic_viscosity: float
    """Kinematic viscosity [m^2/s]."""

    dynamic_pressure: float
    """Dynamic pressure [Pa]."""

    reynolds_per_length: float
    """Reynolds number per unit length [1/ft or 1/m]."""

    delta_T: float
    """Temperature deviation from ISA [K, same as C]."""

    units: DisplayUnits = SI_UNITS
    """Display units for lengths, speeds and temperatures."""

    @classmethod
    def solve(
        cls,
        inputs: FlightInputs,
        delta_T: float = 0.0,
        units: DisplayUnits | None = None,
    ) -> FlightCondition:
        """Solve for the flight condition defined by a pair of inputs.

        Parameters
        ----------
        inputs : FlightInputs
            Two defining quantities, expressed in `units`.
        delta_T : float
            Temperature deviation from ISA [K].
        units : DisplayUnits, optional
            Units of the inputs and of the resulting flight condition.
            Defaults to the configured display units, or SI if no
            configuration has been loaded.

        Returns
        -------
        FlightCondition

        Raises
        ------
        OutOfRangeError
            If the altitude is outside the ISA model range.
        TemperatureError
            If `delta_T` takes the temperature to or below absolute zero.
        AltitudeSolveError
            If no altitude matches the flight pressure implied by the inputs.
        UnsupportedRegimeError
            If the Mach number is at or above `solver.max_cas_mach`.
            Calibrated airspeed is only defined for subsonic flight, and it is
            either an input or a derived quantity of every solve, so with the
            default limit of 1.0 all supersonic conditions are rejected, even
            for the Mach/altitude and altitude/TAS pairs.
        """
        if units is None:
            units = default_units()
        logger.debug('Solving flight condition for %s in %s', inputs, units)

        given = {f.name: getattr(inputs, f.name) for f in fields(inputs)}

        # Work in SI units throughout.
        mach = given.get('mach')
        altitude = given.get('altitude')
        if altitude is not None and units.feet:
            altitude = feet_to_meters(altitude)
        speeds = {
            k: knots_to_mps(given[k]) if units.knots else given[k]
            for k in _SPEED_FIELDS
            if k in given
        }

        # Pressure at flight level, and the corresponding altitude if it was
        # not given directly.
        if altitude is not None:
            p = atmosphere.pressure(altitude)
        else:
            assert mach is not None
            if 'eas' in speeds:
                p = (speeds['eas'] / a0 / mach) ** 2 * p0
            else:
                _check_subsonic(mach)
                p = p0 * _pitot_term(speeds['cas'] / a0) / _pitot_term(mach)
            logger.debug('Flight pressure %.6f Pa', p)
            settings = solver_settings()
            altitude = atmosphere.altitude_from_pressure(
                p,
                xtol=settings.xtol,
                rtol=settings.rtol,
                maxiter=settings.maxiter,
            )

        T = atmosphere.temperature(altitude, delta_T)
        rho = atmosphere.density(altitude, delta_T)
        mu = atmosphere.viscosity(altitude, delta_T)
        a = atmosphere.sound_speed(altitude, delta_T)

        if mach is None:
            if 'tas' in speeds:
                mach = speeds['tas'] / a
            elif 'eas' in speeds:
                mach = float(speeds['eas'] / a0 * np.sqrt(p0 / p))
            else:
                mach = _inverse_pitot_term(p0 / p * _pitot_term(speeds['cas'] / a0))

        # Calibrated airspeed takes part in every solve, either as an input or
        # as a derived quantity.
        _check_subsonic(mach)

        tas = speeds.get('tas', a * mach)
        eas = speeds.get('eas', float(tas * np.sqrt(rho / rho0)))
        cas = speeds.get('cas', a0 * _inverse_pitot_term(p / p0 * _pitot_term(mach)))

        nu = mu / rho
        condition = cls(
            mach=mach,
            altitude=altitude,
            eas=eas,
            cas=cas,
            tas=tas,
            sound_speed=a,
            pressure=p,
            temperature=T,
            density=rho,
            viscosity=mu,
            kinematic_viscosity=nu,
            dynamic_pressure=rho * tas**2 / 2,
            reynolds_per_length=tas / nu,
            delta_T=delta_T,
        )

        # Project into the requested units, keeping the caller's values
        # exactly rather than converting them back and forth.
        condition = condition.convert(units)
        return replace(condition, **given)

    @classmethod
    def from_inputs(
        cls,
        *,
        mach: float | None = None,
        altitude: float | None = None,
        eas: float | None = None,
        cas: float | None = None,
        tas: float | None = None,
        delta_T: float = 0.0,
        units: DisplayUnits | None = None,
    ) -> FlightCondition:
        """Create a flight condition from exactly two of Mach number,
        altitude, EAS, CAS and TAS, expressed in `units`.

        See `make_inputs` for the supported pairs and `solve` for the
        remaining parameters."""
        inputs = make_inputs(mach=mach, altitude=altitude, eas=eas, cas=cas, tas=tas)
        return cls.solve(inputs, delta_T=delta_T, units=units)

    def convert(
        self,
        units: DisplayUnits | None = None,
        *,
        feet: bool | None = None,
        knots: bool | None = None,
        celsius: bool | None = None,
    ) -> FlightCondition:
        """Return a copy of this flight condition in other display units.

        Either pass a complete `DisplayUnits` or individual flags; flags that
        are not given keep their current value. Pressure, density, viscosity
        and dynamic pressure are SI in all unit systems and are not
        converted."""
        if units is None:
            units = DisplayUnits(
                feet=self.units.feet if feet is None else feet,
                knots=self.units.knots if knots is None else knots,
                celsius=self.units.celsius if celsius is None else celsius,
            )

        changes: dict[str, float] = {}
        if units.feet != self.units.feet:
            if units.feet:
                changes['altitude'] = meters_to_feet(self.altitude)
                changes['reynolds_per_length'] = (
                    self.reynolds_per_length * FEET_TO_METERS
                )
            else:
                changes['altitude'] = feet_to_meters(self.altitude)
                changes['reynolds_per_length'] = (
                    self.reynolds_per_length / FEET_TO_METERS
                )
        if units.knots != self.units.knots:
            to_speed = mps_to_knots if units.knots else knots_to_mps
            for k in (*_SPEED_FIELDS, 'sound_speed'):
                changes[k] = to_speed(getattr(self, k))
        if units.celsius != self.units.celsius:
            to_temperature = kelvin_to_celsius if units.celsius else celsius_to_kelvin
            changes['temperature'] = to_temperature(self.temperature)

        return replace(self, units=units, **changes)

    def summary(self) -> str:
        """Human-readable listing of the flight condition."""
        length = self.units.length_label
        speed = self.units.speed_label
        temp = self.units.temperature_label
        return '\n'.join(
            [
                'Flight condition defined by:',
                f'Mach number (.mach) = {self.mach}',
                f'Altitude (.altitude) = {self.altitude} {length}',
                f'Equivalent airspeed (.eas) = {self.eas} {speed}',
                f'Calibrated airspeed (.cas) = {self.cas} {speed}',
                f'True airspeed (.tas) = {self.tas} {speed}',
                f'Speed of sound (.sound_speed) = {self.sound_speed} {speed}',
                f'Pressure (.pressure) = {self.pressure} Pa',
                f'Temperature (.temperature) = {self.temperature} {temp}',
                f'Density (.density) = {self.density} kg/m3',
                f'Viscosity (.viscosity) = {self.viscosity} Pa s',
                'Kinematic viscosity (.kinematic_viscosity) = '
                f'{self.kinematic_viscosity} m2/s',
                f'Dynamic pressure (.dynamic_pressure) = {self.dynamic_pressure} Pa',
                'Reynolds number per length (.reynolds_per_length) = '
                f'{self.reynolds_per_length} 1/{length}',
                f'Temperature deviation from ISA (.delta_T) = {self.delta_T} {temp}',
            ]
        )

    def __str__(self) -> str:
        return self.summary()

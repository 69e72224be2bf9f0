# TODO: Remove this when we migrate to Python 3.14+.
from __future__ import annotations

import logging
from bisect import bisect_left
from dataclasses import dataclass

import numpy as np
from scipy.optimize import brentq

from ISAFlight.constants import (
    R_g,
    S_mu,
    T0,
    g0,
    h_layers,
    h_max,
    h_min,
    kappa,
    lapse_layers,
    mu0,
    p0,
    rho0,
)
from ISAFlight.errors import AltitudeSolveError, OutOfRangeError, TemperatureError

logger = logging.getLogger(__name__)

# Temperature deviations smaller than this [K] are treated as standard
# conditions when computing density.
DELTA_T_ATOL = 1e-12


@dataclass(frozen=True)
class AtmosphereLayer:
    """Base state of one ISA layer, over which temperature varies linearly
    with altitude."""

    base_altitude: float
    """Altitude of the bottom of the layer [m]."""

    lapse_rate: float
    """Temperature lapse rate [K/m]."""

    base_temperature: float
    """Temperature at the layer base [K]."""

    base_pressure: float
    """Pressure at the layer base [Pa]."""

    base_density: float
    """Density at the layer base [kg/m^3]."""

    @property
    def isothermal(self) -> bool:
        return self.lapse_rate == 0

    def temperature(self, altitude: float) -> float:
        return self.base_temperature + self.lapse_rate * (
            altitude - self.base_altitude
        )

    def pressure(self, altitude: float) -> float:
        if self.isothermal:
            return self.base_pressure * self._exponential_decay(altitude)
        exponent = -g0 / (R_g * self.lapse_rate)
        return self.base_pressure * (
            self.temperature(altitude) / self.base_temperature
        ) ** exponent

    def density(self, altitude: float) -> float:
        if self.isothermal:
            return self.base_density * self._exponential_decay(altitude)
        exponent = -g0 / (R_g * self.lapse_rate) - 1
        return self.base_density * (
            self.temperature(altitude) / self.base_temperature
        ) ** exponent

    def _exponential_decay(self, altitude: float) -> float:
        scale_height = R_g * self.base_temperature / g0
        return float(np.exp(-(altitude - self.base_altitude) / scale_height))


def _build_layers() -> tuple[AtmosphereLayer, ...]:
    # Each layer's base state is the previous layer's closed form evaluated at
    # the new base altitude, so the table has to be built bottom-up.
    layers = [
        AtmosphereLayer(
            base_altitude=h_layers[0],
            lapse_rate=lapse_layers[0],
            base_temperature=T0,
            base_pressure=p0,
            base_density=rho0,
        )
    ]
    for base_altitude, lapse_rate in zip(h_layers[1:-1], lapse_layers[1:]):
        below = layers[-1]
        layers.append(
            AtmosphereLayer(
                base_altitude=base_altitude,
                lapse_rate=lapse_rate,
                base_temperature=below.temperature(base_altitude),
                base_pressure=below.pressure(base_altitude),
                base_density=below.density(base_altitude),
            )
        )
    return tuple(layers)


LAYERS: tuple[AtmosphereLayer, ...] = _build_layers()
"""The seven ISA layers, from the troposphere up to the high mesosphere."""


def layer_index(altitude: float) -> int:
    """Return the index of the atmosphere layer containing an altitude.

    The correspondence between index and layer is:

    - 0: Troposphere
    - 1: Tropopause
    - 2: Low stratosphere
    - 3: High stratosphere
    - 4: Stratopause
    - 5: Low mesosphere
    - 6: High mesosphere

    An altitude lying exactly on a layer boundary belongs to the lower layer,
    and all altitudes below sea level belong to the troposphere.

    Parameters
    ----------
    altitude : float
        Altitude in meters.

    Returns
    -------
    int
        Layer index in the range 0-6.

    Raises
    ------
    OutOfRangeError
        If altitude is outside the range [-610 m, 84852 m].
    """
    if altitude < h_min:
        raise OutOfRangeError(
            f'Altitude {altitude} m is lower than ISA minimum {h_min} m'
        )
    if altitude > h_max:
        raise OutOfRangeError(
            f'Altitude {altitude} m is higher than ISA maximum {h_max} m'
        )
    if altitude <= 0:
        return 0
    return bisect_left(h_layers, altitude) - 1


def layer(altitude: float) -> AtmosphereLayer:
    """Return the atmosphere layer containing an altitude [m]."""
    return LAYERS[layer_index(altitude)]


def temperature(altitude: float, delta_T: float = 0.0) -> float:
    """Return the temperature at an altitude.
    Units are SI (m, K)

    Parameters
    ----------
    altitude : float
        Altitude in meters.
    delta_T : float
        Temperature deviation from ISA in Kelvin.

    Returns
    -------
    float
        Temperature in Kelvin.

    Raises
    ------
    TemperatureError
        If the temperature deviation takes the temperature to or below 0 K.
    """
    T = layer(altitude).temperature(altitude) + delta_T
    if T <= 0:
        raise TemperatureError(
            f'Temperature deviation {delta_T} K gives a non-physical temperature '
            f'{T} K at altitude {altitude} m'
        )
    return T


def pressure(altitude: float) -> float:
    """Return the pressure at an altitude.
    Units are SI (m, Pa)

    Pressure only depends on altitude: a temperature deviation from ISA
    changes temperature and density but not the pressure profile.

    Parameters
    ----------
    altitude : float
        Altitude in meters.

    Returns
    -------
    float
        Pressure in Pascals.
    """
    return layer(altitude).pressure(altitude)


def density(altitude: float, delta_T: float = 0.0) -> float:
    """Return the air density at an altitude.
    Units are SI (m, kg/m^3)

    Under standard conditions the layer closed form is used. With a non-zero
    temperature deviation, density follows from the ideal gas law using the
    (unchanged) ISA pressure and the deviated temperature.

    Parameters
    ----------
    altitude : float
        Altitude in meters.
    delta_T : float
        Temperature deviation from ISA in Kelvin.

    Returns
    -------
    float
        Air density in kg/m^3.
    """
    if abs(delta_T) <= DELTA_T_ATOL:
        return layer(altitude).density(altitude)
    return pressure(altitude) / (R_g * temperature(altitude, delta_T))


def viscosity(altitude: float, delta_T: float = 0.0) -> float:
    """Return the dynamic viscosity of air at an altitude using Sutherland's
    law. Units are SI (m, Pa s)"""
    T = temperature(altitude, delta_T)
    return float(mu0 * (T / T0) ** 1.5 * (T0 + S_mu) / (T + S_mu))


def sound_speed(altitude: float, delta_T: float = 0.0) -> float:
    """Return the speed of sound at an altitude. Units are SI (m, m/s)"""
    return float(np.sqrt(kappa * R_g * temperature(altitude, delta_T)))


def altitude_from_pressure(
    p: float, xtol: float = 1e-9, rtol: float = 1e-14, maxiter: int = 100
) -> float:
    """Return the altitude at which the ISA pressure equals a given value.
    Units are SI (Pa, m)

    Pressure decreases monotonically with altitude, so there is a single root
    over the ISA altitude range, which is found with Brent's method.

    Parameters
    ----------
    p : float
        Pressure in Pascals.
    xtol, rtol : float
        Absolute [m] and relative tolerances on the altitude.
    maxiter : int
        Maximum number of root finder iterations.

    Returns
    -------
    float
        Altitude in meters.

    Raises
    ------
    AltitudeSolveError
        If the pressure is outside the ISA pressure range or the root finder
        does not converge within `maxiter` iterations.
    """
    if not np.isfinite(p) or p <= 0:
        raise AltitudeSolveError(f'Invalid pressure {p} Pa')

    try:
        altitude, result = brentq(
            lambda h: pressure(h) - p,
            h_min,
            h_max,
            xtol=xtol,
            rtol=rtol,
            maxiter=maxiter,
            full_output=True,
        )
    except (ValueError, RuntimeError) as e:
        raise AltitudeSolveError(
            f'No ISA altitude found for pressure {p} Pa: {e}'
        ) from e

    logger.debug(
        'Altitude %.6f m for pressure %.6f Pa (%d iterations)',
        altitude,
        p,
        result.iterations,
    )
    return float(altitude)

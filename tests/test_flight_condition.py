from dataclasses import FrozenInstanceError, fields

import numpy as np
import pytest

from ISAFlight import atmosphere
from ISAFlight.constants import a0, p0, rho0
from ISAFlight.errors import (
    AltitudeSolveError,
    InvalidInputCountError,
    InvalidInputPairError,
    OutOfRangeError,
    TemperatureError,
    UnsupportedRegimeError,
)
from ISAFlight.flight import (
    AltitudeCAS,
    AltitudeEAS,
    AltitudeTAS,
    FlightCondition,
    MachAltitude,
    MachCAS,
    MachEAS,
    make_inputs,
)
from ISAFlight.types import SI_UNITS, DisplayUnits
from ISAFlight.units import FEET_TO_METERS, feet_to_meters, knots_to_mps

IMPERIAL = DisplayUnits(feet=True, knots=True, celsius=True)


def check_consistent(fc: FlightCondition):
    """Check the relations between the fields of an SI flight condition."""
    assert fc.units == SI_UNITS
    h = fc.altitude
    assert fc.pressure == pytest.approx(atmosphere.pressure(h), rel=1e-9)
    assert fc.temperature == pytest.approx(
        atmosphere.temperature(h, fc.delta_T), rel=1e-9
    )
    assert fc.density == pytest.approx(atmosphere.density(h, fc.delta_T), rel=1e-9)
    assert fc.sound_speed == pytest.approx(
        atmosphere.sound_speed(h, fc.delta_T), rel=1e-9
    )
    assert fc.mach == pytest.approx(fc.tas / fc.sound_speed, rel=1e-9)
    assert fc.eas == pytest.approx(fc.tas * np.sqrt(fc.density / rho0), rel=1e-9)
    assert fc.kinematic_viscosity == pytest.approx(fc.viscosity / fc.density)
    assert fc.dynamic_pressure == pytest.approx(fc.density * fc.tas**2 / 2)
    assert fc.reynolds_per_length == pytest.approx(fc.tas / fc.kinematic_viscosity)


def test_mach_altitude():
    fc = FlightCondition.from_inputs(altitude=11000, mach=0.8)
    assert fc.altitude == 11000
    assert fc.mach == 0.8
    assert fc.mach == pytest.approx(fc.tas / atmosphere.sound_speed(11000))
    assert fc.tas == pytest.approx(236.06, rel=1e-4)
    assert fc.temperature == pytest.approx(216.65)
    assert fc.delta_T == 0.0
    check_consistent(fc)


def test_sea_level_speeds_coincide():
    # At sea level in standard conditions EAS, CAS and TAS are identical.
    fc = FlightCondition.from_inputs(altitude=0, mach=0.5)
    assert fc.tas == pytest.approx(0.5 * a0)
    assert fc.eas == pytest.approx(fc.tas)
    assert fc.cas == pytest.approx(fc.tas)
    assert fc.pressure == p0


def test_speed_ordering_at_altitude():
    fc = FlightCondition.from_inputs(altitude=10000, mach=0.78)
    # Compressibility puts CAS above EAS, density puts TAS above both.
    assert fc.eas < fc.cas < fc.tas


@pytest.mark.parametrize(
    'inputs',
    [
        MachAltitude(mach=0.6, altitude=8000),
        MachEAS(mach=0.6, eas=150),
        MachCAS(mach=0.6, cas=150),
        AltitudeEAS(altitude=8000, eas=150),
        AltitudeCAS(altitude=8000, cas=150),
        AltitudeTAS(altitude=8000, tas=200),
    ],
)
def test_all_pairs_consistent(inputs):
    fc = FlightCondition.solve(inputs)
    check_consistent(fc)
    # Inputs are kept exactly.
    for f in fields(inputs):
        assert getattr(fc, f.name) == getattr(inputs, f.name)


@pytest.mark.parametrize(
    'inputs',
    [
        MachAltitude(mach=0.6, altitude=8000),
        AltitudeEAS(altitude=3000, eas=150),
        AltitudeTAS(altitude=20000, tas=200),
    ],
)
def test_all_pairs_consistent_with_temperature_deviation(inputs):
    fc = FlightCondition.solve(inputs, delta_T=12.5)
    assert fc.delta_T == 12.5
    check_consistent(fc)


def test_altitude_eas_round_trip():
    fc1 = FlightCondition.from_inputs(altitude=11000, eas=150)
    fc2 = FlightCondition.from_inputs(mach=fc1.mach, eas=150)
    assert fc2.altitude == pytest.approx(11000, abs=1e-6)
    assert fc2.tas == pytest.approx(fc1.tas, rel=1e-9)
    assert fc2.cas == pytest.approx(fc1.cas, rel=1e-9)


def test_altitude_cas_round_trip():
    fc1 = FlightCondition.from_inputs(altitude=9000, cas=140)
    fc2 = FlightCondition.from_inputs(mach=fc1.mach, cas=140)
    assert fc2.altitude == pytest.approx(9000, abs=1e-6)
    assert fc2.eas == pytest.approx(fc1.eas, rel=1e-9)
    # The back-filled CAS reproduces the input CAS.
    fc3 = FlightCondition.from_inputs(altitude=9000, mach=fc1.mach)
    assert fc3.cas == pytest.approx(140, rel=1e-9)


def test_eas_independent_of_temperature_deviation():
    cold = FlightCondition.from_inputs(altitude=6000, mach=0.7, delta_T=-20.0)
    hot = FlightCondition.from_inputs(altitude=6000, mach=0.7, delta_T=20.0)
    assert cold.eas == pytest.approx(hot.eas, rel=1e-9)
    assert cold.cas == pytest.approx(hot.cas, rel=1e-9)
    assert cold.tas < hot.tas
    assert cold.pressure == hot.pressure


def test_imperial_inputs_kept_exactly():
    fc = FlightCondition.from_inputs(altitude=35000, tas=450, units=IMPERIAL)
    assert fc.units == IMPERIAL
    assert fc.altitude == 35000
    assert fc.tas == 450
    h = feet_to_meters(35000)
    assert fc.mach == pytest.approx(knots_to_mps(450) / atmosphere.sound_speed(h))
    assert fc.temperature == pytest.approx(atmosphere.temperature(h) - 273.15)
    assert fc.pressure == pytest.approx(atmosphere.pressure(h))


def test_imperial_matches_si():
    fc_si = FlightCondition.from_inputs(mach=0.5, eas=100)
    fc_imp = FlightCondition.from_inputs(
        mach=0.5, eas=100 / knots_to_mps(1), units=IMPERIAL
    )
    back = fc_imp.convert(SI_UNITS)
    for name in ('altitude', 'eas', 'cas', 'tas', 'sound_speed', 'temperature'):
        assert getattr(back, name) == pytest.approx(getattr(fc_si, name), rel=1e-9)
    assert back.reynolds_per_length == pytest.approx(
        fc_si.reynolds_per_length, rel=1e-9
    )


def test_convert_round_trip():
    fc = FlightCondition.from_inputs(altitude=11000, mach=0.8, delta_T=5.0)
    imperial = fc.convert(feet=True, knots=True, celsius=True)
    assert imperial.units == IMPERIAL
    assert imperial.altitude == pytest.approx(36089.24, rel=1e-6)
    assert imperial.temperature == pytest.approx(fc.temperature - 273.15)
    assert imperial.reynolds_per_length == pytest.approx(
        fc.reynolds_per_length * FEET_TO_METERS
    )
    assert imperial.sound_speed == pytest.approx(fc.sound_speed / knots_to_mps(1))

    # Quantities that are always SI are left alone.
    for name in (
        'mach',
        'pressure',
        'density',
        'viscosity',
        'kinematic_viscosity',
        'dynamic_pressure',
        'delta_T',
    ):
        assert getattr(imperial, name) == getattr(fc, name)

    back = imperial.convert(SI_UNITS)
    assert back.units == SI_UNITS
    for f in fields(fc):
        if f.name != 'units':
            assert getattr(back, f.name) == pytest.approx(getattr(fc, f.name))


def test_convert_single_flag():
    fc = FlightCondition.from_inputs(altitude=1000, mach=0.3)
    fc_ft = fc.convert(feet=True)
    assert fc_ft.units == DisplayUnits(feet=True)
    assert fc_ft.tas == fc.tas
    assert fc_ft.temperature == fc.temperature
    assert fc.convert() == fc


@pytest.mark.config_updates(units__length='feet', units__speed='knots')
def test_default_units_from_config():
    fc = FlightCondition.from_inputs(altitude=30000, cas=250)
    assert fc.units == DisplayUnits(feet=True, knots=True, celsius=False)
    assert fc.altitude == 30000
    assert fc.cas == 250


def test_frozen():
    fc = FlightCondition.from_inputs(altitude=1000, mach=0.3)
    with pytest.raises(FrozenInstanceError):
        fc.mach = 0.4  # type: ignore
    with pytest.raises(FrozenInstanceError):
        MachAltitude(mach=0.3, altitude=0).mach = 0.5  # type: ignore


@pytest.mark.parametrize(
    'kwargs',
    [
        {},
        {'mach': 0.5},
        {'altitude': 1000},
        {'mach': 0.5, 'altitude': 1000, 'eas': 100},
        {'mach': 0.5, 'altitude': 1000, 'eas': 100, 'cas': 100, 'tas': 100},
    ],
)
def test_invalid_input_count(kwargs):
    with pytest.raises(InvalidInputCountError):
        FlightCondition.from_inputs(**kwargs)


@pytest.mark.parametrize(
    'kwargs',
    [
        {'eas': 100, 'cas': 100},
        {'eas': 100, 'tas': 100},
        {'cas': 100, 'tas': 100},
        {'mach': 0.5, 'tas': 100},
    ],
)
def test_invalid_input_pair(kwargs):
    with pytest.raises(InvalidInputPairError):
        FlightCondition.from_inputs(**kwargs)


def test_make_inputs():
    assert make_inputs(tas=200, altitude=500) == AltitudeTAS(altitude=500, tas=200)
    assert make_inputs(mach=0.3, cas=80) == MachCAS(mach=0.3, cas=80)
    # Zero is a value, not a missing input.
    assert make_inputs(mach=0.0, altitude=0.0) == MachAltitude(mach=0.0, altitude=0.0)


@pytest.mark.parametrize(
    'factory',
    [
        lambda: MachAltitude(mach=-0.1, altitude=0),
        lambda: AltitudeTAS(altitude=0, tas=-1),
        lambda: AltitudeEAS(altitude=np.nan, eas=100),
        lambda: MachEAS(mach=0.0, eas=100),
        lambda: MachCAS(mach=0.0, cas=100),
    ],
)
def test_invalid_input_values(factory):
    with pytest.raises(ValueError):
        factory()


def test_altitude_out_of_range():
    with pytest.raises(OutOfRangeError):
        FlightCondition.from_inputs(altitude=90000, mach=0.5)


def test_pressure_out_of_range():
    # An EAS far too high for the Mach number implies a pressure above the
    # ISA maximum.
    with pytest.raises(AltitudeSolveError):
        FlightCondition.from_inputs(mach=0.1, eas=300)


@pytest.mark.parametrize(
    'kwargs',
    [
        {'mach': 1.2, 'altitude': 15000},
        {'mach': 1.2, 'cas': 300},
        {'altitude': 15000, 'cas': 450},
        {'altitude': 15000, 'tas': 400},
    ],
)
def test_supersonic_cas_rejected(kwargs):
    with pytest.raises(UnsupportedRegimeError):
        FlightCondition.from_inputs(**kwargs)


@pytest.mark.config_updates(solver__max_cas_mach=2.0)
def test_supersonic_limit_from_config():
    fc = FlightCondition.from_inputs(mach=1.2, altitude=15000)
    assert fc.tas == pytest.approx(1.2 * atmosphere.sound_speed(15000))


@pytest.mark.config_updates(solver__maxiter=1)
def test_solver_iteration_budget():
    with pytest.raises(AltitudeSolveError):
        FlightCondition.from_inputs(mach=0.5, eas=100)


def test_summary():
    fc = FlightCondition.from_inputs(altitude=1000, mach=0.3, units=IMPERIAL)
    text = str(fc)
    assert text.startswith('Flight condition defined by:')
    assert 'Altitude (.altitude) = 1000 ft' in text
    assert 'kt' in text
    assert '1/ft' in text
    assert len(text.splitlines()) == 15


def test_non_physical_temperature_deviation():
    with pytest.raises(TemperatureError):
        FlightCondition.from_inputs(altitude=11000, mach=0.8, delta_T=-250.0)

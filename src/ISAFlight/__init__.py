from .errors import (
    AltitudeSolveError,
    FlightInputError,
    InvalidInputCountError,
    InvalidInputPairError,
    ISAFlightError,
    OutOfRangeError,
    TemperatureError,
    UnsupportedRegimeError,
)
from .flight import (
    AltitudeCAS,
    AltitudeEAS,
    AltitudeTAS,
    FlightCondition,
    FlightInputs,
    MachAltitude,
    MachCAS,
    MachEAS,
    make_inputs,
)
from .types import DisplayUnits

__all__ = [
    'AltitudeCAS',
    'AltitudeEAS',
    'AltitudeSolveError',
    'AltitudeTAS',
    'DisplayUnits',
    'FlightCondition',
    'FlightInputError',
    'FlightInputs',
    'ISAFlightError',
    'InvalidInputCountError',
    'InvalidInputPairError',
    'MachAltitude',
    'MachCAS',
    'MachEAS',
    'OutOfRangeError',
    'TemperatureError',
    'UnsupportedRegimeError',
    'make_inputs',
]

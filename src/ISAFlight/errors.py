"""Exceptions raised by the atmosphere model and the flight condition
solver.

All of them derive from `ValueError`: each signals that some input value
cannot be turned into a consistent atmospheric or flight state."""


class ISAFlightError(ValueError):
    """Base class for all ISAFlight errors."""


class OutOfRangeError(ISAFlightError):
    """Altitude lies outside the range covered by the ISA layer model."""


class FlightInputError(ISAFlightError):
    """Base class for invalid selections of flight condition inputs."""


class InvalidInputCountError(FlightInputError):
    """Not exactly two of Mach, altitude, EAS, CAS and TAS were given."""


class InvalidInputPairError(FlightInputError):
    """The two inputs given do not define a flight condition."""


class AltitudeSolveError(ISAFlightError):
    """No altitude in the ISA range reproduces the requested pressure."""


class UnsupportedRegimeError(ISAFlightError):
    """Calibrated airspeed was requested in the supersonic regime."""


class TemperatureError(ISAFlightError):
    """Temperature deviation from ISA takes the temperature to or below
    absolute zero."""

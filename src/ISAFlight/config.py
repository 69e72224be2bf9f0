# TODO: Remove this when we migrate to Python 3.14.
from __future__ import annotations

import tomllib
from pathlib import Path

import numpy as np
from pydantic import ConfigDict, Field, model_validator

from ISAFlight.types import DisplayUnits, LengthUnit, SpeedUnit, TemperatureUnit
from ISAFlight.utils.helpers import deep_update
from ISAFlight.utils.models import CIBaseModel

# scipy's Brent solver rejects relative tolerances below four machine epsilons.
_MIN_RTOL = 4 * float(np.finfo(float).eps)


class SolverConfig(CIBaseModel):
    """Configuration settings for the flight condition solver."""

    model_config = ConfigDict(frozen=True)
    """Configuration is frozen after creation."""

    xtol: float = Field(default=1e-9, gt=0)
    """Absolute tolerance on altitude [m] when solving for altitude from
    pressure."""

    rtol: float = Field(default=1e-14, ge=_MIN_RTOL)
    """Relative tolerance on altitude when solving for altitude from
    pressure."""

    maxiter: int = Field(default=100, ge=1)
    """Iteration budget for the altitude solve. The solve fails rather than
    iterating further."""

    max_cas_mach: float = Field(default=1.0, gt=0)
    """Calibrated airspeed relations are subsonic only: any solve involving
    calibrated airspeed at or above this Mach number fails."""


class UnitsConfig(CIBaseModel):
    """Default display units for flight conditions."""

    model_config = ConfigDict(frozen=True)
    """Configuration is frozen after creation."""

    length: LengthUnit = LengthUnit.METERS
    speed: SpeedUnit = SpeedUnit.MPS
    temperature: TemperatureUnit = TemperatureUnit.KELVIN

    @property
    def display_units(self) -> DisplayUnits:
        return DisplayUnits(
            feet=self.length == LengthUnit.FEET,
            knots=self.speed == SpeedUnit.KNOTS,
            celsius=self.temperature == TemperatureUnit.CELSIUS,
        )


class Config(CIBaseModel):
    """Global ISAFlight configuration settings.

    This is a singleton class; only one instance can be created. This instance
    can then be accessed as `ISAFlight.config.config` via the module-level
    proxy. To use this, create an instance of `Config` at the start of your
    program (probably using the `load` method), then anywhere else in the
    codebase you can access the configuration simply by doing `from
    ISAFlight.config import config`."""

    model_config = ConfigDict(frozen=True)
    """Configuration is frozen after creation."""

    solver: SolverConfig = Field(default_factory=SolverConfig)
    """Flight condition solver settings."""

    units: UnitsConfig = Field(default_factory=UnitsConfig)
    """Default display units."""

    @model_validator(mode='after')
    def register_singleton(self):
        """Initialize the global configuration singleton."""

        global _config
        if _config is not None:
            raise RuntimeError('Config has already been initialized.')
        _config = self

        return self

    @classmethod
    def get(cls) -> Config:
        """Get the global configuration singleton.

        Raises an error if the configuration has not yet been initialized."""
        global _config
        if _config is None:
            raise ValueError('ISAFlight configuration is not set')
        return _config

    @classmethod
    def load(cls, config_file: str | Path | None = None, **kwargs) -> Config:
        """Load configuration from TOML files.

        The `default_config.toml` file included with ISAFlight is loaded
        first, and then TOML data from any `config_file` provided is loaded
        and overlaid on top. Additional keyword arguments are finally applied
        on top of the resulting configuration data. This allows users to only
        specify configuration options that differ from the defaults."""

        with open(Path(__file__).parent / 'data/default_config.toml', 'rb') as fp:
            default_data = tomllib.load(fp)

        # Overlay data can come either from a file or from keyword arguments.
        overlay_data = {}

        if config_file is not None:
            with open(config_file, 'rb') as fp:
                overlay_data = tomllib.load(fp)

        overlay_data = deep_update(overlay_data, kwargs)

        return cls.model_validate(deep_update(default_data, overlay_data))

    @staticmethod
    def reset():
        """Reset the global configuration singleton.

        This is mostly intended for testing purposes, where it can be useful to
        modify the configuration between or within tests."""
        global _config
        _config = None


# Module property-like access to configuration via a proxy to allow late
# initialization.

_config: Config | None = None


class ConfigProxy:
    def __getattr__(self, name):
        global _config
        if _config is None:
            raise ValueError('ISAFlight configuration is not set')
        return getattr(_config, name)

    def __setattr__(self, name, value):
        global _config
        if _config is None:
            raise ValueError('ISAFlight configuration is not set')
        return setattr(_config, name, value)


config = ConfigProxy()


def solver_settings() -> SolverConfig:
    """Solver settings from the loaded configuration, or the defaults if no
    configuration has been loaded."""
    return _config.solver if _config is not None else SolverConfig()


def default_units() -> DisplayUnits:
    """Configured default display units, or SI if no configuration has been
    loaded."""
    units = _config.units if _config is not None else UnitsConfig()
    return units.display_units

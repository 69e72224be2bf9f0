import logging

import click

from ISAFlight import atmosphere
from ISAFlight.config import Config
from ISAFlight.errors import ISAFlightError
from ISAFlight.flight import FlightCondition
from ISAFlight.types import DisplayUnits
from ISAFlight.units import feet_to_meters

logger = logging.getLogger(__name__)

LAYER_NAMES = (
    'troposphere',
    'tropopause',
    'low stratosphere',
    'high stratosphere',
    'stratopause',
    'low mesosphere',
    'high mesosphere',
)


@click.command()
@click.option('--mach', type=float, default=None, help='Mach number.')
@click.option('--altitude', type=float, default=None, help='Altitude.')
@click.option('--eas', type=float, default=None, help='Equivalent airspeed.')
@click.option('--cas', type=float, default=None, help='Calibrated airspeed.')
@click.option('--tas', type=float, default=None, help='True airspeed.')
@click.option(
    '--delta-t',
    type=float,
    default=0.0,
    help='Temperature deviation from ISA [K].',
)
@click.option(
    '--feet/--meters',
    default=None,
    help='Length units for inputs and output (default from configuration).',
)
@click.option(
    '--knots/--mps',
    default=None,
    help='Speed units for inputs and output (default from configuration).',
)
@click.option(
    '--celsius/--kelvin',
    default=None,
    help='Temperature units for output (default from configuration).',
)
@click.option(
    '-c',
    '--config-file',
    type=click.Path(exists=True),
    default=None,
    help='TOML configuration file overlaid on the defaults.',
)
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging.')
def run(
    mach,
    altitude,
    eas,
    cas,
    tas,
    delta_t,
    feet,
    knots,
    celsius,
    config_file,
    verbose,
):
    """Solve a flight condition from exactly two of Mach number, altitude,
    EAS, CAS and TAS."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    cfg = Config.load(config_file=config_file)
    defaults = cfg.units.display_units
    units = DisplayUnits(
        feet=defaults.feet if feet is None else feet,
        knots=defaults.knots if knots is None else knots,
        celsius=defaults.celsius if celsius is None else celsius,
    )

    try:
        fc = FlightCondition.from_inputs(
            mach=mach,
            altitude=altitude,
            eas=eas,
            cas=cas,
            tas=tas,
            delta_T=delta_t,
            units=units,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    finally:
        Config.reset()

    click.echo(fc.summary())


@click.command()
@click.option(
    '-a',
    '--altitude',
    type=float,
    multiple=True,
    required=True,
    help='Altitude (may be given more than once).',
)
@click.option(
    '--delta-t',
    type=float,
    default=0.0,
    help='Temperature deviation from ISA [K].',
)
@click.option('--feet', is_flag=True, help='Altitudes are given in feet.')
def atmosphere_table(altitude, delta_t, feet):
    """Print ISA properties at one or more altitudes."""
    logging.basicConfig(level=logging.INFO)

    click.echo(
        f'{"altitude [m]":>14} {"layer":>18} {"T [K]":>10} {"p [Pa]":>12} '
        f'{"rho [kg/m3]":>12} {"mu [Pa s]":>12} {"a [m/s]":>10}'
    )
    for h in altitude:
        h_m = feet_to_meters(h) if feet else h
        try:
            i = atmosphere.layer_index(h_m)
        except ISAFlightError as e:
            raise click.UsageError(str(e)) from e
        click.echo(
            f'{h_m:14.2f} {LAYER_NAMES[i]:>18} '
            f'{atmosphere.temperature(h_m, delta_t):10.3f} '
            f'{atmosphere.pressure(h_m):12.4f} '
            f'{atmosphere.density(h_m, delta_t):12.6f} '
            f'{atmosphere.viscosity(h_m, delta_t):12.5e} '
            f'{atmosphere.sound_speed(h_m, delta_t):10.3f}'
        )


if __name__ == '__main__':
    run()

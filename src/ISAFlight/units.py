"""Unit conversion factors and conversion functions for the display units
supported by flight conditions (feet, knots, degrees Celsius)."""

FEET_TO_METERS = 0.3048
"""Unit conversion factor for feet to meters."""

METERS_TO_FEET = 1 / FEET_TO_METERS
"""Unit conversion factor for meters to feet."""

KNOTS_TO_MPS = 1852 / 3600
"""Unit conversion factor for knots to m/s."""

MPS_TO_KNOTS = 1 / KNOTS_TO_MPS
"""Unit conversion factor for m/s to knots."""

CELSIUS_OFFSET = 273.15
"""Kelvin temperature of 0 °C."""


def feet_to_meters(feet: float) -> float:
    return feet * FEET_TO_METERS


def meters_to_feet(meters: float) -> float:
    return meters / FEET_TO_METERS


def knots_to_mps(knots: float) -> float:
    return knots * KNOTS_TO_MPS


def mps_to_knots(mps: float) -> float:
    return mps / KNOTS_TO_MPS


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - CELSIUS_OFFSET


def celsius_to_kelvin(celsius: float) -> float:
    return celsius + CELSIUS_OFFSET

import numpy as np

# Sea-level static pressure [Pa]
p0 = 101_325.0  # ISA sea-level pressure

# Sea-level standard temperature [K]
T0 = 288.15  # ISA sea-level temperature (15 °C)

# Sea-level air density [kg/m^3]
rho0 = 1.225  # ISA sea-level density

# Sea-level dynamic viscosity [Pa s]
mu0 = 1.7894e-5

# Gravitational acceleration [m/s^2]
g0 = 9.80665

# Ratio of specific heats for dry air (kappa = cp/cv)
kappa = 1.4

# Specific gas constant for dry air [J/kg/K], consistent with the sea-level
# triple (p0, rho0, T0) rather than the tabulated 287.05287.
R_g = p0 / (rho0 * T0)

# Sutherland constant for air [K]
S_mu = 110.0

# Speed of sound at sea level [m/s]
a0 = float(np.sqrt(kappa * R_g * T0))

# Altitude validity range of the model [m]
h_min = -610.0
h_max = 84_852.0

# Layer boundaries [m]: base of each of the seven layers plus the model top.
h_layers = (0.0, 11_000.0, 20_000.0, 32_000.0, 47_000.0, 51_000.0, 71_000.0, h_max)

# Temperature lapse rate in each layer [K/m]
lapse_layers = (-6.5e-3, 0.0, 1.0e-3, 2.8e-3, 0.0, -2.8e-3, -2.0e-3)

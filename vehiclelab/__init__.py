# vehiclelab - vehicle dynamics simulation and validation engine

__version__ = "0.1.0"

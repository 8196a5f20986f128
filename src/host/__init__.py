from .host_interface import IHost
from .simulated_host import SimulatedHost, SimulatedUser, PlayedSound

__all__ = [
    "IHost",
    "SimulatedHost",
    "SimulatedUser",
    "PlayedSound",
]

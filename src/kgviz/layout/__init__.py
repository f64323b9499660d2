"""Force-directed layout: state, forces, simulation and tick scheduling."""

from kgviz.layout.forces import (
    CenterForce,
    CollideForce,
    Force,
    LinkForce,
    ManyBodyForce,
    default_forces,
)
from kgviz.layout.quadtree import QuadCell, QuadTree
from kgviz.layout.scheduler import TickScheduler
from kgviz.layout.simulation import ForceSimulation, advance
from kgviz.layout.state import NodeLayout, RunState, SimulationState

__all__ = [
    # State
    "NodeLayout",
    "RunState",
    "SimulationState",
    # Forces
    "Force",
    "LinkForce",
    "ManyBodyForce",
    "CenterForce",
    "CollideForce",
    "default_forces",
    "QuadCell",
    "QuadTree",
    # Simulation
    "ForceSimulation",
    "advance",
    "TickScheduler",
]

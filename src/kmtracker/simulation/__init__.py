from .simulator import Simulator, TrajectorySimulator

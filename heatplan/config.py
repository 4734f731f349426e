import multiprocessing
from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigurationError


def default_workers():
    return max(1, multiprocessing.cpu_count() - 1)


@dataclass
class SimulationConfig:
    """Run options. Call validate() before starting a run."""
    use_surface_optimisation: bool = True
    use_multithreading: bool = False
    max_workers: int = field(default_factory=default_workers)
    save_all_nodes: Optional[str] = None    # CSV path, one row per (grid point, tariff)
    save_surfaces: Optional[str] = None     # Directory for per-pair cost surface CSVs
    print_intermediates: bool = False

    def validate(self):
        # The node trace is one shared file written in evaluation order
        if self.save_all_nodes and self.use_multithreading:
            raise ConfigurationError("save_all_nodes cannot be combined with use_multithreading")
        if self.save_all_nodes and self.use_surface_optimisation:
            raise ConfigurationError("save_all_nodes cannot be combined with use_surface_optimisation")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}")
        return self

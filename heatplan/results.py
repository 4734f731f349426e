import json
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .boilers import GenericSystem
from .building import HouseInputs, YearlyDemand
from .constants import NPC_YEARS
from .evaluate import SystemSpecification
from .options import heat_solar_pairs

_LOGGER = logging.getLogger(__name__)

NODE_TRACE_COLUMNS = [
    "heat_option", "solar_option", "pv_size", "solar_thermal_size", "tes_volume", "tariff",
    "operational_expenditure", "capital_expenditure", "net_present_cost", "operational_emissions",
]


def _demand_dict(demand):
    return {
        "hot-water": demand.hot_water,
        "space": demand.space,
        "total": demand.total,
        "peak-hourly": demand.max_hourly,
    }


def _specification_dict(spec):
    return {
        "pv-size": spec.pv_size,
        "solar-thermal-size": spec.solar_thermal_size,
        "thermal-energy-storage-volume": spec.tes_volume,
        "tariff": spec.tariff.value,
        "operational-expenditure": spec.operational_expenditure,
        "capital-expenditure": spec.capital_expenditure,
        "net-present-cost": spec.net_present_cost,
        "operational-emissions": spec.operational_emissions,
    }


def _generic_dict(system):
    return {
        "operational-expenditure": system.operational_expenditure,
        "capital-expenditure": system.capital_expenditure,
        "net-present-cost": system.net_present_cost,
        "operational-emissions": system.operational_emissions,
    }


@dataclass
class Report:
    inputs: HouseInputs
    thermal_transmittance: float
    epc_demand: Optional[float]
    erh_demand: YearlyDemand
    hp_demand: YearlyDemand
    specifications: List[SystemSpecification]   # 21 optima, heat-major
    comparisons: List[GenericSystem]
    search_results: list = field(default_factory=list, repr=False)  # Per-pair surfaces, not serialised

    def to_dict(self):
        systems = {}
        for spec in self.specifications:
            systems.setdefault(spec.heat_option.value, {})[spec.solar_option.value] = _specification_dict(spec)

        data = {
            "thermal-transmittance": self.thermal_transmittance,
            "optimised-epc-demand": self.epc_demand,
            "npc-years": NPC_YEARS,
            "demand": {
                "boiler": _demand_dict(self.erh_demand),
                "heat-pump": _demand_dict(self.hp_demand),
            },
            "systems": systems,
        }
        for system in self.comparisons:
            block = data.setdefault(system.name, {})
            if system.variant:
                block[system.variant] = _generic_dict(system)
            else:
                block.update(_generic_dict(system))
        return data

    def to_dataframe(self):
        rows = []
        for spec in self.specifications:
            rows.append({
                "heat_option": spec.heat_option.label,
                "solar_option": spec.solar_option.label,
                "pv_size": spec.pv_size,
                "solar_thermal_size": spec.solar_thermal_size,
                "tes_volume": spec.tes_volume,
                "tariff": spec.tariff.label,
                "operational_expenditure": spec.operational_expenditure,
                "capital_expenditure": spec.capital_expenditure,
                "net_present_cost": spec.net_present_cost,
                "operational_emissions": spec.operational_emissions,
            })
        return pd.DataFrame(rows, columns=NODE_TRACE_COLUMNS)

    def to_csv(self):
        return self.to_dataframe().to_csv(index=False)

    def best(self):
        """Lowest net present cost across all optimised systems."""
        return min(self.specifications, key=lambda spec: spec.net_present_cost)


def save_json(filename, report):
    with open(filename, "w") as f:
        json.dump(report.to_dict(), f, indent=4)
    print(f"Report saved to: {filename}")


def save_csv(filename, report):
    with open(filename, "w") as f:
        f.write(report.to_csv())
    print(f"Report saved to: {filename}")


def save_node_trace(filename, specifications):
    """One row per (grid point, tariff) in evaluation order."""
    rows = []
    for spec in specifications:
        row = asdict(spec)
        row["heat_option"] = spec.heat_option.label
        row["solar_option"] = spec.solar_option.label
        row["tariff"] = spec.tariff.label
        rows.append(row)
    pd.DataFrame(rows, columns=NODE_TRACE_COLUMNS).to_csv(filename, index=False)
    _LOGGER.info("Wrote %d evaluations to %s", len(rows), filename)


def surface_filename(index):
    return f"o{index}.csv"


def save_surfaces(directory, results):
    """
    One CSV per heat/solar pair, numbered in pair order. Rows are solar
    sizes, columns storage sizes; cells the search skipped are NaN.
    """
    for index, result in enumerate(results):
        arr = result.surface.to_array()
        path = os.path.join(directory, surface_filename(index))
        pd.DataFrame(arr).to_csv(path, header=False, index=False, na_rep="NaN")
    _LOGGER.info("Wrote %d cost surfaces to %s", len(results), directory)


def plot_cost_surface(result, title="", show=True):
    """Heat map of the evaluated cells; unevaluated cells stay blank."""
    arr = result.surface.to_array()
    masked = np.ma.masked_invalid(arr)

    fig, ax = plt.subplots(figsize=(10, 6))
    mesh = ax.pcolormesh(masked, cmap="viridis", shading="auto")
    fig.colorbar(mesh, ax=ax, label="Net present cost (£)")

    spec = result.specification
    best_j, best_i = np.unravel_index(np.nanargmin(arr), arr.shape)
    ax.plot(best_i + 0.5, best_j + 0.5, marker="*", color="red", markersize=14, label="Optimum")
    ax.set_title(f"{len(result.surface)} of {result.surface.size} cells evaluated", loc="right", fontsize=9)

    ax.set_xlabel("Storage option")
    ax.set_ylabel("Solar size option")
    if not title:
        title = f"{spec.heat_option.label} / {spec.solar_option.label}"
    ax.set_title(title)
    ax.legend()
    fig.tight_layout()
    if show:
        plt.show()
    return fig


def plot_all_surfaces(results, show=True):
    figures = []
    for (heat, solar), result in zip(heat_solar_pairs(), results):
        figures.append(plot_cost_surface(result, title=f"{heat.label} / {solar.label}", show=False))
    if show:
        plt.show()
    return figures

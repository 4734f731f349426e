#!/usr/bin/python3

import argparse
import json
import logging
import os
import re
import sys

from heatplan import load_csv
from heatplan import results
from heatplan.building import HouseInputs
from heatplan.config import SimulationConfig, default_workers
from heatplan.constants import HOURS_PER_YEAR
from heatplan.simulation import prepare_context, run_simulation


def load_house(filename):
    with open(filename, 'r') as f:
        # Support C-style // comments to allow user annotations
        content = f.read()
        content = re.sub(r'//.*', '', content)
        data = json.loads(content)
    inputs = HouseInputs.from_dict(data)
    print(f"Loaded house from {filename}")
    print(f" -> {inputs.house_size:.0f} m2, {inputs.num_occupants} occupants, {inputs.postcode}")
    return inputs


def print_summary(report):
    print("\n" + "=" * 60)
    print("OPTIMISED SYSTEMS")
    print(f"Thermal transmittance: {report.thermal_transmittance:.2f} W/m2K")
    print("=" * 60)
    for spec in report.specifications:
        print(f"{spec.heat_option.label:<26} {spec.solar_option.label:<32} "
              f"NPC £{spec.net_present_cost:>9.0f}  {spec.tariff.label}")
    print("-" * 60)
    for system in report.comparisons:
        name = f"{system.name} ({system.variant})" if system.variant else system.name
        print(f"{name:<59} NPC £{system.net_present_cost:>9.0f}")
    best = report.best()
    print("=" * 60)
    print(f"Cheapest: {best.heat_option.label} with {best.solar_option.label}, "
          f"{best.tes_volume:.1f} m3 storage on {best.tariff.label}")


def run_main(args_list=None):
    parser = argparse.ArgumentParser(
        description="Size a domestic heat source, thermal storage and solar system for lowest lifetime cost.",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument("house_json", help="Path to house inputs JSON (// comments allowed)")
    parser.add_argument("--assets", default="assets",
                        help="Weather asset directory with outside_temps/, solar_irradiances/ and agile_tariff.csv\n(default: assets)")
    parser.add_argument("--hours", type=int, default=HOURS_PER_YEAR,
                        help=f"Length of the weather trace in hours (default: {HOURS_PER_YEAR})")
    parser.add_argument("--thermal-transmittance", type=float, metavar="U",
                        help="Skip EPC calibration and use this fabric U-value (W/m2K)")

    # Search options
    parser.add_argument("--no-surface-optimisation", action="store_true",
                        help="Evaluate every grid point instead of the adaptive surface search")
    parser.add_argument("--parallel", action="store_true",
                        help="Search the heat/solar pairs in a process pool")
    parser.add_argument("--workers", type=int, default=default_workers(),
                        help="Worker processes for --parallel (default: CPU count - 1)")

    # Debug output
    parser.add_argument("--save-all-nodes", metavar="CSV_FILE",
                        help="Write every evaluated grid point and tariff to CSV\n(requires --no-surface-optimisation, not --parallel)")
    parser.add_argument("--save-surfaces", metavar="DIR",
                        help="Write each pair's cost surface to DIR/o<index>.csv")
    parser.add_argument("--plot-surfaces", action="store_true", help="Plot every cost surface")

    parser.add_argument("-o", "--output", help="Write the report to this file")
    parser.add_argument("--format", choices=["json", "csv"], default="json",
                        help="Report format for --output (default: json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log intermediate values")

    args = parser.parse_args(args_list)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if not os.path.exists(args.house_json):
        print(f"Error: House file '{args.house_json}' not found.")
        return 1

    config = SimulationConfig(
        use_surface_optimisation=not args.no_surface_optimisation,
        use_multithreading=args.parallel,
        max_workers=args.workers,
        save_all_nodes=args.save_all_nodes,
        save_surfaces=args.save_surfaces,
        print_intermediates=args.verbose,
    )

    try:
        config.validate()
        inputs = load_house(args.house_json)
        weather = load_csv.load_weather(args.assets, inputs.latitude, inputs.longitude,
                                        expected_length=args.hours)
        context = prepare_context(inputs, weather, thermal_transmittance=args.thermal_transmittance)
        print("\n--- SEARCHING HEAT / SOLAR COMBINATIONS ---")
        report = run_simulation(inputs, weather, config, context=context)
    except (LookupError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print_summary(report)
    if args.plot_surfaces:
        results.plot_all_surfaces(report.search_results)

    if args.output:
        if args.format == "csv":
            results.save_csv(args.output, report)
        else:
            results.save_json(args.output, report)
    return 0


if __name__ == "__main__":
    sys.exit(run_main())

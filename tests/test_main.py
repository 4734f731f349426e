import unittest
import os
import shutil
import tempfile
import json
from unittest.mock import patch
import sys

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

# Import the main module to test
# We need to make sure the parent directory is in sys.path if running from tests/
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import main
from heatplan import load_csv

HOURS = 24


class TestMainIntegration(unittest.TestCase):
    def setUp(self):
        # Create a temporary directory
        self.test_dir = tempfile.mkdtemp()
        self.assets_dir = os.path.join(self.test_dir, 'assets')
        self.house_path = os.path.join(self.test_dir, 'house.json')
        self.output_path = os.path.join(self.test_dir, 'report.json')

        # Small house keeps every search grid tiny
        with open(self.house_path, 'w') as f:
            f.write("""{
    // Semi-detached, Loughborough
    "thermostat_temperature": 20.0,
    "latitude": 52.0,
    "longitude": -1.0,
    "num_occupants": 2,
    "house_size": 24.0,
    "postcode": "LE11 3TU",
    "epc_space_heating": 2500.0,
    "tes_volume_max": 0.2
}
""")
        self.generate_weather()

        # Conditional Plot Suppression
        # If SHOW_PLOTS env var is NOT set, suppress plots.
        if not os.environ.get('SHOW_PLOTS'):
            self.plot_patcher = patch('matplotlib.pyplot.show')
            self.mock_show = self.plot_patcher.start()
        else:
            self.plot_patcher = None

    def tearDown(self):
        # Stop patcher if it was started
        if self.plot_patcher:
            self.plot_patcher.stop()
        plt.close("all")

        # Remove the directory after the test
        shutil.rmtree(self.test_dir)

    def generate_weather(self):
        # One winter day: 2-8 °C, sun from 08:00 to 16:00
        hours = np.arange(HOURS)
        filename = load_csv.weather_filename(52.0, -1.0)
        temperatures = 5.0 - 3.0 * np.cos(hours / HOURS * 2 * np.pi)
        irradiances = np.clip(250.0 * np.sin((hours - 8) / 8.0 * np.pi), 0.0, None)
        series = {
            os.path.join(load_csv.OUTSIDE_TEMPERATURES_DIR, filename): temperatures,
            os.path.join(load_csv.SOLAR_IRRADIANCES_DIR, filename): irradiances,
            load_csv.AGILE_TARIFF_FILE: np.where(hours < 5, 7.5, 16.0),
        }
        for relpath, values in series.items():
            path = os.path.join(self.assets_dir, relpath)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            pd.Series(values).to_csv(path, header=False, index=False)

    def run_cli(self, *extra):
        args = [self.house_path, '--assets', self.assets_dir, '--hours', str(HOURS)] + list(extra)
        with open(os.devnull, 'w') as devnull, patch('sys.stdout', new=devnull):
            return main.run_main(args)

    def test_json_report(self):
        exit_code = self.run_cli('--thermal-transmittance', '1.8', '-o', self.output_path)
        self.assertEqual(exit_code, 0)
        self.assertTrue(os.path.exists(self.output_path))

        with open(self.output_path, 'r') as f:
            data = json.load(f)
        self.assertAlmostEqual(data['thermal-transmittance'], 1.8)
        self.assertEqual(len(data['systems']), 3)
        self.assertEqual(sum(len(v) for v in data['systems'].values()), 21)
        self.assertIn('green', data['hydrogen-fuel-cell'])

    def test_csv_report_with_calibration(self):
        csv_path = os.path.join(self.test_dir, 'report.csv')
        exit_code = self.run_cli('-o', csv_path, '--format', 'csv')
        self.assertEqual(exit_code, 0)
        df = pd.read_csv(csv_path)
        self.assertEqual(len(df), 21)
        self.assertTrue((df['net_present_cost'] > 0).all())

    def test_debug_outputs(self):
        nodes_path = os.path.join(self.test_dir, 'nodes.csv')
        surfaces_dir = os.path.join(self.test_dir, 'surfaces')
        exit_code = self.run_cli('--thermal-transmittance', '1.8', '--no-surface-optimisation',
                                 '--save-all-nodes', nodes_path, '--save-surfaces', surfaces_dir,
                                 '--plot-surfaces')
        self.assertEqual(exit_code, 0)
        nodes = pd.read_csv(nodes_path)
        self.assertEqual(len(nodes) % 5, 0)
        self.assertEqual(len(os.listdir(surfaces_dir)), 21)
        if self.plot_patcher:
            self.mock_show.assert_called()

    def test_node_trace_needs_exhaustive_search(self):
        nodes_path = os.path.join(self.test_dir, 'nodes.csv')
        exit_code = self.run_cli('--save-all-nodes', nodes_path)
        self.assertEqual(exit_code, 1)
        self.assertFalse(os.path.exists(nodes_path))

    def test_missing_weather(self):
        shutil.rmtree(self.assets_dir)
        self.assertEqual(self.run_cli(), 1)

    def test_unknown_postcode(self):
        with open(self.house_path, 'r') as f:
            content = f.read()
        with open(self.house_path, 'w') as f:
            f.write(content.replace('LE11 3TU', 'ZZ9 9ZZ'))
        self.assertEqual(self.run_cli('--thermal-transmittance', '1.8'), 1)

    def test_missing_house_file(self):
        os.remove(self.house_path)
        self.assertEqual(self.run_cli(), 1)


if __name__ == '__main__':
    unittest.main()

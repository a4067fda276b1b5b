#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module contains unit tests for the heat source module
"""

# Standard library imports
import unittest

# Third-party imports
import numpy as np

# Local imports
from hpwhsim.material_properties import WATER
from hpwhsim.controls.heating_logic import bottom_third, bottom_node_max_temp
from hpwhsim.heating_systems.performance_curve import PerformanceCurve
from hpwhsim.heating_systems.storage_tank import StorageTank
from hpwhsim.heating_systems.heat_source import HeatSource, HeatSourceConfig, HeatSourceType

def condensity(*weights):
    return list(weights) + [0.0] * (12 - len(weights))

def flat_curve(input_power_W, cop):
    return PerformanceCurve([
        {'T_F': 50, 'input_power_coeffs': [input_power_W], 'COP_coeffs': [cop]},
        ])

def heat_source(
        source_type=HeatSourceType.RESISTANCE,
        configuration=HeatSourceConfig.SUBMERGED,
        input_power_W=1000.0,
        cop=1.0,
        turn_on_logic=(),
        shut_off_logic=(),
        **kwargs
        ):
    return HeatSource(
        'test source',
        source_type,
        configuration,
        condensity(1.0),
        flat_curve(input_power_W, cop),
        turn_on_logic,
        shut_off_logic,
        **kwargs
        )

class TestHeatSource(unittest.TestCase):
    """ Unit tests for HeatSource class """

    def setUp(self):
        """ 12 litre, 12 node tank (1 litre per node) at 20 degrees, setpoint 50 """
        self.tank = StorageTank(12, 12.0, 0.0, 20.0)
        self.setpoint = 50.0
        self.ambient_T = 20.0
        self.node_heat_capacity = WATER.volumetric_heat_capacity()
        self.heat_distribution = np.zeros(12)

    def add_heat(self, source, minutes):
        return source.add_heat(self.tank, self.setpoint, self.ambient_T, minutes, self.heat_distribution)

    def test_engage_disengage(self):
        source = heat_source(backup_idx=1, companion_idx=2, followed_by_idx=0)
        self.assertFalse(source.is_engaged(), "heat source should start off")
        source.engage()
        self.assertTrue(source.is_engaged(), "heat source should be engaged")
        source.disengage()
        self.assertFalse(source.is_engaged(), "heat source should be disengaged")
        self.assertEqual(source.backup_idx(), 1, "incorrect backup")
        self.assertEqual(source.companion_idx(), 2, "incorrect companion")
        self.assertEqual(source.followed_by_idx(), 0, "incorrect followed-by")

    def test_should_heat(self):
        source = heat_source(turn_on_logic=[bottom_third(20.0)])
        self.assertTrue(
            source.should_heat(self.tank, self.setpoint, self.ambient_T),
            "cold tank should need heat"
            )
        self.tank.reset_temps(45.0)
        self.assertFalse(
            source.should_heat(self.tank, self.setpoint, self.ambient_T),
            "warm tank should not need heat"
            )

    def test_should_not_heat_if_shutting_off(self):
        source = heat_source(
            turn_on_logic=[bottom_third(20.0)],
            shut_off_logic=[bottom_node_max_temp(10.0)],
            )
        self.assertTrue(source.shuts_off(self.tank, self.setpoint, self.ambient_T), "should shut off")
        self.assertFalse(
            source.should_heat(self.tank, self.setpoint, self.ambient_T),
            "source that would shut off should not heat"
            )

    def test_compressor_lockout(self):
        compressor = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.WRAPPED,
            min_T=10.0,
            max_T=40.0,
            hysteresis=2.0,
            )
        for ambient_T, engaged, locked_out in [
                (5.0, True, True),
                (11.0, False, True),
                (11.0, True, False),
                (25.0, False, False),
                (39.0, False, True),
                (39.0, True, False),
                (41.0, True, True),
                ]:
            with self.subTest(ambient_T=ambient_T, engaged=engaged):
                if engaged:
                    compressor.engage()
                else:
                    compressor.disengage()
                self.assertEqual(compressor.is_locked_out(ambient_T), locked_out, "incorrect lockout")
                self.assertEqual(
                    compressor.shuts_off(self.tank, self.setpoint, ambient_T),
                    locked_out,
                    "lockout should shut compressor off"
                    )

        element = heat_source(min_T=10.0, max_T=40.0)
        self.assertFalse(element.is_locked_out(-10.0), "resistive element should never lock out")

    def test_add_heat_submerged(self):
        source = heat_source(input_power_W=1000.0)
        runtime = self.add_heat(source, 1.0)
        self.assertEqual(runtime, 1.0, "incorrect runtime")
        self.assertEqual(source.runtime_min(), 1.0, "incorrect runtime recorded")
        self.assertAlmostEqual(source.energy_input_kWh(), 1.0 / 60.0, msg="incorrect energy input")
        self.assertAlmostEqual(source.energy_output_kWh(), 1.0 / 60.0, msg="incorrect energy output")
        for i, temp in enumerate(self.tank.temps()):
            with self.subTest(node=i):
                self.assertAlmostEqual(
                    temp,
                    20.0 + 60.0 / (12 * self.node_heat_capacity),
                    msg="incorrect tank temperature"
                    )

    def test_add_heat_finishes_early(self):
        """ Heat the tank cannot absorb is reported as time not run """
        self.tank.reset_temps(49.9)
        source = heat_source(input_power_W=10000.0)
        runtime = self.add_heat(source, 60.0)
        energy_needed = 12 * self.node_heat_capacity * 0.1
        self.assertAlmostEqual(runtime, 60.0 * energy_needed / 36000.0, msg="incorrect runtime")
        self.assertAlmostEqual(
            source.energy_output_kWh(),
            energy_needed / 3600.0,
            msg="incorrect energy output"
            )
        for i, temp in enumerate(self.tank.temps()):
            with self.subTest(node=i):
                self.assertAlmostEqual(temp, 50.0, msg="tank not at setpoint")

    def test_add_heat_wrapped(self):
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.WRAPPED,
            input_power_W=1000.0,
            cop=3.0,
            )
        energy_before = self.tank.energy_content()
        runtime = self.add_heat(source, 1.0)
        self.assertAlmostEqual(runtime, 1.0, msg="incorrect runtime")
        self.assertAlmostEqual(
            self.tank.energy_content() - energy_before,
            180.0,
            msg="heat added to tank does not match capacity"
            )
        self.assertAlmostEqual(source.energy_input_kWh(), 1.0 / 60.0, msg="incorrect energy input")
        self.assertAlmostEqual(source.energy_output_kWh(), 3.0 / 60.0, msg="incorrect energy output")
        temps = self.tank.temps()
        for i in range(11):
            self.assertLessEqual(temps[i], temps[i + 1] + 1e-9, "temperature inversion")

    def test_add_heat_tank_at_setpoint(self):
        """ Heat source on a tank that cannot take heat does not run """
        self.tank.reset_temps(self.setpoint)
        for source_type, configuration in [
                (HeatSourceType.RESISTANCE, HeatSourceConfig.SUBMERGED),
                (HeatSourceType.COMPRESSOR, HeatSourceConfig.WRAPPED),
                ]:
            with self.subTest(configuration=configuration):
                source = heat_source(source_type=source_type, configuration=configuration, cop=3.0)
                energy_before = self.tank.energy_content()
                self.assertEqual(self.add_heat(source, 60.0), 0.0, "heat source ran with tank at setpoint")
                self.assertEqual(source.runtime_min(), 0.0, "runtime recorded with tank at setpoint")
                self.assertEqual(source.energy_input_kWh(), 0.0, "energy used with tank at setpoint")
                self.assertEqual(source.energy_output_kWh(), 0.0, "energy added with tank at setpoint")
                self.assertEqual(self.tank.energy_content(), energy_before, "tank heated above setpoint")

    def test_outputs_are_plain_floats(self):
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.WRAPPED,
            cop=3.0,
            )
        runtime = self.add_heat(source, 1.0)
        for description, value in [
                ('runtime', runtime),
                ('recorded runtime', source.runtime_min()),
                ('energy input', source.energy_input_kWh()),
                ('energy output', source.energy_output_kWh()),
                ]:
            with self.subTest(description):
                self.assertIs(type(value), float, "output should be a float")
        for i, temp in enumerate(self.tank.temps()):
            with self.subTest(node=i):
                self.assertIs(type(temp), float, "tank temperature should be a float")

    def test_add_heat_external_partial_node(self):
        self.tank.set_temps([20.0] * 6 + [50.0] * 6)
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.EXTERNAL,
            )
        energy_before = self.tank.energy_content()
        runtime = self.add_heat(source, 1.0)
        self.assertAlmostEqual(runtime, 1.0, msg="incorrect runtime")
        self.assertAlmostEqual(
            self.tank.energy_content() - energy_before,
            60.0,
            msg="heat added to tank does not match capacity"
            )
        self.assertAlmostEqual(self.tank.node_temp(11), 50.0, msg="top node not at setpoint")

    def test_add_heat_external_several_nodes(self):
        self.tank.set_temps([20.0] * 6 + [50.0] * 6)
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.EXTERNAL,
            )
        energy_before = self.tank.energy_content()
        runtime = self.add_heat(source, 10.0)
        self.assertAlmostEqual(runtime, 10.0, msg="incorrect runtime")
        self.assertAlmostEqual(
            self.tank.energy_content() - energy_before,
            600.0,
            msg="heat added to tank does not match capacity"
            )
        self.assertAlmostEqual(source.energy_input_kWh(), 10.0 / 60.0, msg="incorrect energy input")
        self.assertAlmostEqual(source.energy_output_kWh(), 10.0 / 60.0, msg="incorrect energy output")
        # Four whole nodes cycled through, then part of a fifth
        for i, temp in enumerate(self.tank.temps()[6:]):
            with self.subTest(node=i + 6):
                self.assertAlmostEqual(temp, 50.0, msg="top of tank not at setpoint")

    def test_add_heat_external_shuts_off(self):
        self.tank.set_temps([20.0] * 6 + [50.0] * 6)
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.EXTERNAL,
            shut_off_logic=[bottom_node_max_temp(15.0)],
            )
        runtime = self.add_heat(source, 10.0)
        self.assertAlmostEqual(
            runtime,
            10.0 * (30.0 * self.node_heat_capacity) / 600.0,
            msg="external heat source should stop after one node"
            )

    def test_add_heat_external_tank_at_setpoint(self):
        self.tank.reset_temps(50.0)
        source = heat_source(
            source_type=HeatSourceType.COMPRESSOR,
            configuration=HeatSourceConfig.EXTERNAL,
            )
        self.assertEqual(self.add_heat(source, 10.0), 0.0, "heat source ran with tank at setpoint")
        self.assertEqual(source.energy_input_kWh(), 0.0, "energy used with tank at setpoint")
        self.assertEqual(source.energy_output_kWh(), 0.0, "energy added with tank at setpoint")

    def test_check_inputs(self):
        self.assertListEqual(heat_source().check_inputs(1), [], "valid heat source reported errors")

        bad_condensity = HeatSource(
            'bad', HeatSourceType.RESISTANCE, HeatSourceConfig.SUBMERGED,
            condensity(0.5, 0.4), flat_curve(1000.0, 1.0), [],
            )
        self.assertEqual(len(bad_condensity.check_inputs(1)), 1, "condensity error not reported")

        self.assertEqual(len(heat_source(backup_idx=2).check_inputs(2)), 1, "index error not reported")
        self.assertEqual(len(heat_source(hysteresis=-1.0).check_inputs(1)), 1, "hysteresis error not reported")

    def test_invalid_strings(self):
        self.assertEqual(HeatSourceConfig.from_string('wrapped'), HeatSourceConfig.WRAPPED, "incorrect config")
        self.assertEqual(HeatSourceType.from_string('compressor'), HeatSourceType.COMPRESSOR, "incorrect type")
        with self.assertRaises(SystemExit):
            HeatSourceConfig.from_string('immersed')
        with self.assertRaises(SystemExit):
            HeatSourceType.from_string('boiler')

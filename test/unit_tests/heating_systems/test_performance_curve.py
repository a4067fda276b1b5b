#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module contains unit tests for the performance curve module
"""

# Standard library imports
import unittest

# Local imports
from hpwhsim.units import F_to_C
from hpwhsim.heating_systems.performance_curve import PerformanceCurve

class TestPerformanceCurve(unittest.TestCase):
    """ Unit tests for PerformanceCurve class """

    def setUp(self):
        # Deliberately out of order
        self.perf_map = [
            {'T_F': 70, 'input_power_coeffs': [2000.0, 0.0, 0.0], 'COP_coeffs': [4.0, 0.0, 0.0]},
            {'T_F': 50, 'input_power_coeffs': [1000.0, 0.0, 0.0], 'COP_coeffs': [2.0, 0.0, 0.0]},
            ]
        self.curve = PerformanceCurve(self.perf_map)

    def test_calibration_temps_sorted(self):
        self.assertListEqual(self.curve.calibration_temps_F(), [50, 70], "records not sorted")
        self.assertEqual(self.perf_map[0]['T_F'], 70, "input data was modified")

    def test_interpolation(self):
        """ Ambient temperatures between records interpolate linearly in deg F """
        for T_F, input_kW, cop in [(50, 1.0, 2.0), (60, 1.5, 3.0), (65, 1.75, 3.5), (70, 2.0, 4.0)]:
            with self.subTest(T_F=T_F):
                result = self.curve.performance(F_to_C(T_F), 50.0)
                self.assertAlmostEqual(result[0], input_kW, msg="incorrect input power")
                self.assertAlmostEqual(result[1], input_kW * cop, msg="incorrect capacity")
                self.assertAlmostEqual(result[2], cop, msg="incorrect CoP")

    def test_extrapolation(self):
        """ Ambient temperatures outside the records extrapolate from the end pair """
        input_kW, capacity_kW, cop = self.curve.performance(F_to_C(80), 50.0)
        self.assertAlmostEqual(input_kW, 2.5, msg="incorrect extrapolated input power")
        self.assertAlmostEqual(cop, 5.0, msg="incorrect extrapolated CoP")
        self.assertAlmostEqual(capacity_kW, 12.5, msg="incorrect extrapolated capacity")

        input_kW, _, cop = self.curve.performance(F_to_C(40), 50.0)
        self.assertAlmostEqual(input_kW, 0.5, msg="incorrect extrapolated input power")
        self.assertAlmostEqual(cop, 1.0, msg="incorrect extrapolated CoP")

    def test_condenser_temp_polynomial(self):
        """ Coefficients are constant term first, in condenser temperature in deg F """
        curve = PerformanceCurve([
            {'T_F': 50, 'input_power_coeffs': [100.0, 2.0, 0.01], 'COP_coeffs': [6.0, -0.02, 0.0]},
            ])
        input_kW, capacity_kW, cop = curve.performance(F_to_C(50), F_to_C(100))
        self.assertAlmostEqual(input_kW, (100.0 + 200.0 + 100.0) / 1000.0, msg="incorrect input power")
        self.assertAlmostEqual(cop, 4.0, msg="incorrect CoP")
        self.assertAlmostEqual(capacity_kW, 1.6, msg="incorrect capacity")

    def test_single_record(self):
        """ A single record is used whatever the ambient temperature """
        curve = PerformanceCurve([
            {'T_F': 67, 'input_power_coeffs': [4500.0, 0.0, 0.0], 'COP_coeffs': [1.0, 0.0, 0.0]},
            ])
        for ambient_T in [-20.0, 0.0, 19.4, 45.0]:
            with self.subTest(ambient_T=ambient_T):
                self.assertEqual(
                    curve.performance(ambient_T, 30.0),
                    (4.5, 4.5, 1.0),
                    "incorrect performance for single record"
                    )

    def test_invalid_maps(self):
        with self.assertRaises(SystemExit):
            PerformanceCurve([])
        with self.assertRaises(SystemExit):
            PerformanceCurve([
                {'T_F': 50, 'input_power_coeffs': [1.0], 'COP_coeffs': [1.0]},
                {'T_F': 50, 'input_power_coeffs': [2.0], 'COP_coeffs': [1.0]},
                ])

#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module contains unit tests for the heat distribution module
"""

# Standard library imports
import math
import unittest

# Third-party imports
import numpy as np

# Local imports
from hpwhsim.heating_systems.heat_distribution import condentropy, condenser_temp, \
    lowest_node, normalize, submerged_heat_dist, wrapped_heat_dist

def condensity(*weights):
    return list(weights) + [0.0] * (12 - len(weights))

class TestHeatDistribution(unittest.TestCase):

    def test_condentropy(self):
        self.assertEqual(condentropy(condensity(1.0)), 0.0, "incorrect condentropy for one zone")
        self.assertAlmostEqual(
            condentropy(condensity(0.5, 0.5)),
            math.log(2.0),
            msg="incorrect condentropy for two zones",
            )

    def test_lowest_node(self):
        self.assertEqual(lowest_node(condensity(1.0), 12), 0, "incorrect lowest node")
        self.assertEqual(lowest_node(condensity(0.0, 0.0, 1.0), 24), 4, "incorrect lowest node")
        self.assertEqual(lowest_node(condensity(0.0, 0.2, 0.8), 12), 1, "incorrect lowest node")

    def test_condenser_temp(self):
        temps = [10.0 * (i + 1) for i in range(12)]
        self.assertEqual(condenser_temp(condensity(1.0), temps), 10.0, "incorrect condenser temp")
        self.assertAlmostEqual(
            condenser_temp(condensity(0.5, 0.5), temps),
            15.0,
            msg="incorrect condenser temp",
            )
        # Two nodes per zone
        temps_24 = [float(i) for i in range(24)]
        self.assertAlmostEqual(
            condenser_temp(condensity(1.0), temps_24),
            0.5,
            msg="incorrect condenser temp for 24 nodes",
            )

    def test_normalize(self):
        dist = np.array([1.0, 3.0])
        normalize(dist)
        self.assertListEqual(list(dist), [0.25, 0.75], "incorrect normalisation")
        zeros = np.zeros(3)
        normalize(zeros)
        self.assertListEqual(list(zeros), [0.0, 0.0, 0.0], "zero distribution was changed")

    def test_submerged(self):
        dist = np.ones(24)
        submerged_heat_dist(dist, condensity(1.0), [20.0] * 24)
        self.assertListEqual(list(dist), [0.5, 0.5] + [0.0] * 22, "incorrect submerged distribution")

        dist = np.zeros(12)
        submerged_heat_dist(dist, condensity(0.0, 0.2, 0.8), [20.0] * 12)
        expected = [0.0, 0.2, 0.8] + [0.0] * 9
        for i in range(12):
            with self.subTest(i=i):
                self.assertAlmostEqual(dist[i], expected[i], msg="incorrect submerged distribution")

    def test_wrapped_uniform_tank(self):
        """ Every node from the lowest active node up gets an equal share in a uniform tank """
        dist = np.zeros(12)
        wrapped_heat_dist(dist, condensity(0.25, 0.25, 0.25, 0.25), [20.0] * 12, 50.0)
        for i in range(12):
            with self.subTest(i=i):
                self.assertAlmostEqual(dist[i], 1.0 / 12.0, msg="incorrect wrapped distribution")

    def test_wrapped_stratified_tank(self):
        temps = [20.0] * 6 + [50.0] * 6
        dist = np.zeros(12)
        wrapped_heat_dist(dist, condensity(0.0, 0.5, 0.5), temps, 50.0)
        self.assertEqual(dist[0], 0.0, "heat added below lowest active node")
        self.assertListEqual(list(dist[6:]), [0.0] * 6, "heat added to nodes at setpoint")
        self.assertAlmostEqual(dist.sum(), 1.0, msg="distribution does not sum to 1")

    def test_wrapped_tank_at_setpoint(self):
        dist = np.ones(12)
        wrapped_heat_dist(dist, condensity(1.0), [50.0] * 12, 50.0)
        self.assertListEqual(list(dist), [0.0] * 12, "heat distributed in a tank at setpoint")

    def test_buffer_size(self):
        with self.assertRaises(ValueError):
            submerged_heat_dist(np.zeros(11), condensity(1.0), [20.0] * 12)

#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides an object to represent the measured performance of a heat
source (input power and coefficient of performance) as a function of the
ambient temperature and the temperature of the water at the condenser.
"""

# Standard library imports
import sys
from copy import deepcopy

# Third-party imports
import scipy.interpolate
from numpy.polynomial.polynomial import polyval

# Local imports
import hpwhsim.units as units


class PerformanceCurve:
    """ An object to represent calibrated performance data for a heat source.

    Each calibration record is taken at a fixed ambient temperature and gives
    input power and CoP as polynomials in the condenser water temperature.
    Performance at other ambient temperatures is found by linear
    interpolation between the records either side of it, or extrapolation
    from the outermost pair of records.
    """

    def __init__(self, perf_map):
        """ Construct a PerformanceCurve object

        Arguments:
        perf_map -- list of dictionaries of calibration data, each with the following elements:
                        - T_F -- ambient temperature of the record, in deg F
                        - input_power_coeffs -- polynomial coefficients (constant
                          term first) giving input power in W as a function of
                          condenser temperature in deg F
                        - COP_coeffs -- polynomial coefficients (constant term
                          first) giving CoP as a function of condenser
                          temperature in deg F
        """
        if len(perf_map) < 1:
            sys.exit('No calibration data provided for heat source performance')

        # Work on a deep copy in case the original is used to init other objects
        self.__perf_map = sorted(deepcopy(perf_map), key=lambda record: record['T_F'])

        for a, b in zip(self.__perf_map[:-1], self.__perf_map[1:]):
            if a['T_F'] == b['T_F']:
                sys.exit('Duplicate calibration temperature in performance data: ' + str(a['T_F']))

        self.__temps_F = [record['T_F'] for record in self.__perf_map]

    def calibration_temps_F(self):
        """ Return the sorted ambient temperatures of the calibration records, in deg F """
        return list(self.__temps_F)

    def __at_condenser_temp(self, condenser_T_F):
        """ Evaluate each record's polynomials at the given condenser temperature """
        input_power_W = [polyval(condenser_T_F, r['input_power_coeffs']) for r in self.__perf_map]
        cop = [polyval(condenser_T_F, r['COP_coeffs']) for r in self.__perf_map]
        return input_power_W, cop

    def performance(self, external_T_C, condenser_T_C):
        """ Return input power (kW), heating capacity (kW) and CoP

        Arguments:
        external_T_C  -- temperature of the air (or other source) around the heat source, in deg C
        condenser_T_C -- temperature of the water the heat source is heating, in deg C
        """
        # The curve fits are all in Fahrenheit
        condenser_T_F = units.C_to_F(condenser_T_C)
        external_T_F = units.C_to_F(external_T_C)

        input_power_W, cop_list = self.__at_condenser_temp(condenser_T_F)

        if len(self.__perf_map) == 1:
            # If there is only one record, use that regardless of ambient temp
            input_power = input_power_W[0]
            cop = cop_list[0]
        else:
            interp_input = scipy.interpolate.interp1d(
                self.__temps_F,
                input_power_W,
                fill_value='extrapolate',
                )
            interp_cop = scipy.interpolate.interp1d(
                self.__temps_F,
                cop_list,
                fill_value='extrapolate',
                )
            input_power = float(interp_input(external_T_F))
            cop = float(interp_cop(external_T_F))

        input_kW = float(input_power) / units.W_per_kW
        cop = float(cop)
        return input_kW, cop * input_kW, cop

#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module contains common unit conversions for use by other modules.
"""

# Standard library imports
from enum import Enum, auto

kJ_per_kWh = 3600.0
BTU_per_kWh = 3412.14
kJ_per_BTU = 1.055
L_per_gal = 3.78541
W_per_kW = 1000
minutes_per_hour = 60
seconds_per_hour = 3600


class Units(Enum):
    C = auto()
    F = auto()
    KWH = auto()
    BTU = auto()
    KJ = auto()
    GAL = auto()
    L = auto()
    KJ_PER_HR_C = auto()
    BTU_PER_HR_F = auto()


def C_to_F(temp_C):
    return temp_C * 1.8 + 32.0

def F_to_C(temp_F):
    return (temp_F - 32.0) / 1.8

def dF_to_dC(delta_F):
    """ Convert a temperature difference (not a temperature) from F to C """
    return delta_F / 1.8

def dC_to_dF(delta_C):
    return delta_C * 1.8

def kWh_to_BTU(energy_kWh):
    return energy_kWh * BTU_per_kWh

def BTU_to_kWh(energy_BTU):
    return energy_BTU / BTU_per_kWh

def kWh_to_kJ(energy_kWh):
    return energy_kWh * kJ_per_kWh

def kJ_to_kWh(energy_kJ):
    return energy_kJ / kJ_per_kWh

def BTU_to_kJ(energy_BTU):
    return energy_BTU * kJ_per_BTU

def gal_to_L(volume_gal):
    return volume_gal * L_per_gal

def L_to_gal(volume_L):
    return volume_L / L_per_gal

def UAf_to_UAc(UA_BTUperhrF):
    """ Convert a UA value in BTU/hr.F to kJ/hr.C """
    return UA_BTUperhrF * 1.8 * kJ_per_BTU

def UAc_to_UAf(UA_kJperhrC):
    """ Convert a UA value in kJ/hr.C to BTU/hr.F """
    return UA_kJperhrC / (1.8 * kJ_per_BTU)

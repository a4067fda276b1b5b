#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module contains the physical properties of the materials stored in tanks.
"""

# Local imports
import hpwhsim.units as units


class MaterialProperties:
    """ An object to store material properties """

    def __init__(self, density, specific_heat_capacity):
        """ Construct a MaterialProperties object

        Arguments:
        density                -- density of the material, in kg/litre
        specific_heat_capacity -- specific heat capacity of the material, in kJ/kg.K
        """
        self.__density = density
        self.__specific_heat_capacity = specific_heat_capacity

    def density(self):
        """ Return volumetric density, in kg/litre """
        return self.__density

    def specific_heat_capacity(self):
        """ Return specific heat capacity, in kJ/kg.K """
        return self.__specific_heat_capacity

    def specific_heat_capacity_kWh(self):
        """ Return specific heat capacity, in kWh/kg.K """
        return self.__specific_heat_capacity / units.kJ_per_kWh

    def volumetric_heat_capacity(self):
        """ Return volumetric heat capacity, in kJ/litre.K """
        return self.__density * self.__specific_heat_capacity


WATER = MaterialProperties(0.995, 4.181)

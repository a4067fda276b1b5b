#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides an object to model a single heat source in a water
heater (a resistive element or a heat pump compressor), including the logic
that turns it on and off and the way it adds heat to the tank.
"""

# Standard library imports
import sys
from enum import Enum, auto

# Local imports
import hpwhsim.units as units
from hpwhsim.heating_systems.heat_distribution import \
    CONDENSITY_SIZE, condenser_temp, submerged_heat_dist, wrapped_heat_dist


class HeatSourceConfig(Enum):
    SUBMERGED = auto()
    WRAPPED = auto()
    EXTERNAL = auto()

    @classmethod
    def from_string(cls, strval):
        if strval == 'submerged':
            return cls.SUBMERGED
        elif strval == 'wrapped':
            return cls.WRAPPED
        elif strval == 'external':
            return cls.EXTERNAL
        else:
            sys.exit('HeatSourceConfig (' + str(strval) + ') not valid.')


class HeatSourceType(Enum):
    RESISTANCE = auto()
    COMPRESSOR = auto()
    EXTRA = auto()

    @classmethod
    def from_string(cls, strval):
        if strval == 'resistance':
            return cls.RESISTANCE
        elif strval == 'compressor':
            return cls.COMPRESSOR
        elif strval == 'extra':
            return cls.EXTRA
        else:
            sys.exit('HeatSourceType (' + str(strval) + ') not valid.')


class HeatSource:
    """ An object to represent a heat source in a water heater

    Relationships with other heat sources (backup, companion and followed-by)
    are held as indices into the owning water heater's list of heat sources.
    """

    def __init__(
            self,
            name,
            source_type,
            configuration,
            condensity,
            perf_curve,
            turn_on_logic,
            shut_off_logic=(),
            is_vip=False,
            hysteresis=0.0,
            min_T=-273.15,
            max_T=100.0,
            depresses_temperature=False,
            backup_idx=None,
            companion_idx=None,
            followed_by_idx=None,
            ):
        """ Construct a HeatSource object

        Arguments:
        name            -- name of the heat source, used in diagnostics
        source_type     -- HeatSourceType object
        configuration   -- HeatSourceConfig object
        condensity      -- list of CONDENSITY_SIZE weights giving where heat enters the tank
        perf_curve      -- reference to PerformanceCurve object
        turn_on_logic   -- list of HeatingLogic objects, any of which turns the source on
        shut_off_logic  -- list of HeatingLogic objects, any of which shuts the source off
        is_vip          -- True if this source pre-empts all others when it wants to heat
        hysteresis      -- temperature margin, in deg C
        min_T           -- lowest ambient temperature a compressor will run at, in deg C
        max_T           -- highest ambient temperature a compressor will run at, in deg C
        depresses_temperature -- True if running this source cools the air around the tank
        backup_idx      -- index of the heat source to use if this one shuts off
        companion_idx   -- index of the heat source that runs alongside this one
        followed_by_idx -- index of the heat source to run if this one finishes early
        """
        self.__name = name
        self.__type = source_type
        self.__configuration = configuration
        self.__condensity = [float(c) for c in condensity]
        self.__perf_curve = perf_curve
        self.__turn_on_logic = list(turn_on_logic)
        self.__shut_off_logic = list(shut_off_logic)
        self.__is_vip = is_vip
        self.__hysteresis = hysteresis
        self.__min_T = min_T
        self.__max_T = max_T
        self.__depresses_temperature = depresses_temperature
        self.__backup_idx = backup_idx
        self.__companion_idx = companion_idx
        self.__followed_by_idx = followed_by_idx

        self.__is_on = False
        self.reset_outputs()

    def name(self):
        return self.__name

    def source_type(self):
        return self.__type

    def configuration(self):
        return self.__configuration

    def condensity(self):
        return list(self.__condensity)

    def perf_curve(self):
        return self.__perf_curve

    def turn_on_logic(self):
        return list(self.__turn_on_logic)

    def shut_off_logic(self):
        return list(self.__shut_off_logic)

    def is_vip(self):
        return self.__is_vip

    def hysteresis(self):
        return self.__hysteresis

    def min_T(self):
        return self.__min_T

    def max_T(self):
        return self.__max_T

    def depresses_temperature(self):
        return self.__depresses_temperature

    def backup_idx(self):
        return self.__backup_idx

    def companion_idx(self):
        return self.__companion_idx

    def followed_by_idx(self):
        return self.__followed_by_idx

    def is_engaged(self):
        return self.__is_on

    def engage(self):
        self.__is_on = True

    def disengage(self):
        self.__is_on = False

    def runtime_min(self):
        return self.__runtime_min

    def energy_input_kWh(self):
        return self.__energy_input_kWh

    def energy_output_kWh(self):
        return self.__energy_output_kWh

    def reset_outputs(self):
        self.__runtime_min = 0.0
        self.__energy_input_kWh = 0.0
        self.__energy_output_kWh = 0.0

    def is_locked_out(self, ambient_T):
        """ Return True if the ambient temperature is outside a compressor's operating range

        A compressor that is not already running needs the temperature to be
        at least the hysteresis margin inside the range before it will start.
        """
        if self.__type != HeatSourceType.COMPRESSOR:
            return False
        margin = 0.0 if self.__is_on else self.__hysteresis
        return ambient_T < self.__min_T + margin or ambient_T > self.__max_T - margin

    def shuts_off(self, tank, setpoint, ambient_T):
        """ Return True if any shut-off condition holds

        Arguments:
        tank      -- reference to StorageTank object
        setpoint  -- tank setpoint, in deg C
        ambient_T -- temperature of the air around the heat source, in deg C
        """
        if self.is_locked_out(ambient_T):
            return True
        return any(
            logic.is_satisfied(tank, setpoint, ambient_T)
            for logic in self.__shut_off_logic
            )

    def should_heat(self, tank, setpoint, ambient_T):
        """ Return True if any turn-on condition holds and the source would not shut straight off """
        wants_to_heat = any(
            logic.is_satisfied(tank, setpoint, ambient_T)
            for logic in self.__turn_on_logic
            )
        return wants_to_heat and not self.shuts_off(tank, setpoint, ambient_T)

    def condenser_temp(self, tank):
        """ Return the temperature of the water at the heat exchanger, in deg C """
        return condenser_temp(self.__condensity, tank.temps())

    def add_heat(self, tank, setpoint, ambient_T, minutes, heat_distribution):
        """ Run the heat source for up to the given time and record its outputs

        Returns the time the heat source ran for, in minutes.

        Arguments:
        tank              -- reference to StorageTank object
        setpoint          -- tank setpoint, in deg C
        ambient_T         -- temperature of the air around the heat source, in deg C
        minutes           -- time available for heating, in minutes
        heat_distribution -- numpy array with one element per tank node, used
                             as scratch space for the heat distribution
        """
        self.reset_outputs()

        if self.__configuration == HeatSourceConfig.EXTERNAL:
            runtime, input_kW, capacity_kW = self.__add_heat_external(tank, setpoint, ambient_T, minutes)
        else:
            runtime, input_kW, capacity_kW = self.__add_heat_internal(
                tank, setpoint, ambient_T, minutes, heat_distribution,
                )

        self.__runtime_min = float(runtime)
        self.__energy_input_kWh = float(input_kW) * self.__runtime_min / units.minutes_per_hour
        self.__energy_output_kWh = float(capacity_kW) * self.__runtime_min / units.minutes_per_hour
        return self.__runtime_min

    def __add_heat_internal(self, tank, setpoint, ambient_T, minutes, heat_distribution):
        """ Add heat for a submerged or wrapped heat source

        Each node with a share of the heat distribution acts as a separate
        heating element. Nodes are worked through from the top down, with any
        heat a node cannot absorb carried down to the next one.
        """
        temps = tank.temps()
        if self.__configuration == HeatSourceConfig.WRAPPED:
            wrapped_heat_dist(heat_distribution, self.__condensity, temps, setpoint)
        else:
            submerged_heat_dist(heat_distribution, self.__condensity, temps)

        input_kW, capacity_kW, _ = self.__perf_curve.performance(
            ambient_T,
            condenser_temp(self.__condensity, temps),
            )

        # kW * seconds = kJ
        capacity_kJ = capacity_kW * minutes * units.seconds_per_hour / units.minutes_per_hour
        # Nowhere in the tank can take heat, e.g. a wrapped condenser on a tank at setpoint
        if capacity_kJ <= 0.0 or heat_distribution.sum() <= 0.0:
            return 0.0, input_kW, capacity_kW

        leftover_kJ = 0.0
        for node in range(tank.num_nodes() - 1, -1, -1):
            node_cap_kJ = capacity_kJ * float(heat_distribution[node])
            if node_cap_kJ != 0.0:
                leftover_kJ = tank.add_heat_above_node(node_cap_kJ + leftover_kJ, node, setpoint)

        # Heat that could not be absorbed anywhere is time not run
        runtime = (1.0 - leftover_kJ / capacity_kJ) * minutes
        return runtime, input_kW, capacity_kW

    def __add_heat_external(self, tank, setpoint, ambient_T, minutes):
        """ Add heat for a heat source that heats water pumped through it

        Water is taken from the bottom of the tank, heated to setpoint and
        returned to the top, one node (or part of a node) at a time, until the
        time runs out or a shut-off condition is reached. Returns runtime and
        time-weighted average input power and capacity.
        """
        time_remaining = minutes
        input_weighted = 0.0
        capacity_weighted = 0.0

        while True:
            node_heat_kJ = tank.node_heat_to_setpoint(0, setpoint)
            if node_heat_kJ <= 0.0:
                # Bottom of the tank is already at setpoint
                break

            input_kW, capacity_kW, _ = self.__perf_curve.performance(ambient_T, tank.node_temp(0))
            capacity_kJ = capacity_kW * time_remaining * units.seconds_per_hour / units.minutes_per_hour
            if capacity_kJ <= 0.0:
                break

            node_frac = capacity_kJ / node_heat_kJ
            if node_frac > 1.0:
                node_frac = 1.0
                time_used = (node_heat_kJ / capacity_kJ) * time_remaining
            else:
                time_used = time_remaining
            time_remaining -= time_used

            tank.shift_in_heated_water(node_frac, setpoint)

            input_weighted += input_kW * time_used
            capacity_weighted += capacity_kW * time_used

            if time_remaining <= 0.0 or self.shuts_off(tank, setpoint, ambient_T):
                break

        runtime = minutes - time_remaining
        if runtime <= 0.0:
            return 0.0, 0.0, 0.0
        return runtime, input_weighted / runtime, capacity_weighted / runtime

    def check_inputs(self, num_sources):
        """ Return a list of problems with the configuration of this heat source """
        errors = []
        if len(self.__condensity) != CONDENSITY_SIZE:
            errors.append(self.__name + ': condensity must have ' + str(CONDENSITY_SIZE) + ' elements')
        elif abs(sum(self.__condensity) - 1.0) > 1e-6:
            errors.append(self.__name + ': condensity must sum to 1')
        if any(c < 0.0 for c in self.__condensity):
            errors.append(self.__name + ': condensity must not be negative')
        if self.__hysteresis < 0.0:
            errors.append(self.__name + ': hysteresis must not be negative')
        if self.__min_T > self.__max_T:
            errors.append(self.__name + ': minimum operating temperature is above maximum')
        for label, idx in (
                ('backup', self.__backup_idx),
                ('companion', self.__companion_idx),
                ('followed-by', self.__followed_by_idx),
                ):
            if idx is not None and not 0 <= idx < num_sources:
                errors.append(self.__name + ': ' + label + ' heat source index out of range')
        return errors

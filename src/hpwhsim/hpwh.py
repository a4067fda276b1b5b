#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides the top-level object for simulating a storage water
heater (resistance, heat pump or hybrid) one timestep at a time.
"""

# Standard library imports
import sys
import logging
from enum import Enum, IntEnum, auto

# Third-party imports
import numpy as np

# Local imports
import hpwhsim.units as units
from hpwhsim.units import Units
from hpwhsim import presets
from hpwhsim.controls.heating_logic import logic_from_dict
from hpwhsim.heating_systems.heat_distribution import CONDENSITY_SIZE
from hpwhsim.heating_systems.heat_source import HeatSource, HeatSourceConfig, HeatSourceType
from hpwhsim.heating_systems.performance_curve import PerformanceCurve
from hpwhsim.heating_systems.storage_tank import StorageTank

HPWH_ABORT = -274000

# Temperature depression: total drop in local air temperature while a
# compressor runs, and the fraction of the gap remaining after each step
TEMP_DEPRESSION_dC = 4.5
TEMP_DEPRESSION_DECAY = 0.9289

# Minimum lower element power for the energy factor to UA regression
RES_TANK_MIN_POWER_W = 550.0


class DRMode(Enum):
    BLOCK = auto()
    ALLOW = auto()
    ENGAGE = auto()

    @classmethod
    def from_string(cls, strval):
        if strval == 'block':
            return cls.BLOCK
        elif strval == 'allow':
            return cls.ALLOW
        elif strval == 'engage':
            return cls.ENGAGE
        else:
            sys.exit('DRMode (' + str(strval) + ') not valid.')


class Verbosity(IntEnum):
    SILENT = 0
    RELUCTANT = 1
    BASIC = 2
    TYPICAL = 3
    EMETIC = 4


_LOG_LEVELS = {
    Verbosity.RELUCTANT: logging.ERROR,
    Verbosity.BASIC: logging.WARNING,
    Verbosity.TYPICAL: logging.INFO,
    Verbosity.EMETIC: logging.DEBUG,
    }


class HeatPumpWaterHeater:
    """ An object to represent a water heater: a stratified tank and its heat sources

    The heater must be initialised with one of the init_* methods before it
    can be run. Failed initialisation marks the simulation as failed, after
    which stepping returns HPWH_ABORT without changing any state.
    """

    def __init__(self, verbosity=Verbosity.RELUCTANT, logger=None):
        """ Construct a HeatPumpWaterHeater object

        Arguments:
        verbosity -- Verbosity object setting how much is reported
        logger    -- logging.Logger that all messages are sent to

        Other (self.__) variables:
        tank               -- StorageTank object
        heat_sources       -- list of HeatSource objects, in priority order
        heat_distribution  -- numpy array used by heat sources to spread heat over the tank
        location_temp      -- tracked air temperature around the heater when
                              temperature depression is modelled, in deg C
        """
        self.__verbosity = verbosity
        self.__logger = logger if logger is not None else logging.getLogger(__name__)

        self.__sim_has_failed = True
        self.__model_name = None
        self.__tank = None
        self.__heat_sources = []
        self.__heat_distribution = None
        self.__setpoint = None
        self.__setpoint_fixed = False
        self.__do_temp_depression = False
        self.__location_temp = None
        self.__reset_outputs()

    def __msg(self, verbosity, message):
        if verbosity != Verbosity.SILENT and self.__verbosity >= verbosity:
            self.__logger.log(_LOG_LEVELS[verbosity], message)

    def __reset_outputs(self):
        self.__outlet_temp = 0.0
        self.__energy_removed_from_env_kWh = 0.0
        self.__standby_losses_kWh = 0.0
        self.__batch_totals = None

    def __abort(self, message):
        self.__msg(Verbosity.RELUCTANT, message)
        return HPWH_ABORT

    # Initialisation

    def init_presets(self, name):
        """ Initialise as one of the named preset models """
        builder = presets.PRESETS.get(name)
        if builder is None:
            self.__sim_has_failed = True
            return self.__abort('Preset model (' + str(name) + ') not recognised')
        return self.init_from_dict(builder(), model_name=name)

    def init_res_tank(
            self,
            volume=units.gal_to_L(47.5),
            energy_factor=0.95,
            upper_power_W=4500.0,
            lower_power_W=4500.0,
            ):
        """ Initialise as an electric resistance tank described by its energy factor

        Arguments:
        volume        -- tank volume, in litres
        energy_factor -- rated energy factor of the tank
        upper_power_W -- power of the upper element, in W
        lower_power_W -- power of the lower element, in W
        """
        self.__sim_has_failed = True
        # A low power element gives a zero or negative denominator in the UA regression
        if lower_power_W < RES_TANK_MIN_POWER_W:
            return self.__abort('Resistance tank wattage below '
                                + str(RES_TANK_MIN_POWER_W) + ' W, cannot calculate UA')
        if energy_factor <= 0.0:
            return self.__abort('Energy factor must be greater than zero')
        if volume <= 0.0:
            return self.__abort('Tank volume must be greater than zero')

        UA = presets.res_tank_UA(energy_factor, lower_power_W)
        if UA < 0.0:
            if UA < -0.1:
                self.__msg(Verbosity.RELUCTANT, 'Computed tank UA is less than 0, and is reset to 0')
            UA = 0.0

        return self.init_from_dict(
            presets.res_tank_dict(volume, UA, upper_power_W, lower_power_W),
            model_name='customResTank',
            )

    def init_generic(self, volume, energy_factor, res_use):
        """ Initialise as a generic integrated heat pump water heater

        Arguments:
        volume        -- tank volume, in litres
        energy_factor -- uniform energy factor, used to scale compressor performance
        res_use       -- how far the top third of the tank falls below setpoint
                         before the upper element comes on, in deg C
        """
        self.__sim_has_failed = True
        if volume <= 0.0:
            return self.__abort('Tank volume must be greater than zero')
        return self.init_from_dict(
            presets.generic_hpwh_dict(volume, energy_factor, res_use),
            model_name='genericHPWH',
            )

    def init_from_dict(self, hpwh_dict, model_name='custom'):
        """ Initialise from a dictionary of input data

        Arguments:
        hpwh_dict  -- dictionary with the following elements:
                          - num_nodes -- number of tank nodes (a multiple of 12)
                          - volume -- tank volume, in litres
                          - UA -- tank heat loss coefficient, in kJ/hr.K
                          - setpoint -- in deg C
                          - setpoint_fixed (optional) -- True if setpoint cannot be changed
                          - mixes_on_draw (optional)
                          - do_temp_depression (optional)
                          - heat_sources -- list of heat source dictionaries, in priority order
        model_name -- name reported by get_model_name
        """
        self.__sim_has_failed = True

        heat_sources_data = hpwh_dict.get('heat_sources', [])
        if len(heat_sources_data) == 0:
            return self.__abort('Water heater must have at least one heat source')
        for i, data in enumerate(heat_sources_data):
            if len(data.get('perf_map', [])) == 0:
                return self.__abort('Heat source ' + str(i) + ' has no performance data')

        def dict_to_heat_source(idx, data):
            """ Parse dictionary of heat source data and return HeatSource object """
            heat_source = HeatSource(
                data.get('name', 'heat source ' + str(idx)),
                HeatSourceType.from_string(data['type']),
                HeatSourceConfig.from_string(data['configuration']),
                data['condensity'],
                PerformanceCurve(data['perf_map']),
                [logic_from_dict(logic) for logic in data.get('turn_on_logic', [])],
                [logic_from_dict(logic) for logic in data.get('shut_off_logic', [])],
                is_vip=data.get('is_vip', False),
                hysteresis=data.get('hysteresis', 0.0),
                min_T=data.get('min_T', -273.15),
                max_T=data.get('max_T', 100.0),
                depresses_temperature=data.get('depresses_temperature', False),
                backup_idx=data.get('backup'),
                companion_idx=data.get('companion'),
                followed_by_idx=data.get('followed_by'),
                )
            if data.get('is_on', False):
                heat_source.engage()
            return heat_source

        self.__setpoint = hpwh_dict['setpoint']
        self.__setpoint_fixed = hpwh_dict.get('setpoint_fixed', False)
        self.__do_temp_depression = hpwh_dict.get('do_temp_depression', False)
        self.__location_temp = None
        self.__tank = StorageTank(
            hpwh_dict['num_nodes'],
            hpwh_dict['volume'],
            hpwh_dict['UA'],
            self.__setpoint,
            mixes_on_draw=hpwh_dict.get('mixes_on_draw', False),
            )
        self.__heat_sources = [
            dict_to_heat_source(i, data) for i, data in enumerate(heat_sources_data)
            ]
        self.__heat_distribution = np.zeros(self.__tank.num_nodes())
        self.__model_name = model_name
        self.__reset_outputs()

        if self.check_inputs() == HPWH_ABORT:
            return HPWH_ABORT

        self.__msg(Verbosity.TYPICAL, 'Initialised model ' + model_name + ' with '
                   + str(len(self.__heat_sources)) + ' heat sources')
        for i, heat_source in enumerate(self.__heat_sources):
            self.__msg(Verbosity.EMETIC, 'heat source ' + str(i) + ': ' + heat_source.name())

        self.__sim_has_failed = False
        return 0

    def check_inputs(self):
        """ Check the configuration is physically and logically consistent

        Logs every problem found and returns HPWH_ABORT if there were any,
        otherwise 0.
        """
        errors = []
        if len(self.__heat_sources) == 0:
            errors.append('Water heater must have at least one heat source')

        if self.__tank is None:
            errors.append('Water heater has no tank')
        else:
            num_nodes = self.__tank.num_nodes()
            if num_nodes <= 0 or num_nodes % CONDENSITY_SIZE != 0:
                errors.append('Number of nodes must be a positive multiple of ' + str(CONDENSITY_SIZE))
            if self.__tank.volume() <= 0.0:
                errors.append('Tank volume must be greater than zero')
            if self.__tank.UA() < 0.0:
                errors.append('Tank UA must not be negative')

        if self.__setpoint is not None and self.__setpoint >= 100.0:
            errors.append('Setpoint must be below boiling')

        for heat_source in self.__heat_sources:
            errors += heat_source.check_inputs(len(self.__heat_sources))

        for error in errors:
            self.__msg(Verbosity.RELUCTANT, error)
        if len(errors) > 0:
            self.__sim_has_failed = True
            return HPWH_ABORT
        return 0

    # Simulation

    def run_one_step(
            self,
            inlet_T,
            draw_volume,
            tank_ambient_T,
            heat_source_ambient_T,
            dr_mode,
            minutes,
            ):
        """ Simulate one timestep

        Returns 0 on success, HPWH_ABORT if the simulation has failed.

        Arguments:
        inlet_T               -- temperature of the water replacing any draw, in deg C
        draw_volume           -- volume of hot water drawn, in litres
        tank_ambient_T        -- temperature of the air around the tank, in deg C
        heat_source_ambient_T -- temperature of the air at the heat sources, in deg C
        dr_mode               -- DRMode object
        minutes               -- length of the timestep, in minutes
        """
        if self.__sim_has_failed:
            return self.__abort('Simulation has failed, cannot run step')

        self.__reset_outputs()
        for heat_source in self.__heat_sources:
            heat_source.reset_outputs()

        # Depressed location temperature replaces both ambient temperatures
        temperature_goal = tank_ambient_T
        if self.__do_temp_depression:
            if self.__location_temp is None:
                self.__location_temp = tank_ambient_T
            tank_ambient_T = self.__location_temp
            heat_source_ambient_T = self.__location_temp

        self.__outlet_temp = self.__tank.draw(draw_volume, inlet_T)
        self.__standby_losses_kWh = self.__tank.standby_losses(tank_ambient_T, minutes)

        self.__choose_heat_sources(heat_source_ambient_T)
        self.__apply_dr_mode(dr_mode, heat_source_ambient_T)
        self.__add_heat(heat_source_ambient_T, minutes)

        if self.__do_temp_depression:
            compressor_ran = any(
                heat_source.is_engaged() and heat_source.depresses_temperature()
                for heat_source in self.__heat_sources
                )
            if compressor_ran:
                temperature_goal -= TEMP_DEPRESSION_dC
            self.__location_temp -= (self.__location_temp - temperature_goal) \
                                  * (1.0 - TEMP_DEPRESSION_DECAY)

        self.__energy_removed_from_env_kWh = sum(
            heat_source.energy_output_kWh() - heat_source.energy_input_kWh()
            for heat_source in self.__heat_sources
            )
        return 0

    def run_n_steps(
            self,
            inlet_T,
            draw_volume,
            tank_ambient_T,
            heat_source_ambient_T,
            dr_mode,
            minutes,
            ):
        """ Simulate a sequence of timesteps of equal length

        Each of the first five arguments is a list with one value per
        timestep (see run_one_step). Afterwards the output getters report
        totals over all the steps, with outlet temperature averaged by
        volume drawn.
        """
        num_steps = len(inlet_T)
        if any(len(seq) != num_steps for seq in (draw_volume, tank_ambient_T, heat_source_ambient_T, dr_mode)):
            return self.__abort('Input sequences for multiple steps must all be the same length')
        if self.__sim_has_failed:
            return self.__abort('Simulation has failed, cannot run steps')

        num_sources = len(self.__heat_sources)
        energy_removed_sum = 0.0
        standby_losses_sum = 0.0
        outlet_temp_sum = 0.0
        total_draw = 0.0
        runtime_sums = [0.0] * num_sources
        energy_input_sums = [0.0] * num_sources
        energy_output_sums = [0.0] * num_sources

        for t_idx in range(num_steps):
            result = self.run_one_step(
                inlet_T[t_idx],
                draw_volume[t_idx],
                tank_ambient_T[t_idx],
                heat_source_ambient_T[t_idx],
                dr_mode[t_idx],
                minutes,
                )
            if result == HPWH_ABORT:
                return HPWH_ABORT

            energy_removed_sum += self.__energy_removed_from_env_kWh
            standby_losses_sum += self.__standby_losses_kWh
            outlet_temp_sum += self.__outlet_temp * draw_volume[t_idx]
            total_draw += draw_volume[t_idx]
            for i, heat_source in enumerate(self.__heat_sources):
                runtime_sums[i] += heat_source.runtime_min()
                energy_input_sums[i] += heat_source.energy_input_kWh()
                energy_output_sums[i] += heat_source.energy_output_kWh()

        self.__energy_removed_from_env_kWh = energy_removed_sum
        self.__standby_losses_kWh = standby_losses_sum
        self.__outlet_temp = outlet_temp_sum / total_draw if total_draw > 0.0 else 0.0
        self.__batch_totals = (runtime_sums, energy_input_sums, energy_output_sums)
        return 0

    def __is_heating(self):
        return any(heat_source.is_engaged() for heat_source in self.__heat_sources)

    def __turn_all_off(self):
        for heat_source in self.__heat_sources:
            heat_source.disengage()

    def __engage(self, idx, ambient_T):
        """ Engage a heat source, and its companion if the companion can run """
        heat_source = self.__heat_sources[idx]
        heat_source.engage()
        self.__msg(Verbosity.EMETIC, 'Engaging ' + heat_source.name())

        companion_idx = heat_source.companion_idx()
        if companion_idx is not None:
            companion = self.__heat_sources[companion_idx]
            if not companion.is_engaged() \
            and not companion.shuts_off(self.__tank, self.__setpoint, ambient_T):
                self.__engage(companion_idx, ambient_T)

    def __choose_heat_sources(self, ambient_T):
        """ Decide which heat sources are on for this step, in priority order """
        tank = self.__tank
        setpoint = self.__setpoint
        for i, heat_source in enumerate(self.__heat_sources):
            if heat_source.is_vip() and heat_source.should_heat(tank, setpoint, ambient_T):
                # VIP pre-empts everything else
                self.__turn_all_off()
                self.__engage(i, ambient_T)
                break
            elif not self.__is_heating():
                if heat_source.should_heat(tank, setpoint, ambient_T):
                    self.__engage(i, ambient_T)
            elif heat_source.is_engaged() and heat_source.shuts_off(tank, setpoint, ambient_T):
                heat_source.disengage()
                self.__msg(Verbosity.EMETIC, 'Shutting off ' + heat_source.name())
                backup_idx = heat_source.backup_idx()
                if backup_idx is not None \
                and not self.__heat_sources[backup_idx].shuts_off(tank, setpoint, ambient_T):
                    self.__engage(backup_idx, ambient_T)

    def __apply_dr_mode(self, dr_mode, ambient_T):
        if dr_mode == DRMode.BLOCK:
            self.__turn_all_off()
        elif dr_mode == DRMode.ALLOW:
            pass
        elif dr_mode == DRMode.ENGAGE:
            if not self.__is_heating():
                self.__engage(0, ambient_T)
        else:
            sys.exit('DRMode (' + str(dr_mode) + ') not valid.')

    def __add_heat(self, ambient_T, minutes):
        """ Run engaged heat sources in order, sharing out the time in the step

        A heat source that finishes early hands the rest of the step on to
        the heat source it is followed by.
        """
        minutes_to_run = minutes
        for heat_source in self.__heat_sources:
            if not heat_source.is_engaged():
                continue
            runtime = heat_source.add_heat(
                self.__tank,
                self.__setpoint,
                ambient_T,
                minutes_to_run,
                self.__heat_distribution,
                )
            if runtime < minutes_to_run:
                minutes_to_run -= runtime
                heat_source.disengage()
                followed_by_idx = heat_source.followed_by_idx()
                if followed_by_idx is not None \
                and not self.__heat_sources[followed_by_idx].shuts_off(
                        self.__tank, self.__setpoint, ambient_T):
                    self.__engage(followed_by_idx, ambient_T)

    # Queries and settings

    def __temp_in_units(self, temp_C, unit):
        if unit == Units.C:
            return temp_C
        elif unit == Units.F:
            return units.C_to_F(temp_C)
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for a temperature')

    def __energy_in_units(self, energy_kWh, unit):
        if unit == Units.KWH:
            return energy_kWh
        elif unit == Units.BTU:
            return units.kWh_to_BTU(energy_kWh)
        elif unit == Units.KJ:
            return units.kWh_to_kJ(energy_kWh)
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for an energy')

    def __valid_source_idx(self, n):
        if 0 <= n < len(self.__heat_sources):
            return True
        self.__msg(Verbosity.RELUCTANT, 'Heat source index (' + str(n) + ') out of range')
        return False

    def has_sim_failed(self):
        return self.__sim_has_failed

    def get_model_name(self):
        return self.__model_name

    def get_num_nodes(self):
        return self.__tank.num_nodes()

    def get_num_heat_sources(self):
        return len(self.__heat_sources)

    def get_tank_temps(self):
        """ Return node temperatures, bottom to top, in deg C """
        return self.__tank.temps()

    def set_tank_temps(self, temps):
        self.__tank.set_temps(temps)

    def get_tank_node_temp(self, node, unit=Units.C):
        if not 0 <= node < self.__tank.num_nodes():
            return self.__abort('Tank node index (' + str(node) + ') out of range')
        return self.__temp_in_units(self.__tank.node_temp(node), unit)

    def get_nth_sim_tcouple(self, n, unit=Units.C):
        """ Return the reading of simulated thermocouple n (1 = bottom, 6 = top) """
        if not 1 <= n <= 6:
            return self.__abort('Simulated thermocouple (' + str(n) + ') out of range')
        return self.__temp_in_units(self.__tank.sim_tcouple(n), unit)

    def get_outlet_temp(self, unit=Units.C):
        return self.__temp_in_units(self.__outlet_temp, unit)

    def get_energy_removed_from_environment(self, unit=Units.KWH):
        return self.__energy_in_units(self.__energy_removed_from_env_kWh, unit)

    def get_standby_losses(self, unit=Units.KWH):
        return self.__energy_in_units(self.__standby_losses_kWh, unit)

    def get_nth_heat_source_energy_input(self, n, unit=Units.KWH):
        if not self.__valid_source_idx(n):
            return HPWH_ABORT
        if self.__batch_totals is not None:
            return self.__energy_in_units(self.__batch_totals[1][n], unit)
        return self.__energy_in_units(self.__heat_sources[n].energy_input_kWh(), unit)

    def get_nth_heat_source_energy_output(self, n, unit=Units.KWH):
        if not self.__valid_source_idx(n):
            return HPWH_ABORT
        if self.__batch_totals is not None:
            return self.__energy_in_units(self.__batch_totals[2][n], unit)
        return self.__energy_in_units(self.__heat_sources[n].energy_output_kWh(), unit)

    def get_nth_heat_source_runtime(self, n):
        """ Return time heat source n ran for, in minutes """
        if not self.__valid_source_idx(n):
            return HPWH_ABORT
        if self.__batch_totals is not None:
            return self.__batch_totals[0][n]
        return self.__heat_sources[n].runtime_min()

    def is_nth_heat_source_running(self, n):
        if not self.__valid_source_idx(n):
            return HPWH_ABORT
        return self.__heat_sources[n].is_engaged()

    def get_nth_heat_source_type(self, n):
        if not self.__valid_source_idx(n):
            return HPWH_ABORT
        return self.__heat_sources[n].source_type()

    def get_location_temp(self):
        """ Return tracked air temperature around the heater, in deg C (None until first step) """
        return self.__location_temp

    def is_setpoint_fixed(self):
        return self.__setpoint_fixed

    def set_setpoint(self, setpoint, unit=Units.C):
        if self.__setpoint_fixed:
            return self.__abort('Setpoint of model ' + str(self.__model_name) + ' cannot be changed')
        if unit == Units.C:
            self.__setpoint = setpoint
        elif unit == Units.F:
            self.__setpoint = units.F_to_C(setpoint)
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for setpoint')
        return 0

    def get_setpoint(self, unit=Units.C):
        return self.__temp_in_units(self.__setpoint, unit)

    def reset_tank_to_setpoint(self):
        self.__tank.reset_temps(self.__setpoint)
        return 0

    def set_tank_size(self, volume, unit=Units.L):
        if unit == Units.L:
            volume_L = volume
        elif unit == Units.GAL:
            volume_L = units.gal_to_L(volume)
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for tank size')
        if volume_L <= 0.0:
            return self.__abort('Tank volume must be greater than zero')
        self.__tank.set_volume(volume_L)
        return 0

    def get_tank_size(self, unit=Units.L):
        if unit == Units.L:
            return self.__tank.volume()
        elif unit == Units.GAL:
            return units.L_to_gal(self.__tank.volume())
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for tank size')

    def set_do_temp_depression(self, do_temp_depression):
        self.__do_temp_depression = do_temp_depression
        return 0

    def set_UA(self, UA, unit=Units.KJ_PER_HR_C):
        if unit == Units.KJ_PER_HR_C:
            UA_kJperhrC = UA
        elif unit == Units.BTU_PER_HR_F:
            UA_kJperhrC = units.UAf_to_UAc(UA)
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for UA')
        if UA_kJperhrC < 0.0:
            return self.__abort('Tank UA must not be negative')
        self.__tank.set_UA(UA_kJperhrC)
        return 0

    def get_UA(self, unit=Units.KJ_PER_HR_C):
        if unit == Units.KJ_PER_HR_C:
            return self.__tank.UA()
        elif unit == Units.BTU_PER_HR_F:
            return units.UAc_to_UAf(self.__tank.UA())
        else:
            return self.__abort('Unit (' + str(unit) + ') not valid for UA')

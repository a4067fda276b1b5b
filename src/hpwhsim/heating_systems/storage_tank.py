#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides an object to model a stratified hot water storage tank.
The tank is modelled as a stack of equal-volume nodes, from the bottom of the
tank (node 0) to the top (node num_nodes - 1).
"""

# Local imports
from hpwhsim.material_properties import WATER
from hpwhsim.heating_systems.heat_distribution import CONDENSITY_SIZE
import hpwhsim.units as units


class StorageTank:
    """ An object to represent the water in a hot water storage tank

    Models hot water being drawn off the top of the tank and replaced by cold
    water at the bottom, standby losses through the tank wall, and heat being
    added to the water by heat sources. Assumes the water is stratified by
    temperature.
    """

    # Number of simulated thermocouples spaced evenly up the tank
    __NUM_SIM_TCOUPLES = 6

    def __init__(self, num_nodes, volume, UA, temp_initial, mixes_on_draw=False, contents=WATER):
        """ Construct a StorageTank object

        Arguments:
        num_nodes     -- number of nodes the tank is modelled with
        volume        -- total volume of the tank, in litres
        UA            -- heat loss coefficient of the tank wall, in kJ/hr.K
        temp_initial  -- initial temperature of every node, in deg C
        mixes_on_draw -- whether a draw mixes the water in the bottom third of the tank
        contents      -- reference to MaterialProperties object
        """
        self.__num_nodes = num_nodes
        self.__volume = volume
        self.__UA = UA
        self.__mixes_on_draw = mixes_on_draw
        self.__contents = contents
        self.__temp_n = [temp_initial] * num_nodes

    def num_nodes(self):
        return self.__num_nodes

    def volume(self):
        """ Return total volume of the tank, in litres """
        return self.__volume

    def set_volume(self, volume):
        self.__volume = volume

    def volume_per_node(self):
        return self.__volume / self.__num_nodes

    def UA(self):
        """ Return heat loss coefficient, in kJ/hr.K """
        return self.__UA

    def set_UA(self, UA):
        self.__UA = UA

    def mixes_on_draw(self):
        return self.__mixes_on_draw

    def set_mixes_on_draw(self, mixes_on_draw):
        self.__mixes_on_draw = mixes_on_draw

    def temps(self):
        """ Return a copy of the node temperatures, bottom to top, in deg C """
        return list(self.__temp_n)

    def set_temps(self, temps):
        if len(temps) != self.__num_nodes:
            raise ValueError('Expected ' + str(self.__num_nodes) + ' node temperatures')
        self.__temp_n = [float(t) for t in temps]

    def reset_temps(self, temp):
        """ Set every node to the same temperature """
        self.__temp_n = [temp] * self.__num_nodes

    def node_temp(self, node):
        return self.__temp_n[node]

    def __node_heat_capacity(self):
        """ Heat needed to raise one node by 1 degree, in kJ/K """
        return self.volume_per_node() * self.__contents.volumetric_heat_capacity()

    def __avg(self, first, last):
        """ Mean temperature of nodes first to last - 1 """
        return sum(self.__temp_n[first:last]) / (last - first)

    def average_temp(self):
        return self.__avg(0, self.__num_nodes)

    def top_third_avg(self):
        return self.__avg(2 * (self.__num_nodes // 3), self.__num_nodes)

    def bottom_third_avg(self):
        return self.__avg(0, self.__num_nodes // 3)

    def bottom_twelfth_avg(self):
        return self.__avg(0, self.__num_nodes // 12)

    def sim_tcouple(self, n):
        """ Return the reading of simulated thermocouple n (1 = bottom, 6 = top) """
        per_tcouple = self.__num_nodes // self.__NUM_SIM_TCOUPLES
        return self.__avg((n - 1) * per_tcouple, n * per_tcouple)

    def logical_node_avg(self, logical_node):
        """ Return the mean temperature of a logical node

        Logical nodes 1 to CONDENSITY_SIZE are the condensity zones of the
        tank, from the bottom up. Logical node 0 is the bottom node of the tank
        and logical node CONDENSITY_SIZE + 1 is the top node.
        """
        if logical_node == 0:
            return self.__temp_n[0]
        if logical_node == CONDENSITY_SIZE + 1:
            return self.__temp_n[-1]
        per_zone = self.__num_nodes // CONDENSITY_SIZE
        return self.__avg((logical_node - 1) * per_zone, logical_node * per_zone)

    def weighted_avg(self, node_weights):
        """ Return the weighted mean temperature of a list of (logical_node, weight) pairs """
        total_weight = sum(weight for _, weight in node_weights)
        return sum(
            self.logical_node_avg(logical_node) * weight
            for logical_node, weight in node_weights
            ) \
            / total_weight

    def draw(self, volume_drawn, temp_inlet):
        """ Draw hot water off the top of the tank, replacing it with inlet water

        Returns the volume-weighted temperature of the water drawn off, in deg C,
        or 0.0 if no water was drawn.

        Arguments:
        volume_drawn -- volume of water drawn off, in litres
        temp_inlet   -- temperature of the water entering the bottom of the tank, in deg C
        """
        if volume_drawn <= 0.0:
            return 0.0

        n = self.__num_nodes

        if volume_drawn > self.__volume:
            # Whole tank is flushed through, and anything beyond that comes
            # straight through at inlet temperature
            temp_outlet = ( self.average_temp() * self.__volume \
                          + temp_inlet * (volume_drawn - self.__volume) \
                          ) \
                          / volume_drawn
            self.__temp_n = [temp_inlet] * n
        else:
            draw_fraction = volume_drawn / self.volume_per_node()
            whole_nodes = int(draw_fraction)
            draw_fraction -= whole_nodes
            # Can only happen through rounding when the whole tank is drawn
            if whole_nodes >= n:
                whole_nodes, draw_fraction = n, 0.0

            temp_outlet_sum = 0.0

            if whole_nodes > 0:
                # Whole nodes leave the top of the tank at their current temperature
                temp_outlet_sum += sum(self.__temp_n[n - whole_nodes:])
                self.__temp_n = [temp_inlet] * whole_nodes + self.__temp_n[:n - whole_nodes]

            if draw_fraction > 0.0:
                temp_outlet_sum += draw_fraction * self.__temp_n[n - 1]
                # IMPORTANT to iterate from the top down so each node mixes
                # with the unmodified node below it
                for i in range(n - 1, 0, -1):
                    self.__temp_n[i] = self.__temp_n[i] * (1.0 - draw_fraction) \
                                     + self.__temp_n[i - 1] * draw_fraction
                self.__temp_n[0] = self.__temp_n[0] * (1.0 - draw_fraction) \
                                 + temp_inlet * draw_fraction

            temp_outlet = temp_outlet_sum / (whole_nodes + draw_fraction)

        if self.__mixes_on_draw:
            self.mix_on_draw()

        return temp_outlet

    def mix_on_draw(self):
        """ Mix the bottom third of the tank, as caused by inlet water turbulence

        Each node moves a third of the way towards the average temperature of
        the bottom third.
        """
        mixed_below_node = self.__num_nodes // 3
        temp_avg = self.__avg(0, mixed_below_node)
        for i in range(mixed_below_node):
            self.__temp_n[i] += (temp_avg - self.__temp_n[i]) / 3.0

    def standby_losses(self, temp_amb, minutes):
        """ Apply heat loss through the tank wall and return it, in kWh

        The loss is calculated from the average temperature of the tank and
        removed evenly from every node.

        Arguments:
        temp_amb -- temperature of the air around the tank, in deg C
        minutes  -- length of the timestep, in minutes
        """
        losses_kJ = self.__UA * (self.average_temp() - temp_amb) \
                  * (minutes / units.minutes_per_hour)

        loss_per_node = (losses_kJ / self.__num_nodes) / self.__node_heat_capacity()
        self.__temp_n = [temp - loss_per_node for temp in self.__temp_n]

        return units.kJ_to_kWh(losses_kJ)

    def add_heat_above_node(self, energy_kJ, node, setpoint):
        """ Add heat to the tank from node upwards and return any energy left over, in kJ

        Heat raises the block of equal-temperature nodes starting at node up
        to the temperature of the next node above, merges that node into the
        block and carries on. A colder node above is first raised to the
        block temperature. Once the block reaches the top of the tank its
        target is the setpoint. If there is not enough energy to reach the
        target, the energy is spread evenly across the block.

        Arguments:
        energy_kJ -- heat available, in kJ
        node      -- lowest node to heat
        setpoint  -- temperature the top of the tank is heated to, in deg C
        """
        n = self.__num_nodes
        node_heat_capacity = self.__node_heat_capacity()

        # Find the top of the block of nodes at the same temperature as node
        top_of_block = node
        while top_of_block < n - 1 \
          and self.__temp_n[top_of_block] == self.__temp_n[top_of_block + 1]:
            top_of_block += 1

        while energy_kJ > 0 and top_of_block < n:
            if top_of_block == n - 1:
                temp_target = setpoint
            else:
                temp_target = self.__temp_n[top_of_block + 1]

            temp_block = self.__temp_n[top_of_block]
            delta_T = temp_target - temp_block
            if delta_T <= 0:
                if top_of_block == n - 1:
                    # Top of the tank is already at or above setpoint
                    break
                # Next node up is no warmer: bring it up to the block
                # temperature and take it into the block
                above = top_of_block + 1
                energy_needed = node_heat_capacity * (temp_block - self.__temp_n[above])
                if energy_needed > energy_kJ:
                    self.__temp_n[above] += energy_kJ / node_heat_capacity
                    energy_kJ = 0.0
                else:
                    self.__temp_n[above] = temp_block
                    energy_kJ -= energy_needed
                    top_of_block = above
                continue

            nodes_in_block = top_of_block + 1 - node
            energy_needed = node_heat_capacity * nodes_in_block * delta_T

            if energy_needed > energy_kJ:
                # Not enough to reach the target: spread what there is
                temp_rise = energy_kJ / node_heat_capacity / nodes_in_block
                for j in range(node, top_of_block + 1):
                    self.__temp_n[j] += temp_rise
                energy_kJ = 0.0
            else:
                for j in range(node, top_of_block + 1):
                    self.__temp_n[j] = temp_target
                top_of_block += 1
                energy_kJ -= energy_needed

        return energy_kJ

    def node_heat_to_setpoint(self, node, setpoint):
        """ Heat needed to bring one node up to setpoint, in kJ """
        return self.__node_heat_capacity() * (setpoint - self.__temp_n[node])

    def shift_in_heated_water(self, node_frac, setpoint):
        """ Cycle water through an external heat source

        node_frac of a node is drawn from the bottom of the tank and returned
        to the top at setpoint, so every node moves down by node_frac.
        """
        n = self.__num_nodes
        for i in range(n - 1):
            self.__temp_n[i] = self.__temp_n[i] * (1.0 - node_frac) \
                             + self.__temp_n[i + 1] * node_frac
        self.__temp_n[n - 1] = self.__temp_n[n - 1] * (1.0 - node_frac) + setpoint * node_frac

    def energy_content(self, temp_ref=0.0):
        """ Return heat stored in the tank relative to temp_ref, in kJ """
        return self.__node_heat_capacity() * sum(temp - temp_ref for temp in self.__temp_n)

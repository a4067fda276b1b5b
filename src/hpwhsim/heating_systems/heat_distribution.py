#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides functions to work out how the heat delivered by a heat
source is spread over the nodes of a stratified tank.

The position of a heat source is described by its condensity: a list of
CONDENSITY_SIZE weights, one per equal-height zone of the tank from the bottom
up, summing to 1. Each zone covers num_nodes / CONDENSITY_SIZE tank nodes.
"""

# Standard library imports
import math

# Third-party imports
import numpy as np

CONDENSITY_SIZE = 12

# Mapping from condentropy to shrinkage for wrapped condensers
SHRINKAGE_ALPHA = 1.0
SHRINKAGE_BETA = 2.0
# Logistic offset, in deg C (5 deg F)
LOGISTIC_OFFSET = 5.0 / 1.8


def nodes_per_zone(num_nodes):
    return num_nodes // CONDENSITY_SIZE

def lowest_node(condensity, num_nodes):
    """ Return the index of the lowest tank node with non-zero condensity """
    per_zone = nodes_per_zone(num_nodes)
    for i in range(num_nodes):
        if condensity[i // per_zone] > 0:
            return i
    return 0

def condentropy(condensity):
    """ Return the Shannon entropy of the (non-zero) condensity weights """
    return -sum(c * math.log(c) for c in condensity if c > 0)

def shrinkage(condensity):
    return SHRINKAGE_ALPHA + SHRINKAGE_BETA * condentropy(condensity)

def expit(x, offset):
    """ Logistic function, falling from 1 to 0 around x = offset """
    return 1.0 / (1.0 + np.exp(x - offset))

def condenser_temp(condensity, tank_temps):
    """ Return the temperature seen by the condenser, in deg C

    This is the condensity-weighted average of the node temperatures.
    """
    num_nodes = len(tank_temps)
    per_zone = nodes_per_zone(num_nodes)
    condenser_T_C = 0.0
    for i, temp in enumerate(tank_temps):
        weight = condensity[i // per_zone]
        if weight != 0:
            # Weights always sum to 1 so there is no need to divide out
            condenser_T_C += (weight / per_zone) * temp
    return condenser_T_C

def normalize(distribution):
    """ Scale distribution in place so that it sums to 1 (left alone if it sums to 0) """
    total = distribution.sum()
    if total > 0:
        distribution /= total
    return distribution

def submerged_heat_dist(heat_distribution, condensity, tank_temps):
    """ Fill heat_distribution for a heat source immersed in the tank

    Each node at or above the lowest active node gets the condensity of the
    zone it sits in.

    Arguments:
    heat_distribution -- numpy array with one element per tank node, owned by
                         the caller and overwritten by this function
    condensity        -- list of CONDENSITY_SIZE condensity weights
    tank_temps        -- list of node temperatures, bottom to top, in deg C
    """
    num_nodes = _check_buffer(heat_distribution, tank_temps)
    heat_distribution.fill(0.0)
    lowest = lowest_node(condensity, num_nodes)

    zone_idx = np.arange(num_nodes) // nodes_per_zone(num_nodes)
    heat_distribution[lowest:] = np.asarray(condensity, dtype=float)[zone_idx[lowest:]]
    return normalize(heat_distribution)

def wrapped_heat_dist(heat_distribution, condensity, tank_temps, setpoint_C):
    """ Fill heat_distribution for a condenser wrapped around the outside of the tank

    Heat is spread upwards from the lowest active node by a logistic
    function whose width grows with the condentropy, and weighted by how far
    each node is below setpoint.

    Arguments:
    heat_distribution -- numpy array with one element per tank node, owned by
                         the caller and overwritten by this function
    condensity        -- list of CONDENSITY_SIZE condensity weights
    tank_temps        -- list of node temperatures, bottom to top, in deg C
    setpoint_C        -- tank setpoint, in deg C
    """
    num_nodes = _check_buffer(heat_distribution, tank_temps)
    heat_distribution.fill(0.0)
    lowest = lowest_node(condensity, num_nodes)

    active = np.asarray(tank_temps[lowest:], dtype=float)
    headroom = np.maximum(setpoint_C - active, 0.0)
    heat_distribution[lowest:] \
        = expit((active - active[0]) / shrinkage(condensity), LOGISTIC_OFFSET) * headroom
    return normalize(heat_distribution)

def _check_buffer(heat_distribution, tank_temps):
    if len(heat_distribution) != len(tank_temps):
        raise ValueError('Heat distribution buffer does not match the number of tank nodes')
    return len(tank_temps)

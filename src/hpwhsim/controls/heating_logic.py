#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides objects to model the control logic that decides when a
heat source in a water heater turns on and when it shuts off.

Tank-based logic measures a weighted average over "logical nodes" of the
tank: logical node 0 is the bottom node, logical nodes 1 to 12 are the
twelve equal-height zones from the bottom up, and logical node 13 is the top
node.
"""

# Standard library imports
import sys
from enum import Enum, auto

# Local imports
from hpwhsim.heating_systems.heat_distribution import CONDENSITY_SIZE

BOTTOM_NODE = 0
TOP_NODE = CONDENSITY_SIZE + 1

BOTTOM_THIRD_NODES = ((1, 1.0), (2, 1.0), (3, 1.0), (4, 1.0))
TOP_THIRD_NODES = ((9, 1.0), (10, 1.0), (11, 1.0), (12, 1.0))


class Compare(Enum):
    LESS_THAN = auto()
    GREATER_THAN = auto()

    @classmethod
    def from_string(cls, strval):
        if strval == 'lessThan':
            return cls.LESS_THAN
        elif strval == 'greaterThan':
            return cls.GREATER_THAN
        else:
            sys.exit('Compare (' + str(strval) + ') not valid.')

    def __call__(self, a, b):
        if self is Compare.LESS_THAN:
            return a < b
        return a > b


class LogicKind(Enum):
    TOP_THIRD = auto()
    BOTTOM_THIRD = auto()
    STANDBY = auto()
    TOP_THIRD_ABSOLUTE = auto()
    LARGE_DRAW = auto()
    BOTTOM_NODE_MAX_TEMP = auto()
    BOTTOM_TWELFTH_MAX_TEMP = auto()
    LOW_T = auto()
    LOW_T_REHEAT = auto()
    NODE_WEIGHTED = auto()

    @classmethod
    def from_string(cls, strval):
        if strval == 'topThird':
            return cls.TOP_THIRD
        elif strval == 'bottomThird':
            return cls.BOTTOM_THIRD
        elif strval == 'standby':
            return cls.STANDBY
        elif strval == 'topThirdAbsolute':
            return cls.TOP_THIRD_ABSOLUTE
        elif strval == 'largeDraw':
            return cls.LARGE_DRAW
        elif strval == 'bottomNodeMaxTemp':
            return cls.BOTTOM_NODE_MAX_TEMP
        elif strval == 'bottomTwelfthMaxTemp':
            return cls.BOTTOM_TWELFTH_MAX_TEMP
        elif strval == 'lowT':
            return cls.LOW_T
        elif strval == 'lowTreheat':
            return cls.LOW_T_REHEAT
        elif strval == 'nodeWeighted':
            return cls.NODE_WEIGHTED
        else:
            sys.exit('LogicKind (' + str(strval) + ') not valid.')

    def measures_ambient(self):
        return self in (LogicKind.LOW_T, LogicKind.LOW_T_REHEAT)


# Node weights, whether decision point is absolute, and comparison for each kind
_LOGIC_DEFAULTS = {
    LogicKind.TOP_THIRD: (TOP_THIRD_NODES, False, Compare.LESS_THAN),
    LogicKind.BOTTOM_THIRD: (BOTTOM_THIRD_NODES, False, Compare.LESS_THAN),
    LogicKind.STANDBY: (((TOP_NODE, 1.0),), False, Compare.LESS_THAN),
    LogicKind.TOP_THIRD_ABSOLUTE: (TOP_THIRD_NODES, True, Compare.LESS_THAN),
    LogicKind.LARGE_DRAW: (BOTTOM_THIRD_NODES, True, Compare.LESS_THAN),
    LogicKind.BOTTOM_NODE_MAX_TEMP: (((BOTTOM_NODE, 1.0),), True, Compare.GREATER_THAN),
    LogicKind.BOTTOM_TWELFTH_MAX_TEMP: (((1, 1.0),), True, Compare.GREATER_THAN),
    LogicKind.LOW_T: ((), True, Compare.LESS_THAN),
    LogicKind.LOW_T_REHEAT: ((), True, Compare.GREATER_THAN),
    }


class HeatingLogic:
    """ An object to represent a single turn-on or shut-off condition """

    def __init__(self, kind, decision_point, node_weights=None, is_absolute=None, compare=None):
        """ Construct a HeatingLogic object

        Arguments:
        kind           -- LogicKind of this condition
        decision_point -- temperature the measurement is compared with, in deg C.
                          For relative logic this is a difference below setpoint.
        node_weights   -- list of (logical_node, weight) pairs to average over.
                          Only needed for NODE_WEIGHTED logic, or to override the
                          defaults of other kinds.
        is_absolute    -- True if decision_point is an absolute temperature,
                          False if it is relative to the setpoint
        compare        -- Compare object giving the direction of the comparison
        """
        if kind == LogicKind.NODE_WEIGHTED:
            if not node_weights or is_absolute is None or compare is None:
                sys.exit('Node-weighted heating logic needs node weights, '
                         'absoluteness and comparison direction')
            default_nodes, default_absolute, default_compare = node_weights, is_absolute, compare
        else:
            default_nodes, default_absolute, default_compare = _LOGIC_DEFAULTS[kind]

        self.__kind = kind
        self.__decision_point = decision_point
        self.__node_weights = tuple(
            (int(node), float(weight))
            for node, weight in (node_weights if node_weights is not None else default_nodes)
            )
        self.__is_absolute = default_absolute if is_absolute is None else is_absolute
        self.__compare = default_compare if compare is None else compare

        for node, _ in self.__node_weights:
            if not BOTTOM_NODE <= node <= TOP_NODE:
                sys.exit('Logical node (' + str(node) + ') not valid.')

    def kind(self):
        return self.__kind

    def decision_point(self):
        return self.__decision_point

    def node_weights(self):
        return self.__node_weights

    def is_absolute(self):
        return self.__is_absolute

    def compare(self):
        return self.__compare

    def threshold(self, setpoint):
        """ Return the temperature the measurement is compared with, in deg C """
        if self.__is_absolute:
            return self.__decision_point
        return setpoint - self.__decision_point

    def measure(self, tank, ambient_T):
        """ Return the temperature this logic looks at, in deg C """
        if self.__kind.measures_ambient():
            return ambient_T
        return tank.weighted_avg(self.__node_weights)

    def is_satisfied(self, tank, setpoint, ambient_T):
        """ Return True if the condition holds for the current tank state

        Arguments:
        tank      -- reference to StorageTank object
        setpoint  -- tank setpoint, in deg C
        ambient_T -- temperature of the air around the heat source, in deg C
        """
        return self.__compare(self.measure(tank, ambient_T), self.threshold(setpoint))

    def __repr__(self):
        return 'HeatingLogic(' + self.__kind.name + ', ' + str(self.__decision_point) + ')'


def top_third(decision_point):
    """ Turn on when the top third of the tank is more than decision_point below setpoint """
    return HeatingLogic(LogicKind.TOP_THIRD, decision_point)

def bottom_third(decision_point):
    return HeatingLogic(LogicKind.BOTTOM_THIRD, decision_point)

def standby(decision_point):
    """ Turn on when the top node has cooled decision_point below setpoint """
    return HeatingLogic(LogicKind.STANDBY, decision_point)

def top_third_absolute(decision_point):
    return HeatingLogic(LogicKind.TOP_THIRD_ABSOLUTE, decision_point)

def large_draw(decision_point):
    """ Shut off when the bottom third of the tank falls below decision_point """
    return HeatingLogic(LogicKind.LARGE_DRAW, decision_point)

def bottom_node_max_temp(decision_point):
    return HeatingLogic(LogicKind.BOTTOM_NODE_MAX_TEMP, decision_point)

def bottom_twelfth_max_temp(decision_point):
    return HeatingLogic(LogicKind.BOTTOM_TWELFTH_MAX_TEMP, decision_point)

def low_T(decision_point):
    """ Shut off when the heat source ambient temperature is below decision_point """
    return HeatingLogic(LogicKind.LOW_T, decision_point)

def low_T_reheat(decision_point):
    """ Shut off when the heat source ambient temperature is above decision_point """
    return HeatingLogic(LogicKind.LOW_T_REHEAT, decision_point)

def node_weighted(node_weights, decision_point, is_absolute, compare):
    return HeatingLogic(
        LogicKind.NODE_WEIGHTED,
        decision_point,
        node_weights=node_weights,
        is_absolute=is_absolute,
        compare=compare,
        )

def logic_from_dict(logic_dict):
    """ Build a HeatingLogic object from input data

    Arguments:
    logic_dict -- dictionary with the following elements:
                      - kind -- selector string, e.g. 'bottomThird'
                      - decision_point -- in deg C (or difference in deg C)
                      - node_weights (optional) -- list of [logical_node, weight]
                      - absolute (optional) -- bool
                      - compare (optional) -- 'lessThan' or 'greaterThan'
    """
    kind = LogicKind.from_string(logic_dict['kind'])
    compare = logic_dict.get('compare')
    return HeatingLogic(
        kind,
        logic_dict['decision_point'],
        node_weights=logic_dict.get('node_weights'),
        is_absolute=logic_dict.get('absolute'),
        compare=Compare.from_string(compare) if compare is not None else None,
        )

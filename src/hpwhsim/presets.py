#!/usr/bin/env python3

""" TODO Copyright & licensing notices

This module provides input data for named water heater models, in the
dictionary format accepted by HeatPumpWaterHeater.init_from_dict.

Heat sources are listed in priority order. Relationships between heat
sources (backup, companion, followed_by) are indices into that list.
"""

# Local imports
from hpwhsim.units import F_to_C, dF_to_dC, gal_to_L, L_to_gal, UAf_to_UAc
from hpwhsim.heating_systems.heat_distribution import CONDENSITY_SIZE


def _logic(kind, decision_point, **kwargs):
    logic = {'kind': kind, 'decision_point': decision_point}
    logic.update(kwargs)
    return logic

def _condensity(*weights):
    """ Pad a list of leading condensity weights out to the full size """
    return list(weights) + [0.0] * (CONDENSITY_SIZE - len(weights))

def _perf_record(T_F, input_power_coeffs, COP_coeffs):
    return {
        'T_F': T_F,
        'input_power_coeffs': list(input_power_coeffs),
        'COP_coeffs': list(COP_coeffs),
        }

def _resistive_element(name, node, power_W, turn_on_logic, shut_off_logic=(), **kwargs):
    """ Return data for a resistive element immersed at the given condensity node """
    condensity = [0.0] * CONDENSITY_SIZE
    condensity[node] = 1.0
    element = {
        'name': name,
        'type': 'resistance',
        'configuration': 'submerged',
        'condensity': condensity,
        # Constant input power and a CoP of 1, whatever the temperatures
        'perf_map': [
            _perf_record(50, (power_W, 0.0, 0.0), (1.0, 0.0, 0.0)),
            _perf_record(67, (power_W, 0.0, 0.0), (1.0, 0.0, 0.0)),
            ],
        'turn_on_logic': list(turn_on_logic),
        'shut_off_logic': list(shut_off_logic),
        }
    element.update(kwargs)
    return element

def _compressor(name, configuration, condensity, perf_map, turn_on_logic, shut_off_logic=(), **kwargs):
    compressor = {
        'name': name,
        'type': 'compressor',
        'configuration': configuration,
        'condensity': condensity,
        'perf_map': perf_map,
        'turn_on_logic': list(turn_on_logic),
        'shut_off_logic': list(shut_off_logic),
        'depresses_temperature': True,
        }
    compressor.update(kwargs)
    return compressor

def _tank(num_nodes, volume, UA, setpoint, mixes_on_draw, heat_sources, **kwargs):
    tank = {
        'num_nodes': num_nodes,
        'volume': volume,
        'UA': UA,
        'setpoint': setpoint,
        'mixes_on_draw': mixes_on_draw,
        'heat_sources': heat_sources,
        }
    tank.update(kwargs)
    return tank


# Resistance tanks

def res_tank_UA(energy_factor, lower_power_W):
    """ Back-calculate tank UA, in kJ/hr.K, from the energy factor regression

    The result can be negative for efficient tanks; the caller decides what
    to do about that.
    """
    recovery_efficiency = 0.98
    numerator = (1.0 / energy_factor) - (1.0 / recovery_efficiency)
    temp = 1.0 / (recovery_efficiency * lower_power_W * 3.41443)
    denominator = 67.5 * ((24.0 / 41094.0) - temp)
    return UAf_to_UAc(numerator / denominator)

def res_tank_dict(volume, UA, upper_power_W, lower_power_W):
    """ Return data for a standard two-element resistance tank """
    return _tank(12, volume, UA, F_to_C(127.0), True, [
        _resistive_element(
            'top element', 8, upper_power_W,
            [_logic('topThird', dF_to_dC(20))],
            is_vip=True,
            followed_by=1,
            ),
        _resistive_element(
            'bottom element', 0, lower_power_W,
            [_logic('bottomThird', dF_to_dC(40)), _logic('standby', dF_to_dC(10))],
            ),
        ])

def restank_no_UA():
    return res_tank_dict(gal_to_L(50), 0.0, 4500.0, 4500.0)

def _restank_test(setpoint, volume, UA):
    return _tank(12, volume, UA, setpoint, False, [
        _resistive_element(
            'top element', 9, 4500.0,
            [_logic('topThird', 20.0)],
            is_vip=True,
            followed_by=1,
            ),
        _resistive_element(
            'bottom element', 0, 4500.0,
            [_logic('bottomThird', 20.0), _logic('standby', 15.0)],
            ),
        ])

def restank_huge_UA():
    return _restank_test(50.0, 120.0, 500.0)

def restank_realistic():
    return _restank_test(F_to_C(127.0), gal_to_L(50), 10.0)


# Heat pumps

GE_TIER_1_PERF_MAP = [
    _perf_record(47, (290.0, 1.59, 0.00107), (4.49, -0.0187, -0.0000133)),
    _perf_record(67, (375.0, 1.21, 0.00216), (5.60, -0.0252, 0.00000254)),
    ]

def basic_integrated():
    return _tank(12, 120.0, 10.0, 50.0, False, [
        _resistive_element(
            'top element', 9, 4500.0,
            [_logic('topThird', 20.0)],
            is_vip=True,
            followed_by=1,
            ),
        _compressor(
            'compressor', 'wrapped',
            [1.0 / 6.0] * 6 + [0.0] * 6,
            GE_TIER_1_PERF_MAP,
            [_logic('bottomThird', 20.0), _logic('standby', 15.0)],
            min_T=0.0,
            max_T=F_to_C(120.0),
            hysteresis=dF_to_dC(4),
            backup=2,
            followed_by=2,
            ),
        _resistive_element(
            'bottom element', 0, 4500.0,
            [_logic('bottomThird', 20.0), _logic('standby', 15.0)],
            hysteresis=dF_to_dC(4),
            backup=1,
            ),
        ])

def external_test():
    return _tank(96, 120.0, 0.0, 50.0, False, [
        _compressor(
            'compressor', 'external',
            _condensity(1.0),
            GE_TIER_1_PERF_MAP,
            [_logic('bottomThird', 20.0), _logic('standby', 15.0)],
            [_logic('bottomNodeMaxTemp', 20.0)],
            max_T=F_to_C(120.0),
            depresses_temperature=False,
            ),
        ])

def _integrated_three_source(
        volume,
        UA,
        compressor_perf_map,
        top_power_W,
        bottom_power_W,
        compressor_turn_on,
        top_turn_on,
        bottom_turn_on=(),
        compressor_shut_off=(),
        ):
    """ Return data for the common layout of top element, compressor, bottom element """
    return _tank(12, volume, UA, F_to_C(127.0), True, [
        _resistive_element(
            'top element', 8, top_power_W, top_turn_on,
            is_vip=True,
            followed_by=1,
            ),
        _compressor(
            'compressor', 'wrapped',
            _condensity(*[1.0 / 5.0] * 5),
            compressor_perf_map,
            compressor_turn_on,
            compressor_shut_off,
            min_T=F_to_C(45.0),
            max_T=F_to_C(120.0),
            hysteresis=dF_to_dC(4),
            backup=2,
            followed_by=2,
            ),
        _resistive_element(
            'bottom element', 0, bottom_power_W, bottom_turn_on,
            hysteresis=dF_to_dC(4),
            backup=1,
            ),
        ])

def ao_smith_PHPT60():
    return _integrated_three_source(
        215.8, 7.31,
        [
            _perf_record(47, (467.0, 2.81, 0.0072), (4.86, -0.0222, -0.00001)),
            _perf_record(67, (541.0, 1.47, 0.0176), (6.58, -0.0392, 0.0000407)),
            ],
        4250.0, 2000.0,
        compressor_turn_on=[_logic('bottomThird', dF_to_dC(43.6)), _logic('standby', dF_to_dC(23.8))],
        top_turn_on=[_logic('topThird', dF_to_dC(25))],
        bottom_turn_on=[_logic('bottomThird', dF_to_dC(43.6))],
        )

def ge_2012():
    return _integrated_three_source(
        172.0, 6.8,
        [
            _perf_record(47, (300.0, 1.59, 0.00107), (4.7, -0.0210, 0.0)),
            _perf_record(67, (378.0, 1.21, 0.00216), (4.8, -0.0167, 0.0)),
            ],
        4200.0, 4200.0,
        compressor_turn_on=[_logic('bottomThird', dF_to_dC(40)), _logic('standby', dF_to_dC(5.2))],
        top_turn_on=[_logic('topThird', dF_to_dC(28))],
        bottom_turn_on=[_logic('bottomThird', dF_to_dC(40))],
        compressor_shut_off=[_logic('largeDraw', F_to_C(65))],
        )

def sanden_80():
    return _tank(96, 315.0, 7.0, 65.0, False, [
        _compressor(
            'compressor', 'external',
            _condensity(1.0),
            [
                _perf_record(17, (1650.0, 5.5, 0.0), (3.2, -0.015, 0.0)),
                _perf_record(35, (1100.0, 4.0, 0.0), (3.7, -0.015, 0.0)),
                _perf_record(50, (880.0, 3.1, 0.0), (5.25, -0.025, 0.0)),
                _perf_record(67, (740.0, 4.0, 0.0), (6.2, -0.03, 0.0)),
                _perf_record(95, (790.0, 2.0, 0.0), (7.15, -0.04, 0.0)),
                ],
            [
                _logic('nodeWeighted', F_to_C(113),
                       node_weights=[[8, 1.0]], absolute=True, compare='lessThan'),
                _logic('standby', dF_to_dC(8.2639)),
                ],
            [
                _logic('nodeWeighted', F_to_C(135),
                       node_weights=[[1, 1.0]], absolute=True, compare='greaterThan'),
                ],
            is_vip=True,
            hysteresis=4.0,
            depresses_temperature=False,
            ),
        ],
        setpoint_fixed=True,
        )

def _hybrid_50_gal(element_power_W):
    return _tank(24, 171.0, 6.0, F_to_C(127.0), True, [
        _resistive_element(
            'top element', 8, element_power_W,
            [_logic('nodeWeighted', F_to_C(105),
                    node_weights=[[11, 1.0], [12, 1.0]], absolute=True, compare='lessThan')],
            is_vip=True,
            followed_by=1,
            companion=2,
            ),
        _resistive_element(
            'bottom element', 0, element_power_W,
            [],
            [_logic('bottomTwelfthMaxTemp', F_to_C(100))],
            hysteresis=dF_to_dC(2),
            backup=2,
            followed_by=2,
            ),
        _compressor(
            'compressor', 'wrapped',
            _condensity(*[1.0 / 5.0] * 5),
            [
                _perf_record(50, (170.0, 2.02, 0.0), (5.93, -0.027, 0.0)),
                _perf_record(70, (144.5, 2.42, 0.0), (7.67, -0.037, 0.0)),
                _perf_record(95, (94.1, 3.15, 0.0), (11.1, -0.056, 0.0)),
                ],
            [_logic('bottomThird', dF_to_dC(35)), _logic('standby', dF_to_dC(9))],
            min_T=F_to_C(42.0),
            max_T=F_to_C(120.0),
            hysteresis=dF_to_dC(2),
            backup=1,
            ),
        ])

def ao_smith_HPTU50():
    return _hybrid_50_gal(4500.0)

def rheem_HBDR2250():
    return _hybrid_50_gal(2250.0)

def rheem_HBDR4550():
    return _hybrid_50_gal(4500.0)


# Generic heat pump, scaled from a reference model by uniform energy factor

GENERIC_PERF_MAP = [
    _perf_record(50, (187.064124, 1.939747, 0.0), (5.4977772, -0.0243008, 0.0)),
    _perf_record(70, (148.0418, 2.553291, 0.0), (7.207307, -0.0335265, 0.0)),
    ]

def generic_UA(volume):
    """ Return a conservative (high) UA, in kJ/hr.K, for a tank of the given volume in litres """
    v1 = 7.5156316175 * L_to_gal(volume) ** 0.33 + 5.9995357658
    return 0.0076183819 * v1 * v1

def generic_fudge(energy_factor):
    """ Return the factor applied to CoP, scaling from 70% at UEF 2.0 to 95% at UEF 3.4 """
    f_UEF = (energy_factor - 2.0) / (3.4 - 2.0)
    return (1.0 - f_UEF) * 0.7 + f_UEF * 0.95

def generic_hpwh_dict(volume, energy_factor, res_use):
    """ Return data for a generic integrated heat pump water heater

    Input power is scaled down by the same factor CoP is scaled up by, so
    heating capacity is unchanged.
    """
    fudge = generic_fudge(energy_factor)
    perf_map = [
        _perf_record(
            record['T_F'],
            [coeff / fudge for coeff in record['input_power_coeffs']],
            [coeff * fudge for coeff in record['COP_coeffs']],
            )
        for record in GENERIC_PERF_MAP
        ]

    return _tank(12, volume, generic_UA(volume), F_to_C(127.0), True, [
        _resistive_element(
            'top element', 6, 4500.0,
            [_logic('topThird', res_use)],
            is_vip=True,
            followed_by=1,
            ),
        _resistive_element(
            'bottom element', 0, 4000.0,
            [],
            [_logic('bottomTwelfthMaxTemp', F_to_C(86.1111))],
            condensity=_condensity(0.0, 0.2, 0.8),
            hysteresis=dF_to_dC(2),
            backup=2,
            followed_by=2,
            ),
        _compressor(
            'compressor', 'wrapped',
            _condensity(*[1.0 / 4.0] * 4),
            perf_map,
            [_logic('bottomThird', dF_to_dC(33.6883)), _logic('standby', dF_to_dC(12.392))],
            min_T=F_to_C(45.0),
            max_T=F_to_C(120.0),
            hysteresis=dF_to_dC(2),
            backup=1,
            ),
        ])


PRESETS = {
    'restankNoUA': restank_no_UA,
    'restankHugeUA': restank_huge_UA,
    'restankRealistic': restank_realistic,
    'basicIntegrated': basic_integrated,
    'externalTest': external_test,
    'AOSmithPHPT60': ao_smith_PHPT60,
    'GE2012': ge_2012,
    'Sanden80': sanden_80,
    'AOSmithHPTU50': ao_smith_HPTU50,
    'RheemHBDR2250': rheem_HBDR2250,
    'RheemHBDR4550': rheem_HBDR4550,
    }

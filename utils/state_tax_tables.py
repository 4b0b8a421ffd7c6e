# utils/state_tax_tables.py

"""
2025 state income tax schedules for all 50 states + DC.

Bracketed states carry a `single` and a `married-joint` schedule of
(low, high, rate) tuples; every other filing status uses the `single`
schedule. Flat-rate states (including the no-income-tax states) carry a
single `flat_rate` and no brackets.
"""

import numpy as np
from typing import Any, Dict

STATE_TAX_TABLE_2025: Dict[str, Dict[str, Any]] = {
    "AL": {
        "name": "Alabama",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 500, 0.02), (500, 3000, 0.04), (3000, np.inf, 0.05)],
            "married-joint": [(0, 1000, 0.02), (1000, 6000, 0.04), (6000, np.inf, 0.05)],
        },
    },
    "AK": {"name": "Alaska", "flat_rate": 0.0, "brackets": None},
    "AZ": {
        "name": "Arizona",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 30719, 0.0259), (30719, 74899, 0.032), (74899, 161903, 0.045), (161903, np.inf, 0.0545)],
            "married-joint": [(0, 61438, 0.0259), (61438, 149798, 0.032), (149798, 323806, 0.045), (323806, np.inf, 0.0545)],
        },
    },
    "AR": {
        "name": "Arkansas",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 4300, 0.02), (4300, 8599, 0.04), (8599, 13199, 0.05), (13199, np.inf, 0.0575)],
            "married-joint": [(0, 8600, 0.02), (8600, 17199, 0.04), (17199, 26399, 0.05), (26399, np.inf, 0.0575)],
        },
    },
    "CA": {
        "name": "California",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 10412, 0.01), (10412, 24684, 0.02), (24684, 38942, 0.04), (38942, 54081, 0.06), (54081, 68541, 0.08), (68541, 84846, 0.093), (84846, 118468, 0.103), (118468, 673902, 0.113), (673902, 822472, 0.123), (822472, np.inf, 0.133)],
            "married-joint": [(0, 20824, 0.01), (20824, 49368, 0.02), (49368, 77884, 0.04), (77884, 108162, 0.06), (108162, 137082, 0.08), (137082, 169692, 0.093), (169692, 236936, 0.103), (236936, 1347804, 0.113), (1347804, 1644944, 0.123), (1644944, np.inf, 0.133)],
        },
    },
    "CO": {"name": "Colorado", "flat_rate": 0.0435, "brackets": None},
    "CT": {
        "name": "Connecticut",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 21000, 0.03), (21000, 53000, 0.05), (53000, np.inf, 0.0635)],
            "married-joint": [(0, 42000, 0.03), (42000, 106000, 0.05), (106000, np.inf, 0.0635)],
        },
    },
    "DE": {
        "name": "Delaware",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 2000, 0.022), (2000, 5000, 0.039), (5000, 10000, 0.048), (10000, 20000, 0.052), (20000, 25000, 0.0555), (25000, 60000, 0.06), (60000, np.inf, 0.066)],
            "married-joint": [(0, 3000, 0.022), (3000, 7500, 0.039), (7500, 15000, 0.048), (15000, 30000, 0.052), (30000, 37500, 0.0555), (37500, 90000, 0.06), (90000, np.inf, 0.066)],
        },
    },
    "FL": {"name": "Florida", "flat_rate": 0.0, "brackets": None},
    "GA": {
        "name": "Georgia",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1050, 0.01), (1050, 2450, 0.02), (2450, 3650, 0.03), (3650, 5850, 0.04), (5850, 7000, 0.05), (7000, 10200, 0.0555), (10200, np.inf, 0.0575)],
            "married-joint": [(0, 1750, 0.01), (1750, 3750, 0.02), (3750, 5650, 0.03), (5650, 7750, 0.04), (7750, 10000, 0.05), (10000, 14000, 0.0555), (14000, np.inf, 0.0575)],
        },
    },
    "HI": {
        "name": "Hawaii",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1288, 0.014), (1288, 3072, 0.032), (3072, 5456, 0.055), (5456, 8584, 0.064), (8584, 12500, 0.068), (12500, np.inf, 0.0685)],
            "married-joint": [(0, 2176, 0.014), (2176, 5104, 0.032), (5104, 8912, 0.055), (8912, 12672, 0.064), (12672, 20000, 0.068), (20000, np.inf, 0.0685)],
        },
    },
    "ID": {
        "name": "Idaho",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1919, 0.01), (1919, 3839, 0.03), (3839, 5759, 0.045), (5759, 7679, 0.0525), (7679, 9599, 0.063), (9599, 11519, 0.0685), (11519, np.inf, 0.0725)],
            "married-joint": [(0, 3838, 0.01), (3838, 7678, 0.03), (7678, 11518, 0.045), (11518, 15358, 0.0525), (15358, 19198, 0.063), (19198, 23038, 0.0685), (23038, np.inf, 0.0725)],
        },
    },
    "IL": {"name": "Illinois", "flat_rate": 0.0495, "brackets": None},
    "IN": {"name": "Indiana", "flat_rate": 0.0365, "brackets": None},
    "IA": {
        "name": "Iowa",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1839, 0.00), (1839, 13687, 0.045), (13687, 32962, 0.0675), (32962, np.inf, 0.0875)],
            "married-joint": [(0, 3679, 0.00), (3679, 27374, 0.045), (27374, 65924, 0.0675), (65924, np.inf, 0.0875)],
        },
    },
    "KS": {
        "name": "Kansas",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 15000, 0.057), (15000, 30000, 0.063), (30000, np.inf, 0.085)],
            "married-joint": [(0, 30000, 0.057), (30000, 60000, 0.063), (60000, np.inf, 0.085)],
        },
    },
    "KY": {
        "name": "Kentucky",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3000, 0.02), (3000, 4000, 0.035), (4000, 5000, 0.045), (5000, 8000, 0.0475), (8000, np.inf, 0.0575)],
            "married-joint": [(0, 6000, 0.02), (6000, 8000, 0.035), (8000, 10000, 0.045), (10000, 16000, 0.0475), (16000, np.inf, 0.0575)],
        },
    },
    "LA": {
        "name": "Louisiana",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 12500, 0.02), (12500, 50000, 0.04), (50000, np.inf, 0.06)],
            "married-joint": [(0, 25000, 0.02), (25000, 100000, 0.04), (100000, np.inf, 0.06)],
        },
    },
    "ME": {
        "name": "Maine",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 23000, 0.055), (23000, 54450, 0.069), (54450, np.inf, 0.0715)],
            "married-joint": [(0, 36800, 0.055), (36800, 87100, 0.069), (87100, np.inf, 0.0715)],
        },
    },
    "MD": {
        "name": "Maryland",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1000, 0.02), (1000, 2000, 0.03), (2000, 3000, 0.04), (3000, 100000, 0.0475), (100000, 125000, 0.05), (125000, np.inf, 0.0575)],
            "married-joint": [(0, 1000, 0.02), (1000, 2000, 0.03), (2000, 3000, 0.04), (3000, 150000, 0.0475), (150000, 175000, 0.05), (175000, np.inf, 0.0575)],
        },
    },
    "MA": {"name": "Massachusetts", "flat_rate": 0.05, "brackets": None},
    "MI": {"name": "Michigan", "flat_rate": 0.0425, "brackets": None},
    "MN": {
        "name": "Minnesota",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 28925, 0.0535), (28925, 116863, 0.0705), (116863, 211610, 0.0785), (211610, np.inf, 0.0985)],
            "married-joint": [(0, 38415, 0.0535), (38415, 154984, 0.0705), (154984, 270948, 0.0785), (270948, np.inf, 0.0985)],
        },
    },
    "MS": {
        "name": "Mississippi",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3000, 0.03), (3000, 5000, 0.04), (5000, 10000, 0.05), (10000, np.inf, 0.05)],
            "married-joint": [(0, 6000, 0.03), (6000, 10000, 0.04), (10000, 20000, 0.05), (20000, np.inf, 0.05)],
        },
    },
    "MO": {
        "name": "Missouri",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1073, 0.015), (1073, 3219, 0.02), (3219, 5365, 0.0225), (5365, 7511, 0.03), (7511, 9657, 0.0325), (9657, 11803, 0.035), (11803, np.inf, 0.0575)],
            "married-joint": [(0, 2146, 0.015), (2146, 6438, 0.02), (6438, 10730, 0.0225), (10730, 15022, 0.03), (15022, 19314, 0.0325), (19314, 23606, 0.035), (23606, np.inf, 0.0575)],
        },
    },
    "MT": {
        "name": "Montana",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3300, 0.01), (3300, 8000, 0.02), (8000, 10800, 0.03), (10800, 13400, 0.04), (13400, 17100, 0.053), (17100, 19700, 0.063), (19700, 23800, 0.073), (23800, 27700, 0.083), (27700, np.inf, 0.093)],
            "married-joint": [(0, 4400, 0.01), (4400, 10600, 0.02), (10600, 14400, 0.03), (14400, 17800, 0.04), (17800, 22800, 0.053), (22800, 26200, 0.063), (26200, 31800, 0.073), (31800, 36900, 0.083), (36900, np.inf, 0.093)],
        },
    },
    "NE": {
        "name": "Nebraska",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3340, 0.0254), (3340, 8380, 0.0324), (8380, 13650, 0.0406), (13650, 27260, 0.0459), (27260, np.inf, 0.0684)],
            "married-joint": [(0, 6680, 0.0254), (6680, 16760, 0.0324), (16760, 27300, 0.0406), (27300, 54520, 0.0459), (54520, np.inf, 0.0684)],
        },
    },
    "NV": {"name": "Nevada", "flat_rate": 0.0, "brackets": None},
    "NH": {"name": "New Hampshire", "flat_rate": 0.0, "brackets": None},
    "NJ": {
        "name": "New Jersey",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 20000, 0.0135), (20000, 35000, 0.0175), (35000, 40000, 0.0245), (40000, 75000, 0.0352), (75000, 110000, 0.0637), (110000, 250000, 0.0897), (250000, np.inf, 0.1037)],
            "married-joint": [(0, 20000, 0.0135), (20000, 50000, 0.0175), (50000, 70000, 0.0245), (70000, 130000, 0.0352), (130000, 180000, 0.0637), (180000, 400000, 0.0897), (400000, np.inf, 0.1037)],
        },
    },
    "NM": {
        "name": "New Mexico",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 5900, 0.017), (5900, 11900, 0.032), (11900, 17100, 0.047), (17100, np.inf, 0.059)],
            "married-joint": [(0, 9400, 0.017), (9400, 18900, 0.032), (18900, 27200, 0.047), (27200, np.inf, 0.059)],
        },
    },
    "NY": {
        "name": "New York",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 8500, 0.04), (8500, 20000, 0.0465), (20000, 35000, 0.055), (35000, 40500, 0.06), (40500, 80750, 0.0685), (80750, 215400, 0.0965), (215400, 1077550, 0.103), (1077550, np.inf, 0.1085)],
            "married-joint": [(0, 17000, 0.04), (17000, 40000, 0.0465), (40000, 70000, 0.055), (70000, 81000, 0.06), (81000, 161500, 0.0685), (161500, 430800, 0.0965), (430800, 2155350, 0.103), (2155350, np.inf, 0.1085)],
        },
    },
    "NC": {
        "name": "North Carolina",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 25250, 0.04), (25250, 58200, 0.06), (58200, np.inf, 0.085)],
            "married-joint": [(0, 50500, 0.04), (50500, 116400, 0.06), (116400, np.inf, 0.085)],
        },
    },
    "ND": {
        "name": "North Dakota",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 40125, 0.01), (40125, 98405, 0.02), (98405, 189300, 0.026), (189300, np.inf, 0.029)],
            "married-joint": [(0, 66850, 0.01), (66850, 151200, 0.02), (151200, 230250, 0.026), (230250, np.inf, 0.029)],
        },
    },
    "OH": {
        "name": "Ohio",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 25550, 0.015), (25550, 51150, 0.03), (51150, 102850, 0.04), (102850, np.inf, 0.0465)],
            "married-joint": [(0, 42750, 0.015), (42750, 85550, 0.03), (85550, 171100, 0.04), (171100, np.inf, 0.0465)],
        },
    },
    "OK": {
        "name": "Oklahoma",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 1000, 0.01), (1000, 2500, 0.02), (2500, 3750, 0.03), (3750, 5000, 0.04), (5000, 7200, 0.05), (7200, np.inf, 0.0575)],
            "married-joint": [(0, 2000, 0.01), (2000, 5000, 0.02), (5000, 7500, 0.03), (7500, 10000, 0.04), (10000, 14400, 0.05), (14400, np.inf, 0.0575)],
        },
    },
    "OR": {
        "name": "Oregon",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3750, 0.0475), (3750, 9450, 0.0675), (9450, 12000, 0.0875), (12000, np.inf, 0.099)],
            "married-joint": [(0, 7500, 0.0475), (7500, 18900, 0.0675), (18900, 24000, 0.0875), (24000, np.inf, 0.099)],
        },
    },
    "PA": {"name": "Pennsylvania", "flat_rate": 0.0307, "brackets": None},
    "RI": {
        "name": "Rhode Island",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 73600, 0.0375), (73600, 168600, 0.045), (168600, np.inf, 0.0475)],
            "married-joint": [(0, 147200, 0.0375), (147200, 337200, 0.045), (337200, np.inf, 0.0475)],
        },
    },
    "SC": {
        "name": "South Carolina",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3650, 0.03), (3650, 7300, 0.04), (7300, 10950, 0.05), (10950, 14600, 0.06), (14600, np.inf, 0.07)],
            "married-joint": [(0, 5800, 0.03), (5800, 11600, 0.04), (11600, 17400, 0.05), (17400, 23200, 0.06), (23200, np.inf, 0.07)],
        },
    },
    "SD": {"name": "South Dakota", "flat_rate": 0.0, "brackets": None},
    "TN": {"name": "Tennessee", "flat_rate": 0.0, "brackets": None},
    "TX": {"name": "Texas", "flat_rate": 0.0, "brackets": None},
    "UT": {"name": "Utah", "flat_rate": 0.0487, "brackets": None},
    "VT": {
        "name": "Vermont",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 45650, 0.035), (45650, 110200, 0.063), (110200, 210809, 0.075), (210809, np.inf, 0.077)],
            "married-joint": [(0, 61150, 0.035), (61150, 156600, 0.063), (156600, 238150, 0.075), (238150, np.inf, 0.077)],
        },
    },
    "VA": {
        "name": "Virginia",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 3000, 0.02), (3000, 12000, 0.03), (12000, 17000, 0.05), (17000, 70000, 0.0575), (70000, np.inf, 0.0675)],
            "married-joint": [(0, 6000, 0.02), (6000, 24000, 0.03), (24000, 34000, 0.05), (34000, 140000, 0.0575), (140000, np.inf, 0.0675)],
        },
    },
    "WA": {"name": "Washington", "flat_rate": 0.0, "brackets": None},
    "WV": {
        "name": "West Virginia",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 10000, 0.03), (10000, 25000, 0.04), (25000, 40000, 0.045), (40000, 60000, 0.06), (60000, np.inf, 0.065)],
            "married-joint": [(0, 20000, 0.03), (20000, 50000, 0.04), (50000, 80000, 0.045), (80000, 120000, 0.06), (120000, np.inf, 0.065)],
        },
    },
    "WI": {
        "name": "Wisconsin",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 15522, 0.0355), (15522, 38344, 0.0465), (38344, 245625, 0.053), (245625, np.inf, 0.0585)],
            "married-joint": [(0, 20769, 0.0355), (20769, 51216, 0.0465), (51216, 284500, 0.053), (284500, np.inf, 0.0585)],
        },
    },
    "WY": {"name": "Wyoming", "flat_rate": 0.0, "brackets": None},
    "DC": {
        "name": "District of Columbia",
        "flat_rate": None,
        "brackets": {
            "single": [(0, 11075, 0.04), (11075, 31675, 0.06), (31675, 56000, 0.085), (56000, np.inf, 0.0995)],
            "married-joint": [(0, 15000, 0.04), (15000, 38000, 0.06), (38000, 60000, 0.085), (60000, np.inf, 0.0995)],
        },
    },
}

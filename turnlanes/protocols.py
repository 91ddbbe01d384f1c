# © Copyright 2024 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import List, Tuple

Position = Tuple[float, float]
"""Position describes the physical location of a node.
This should be WGS84 degrees, first latitude, then longitude.
"""

Line = List[Position]
"""Line describes a polyline - a sequence of :py:obj:`Position` in the order of travel
(or in the order of nodes of a way, for unoriented lines).
"""

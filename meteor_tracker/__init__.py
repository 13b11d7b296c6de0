"""
PDX Meteor Tracker.

Track near-earth objects approaching our planet using the NASA NeoWs feed,
alongside the Astronomy Picture of the Day.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

__version__ = "0.1.0"
__author__ = "Meir Miyara"
__email__ = "meir.miyara@gmail.com"

"""
SoilLab Engine: laboratory soil test calculations and soil classification.
"""

from soillab.utils.constants import APP_VERSION

__version__ = APP_VERSION

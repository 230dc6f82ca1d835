"""Default settings files and loaders.

The weekday ratio table, the week bucket boundaries and the month picker
windows are stored in JSON files so they can be tuned without code changes.
"""

from .loader import load_config, get_apportionment_config, get_config_value

__all__ = ['load_config', 'get_apportionment_config', 'get_config_value']

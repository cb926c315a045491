##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Used to store the application configuration.

The `config` package loads Tabula's optional `tabula.yaml` file and turns the
parts of it that influence record mapping into a `MappingSettings` object.

Modules:
    config_filepaths.py: Constants for the locations Tabula searches for its configuration.
    configfile.py: Handles the loading of configuration files and their default values.
"""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class MappingSettings:
    """
    The naming rules used when deriving a table from a record type.

    Instances are frozen (and therefore hashable) so that they can take part
    in the key of the descriptor cache.

    Attributes:
        ignore_suffix: Fields whose name ends with this suffix are not mapped to a column.
        identity_field: The name of the field that becomes the auto-incrementing primary key.
        null_token: The text used in place of `None` when describing a record.
    """

    ignore_suffix: str = "_"
    identity_field: str = "id"
    null_token: str = "<null>"

    def __post_init__(self):
        if not self.ignore_suffix:
            raise ValueError("The ignore suffix must be a non-empty string.")
        if not self.identity_field:
            raise ValueError("The identity field name must be a non-empty string.")

    @classmethod
    def from_config(cls, config: Dict) -> "MappingSettings":
        """
        Build settings from the `mapping` section of a loaded configuration.

        Args:
            config: A configuration dictionary as returned by
                [`get_config`][config.configfile.get_config].

        Returns:
            A `MappingSettings` instance; missing keys keep their defaults.
        """
        mapping = config.get("mapping") or {}
        known = {key: mapping[key] for key in ("ignore_suffix", "identity_field", "null_token") if key in mapping}
        return cls(**known)


DEFAULT_SETTINGS = MappingSettings()

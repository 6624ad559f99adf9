# memfs.toml handling
import copy
import logging
import os

import pytoml as toml

CONFIG_NAME = "memfs.toml"

logger = logging.getLogger(__name__)

DEFAULTS = {
    "Seed": {
        "paths": [],
    },
    "Mount": {
        "foreground": True,
        "allow_other": False,
    },
    "logging": {
        "level": "WARNING",
    },
}


def default_path():
    return os.path.join(os.getcwd(), CONFIG_NAME)


def load_config(path=None):
    """Read the config at `path` (memfs.toml in the cwd by default).

    A missing file gives the defaults. Tables from the file are merged key by
    key over the defaults; a malformed file raises toml.TomlError.
    """
    if( path is None ):
        path = default_path()

    config = copy.deepcopy(DEFAULTS)
    if not os.path.exists(path):
        return config

    with open(path) as conf:
        loaded = toml.load(conf)

    for table, values in loaded.items():
        if( table in config and isinstance(values, dict) ):
            config[table].update(values)
        else:
            config[table] = values
    return config


def mount_options(config):
    """FUSE options from the [Mount] table.

    The adapter moves one shared cursor on every call, so the mount is
    always single threaded whatever the file says.
    """
    options = dict(config.get("Mount", {}))
    if( options.pop("nothreads", True) is not True ):
        logger.warning("Ignoring nothreads = false, the tree is single threaded")
    options["nothreads"] = True
    return options

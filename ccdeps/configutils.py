import os

import appdirs

import ccdeps.utils
import ccdeps.wrappedos

CONFIG_NAME = "ccdeps.conf"


def default_config_directories(user_config_dir=None, system_config_dir=None, verbose=0):
    # Use configuration in the order (lowest to highest priority)
    # 1) system config (XDG compliant.  /etc/xdg/ccdeps)
    # 2) user config   (XDG compliant. ~/.config/ccdeps)
    # 3) current working directory
    # 4) environment variables
    # 5) given on the command line

    # These variables are settable to assist writing tests
    if user_config_dir is None:
        user_config_dir = appdirs.user_config_dir(appname="ccdeps")
    if system_config_dir is None:
        system_config_dir = appdirs.site_config_dir(appname="ccdeps")

    results = ccdeps.utils.ordered_unique(
        [system_config_dir, user_config_dir, os.getcwd()]
    )
    if verbose >= 9:
        print(" ".join(["Default config directories"] + results))

    return results


def defaultconfigs(user_config_dir=None, system_config_dir=None, verbose=0):
    """ Find the ccdeps.conf files, lowest priority first """
    confs = [
        os.path.join(defaultdir, CONFIG_NAME)
        for defaultdir in default_config_directories(
            user_config_dir=user_config_dir,
            system_config_dir=system_config_dir,
            verbose=verbose,
        )
    ]

    # Only return the configs that exist
    configs = [cfg for cfg in confs if ccdeps.wrappedos.isfile(cfg)]
    if verbose >= 8:
        print(" ".join(["Default configs are "] + configs))
    return configs

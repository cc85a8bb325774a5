import shutil
import sys

import configargparse

from ccdeps.version import __version__
import ccdeps.configutils
import ccdeps.utils


def create_parser(description, user_config_dir=None, system_config_dir=None):
    """ Create the configargparse singleton with the ccdeps.conf files as defaults """
    return configargparse.getArgumentParser(
        description=description,
        formatter_class=configargparse.ArgumentDefaultsHelpFormatter,
        default_config_files=ccdeps.configutils.defaultconfigs(
            user_config_dir=user_config_dir, system_config_dir=system_config_dir
        ),
        args_for_setting_config_path=["-c", "--config"],
        ignore_unknown_config_file_keys=True,
    )


def add_base_arguments(cap):
    cap.add(
        "-v",
        "--verbose",
        help="Output verbosity. Add more v's to make it more verbose",
        action="count",
        default=0)
    cap.add(
        "-q",
        "--quiet",
        help="Decrement verbosity. Useful in apps where the default verbosity > 0.",
        action="count",
        default=0)
    cap.add(
        "--version",
        action="version",
        version=__version__)
    cap.add(
        "-?",
        action='help',
        help='Help')


def add_common_arguments(cap):
    """ Insert common arguments into the configargparse object """
    add_base_arguments(cap)
    cap.add(
        "--CC",
        help="C compiler",
        env_var="CC",
        default="gcc")
    cap.add(
        "--CXX",
        help="C++ compiler",
        env_var="CXX",
        default="g++")
    cap.add(
        "--CPPFLAGS",
        help="C preprocessor flags",
        env_var="CPPFLAGS",
        default="")
    cap.add(
        "--language",
        help="Source language given to the compiler with -x. "
             "Unsupplied means guess from -x in the CPPFLAGS or the file extension.",
        default=None)
    cap.add(
        "--timeout",
        type=float,
        help="Kill the compiler if it runs for longer than this many seconds",
        default=None)
    ccdeps.utils.add_flag_argument(
        parser=cap,
        name="best-effort-searchpath",
        dest="best_effort_searchpath",
        default=False,
        help="If the system search path cannot be discovered then carry on "
             "without it.  System headers may then be reported as dependencies.")


def _commonsubstitutions(args):
    """ Each -q cancels out one -v """
    args.verbose -= args.quiet


# List to store the callback functions for parse args
_substitutioncallbacks = [_commonsubstitutions]


def resetcallbacks():
    """ Useful in tests to clear out the substitution callbacks """
    global _substitutioncallbacks
    _substitutioncallbacks = [_commonsubstitutions]


def substitutions(args, verbose=None):
    if verbose is None:
        verbose = args.verbose

    for func in _substitutioncallbacks:
        func(args)

    if verbose >= 2:
        verboseprintconfig(args)


def parseargs(cap, argv=None, verbose=None):
    args = cap.parse_args(args=argv)

    if verbose is None:
        verbose = args.verbose

    substitutions(args, verbose)
    return args


def terminalcolumns():
    """ How many columns in the text terminal """
    return shutil.get_terminal_size(fallback=(80, 24)).columns


def verboseprintconfig(args, file=None):
    if file is None:
        file = sys.stderr

    if args.verbose >= 3:
        cap = configargparse.getArgumentParser()
        cap.print_values(file=file)

    if args.verbose >= 2:
        verbose_print_args(args, file=file)


def verbose_print_args(args, file=None):
    if file is None:
        file = sys.stderr

    # Print the args in two columns Attr: Value
    print("\n\nFinal aggregated variables:", file=file)
    maxattrlen = 0
    for attr in args.__dict__.keys():
        if len(attr) > maxattrlen:
            maxattrlen = len(attr)
    fmt = "".join(["{0:", str(maxattrlen + 1), "}: {1}"])
    rightcolbegin = maxattrlen + 3
    maxcols = terminalcolumns()
    rightcolsize = maxcols - rightcolbegin
    if maxcols <= rightcolbegin:
        print("Verbose print of args aborted due to small terminal size!", file=file)
        return

    for attr, value in sorted(args.__dict__.items()):
        if value is None:
            print(fmt.format(attr, ""), file=file)
            continue
        strvalue = str(value)
        valuelen = len(strvalue)
        if rightcolbegin + valuelen < maxcols:
            print(fmt.format(attr, strvalue), file=file)
        else:
            # values are too long to fit.  Split them on spaces
            valuesplit = strvalue.split(' ', valuelen % rightcolsize)
            print(fmt.format(attr, valuesplit[0]), file=file)
            for kk in range(1, len(valuesplit)):
                print(fmt.format("", valuesplit[kk]), file=file)

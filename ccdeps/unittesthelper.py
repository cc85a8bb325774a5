import ast
import os
import shlex
import shutil
import stat
import sys
import tempfile
from io import open

import configargparse

import ccdeps.apptools
import ccdeps.depdetect
import ccdeps.wrappedos
# The abbreviation "uth" is often used for this "unittesthelper"


def reset():
    delete_existing_parsers()
    ccdeps.apptools.resetcallbacks()
    ccdeps.wrappedos.clear_cache()


def delete_existing_parsers():
    """ The singleton parsers supplied by configargparse
        don't play well with the unittest framework.
        This function will delete them so you are
        starting with a clean slate
    """
    configargparse._parsers = {}


def create_args(argv=None, tempdir=None):
    """ Parse argv the way the ccdeps tools do.  Config files in tempdir
        (or nowhere) stand in for the user and system configs.
    """
    if argv is None:
        argv = []
    if tempdir is None:
        tempdir = tempfile.gettempdir()
    reset()
    cap = ccdeps.apptools.create_parser(
        "Configargparser in test code",
        user_config_dir=os.path.join(tempdir, "user"),
        system_config_dir=os.path.join(tempdir, "system"),
    )
    ccdeps.depdetect.add_arguments(cap)
    return ccdeps.apptools.parseargs(cap, argv)


def create_temp_config(tempdir=None, filename=None, CC="gcc", CXX="g++"):
    """ User is responsible for removing the config file when
        they are finished
    """
    if not filename:
        tf_handle, filename = tempfile.mkstemp(suffix=".conf", text=True, dir=tempdir)
        os.close(tf_handle)

    with open(filename, "w") as ff:
        ff.write("CC=" + CC + "\n")
        ff.write("CXX=" + CXX + "\n")
        ff.write("searchpath=gcc\n")

    return filename


_FAKE_COMPILER = '''import sys
import time

argv = sys.argv[1:]
with open({log!r}, "a") as ff:
    ff.write(repr(argv) + "\\n")
time.sleep({sleep!r})
if "-Wp,-v" in argv:
    sys.stdin.read()
    sys.stderr.write({verbose_text!r})
    sys.exit({verbose_exit!r})
if "-M" in argv:
    sys.stdout.write({deps_text!r})
    sys.exit({deps_exit!r})
sys.exit(2)
'''

GCC_VERBOSE_TEXT = """ignoring nonexistent directory "/usr/local/include/x86_64-linux-gnu"
ignoring nonexistent directory "/usr/lib/gcc/x86_64-linux-gnu/12/include-fixed"
#include "..." search starts here:
#include <...> search starts here:
 /usr/lib/gcc/x86_64-linux-gnu/12/include
 /usr/local/include
 /usr/include/x86_64-linux-gnu
 /usr/include
End of search list.
"""


def write_fake_compiler(
    directory,
    name="fakecc",
    deps_text="",
    verbose_text=GCC_VERBOSE_TEXT,
    deps_exit=0,
    verbose_exit=0,
    sleep=0,
):
    """ Write an executable that answers the -M and -Wp,-v invocations with
        canned text.  Every invocation appends its argv to name + ".log".
        Returns the path of the executable.
    """
    exepath = os.path.join(directory, name)
    scriptpath = exepath + ".py"
    with open(scriptpath, "w") as ff:
        ff.write(
            _FAKE_COMPILER.format(
                log=exepath + ".log",
                sleep=sleep,
                verbose_text=verbose_text,
                verbose_exit=verbose_exit,
                deps_text=deps_text,
                deps_exit=deps_exit,
            )
        )
    with open(exepath, "w") as ff:
        ff.write("#!/bin/sh\n")
        ff.write(
            "exec {0} {1} \"$@\"\n".format(
                shlex.quote(sys.executable), shlex.quote(scriptpath)
            )
        )
    os.chmod(exepath, os.stat(exepath).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return exepath


def read_fake_compiler_log(exepath):
    """ The argv of every invocation of the fake compiler, in order """
    logpath = exepath + ".log"
    if not os.path.exists(logpath):
        return []
    with open(logpath) as ff:
        return [ast.literal_eval(line) for line in ff if line.strip()]


class TempDirContext:
    def __enter__(self):
        self._origdir = os.getcwd()  # Save the current directory
        self._tmpdir = tempfile.mkdtemp()
        os.chdir(self._tmpdir)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        os.chdir(self._origdir)  # Return to the original directory
        shutil.rmtree(self._tmpdir, ignore_errors=True)  # Cleanup the temporary directory


class EnvironmentContext:
    """ Temporarily set (or with None, unset) environment variables """

    def __init__(self, envvars):
        self._envvars = envvars
        self._saved = {}

    def __enter__(self):
        for key, value in self._envvars.items():
            self._saved[key] = os.environ.get(key)
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        for key, value in self._saved.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value

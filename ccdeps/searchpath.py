"""Discover the directories a compiler searches for headers by default.

There is no machine readable way to ask for this.  GCC and Clang both print
the search list when the preprocessor is run with -v::

    #include "..." search starts here:
    #include <...> search starts here:
     /usr/lib/gcc/x86_64-linux-gnu/12/include
     /usr/local/include
     /usr/include
    End of search list.

Each directory is on its own line with a single leading space.  A compiler
that prints something else simply yields no directories, which means that
nothing gets filtered out of the dependency list.
"""

import sys

import ccdeps.preprocessor
import ccdeps.wrappedos


def parse_search_path(text):
    """Return the cleaned directories announced in the -v output, in order"""
    paths = []
    for line in text.split("\n"):
        if line.startswith(" /"):
            paths.append(ccdeps.wrappedos.cleanpath(line.strip(" \r\n")))
    return paths


def create(args, preprocessor=None, output=None):
    """SearchPathProvider Factory"""
    classname = args.searchpath.title() + "SearchPathProvider"
    if args.verbose >= 3:
        print("Creating " + classname + " to discover the system search path.", file=output or sys.stderr)
    providercls = globals()[classname]
    return providercls(args, preprocessor=preprocessor, output=output)


def add_arguments(cap):
    """Add the command line arguments that the SearchPathProvider classes require"""
    allproviders = [
        st[: -len("SearchPathProvider")].lower()
        for st in dict(globals())
        if st.endswith("SearchPathProvider")
    ]
    cap.add(
        "--searchpath",
        choices=allproviders,
        default="gcc",
        help="How to discover the compiler's system include directories. "
        "Dependencies in those directories are not reported. "
        "none means nothing is filtered.",
    )


class SearchPathProviderBase(object):
    """Common functionality of the system search path providers"""

    def __init__(self, args, preprocessor=None, output=None):
        self.args = args
        self.output = output if output is not None else sys.stderr
        if preprocessor is None:
            preprocessor = ccdeps.preprocessor.PreProcessor(args, output=self.output)
        self.preprocessor = preprocessor

    def discover(self, compiler, compilation):
        """Return the system include directories of the resolved compiler"""
        raise NotImplementedError


class GccSearchPathProvider(SearchPathProviderBase):
    """Scrape the search list from the verbose preprocessor output of gcc/clang"""

    def discover(self, compiler, compilation):
        argv = [
            compilation.local_compiler(self.args),
            "-Wp,-v",
            "-x",
            compilation.language,
            "-E",
            "-",
        ]
        _, stderr = self.preprocessor.run(
            argv, executable=compiler, capture_stdout=False, capture_stderr=True
        )
        paths = parse_search_path(stderr.decode("utf-8", errors="surrogateescape"))
        if self.args.verbose >= 3:
            print(
                "Found {0} system include directories for {1}".format(len(paths), compiler),
                file=self.output,
            )
        return paths


class NoneSearchPathProvider(SearchPathProviderBase):
    """Report no system directories.  Every dependency is kept."""

    def discover(self, compiler, compilation):
        return []

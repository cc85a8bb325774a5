import subprocess
import sys

import ccdeps.apptools
import ccdeps.makedeps
import ccdeps.pathfilter
import ccdeps.preprocessor
import ccdeps.searchpath
import ccdeps.tracing


def add_arguments(cap):
    """Add the command line arguments that the DependencyDetector requires"""
    ccdeps.apptools.add_common_arguments(cap)
    ccdeps.searchpath.add_arguments(cap)


class DependencyDetector(object):
    """Ask the local compiler which files a compilation reads, then drop
    the ones that live in the compiler's own search path.  What is left
    is what a remote compiler needs to be sent.

    The tracer, the verbose output stream and the cancellation event are
    injected.  Without them the default tracer and sys.stderr are used and
    the compiler cannot be cancelled (args.timeout still applies).
    """

    def __init__(self, args, tracer=None, output=None, cancel=None, searchpath=None):
        self.args = args
        self.tracer = tracer if tracer is not None else ccdeps.tracing.get_tracer()
        self.output = output if output is not None else sys.stderr
        self.preprocessor = ccdeps.preprocessor.PreProcessor(
            args, cancel=cancel, output=self.output
        )
        if searchpath is None:
            searchpath = ccdeps.searchpath.create(
                args, preprocessor=self.preprocessor, output=self.output
            )
        self.searchpath = searchpath

    def _log(self, message):
        print(message, file=self.output)

    def preprocessor_argv(self, compilation):
        """The command line that writes the make rule for compilation to stdout"""
        argv = [compilation.local_compiler(self.args)]
        argv.extend(compilation.unknown_args)
        for opt in compilation.defs:
            argv.extend([opt.opt, opt.value])
        for opt in compilation.includes:
            argv.extend([opt.opt, opt.path])
        argv.extend(["-M", "-MF", "-", compilation.input])
        return argv

    def _discover(self, ccpath, compilation):
        try:
            return self.searchpath.discover(ccpath, compilation)
        except (OSError, subprocess.CalledProcessError) as err:
            if not getattr(self.args, "best_effort_searchpath", False):
                raise
            self._log(
                "Could not discover the system search path of {0} ({1}). "
                "System headers may be reported as dependencies.".format(ccpath, err)
            )
            return []

    def search_path(self, compilation):
        """The system include directories of the compiler for compilation"""
        with self.tracer.span("discover_search_path") as span:
            ccpath = ccdeps.preprocessor.find_compiler(
                compilation.local_compiler(self.args)
            )
            syspaths = self._discover(ccpath, compilation)
            span.add_field("count", len(syspaths))
            return syspaths

    def process(self, compilation):
        """Return the files that compilation depends upon.

        Unlike the raw make rule, the input file itself is not listed: every
        prerequisite equal to compilation.input is dropped.  The match is on
        the exact string, so a different path with the same basename
        (gen/a.c for a.c) is kept.
        """
        with self.tracer.span("detect_dependencies") as span:
            ccpath = ccdeps.preprocessor.find_compiler(
                compilation.local_compiler(self.args)
            )

            argv = self.preprocessor_argv(compilation)
            if self.args.verbose >= 1:
                self._log("run cpp -M: {0!r}".format(argv))
            span.add_field("argc", len(argv))
            deps, _ = self.preprocessor.run(argv, executable=ccpath)

            syspaths = self._discover(ccpath, compilation)
            if self.args.verbose >= 1:
                self._log("Discovered local system path: {0!r}".format(syspaths))

            deplist = ccdeps.makedeps.parse_make_deps(deps)
            deplist = ccdeps.pathfilter.remove_paths(deplist, syspaths)
            # The compiler lists the input as the first prerequisite
            deplist = [dep for dep in deplist if dep != compilation.input]

            span.add_field("count", len(deplist))
            return deplist


def detect_dependencies(args, compilation, tracer=None, output=None, cancel=None):
    """Convenience wrapper around DependencyDetector.process"""
    detector = DependencyDetector(args, tracer=tracer, output=output, cancel=cancel)
    return detector.process(compilation)

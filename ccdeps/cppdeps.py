import subprocess
import sys

import ccdeps.apptools
import ccdeps.compilation
import ccdeps.depdetect
import ccdeps.preprocessor
import ccdeps.tracing
import ccdeps.utils
import ccdeps.wrappedos


def add_arguments(cap):
    cap.add("filename", help='File to use in "$CXX $CPPFLAGS -M -MF - filename"', nargs="+")
    ccdeps.depdetect.add_arguments(cap)
    ccdeps.utils.add_flag_argument(
        parser=cap,
        name="unique",
        default=False,
        help="Only print the first occurrence of each dependency.")
    cap.add(
        "--print-searchpath",
        dest="print_searchpath",
        action="store_true",
        help="Print the system search path that would be filtered out instead of the dependencies")
    cap.add(
        "--trace",
        action="store_true",
        help="Print how long each step took, and what it found, to stderr")


def main(argv=None):
    cap = ccdeps.apptools.create_parser(
        "Print the files that compiling the given file depends upon, "
        "excluding the files in the compiler's system search path."
    )
    add_arguments(cap)
    args = ccdeps.apptools.parseargs(cap, argv)

    for fname in args.filename:
        if not ccdeps.wrappedos.isfile(fname):
            sys.stderr.write(
                "The supplied filename ({0}) isn't a file. "
                " Did you spell it correctly?  "
                "Another possible reason is that you didn't supply a filename and "
                "that configargparse has picked an unused positional argument from "
                "the config file.\n".format(fname)
            )
            return 1

    tracer = ccdeps.tracing.initialize_tracer(enabled=args.trace)
    detector = ccdeps.depdetect.DependencyDetector(args, tracer=tracer)

    results = []
    try:
        for fname in args.filename:
            compilation = ccdeps.compilation.Compilation.from_flags(
                fname, args.CPPFLAGS, language=args.language
            )
            if args.print_searchpath:
                results.extend(detector.search_path(compilation))
            else:
                results.extend(detector.process(compilation))
    except (
        OSError,
        subprocess.SubprocessError,
        ccdeps.preprocessor.CancelledError,
    ) as err:
        sys.stderr.write("ccdeps: {0}\n".format(err))
        return 1
    finally:
        if args.trace:
            tracer.report(max(args.verbose, 1))

    if args.unique:
        results = ccdeps.utils.ordered_unique(results)

    for dep in results:
        print(dep)

    return 0

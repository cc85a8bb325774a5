import collections
import shlex

import ccdeps.wrappedos

Def = collections.namedtuple("Def", ["opt", "value"])
Include = collections.namedtuple("Include", ["opt", "path"])

# Longest first so that the joined forms match the right option
_DEF_OPTS = ("-D", "-U")
_INCLUDE_OPTS = ("-idirafter", "-isystem", "-iquote", "-I")

# Languages that the C compiler driver is responsible for
_CC_LANGUAGES = ("c", "assembler-with-cpp")


def _split_option(flag, options):
    """ Return (option, attached value) if flag begins with one of the options """
    for opt in options:
        if flag.startswith(opt):
            return opt, flag[len(opt):]
    return None, None


def implied_language(filename):
    """ Guess the -x language from the file extension """
    if ccdeps.wrappedos.isc(filename):
        return "c"
    return "c++"


class Compilation(object):

    """ One compiler invocation that we want the dependencies of.
        The flag groups are kept in command line order.
    """

    def __init__(self, language, input, unknown_args=(), defs=(), includes=()):
        self.language = language
        self.input = input
        self.unknown_args = tuple(unknown_args)
        self.defs = tuple(Def(*dd) for dd in defs)
        self.includes = tuple(Include(*ii) for ii in includes)

    def local_compiler(self, args):
        """ The compiler that runs this compilation on this machine """
        if self.language in _CC_LANGUAGES:
            return args.CC
        return args.CXX

    @classmethod
    def from_flags(cls, filename, flags, language=None):
        """ Sort a CPPFLAGS style string into the defines, the include
            paths and everything else.  Joined forms like -DFOO and -Ipath
            are split so that every option is followed by its own value.
        """
        if flags is None:
            flags = []
        elif isinstance(flags, str):
            flags = shlex.split(flags)

        unknown_args = []
        defs = []
        includes = []
        explicit_language = None
        flags = list(flags)
        ii = 0
        while ii < len(flags):
            flag = flags[ii]
            opt, value = _split_option(flag, _DEF_OPTS)
            target = defs
            if opt is None:
                opt, value = _split_option(flag, _INCLUDE_OPTS)
                target = includes

            if opt is not None:
                if not value:
                    if ii + 1 == len(flags):
                        # Dangling option.  Let the compiler complain about it.
                        unknown_args.append(flag)
                        break
                    ii += 1
                    value = flags[ii]
                target.append((opt, value))
            else:
                if flag == "-x" and ii + 1 < len(flags):
                    explicit_language = flags[ii + 1]
                    unknown_args.extend(flags[ii:ii + 2])
                    ii += 2
                    continue
                if flag.startswith("-x") and len(flag) > 2:
                    explicit_language = flag[2:]
                unknown_args.append(flag)
            ii += 1

        if language is None:
            language = explicit_language
        if language is None:
            language = implied_language(filename)
        return cls(language, filename, unknown_args, defs, includes)

    def __eq__(self, other):
        if not isinstance(other, Compilation):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        return "Compilation(language={0!r}, input={1!r}, unknown_args={2!r}, defs={3!r}, includes={4!r})".format(
            self.language, self.input, self.unknown_args, self.defs, self.includes
        )

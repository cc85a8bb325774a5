import errno
import shutil
import subprocess
import sys
import time

import psutil

# How often a running compiler is checked for cancellation
POLL_INTERVAL = 0.05


class CompilerNotFoundError(FileNotFoundError):
    """ The compiler is not on the PATH """


class CancelledError(Exception):
    """ The compiler was killed because the caller cancelled the operation """


def find_compiler(name):
    """ Resolve the compiler name to the executable that will be run.
        The PATH is searched afresh on every call.
    """
    ccpath = shutil.which(name)
    if ccpath is None:
        raise CompilerNotFoundError(
            errno.ENOENT, "Could not find the compiler on the PATH", name
        )
    return ccpath


def _kill_tree(proc):
    """ Kill the process and everything it spawned (cc1, as, ...) """
    try:
        children = psutil.Process(proc.pid).children(recursive=True)
    except psutil.NoSuchProcess:
        children = []
    for child in children:
        try:
            child.kill()
        except psutil.NoSuchProcess:
            pass
    proc.kill()


class PreProcessor(object):

    """ Make it easy to call the C Pre Processor.
        Stdin is always empty.  The child is killed if the cancel event
        is set or if args.timeout seconds go by.
    """

    def __init__(self, args, cancel=None, output=None):
        self.args = args
        self.cancel = cancel
        self.output = output if output is not None else sys.stderr

    def _deadline(self):
        timeout = getattr(self.args, "timeout", None)
        if timeout:
            return time.monotonic() + timeout
        return None

    def _wait(self, proc, argv):
        deadline = self._deadline()
        if self.cancel is None and deadline is None:
            return proc.communicate()

        while True:
            if self.cancel is not None and self.cancel.is_set():
                _kill_tree(proc)
                proc.communicate()
                raise CancelledError(
                    "Cancelled while running {0}".format(" ".join(argv))
                )
            if deadline is not None and time.monotonic() >= deadline:
                _kill_tree(proc)
                proc.communicate()
                raise subprocess.TimeoutExpired(argv, self.args.timeout)
            try:
                return proc.communicate(timeout=POLL_INTERVAL)
            except subprocess.TimeoutExpired:
                continue

    def run(self, argv, executable=None, capture_stdout=True, capture_stderr=False):
        """ Run argv and return the (stdout, stderr) bytes.
            Streams that are not captured come back as None.
            Uncaptured stdout is discarded, uncaptured stderr goes to our stderr.
        """
        if self.args.verbose >= 4:
            print(" ".join(argv), file=self.output)

        try:
            proc = subprocess.Popen(
                argv,
                executable=executable,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture_stdout else subprocess.DEVNULL,
                stderr=subprocess.PIPE if capture_stderr else None,
            )
        except OSError as err:
            if self.args.verbose >= 1:
                print(
                    "Failed to run {0}  Error={1}".format(argv[0], err),
                    file=self.output,
                )
            raise

        with proc:
            try:
                stdout, stderr = self._wait(proc, argv)
            except BaseException:
                if proc.poll() is None:
                    _kill_tree(proc)
                raise

        if self.args.verbose >= 5:
            if stdout:
                print(stdout.decode("utf-8", errors="replace"), file=self.output)
            if stderr:
                print(stderr.decode("utf-8", errors="replace"), file=self.output)

        if proc.returncode != 0:
            raise subprocess.CalledProcessError(
                proc.returncode, argv, output=stdout, stderr=stderr
            )
        return stdout, stderr

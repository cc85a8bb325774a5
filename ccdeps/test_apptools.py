import io
import os

import pytest

import ccdeps.apptools
import ccdeps.unittesthelper as uth


class TestConfig:
    def setup_method(self):
        uth.reset()

    def teardown_method(self):
        uth.reset()

    def test_defaults(self):
        with uth.EnvironmentContext({"CC": None, "CXX": None, "CPPFLAGS": None}):
            args = uth.create_args([])
        assert args.CC == "gcc"
        assert args.CXX == "g++"
        assert args.CPPFLAGS == ""
        assert args.searchpath == "gcc"
        assert args.timeout is None
        assert args.language is None
        assert args.best_effort_searchpath is False
        assert args.verbose == 0

    def test_verbose_minus_quiet(self):
        args = uth.create_args(["-vvv", "-q"])
        assert args.verbose == 2

    def test_environment_overrides_default(self):
        with uth.EnvironmentContext({"CC": "clang", "CXX": "clang++"}):
            args = uth.create_args([])
        assert args.CC == "clang"
        assert args.CXX == "clang++"

    def test_command_line_overrides_environment(self):
        with uth.EnvironmentContext({"CC": "clang"}):
            args = uth.create_args(["--CC=tcc"])
        assert args.CC == "tcc"

    def test_config_file_hierarchy(self, tmp_path):
        """System config < user config < command line"""
        system_dir = tmp_path / "system"
        user_dir = tmp_path / "user"
        system_dir.mkdir()
        user_dir.mkdir()
        (system_dir / "ccdeps.conf").write_text("CC=system-cc\nCXX=system-cxx\ntimeout=10\n")
        (user_dir / "ccdeps.conf").write_text("CC=user-cc\n")

        with uth.EnvironmentContext({"CC": None, "CXX": None}):
            args = uth.create_args([], tempdir=str(tmp_path))
            assert args.CC == "user-cc"
            assert args.CXX == "system-cxx"
            assert args.timeout == 10.0

            args = uth.create_args(["--CC=cli-cc"], tempdir=str(tmp_path))
            assert args.CC == "cli-cc"

    def test_explicit_config(self, tmp_path):
        configname = uth.create_temp_config(tempdir=str(tmp_path), CC="configured-cc")
        with uth.EnvironmentContext({"CC": None}):
            args = uth.create_args(["-c", configname])
        assert args.CC == "configured-cc"

    def test_best_effort_flag(self):
        assert uth.create_args(["--best-effort-searchpath"]).best_effort_searchpath is True
        assert uth.create_args(["--no-best-effort-searchpath"]).best_effort_searchpath is False

        ccdeps.apptools.resetcallbacks()
        uth.delete_existing_parsers()
        cap = ccdeps.apptools.create_parser("callback test")
        ccdeps.apptools.add_common_arguments(cap)
        ccdeps.apptools.parseargs(cap, ["--CC=again"])
        assert seen == ["cbcc"]

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            uth.create_args(["--version"])
        from ccdeps.version import __version__
        assert __version__ in capsys.readouterr().out

    def test_verbose_print_args(self):
        args = uth.create_args(["--CC=printme"])
        output = io.StringIO()
        ccdeps.apptools.verbose_print_args(args, file=output)
        text = output.getvalue()
        assert "Final aggregated variables" in text
        assert "printme" in text

    def test_very_verbose_prints_config(self, capsys):
        uth.create_args(["-vv", "--CC=loudcc"])
        assert "loudcc" in capsys.readouterr().err


class TestDefaultConfigs:
    def setup_method(self):
        uth.reset()

    def test_only_existing_configs_lowest_priority_first(self, tmp_path):
        import ccdeps.configutils

        system_dir = tmp_path / "system"
        user_dir = tmp_path / "user"
        system_dir.mkdir()
        user_dir.mkdir()
        (system_dir / "ccdeps.conf").write_text("")
        (user_dir / "ccdeps.conf").write_text("")

        with uth.TempDirContext():
            configs = ccdeps.configutils.defaultconfigs(
                user_config_dir=str(user_dir), system_config_dir=str(system_dir)
            )
            dirs = ccdeps.configutils.default_config_directories(
                user_config_dir=str(user_dir), system_config_dir=str(system_dir)
            )
            cwd = os.getcwd()

        assert configs == [
            os.path.join(str(system_dir), "ccdeps.conf"),
            os.path.join(str(user_dir), "ccdeps.conf"),
        ]
        assert dirs == [str(system_dir), str(user_dir), cwd]

    def test_appdirs_defaults(self):
        import appdirs
        import ccdeps.configutils

        dirs = ccdeps.configutils.default_config_directories()
        assert dirs[0] == appdirs.site_config_dir(appname="ccdeps")
        assert dirs[1] == appdirs.user_config_dir(appname="ccdeps")

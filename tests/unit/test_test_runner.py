"""Unit tests for the run_tests.py command builder."""

import sys

import pytest
from hypothesis import settings as hypothesis_settings

import run_tests


class TestBuildCommand:
    """Test suite selection and pytest arguments."""

    def test_defaults_run_both_suites(self):
        cmd = run_tests.build_command(run_tests.parse_args([]))

        assert cmd[:3] == [sys.executable, "-m", "pytest"]
        assert "tests/unit" in cmd
        assert "tests/property" in cmd
        assert "-m" not in cmd

    def test_property_only(self):
        cmd = run_tests.build_command(run_tests.parse_args(["--property"]))

        assert "tests/property" in cmd
        assert "tests/unit" not in cmd

    def test_unit_only(self):
        cmd = run_tests.build_command(run_tests.parse_args(["--unit"]))

        assert "tests/unit" in cmd
        assert "tests/property" not in cmd

    def test_coverage_targets_package(self):
        cmd = run_tests.build_command(run_tests.parse_args(["--coverage"]))

        assert "--cov=insights_server" in cmd
        assert "--cov-fail-under=80" in cmd

    def test_keyword_and_failfast(self):
        cmd = run_tests.build_command(run_tests.parse_args(["-k", "rollup", "-x"]))

        assert cmd[cmd.index("-k") + 1] == "rollup"
        assert "-x" in cmd

    def test_no_fast_option(self):
        with pytest.raises(SystemExit):
            run_tests.parse_args(["--fast"])


class TestHypothesisProfile:
    """Test the profile handed to the pytest process."""

    def test_default_profile(self):
        env = run_tests.build_env(run_tests.parse_args([]))

        assert env["HYPOTHESIS_PROFILE"] == "ci"

    def test_profile_switch(self):
        env = run_tests.build_env(run_tests.parse_args(["--property", "--profile", "thorough"]))

        assert env["HYPOTHESIS_PROFILE"] == "thorough"

    def test_unknown_profile_rejected(self):
        with pytest.raises(SystemExit):
            run_tests.parse_args(["--profile", "huge"])

    @pytest.mark.parametrize(
        "profile,examples",
        [("quick", 10), ("ci", 100), ("thorough", 1000)],
    )
    def test_profiles_registered(self, profile, examples):
        assert profile in run_tests.HYPOTHESIS_PROFILES
        assert hypothesis_settings.get_profile(profile).max_examples == examples

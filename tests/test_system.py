"""Tests for system package and locale setup."""

import pytest

from clusterprep.errors import SystemPackagesFailed
from clusterprep.installer import (
    InstallationOutcome,
    PackageManager,
    check_iso_tooling,
    configure_locale,
    install_system_packages,
)
from clusterprep.installer.profiles import get_profile
from clusterprep.installer.system import find_missing_packages, locale_available
from tests.conftest import FakeRunner

APT = get_profile(PackageManager.APT)
DNF = get_profile(PackageManager.DNF)


class TestInstallSystemPackages:
    @pytest.mark.asyncio
    async def test_all_present_runs_no_package_manager(self, config, runner):
        result = await install_system_packages(APT, config, runner)

        assert result.outcome == InstallationOutcome.ALREADY_PRESENT
        assert all(c.startswith("dpkg -s ") for c in runner.commands)
        assert len(runner.commands) == len(APT.packages)
        assert not runner.matching("apt-get")

    @pytest.mark.asyncio
    async def test_installs_only_missing(self, config, runner):
        runner.respond("dpkg -s jq ", ("", 1)).respond("dpkg -s xorriso ", ("", 1))

        result = await install_system_packages(APT, config, runner)

        assert result.outcome == InstallationOutcome.INSTALLED
        assert runner.commands[-2] == "sudo apt-get update -y"
        assert runner.commands[-1] == "sudo apt-get install -y jq xorriso"
        assert result.detail == "jq xorriso"

    @pytest.mark.asyncio
    async def test_no_sudo_when_root(self, config, runner):
        from dataclasses import replace

        root_config = replace(config, use_sudo=False)
        runner.respond("dpkg -s jq ", ("", 1))

        await install_system_packages(APT, root_config, runner)

        assert runner.commands[-1] == "apt-get install -y jq"

    @pytest.mark.asyncio
    async def test_apt_failure_is_fatal(self, config, runner):
        runner.respond("dpkg -s jq ", ("", 1))
        runner.respond("apt-get install", ("E: Unable to locate package jq", 100))

        with pytest.raises(SystemPackagesFailed) as exc_info:
            await install_system_packages(APT, config, runner)

        assert "Unable to locate package" in str(exc_info.value)
        assert exc_info.value.exit_code == 5

    @pytest.mark.asyncio
    async def test_apt_refresh_failure_is_fatal(self, config, runner):
        runner.respond("dpkg -s jq ", ("", 1))
        runner.respond("apt-get update", ("network down", 100))

        with pytest.raises(SystemPackagesFailed):
            await install_system_packages(APT, config, runner)

        assert not runner.matching("apt-get install")

    @pytest.mark.asyncio
    async def test_dnf_failure_degrades(self, config, runner):
        runner.respond("rpm -q gcc", ("package gcc is not installed", 1))
        runner.respond("dnf install", ("No match for argument", 1))

        result = await install_system_packages(DNF, config, runner)

        assert result.outcome == InstallationOutcome.SKIPPED_WITH_WARNING
        assert "No match for argument" in result.detail
        assert runner.commands[-1] == "sudo dnf install -y gcc"

    @pytest.mark.asyncio
    async def test_find_missing_packages_uses_locale_env(self, config, runner):
        runner.respond("rpm -q python3-devel", ("", 1))

        missing = await find_missing_packages(DNF, config, runner)

        assert missing == ["python3-devel"]
        assert all(c.env["LANG"] == "en_US.UTF-8" for c in runner.calls)


class TestConfigureLocale:
    @pytest.mark.asyncio
    async def test_skipped_when_locale_present(self, config, runner):
        runner.respond("locale -a", ("C\nC.utf8\nen_US.utf8\nPOSIX", 0))

        result = await configure_locale(APT, config, runner)

        assert result.outcome == InstallationOutcome.ALREADY_PRESENT
        assert runner.commands == ["locale -a"]

    @pytest.mark.asyncio
    async def test_locale_matching_is_normalized(self, config, runner):
        runner.respond("locale -a", ("en_US.UTF-8", 0))
        assert await locale_available(config, runner)

    @pytest.mark.asyncio
    async def test_apt_steps_all_run(self, config, runner):
        runner.respond("locale -a", ("C\nPOSIX", 0))

        result = await configure_locale(APT, config, runner)

        assert result.outcome == InstallationOutcome.INSTALLED
        steps = runner.commands[1:]
        assert len(steps) == 5
        assert "/etc/locale.gen" in steps[0]
        assert steps[1] == "sudo locale-gen en_US.UTF-8"
        assert steps[2] == "sudo localedef -i en_US -f UTF-8 en_US.UTF-8"
        assert "/etc/default/locale" in steps[3]
        assert steps[4] == "sudo update-locale LANG=en_US.UTF-8 LC_ALL=en_US.UTF-8"

    @pytest.mark.asyncio
    async def test_failures_are_not_fatal(self, config, runner):
        runner.respond("locale -a", ("", 1))
        runner.respond("locale-gen", ("locale-gen: command not found", 127))
        runner.respond("update-locale", ("failed", 1))

        result = await configure_locale(APT, config, runner)

        assert result.outcome == InstallationOutcome.SKIPPED_WITH_WARNING
        assert "locale-gen" in result.detail
        assert "update-locale" in result.detail
        assert len(runner.commands) == 6

    @pytest.mark.asyncio
    async def test_rpm_uses_localectl(self, config, runner):
        runner.respond("locale -a", ("C", 0))
        runner.respond("localectl", ("Failed to connect to bus", 1))

        result = await configure_locale(DNF, config, runner)

        assert result.outcome == InstallationOutcome.SKIPPED_WITH_WARNING
        assert runner.commands[-1] == "sudo localectl set-locale LANG=en_US.UTF-8"


class TestIsoTooling:
    def test_present(self, config):
        runner = FakeRunner().make_available("xorriso")

        result = check_iso_tooling(config, runner)

        assert result.outcome == InstallationOutcome.ALREADY_PRESENT

    def test_missing_warns(self, config, runner, capsys):
        result = check_iso_tooling(config, runner)

        assert result.outcome == InstallationOutcome.SKIPPED_WITH_WARNING
        out = capsys.readouterr().out
        assert "no ISO creation tool found" in out
        assert "KUBECTL_DOWNLOAD_URL" in out

"""Tests for the completion summary."""

from clusterprep.installer import BootstrapReport, InstallationOutcome, StepResult
from clusterprep.report import render_next_steps, render_summary


def test_summary_lists_every_step():
    report = BootstrapReport()
    report.add(
        StepResult("system packages", InstallationOutcome.ALREADY_PRESENT),
        StepResult("python requirements", InstallationOutcome.FAILED, "pip exploded"),
        StepResult("kubectl", InstallationOutcome.INSTALLED, "/usr/local/bin/kubectl"),
    )

    summary = render_summary(report)

    assert "system packages: already present" in summary
    assert "python requirements: failed (pip exploded)" in summary
    assert "kubectl: installed" in summary
    assert "/usr/local/bin/kubectl" not in summary
    assert [s.name for s in report.warnings] == ["python requirements"]


def test_next_steps(config):
    text = render_next_steps(config)

    assert f"source {config.venv_dir}/bin/activate" in text
    assert "cd ansible" in text

"""Console summary and next-step instructions."""

import click

from .config import BootstrapConfig
from .installer import BootstrapReport


def render_summary(report: BootstrapReport) -> str:
    lines = ["Summary:"]
    for step in report.steps:
        line = f"  {step.outcome.icon} {step.name}: {step.outcome.value.replace('_', ' ')}"
        if step.degraded and step.detail:
            line += f" ({step.detail})"
        lines.append(line)
    return "\n".join(lines)


def render_next_steps(config: BootstrapConfig) -> str:
    activate = config.venv_bin_dir / "activate"
    return (
        "Setup completed.\n"
        "\n"
        "Next steps:\n"
        "  1) Activate the virtualenv:\n"
        f"     source {activate}\n"
        "\n"
        "  2) Run the playbook (example):\n"
        "     cd ansible\n"
        "     ansible-playbook site.yml -i inventory/host_vars/homelab.yml"
    )


def print_completion(config: BootstrapConfig, report: BootstrapReport) -> None:
    click.echo("")
    click.echo(render_summary(report))
    if report.warnings:
        click.secho(
            f"\n{len(report.warnings)} step(s) completed with warnings; "
            "rerun clusterprep after fixing them.",
            fg="yellow",
        )
    click.echo("")
    click.echo(render_next_steps(config))

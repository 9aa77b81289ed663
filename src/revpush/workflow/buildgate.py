from __future__ import annotations

import logging
from dataclasses import replace

import typer

from revpush.core.conduit import parse_buildable, parse_builds
from revpush.core.models import BuildableState, BuildableStatus
from revpush.shell.conduit_client import ConduitClient, ConduitError
from revpush.shell.console import Console
from revpush.workflow.errors import UserAbort

logger = logging.getLogger(__name__)

_WARNINGS = {
    BuildableState.BUILDING: (
        "Builds are still running for the active diff of this revision:",
        "Push revision anyway, despite ongoing build?",
    ),
    BuildableState.FAILED: (
        "Builds failed for the active diff of this revision. Build failures:",
        "Push revision anyway, despite build failures?",
    ),
}


class BuildGate:
    """Warn before pushing a revision whose active diff is still building or failed.

    The check is advisory: servers without the build API, diffs without a
    buildable and unknown statuses all pass silently.
    """

    def __init__(self, client: ConduitClient, console: Console) -> None:
        self.client = client
        self.console = console

    def fetch(self, active_diff_phid: str) -> BuildableStatus | None:
        try:
            raw_buildables = self.client.query_buildables([active_diff_phid])
        except ConduitError as exc:
            logger.debug("skipping build check: %s", exc)
            return None
        if not raw_buildables:
            return None
        return parse_buildable(raw_buildables[0])

    def check(self, active_diff_phid: str | None) -> None:
        if not active_diff_phid:
            return
        buildable = self.fetch(active_diff_phid)
        if buildable is None:
            return

        if buildable.status == BuildableState.PASSED:
            self.console.badge("BUILDS PASSED", typer.colors.GREEN, "Builds for the active diff completed successfully.")
            return

        warning = _WARNINGS.get(buildable.status)
        if warning is None:
            logger.debug("unrecognized buildable status %r", buildable.status)
            return
        message, prompt = warning

        buildable = replace(buildable, builds=parse_builds(self.client.query_builds([buildable.phid])))
        self.console.echo(f"{message}\n")
        for build in buildable.builds:
            color = typer.colors.RED if build.failed else typer.colors.YELLOW
            self.console.badge(build.status_name.upper(), color, f"Build {build.id}: {build.name}", indent="    ")
        if buildable.uri:
            self.console.echo(f"\nYou can review build details here:\n\n    {buildable.uri}\n")

        if not self.console.confirm(prompt):
            raise UserAbort("build status")

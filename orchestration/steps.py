"""
Audit step activities.

Each activity receives a StepContext and returns a StepOutcome. Command
failures come back as unsuccessful outcomes; an activity raises only when
the scan itself cannot be performed, which the run controller records as a
failed step.
"""

import asyncio

from core.domain.entities import DetectedIssue
from core.domain.enums import IssueSeverity, IssueType
from core.infrastructure.logging import get_logger

from .executor import CommandResult, combine
from .models import StepContext, StepOutcome
from .scanners import parse_grep_matches, scan_form_inputs, scan_log_errors
from .workflow import StepDefinition, StepRegistry

logger = get_logger("orchestration.steps")

INSTALL_DEPENDENCIES = "Install Dependencies"
DEV_SERVER_TEST = "Dev Server Test"
LINT = "Lint"
BLOCKED_INPUT_SCAN = "Blocked-Input Scan"
PRODUCTION_SIMULATION = "Production Simulation"
CONSOLE_NETWORK_CHECK = "Console/Network Check"

# exit status of coreutils `timeout` when it had to stop the command
SERVE_WINDOW_EXPIRED_CODE = 124
# grep: 0 = matches, 1 = no matches, anything else is an error
GREP_NO_MATCH_CODE = 1

BLOCKED_ATTRIBUTES = ("readonly", "disabled")
BLOCKED_INPUT_RECOMMENDATION = "Remove disabled or readonly attributes from form inputs"


def _outcome(result: CommandResult) -> StepOutcome:
    return StepOutcome(success=result.success, output=result.output)


async def _run(ctx: StepContext, argv: list[str]) -> CommandResult:
    command, *args = argv
    return await ctx.executor.run(command, args)


async def _serve_briefly(ctx: StepContext, argv: list[str]) -> CommandResult:
    """Run a long-lived command for a bounded time; still alive at the end is ok."""
    seconds = ctx.settings.serve_window_seconds
    result = await ctx.executor.run("timeout", [f"{seconds}s", *argv])
    if result.return_code == SERVE_WINDOW_EXPIRED_CODE:
        result.success = True
        result.output = result.stdout or f"{' '.join(argv)} still running after {seconds}s"
    return result


# =========================================================================
# ACTIVITIES
# =========================================================================


async def install_dependencies(ctx: StepContext) -> StepOutcome:
    return _outcome(await _run(ctx, ctx.settings.install_command))


async def dev_server_test(ctx: StepContext) -> StepOutcome:
    """Start the dev server briefly, then scan the components for blocked inputs."""
    dev = await _serve_briefly(ctx, ctx.settings.dev_command)

    root = ctx.settings.project_dir / ctx.settings.form_scan_dir
    findings = await asyncio.to_thread(scan_form_inputs, root)
    form_output = "\n".join(str(f) for f in findings) or "No form issues detected"

    return StepOutcome(
        success=dev.success and not findings,
        output=f"Dev server test: {dev.output}\nForm scan: {form_output}",
    )


async def lint(ctx: StepContext) -> StepOutcome:
    return _outcome(await _run(ctx, ctx.settings.lint_command))


async def blocked_input_scan(ctx: StepContext) -> StepOutcome:
    """
    Grep the project for readonly/disabled attributes in components.

    Every matched line is reported as a critical form_input issue. The step
    succeeds whatever it finds.

    Raises:
        RuntimeError: If grep cannot run or exits with an error
    """
    sections: list[str] = []
    for attribute in BLOCKED_ATTRIBUTES:
        result = await ctx.executor.run(
            "grep",
            [
                "-r", "-n", "-i", attribute, ".",
                "--include=*.tsx", "--include=*.jsx",
                "--exclude-dir=node_modules",
            ],
        )
        if result.return_code == GREP_NO_MATCH_CODE:
            continue
        if not result.success:
            raise RuntimeError(f"grep for {attribute} failed: {result.output.strip()}")

        matches = parse_grep_matches(result.stdout)
        for match in matches:
            await ctx.report_issue(
                DetectedIssue(
                    type=IssueType.FORM_INPUT,
                    severity=IssueSeverity.CRITICAL,
                    title="Form Input Blocked",
                    description=match.content,
                    run_id=ctx.run_id,
                    file_path=match.path,
                    line_number=match.line_number,
                    recommendation=BLOCKED_INPUT_RECOMMENDATION,
                )
            )
        logger.info(f"{len(matches)} {attribute} match(es) in run {ctx.run_id}")
        sections.append(f"{attribute.capitalize()} attributes found:\n{result.stdout.rstrip()}")

    return StepOutcome(success=True, output="\n\n".join(sections) or "No blocked inputs found")


async def production_simulation(ctx: StepContext) -> StepOutcome:
    build = await _run(ctx, ctx.settings.build_command)
    if not build.success:
        return _outcome(build)

    serve = await _serve_briefly(ctx, ctx.settings.start_command)
    return _outcome(combine(("Build", build), ("Production test", serve)))


async def console_network_check(ctx: StepContext) -> StepOutcome:
    log_dirs = [ctx.settings.project_dir / d for d in ctx.settings.log_dirs]
    errors = await asyncio.to_thread(scan_log_errors, log_dirs)
    if errors:
        return StepOutcome(success=False, output="\n".join(errors))
    return StepOutcome(success=True, output="No console errors detected in log files")


def build_default_registry() -> StepRegistry:
    """The audit sequence, in execution order."""
    return StepRegistry(
        [
            StepDefinition(INSTALL_DEPENDENCIES, install_dependencies),
            StepDefinition(DEV_SERVER_TEST, dev_server_test),
            StepDefinition(LINT, lint),
            StepDefinition(BLOCKED_INPUT_SCAN, blocked_input_scan),
            StepDefinition(PRODUCTION_SIMULATION, production_simulation),
            StepDefinition(CONSOLE_NETWORK_CHECK, console_network_check),
        ]
    )

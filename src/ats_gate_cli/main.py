"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ats_gate_core.config.settings import Settings
from ats_gate_core.exceptions import AtsGateError
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.policy import ConfidenceBucket
from ats_gate_core.models.run import ScoringOutcome, ScoringRequest
from ats_gate_infra.cache.requirements_cache import DiskRequirementsCache
from ats_gate_infra.db.telemetry_db import TelemetryDatabase
from ats_gate_scoring.agents.requirements_extractor import RequirementsExtractor
from ats_gate_scoring.agents.soft_fit import FixedSoftFitScorer, SoftFitScorer
from ats_gate_scoring.batch import BatchItemResult, score_batch
from ats_gate_scoring.confidence import compute_confidence_bucket
from ats_gate_scoring.engine import ATSEngine
from ats_gate_scoring.observability import (
    CostTracker,
    TelemetryEmitter,
    configure_logging,
)
from ats_gate_scoring.pipeline import ScoringPipeline
from ats_gate_scoring.policy import evaluate_gate_decision, get_policy, get_profile_kpis

app = typer.Typer(
    name="ats-gate",
    help="Explainable ATS scoring and policy gating",
)
console = Console()
logger = structlog.get_logger()


def _error(message: str) -> None:
    """Print an error line without wrapping it at the terminal width."""
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        _error(f"{path} is not valid JSON: {exc.msg}")
        raise typer.Exit(code=1) from exc


def _build_settings(verbose: bool, telemetry: bool) -> Settings:
    settings = Settings()
    if verbose:
        settings.log_level = "DEBUG"
    if telemetry:
        settings.telemetry_enabled = True
    configure_logging(settings)
    return settings


async def _run_with_pipeline(
    settings: Settings,
    soft_score: int | None,
    requests_factory: Any,
    runner: Any,
) -> Any:
    """Wire engine, telemetry and extractor, run ``runner`` and clean up."""
    database = None
    sink = None
    if settings.telemetry_enabled:
        database = TelemetryDatabase(settings.database_url)
        await database.create_tables()
        sink = database.sink()
    telemetry = TelemetryEmitter(sink)
    tracker = CostTracker(
        max_cost_usd=settings.max_cost_per_run_usd,
        warn_threshold_usd=settings.warn_cost_threshold_usd,
    )

    soft_fit = (
        FixedSoftFitScorer(soft_score, details="Fixed soft score (CLI)")
        if soft_score is not None
        else SoftFitScorer(settings, cost_tracker=tracker, telemetry=telemetry)
    )
    cache = DiskRequirementsCache(settings.cache_dir)
    extractor = RequirementsExtractor(
        settings, cache=cache, cost_tracker=tracker, telemetry=telemetry
    )
    pipeline = ScoringPipeline(
        settings, engine=ATSEngine(settings, soft_fit=soft_fit), telemetry=telemetry
    )
    try:
        requests = await requests_factory(extractor)
        return await runner(pipeline, requests)
    finally:
        cache.close()
        if database is not None:
            await database.dispose()
        logger.info("cli_run_cost", **tracker.summary())


def _request_from_files(
    job: dict[str, Any], candidate: dict[str, Any], profile: str | None
) -> Any:
    async def _factory(extractor: RequirementsExtractor) -> list[ScoringRequest]:
        title = str(job.get("title") or job.get("job_title") or "")
        description = str(job.get("description") or job.get("job_description") or "")
        requirements = job.get("requirements")
        if requirements is None:
            requirements = await extractor.extract(
                title, description, job.get("location"), job.get("job_id")
            )
        return [
            ScoringRequest(
                job_title=title,
                job_description=description,
                requirements=requirements,
                candidate=CandidateProfile.model_validate(candidate),
                profile=profile,
                job_id=job.get("job_id"),
                override_threshold=job.get("override_threshold"),
            )
        ]

    return _factory


def _print_outcome(outcome: ScoringOutcome) -> None:
    result = outcome.result
    table = Table(title=f"ATS score {result.total_score}/100 (profile {outcome.profile})")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Details")
    for name, dim in result.dimensions.items():
        weight = result.weights_used.get(name, 0.0)
        table.add_row(str(name), str(dim.score), f"{weight:.2f}", dim.details)
    console.print(table)
    console.print(f"[bold]Reason:[/bold] {result.reason}")
    console.print(
        f"[bold]Confidence:[/bold] {outcome.confidence.confidence} "
        f"({outcome.confidence_bucket}), evidence={outcome.confidence.evidence_count}"
    )
    gate = outcome.gate
    if not gate.passes:
        colour = "red"
    elif gate.recommend_review:
        colour = "yellow"
    else:
        colour = "green"
    console.print(f"[bold {colour}]Gate:[/bold {colour}] {gate.reason}")
    if result.missing_keywords:
        console.print(f"[dim]Missing must-haves: {', '.join(result.missing_keywords)}[/dim]")


@app.command()
def score(
    job_file: Path = typer.Argument(
        ..., help="Job JSON (title, description, requirements)", exists=True
    ),
    candidate_file: Path = typer.Argument(..., help="Candidate profile JSON", exists=True),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Operating profile (A or C)"),
    soft_score: int | None = typer.Option(
        None, "--soft-score", min=0, max=100, help="Use a fixed soft-fit score instead of the LLM"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full outcome as JSON"),
    telemetry: bool = typer.Option(False, "--telemetry", help="Write events to the database"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Score one candidate against one job and apply the gate."""
    settings = _build_settings(verbose, telemetry)
    job = _load_json(job_file)
    candidate = _load_json(candidate_file)

    async def _runner(pipeline: ScoringPipeline, requests: list[ScoringRequest]) -> ScoringOutcome:
        return await pipeline.run(requests[0])

    try:
        outcome = asyncio.run(
            _run_with_pipeline(
                settings, soft_score, _request_from_files(job, candidate, profile), _runner
            )
        )
    except (AtsGateError, ValidationError) as exc:
        _error(str(exc))
        raise typer.Exit(code=1) from exc

    if as_json:
        console.print_json(outcome.model_dump_json())
    else:
        _print_outcome(outcome)


@app.command()
def batch(
    requests_file: Path = typer.Argument(..., help="JSON list of scoring requests", exists=True),
    soft_score: int | None = typer.Option(
        None, "--soft-score", min=0, max=100, help="Use a fixed soft-fit score instead of the LLM"
    ),
    concurrency: int | None = typer.Option(None, "--concurrency", min=1, help="Max in flight"),
    telemetry: bool = typer.Option(False, "--telemetry", help="Write events to the database"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Score a batch of candidate/job pairs with bounded concurrency."""
    settings = _build_settings(verbose, telemetry)
    raw = _load_json(requests_file)
    if not isinstance(raw, list):
        _error("requests file must contain a JSON list")
        raise typer.Exit(code=1)
    try:
        parsed = [ScoringRequest.model_validate(item) for item in raw]
    except ValidationError as exc:
        _error(str(exc))
        raise typer.Exit(code=1) from exc

    async def _factory(extractor: RequirementsExtractor) -> list[ScoringRequest]:
        return parsed

    async def _runner(
        pipeline: ScoringPipeline, requests: list[ScoringRequest]
    ) -> list[BatchItemResult]:
        return await score_batch(pipeline, requests, max_concurrency=concurrency)

    results = asyncio.run(_run_with_pipeline(settings, soft_score, _factory, _runner))

    table = Table(title=f"Batch results ({len(results)})")
    table.add_column("#", justify="right")
    table.add_column("Candidate")
    table.add_column("Job")
    table.add_column("Score", justify="right")
    table.add_column("Gate")
    for item in results:
        if item.outcome is None:
            table.add_row(
                str(item.index), item.candidate_id or "-", item.job_id or "-", "-",
                f"[red]error: {item.error}[/red]",
            )
            continue
        gate = item.outcome.gate
        verdict = "review" if gate.recommend_review else ("pass" if gate.passes else "block")
        table.add_row(
            str(item.index), item.candidate_id or "-", item.job_id or "-",
            str(item.outcome.result.total_score), verdict,
        )
    console.print(table)

    if any(not item.ok for item in results):
        raise typer.Exit(code=1)


@app.command()
def gate(
    score_value: int = typer.Argument(..., min=0, max=100, metavar="SCORE", help="ATS score"),
    bucket: ConfidenceBucket = typer.Option(
        ConfidenceBucket.MODERATE, "--bucket", "-b", help="Confidence bucket"
    ),
    profile: str = typer.Option("A", "--profile", "-p", help="Operating profile (A or C)"),
    threshold: int | None = typer.Option(None, "--threshold", help="Job-level threshold override"),
) -> None:
    """Evaluate the apply gate for a score."""
    decision = evaluate_gate_decision(score_value, bucket, get_policy(profile), threshold)
    console.print_json(decision.model_dump_json())


@app.command()
def policy(
    profile: str = typer.Argument("A", help="Operating profile (A or C)"),
) -> None:
    """Show an operating profile's configuration."""
    config = get_policy(profile)
    console.print(f"[bold]Profile {config.profile}:[/bold] {config.display_name}")

    thresholds = Table(title="Gate thresholds")
    thresholds.add_column("Confidence")
    thresholds.add_column("Threshold", justify="right")
    for b in ConfidenceBucket:
        thresholds.add_row(str(b), str(config.gate_thresholds.for_bucket(b)))
    console.print(thresholds)

    if config.weight_overrides:
        overrides = ", ".join(f"{k}={v:.2f}" for k, v in config.weight_overrides.items())
        console.print(f"Weight overrides: {overrides}")
    else:
        console.print("Weight overrides: engine defaults")

    automation = config.allowed_automation.model_dump()
    console.print(
        "Automation: " + ", ".join(f"{k}={'on' if v else 'off'}" for k, v in automation.items())
    )
    governance = config.governance.model_dump()
    console.print("Governance: " + ", ".join(f"{k}={v}" for k, v in governance.items()))
    console.print(f"Min confidence for normal gate: {config.min_confidence_for_normal_gate}")

    kpis = Table(title="KPIs")
    kpis.add_column("Key")
    kpis.add_column("Label")
    kpis.add_column("Unit")
    kpis.add_column("Better")
    for kpi in get_profile_kpis(config):
        kpis.add_row(kpi.key, kpi.label, kpi.unit, "higher" if kpi.higher_is_better else "lower")
    console.print(kpis)


@app.command("bucket")
def bucket_cmd(
    confidence: int = typer.Argument(..., min=0, max=100, help="Evidence confidence 0-100"),
) -> None:
    """Map a confidence integer to its bucket."""
    console.print(str(compute_confidence_bucket(confidence)))


@app.command("prune-cache")
def prune_cache() -> None:
    """Drop expired and outdated entries from the requirements cache."""
    settings = _build_settings(verbose=False, telemetry=False)
    cache = DiskRequirementsCache(settings.cache_dir)
    try:
        removed = asyncio.run(cache.prune())
        console.print(f"Removed {removed} cached requirement entries, {len(cache)} kept")
    finally:
        cache.close()


@app.command()
def version() -> None:
    """Show version."""
    console.print("ats-gate v0.1.0")


if __name__ == "__main__":
    app()

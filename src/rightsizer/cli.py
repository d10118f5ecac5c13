# src/rightsizer/cli.py
"""Rightsizing advisor CLI - advisory output only, nothing is applied to the cluster."""

import json
import sys
import traceback
from pathlib import Path

import click
import structlog
from pydantic import ValidationError

from rightsizer.analytics.growth import estimate_growth
from rightsizer.analytics.patterns import classify_pattern, detect_seasonal_pattern
from rightsizer.analytics.policies import DEFAULT_POLICY_TABLES
from rightsizer.analytics.rightsizing import (
    RightsizingPolicy,
    rank_recommendations,
    summarize_recommendations,
)
from rightsizer.analytics.statistics import compute_percentiles
from rightsizer.config.settings import Settings
from rightsizer.core.exceptions import InsufficientDataError, RightsizerException
from rightsizer.core.utils import format_bytes, format_cpu, setup_logging
from rightsizer.pricing.factory import create_provider
from rightsizer.scan import load_document, observations_from_document, parse_series

logger = structlog.get_logger(__name__)


def _fail(message: str, debug: bool) -> None:
    click.echo(f"❌ {message}", err=True)
    if debug:
        click.echo(traceback.format_exc(), err=True)
    sys.exit(1)


@click.group()
def cli():
    """Kubernetes rightsizing advisor."""


@cli.command()
@click.argument('scan_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--provider', default=None, help='Pricing provider (aws, azure, gcp, default)')
@click.option('--region', default=None, help='Pricing region')
@click.option('--preset', type=click.Choice(['dev', 'production', 'critical']), default=None,
              help='Lookback preset (dev: 3 days, production: 14 days, critical: 30 days)')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--output', '-o', default=None, help='Write output to this file instead of stdout')
@click.option('--actionable-only', is_flag=True, help='Only show SCALE_DOWN and RIGHT_SIZE recommendations')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def recommend(scan_file, provider, region, preset, output_format, output, actionable_only, verbose, debug):
    """
    Recommend resource requests for every workload in SCAN_FILE.

    SCAN_FILE is a YAML or JSON document with a 'workloads' list; each entry
    carries namespace, name, kind, pods and optional cpu_samples /
    memory_samples series.

    Example:
        rightsizer recommend scan.yaml --preset production --format json
    """
    try:
        settings = Settings.create_from_env()
        setup_logging(
            config_path=settings.logging_config_path,
            log_level="DEBUG" if debug else settings.log_level.value,
            json_logs=settings.json_logs
        )

        analysis = settings.analysis
        if preset:
            analysis = analysis.apply_preset(preset)

        pricing_settings = settings.pricing
        overrides = {}
        if provider:
            overrides["provider"] = provider.strip().lower()
        if region:
            overrides["region"] = region
        if overrides:
            pricing_settings = pricing_settings.model_copy(update=overrides)

        document = load_document(scan_file)
        cluster = document.get("cluster") or {}
        pricing = create_provider(pricing_settings,
                                  provider_id=cluster.get("provider_id"),
                                  labels=cluster.get("node_labels"))

        if verbose:
            click.echo(f"🔍 Analyzing {scan_file}")
            click.echo(f"📅 Lookback: {analysis.lookback_days} days at {analysis.resolution_minutes}m resolution")
            click.echo(f"💰 Pricing: {pricing.name} ({pricing.region})")

        observations = observations_from_document(
            document, analysis.lookback_days, analysis.resolution_minutes, DEFAULT_POLICY_TABLES
        )

        policy = RightsizingPolicy(DEFAULT_POLICY_TABLES, analysis.thresholds())
        recommendations = rank_recommendations(policy.recommend(obs, pricing) for obs in observations)
        if actionable_only:
            recommendations = [r for r in recommendations if r.is_actionable]

        summary = summarize_recommendations(recommendations)

        if output_format == 'json':
            rendered = json.dumps({
                "recommendations": [r.model_dump(mode="json") for r in recommendations],
                "summary": summary,
            }, indent=2)
        else:
            blocks = [r.describe() for r in recommendations]
            blocks.append(
                f"Summary: {summary['total']} workloads, "
                f"{summary['right_size']} right-size, {summary['scale_down']} scale-down, "
                f"{summary['no_action']} no action - "
                f"potential savings ${summary['total_monthly_savings']:.2f}/month"
            )
            rendered = "\n\n".join(blocks)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(rendered + "\n")
            click.echo(f"✅ {summary['total']} recommendations written to: {output_path}")
        else:
            click.echo(rendered)

    except (RightsizerException, ValidationError, ValueError) as e:
        _fail(f"Recommendation failed: {e}", debug)


@cli.command()
@click.argument('series_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--memory', is_flag=True, help='Treat values as memory bytes instead of CPU millicores')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def stats(series_file, memory, debug):
    """
    Print percentiles, pattern, seasonal pattern and growth for one series.

    SERIES_FILE is a YAML or JSON document {samples: [[timestamp, value], ...]}.
    """
    try:
        setup_logging(log_level="DEBUG" if debug else "WARNING")

        document = load_document(series_file)
        samples = parse_series(document.get("samples"))
        summary = compute_percentiles(samples)
        pattern = classify_pattern(samples)
        seasonal = detect_seasonal_pattern(samples)

        def fmt(value: float) -> str:
            return format_bytes(value) if memory else format_cpu(value)

        click.echo(f"📊 Samples: {len(samples)}")
        click.echo(f"   Average: {fmt(summary.average)}")
        click.echo(f"   P50: {fmt(summary.p50)}  P90: {fmt(summary.p90)}  "
                   f"P95: {fmt(summary.p95)}  P99: {fmt(summary.p99)}")
        click.echo(f"   Min: {fmt(summary.min)}  Peak: {fmt(summary.peak)}")
        click.echo(f"📈 Pattern: {pattern.type.value} (CV: {pattern.variation:.2f}, "
                   f"confidence: {pattern.confidence:.2f})")
        click.echo(f"🕘 Seasonal: {seasonal.value}")

        try:
            growth = estimate_growth(samples)
            click.echo(f"📉 Growth: {growth.rate_per_month:+.1f}%/month (R²: {growth.confidence:.2f}), "
                       f"3 month: {fmt(growth.predicted_3_month)}, 6 month: {fmt(growth.predicted_6_month)}")
        except InsufficientDataError as e:
            click.echo(f"📉 Growth: n/a ({e.message})")

    except (RightsizerException, ValidationError, ValueError) as e:
        _fail(f"Statistics failed: {e}", debug)


if __name__ == '__main__':
    cli()

#!/usr/bin/env python3
"""
Command-line entry point of SiteDrift.

Commands:
  snapshot  Crawl a documentation site and save its tree as a JSON snapshot
  diff      Compare a stored snapshot with the live site
  config    Show the effective configuration

Global options:
  --config PATH       YAML/JSON config file (configs/default.yaml if present)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only if omitted)
  --log-format FORMAT Logging format string

snapshot options:
  --url URL               Site to crawl (env BASE_URL)
  --rate-limit-delay MS   Minimum delay before each fetch (env RATE_LIMIT_DELAY, default 50)
  --max-depth N           Maximum crawl depth (env MAX_DEPTH, default 5)
  --out-dir DIR           Snapshot directory (default: snapshots)
  --revision TEXT         Revision marker of the file name, no "-" (default: git short hash)

diff options:
  --path PATH         Snapshot file to compare (default: newest snapshot of --url)
  --snapshots-dir DIR Directory searched without --path (default: snapshots)
  --url URL           Base URL of the live site
  --json PATH         Save a JSON drift report
  --html PATH         Save an HTML drift report
  --fail-on-drift     Exit with status 1 when drift is found

Additionally:
  --version, -v       Show the SiteDrift version

Example:
  site-drift snapshot --url https://docs.trunk.io --max-depth 3
  site-drift diff --path snapshots/docs.trunk.io-1a2b3c4.json --url https://docs.trunk.io
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from jinja2 import TemplateError

from site_drift import __version__
from site_drift.config import CrawlConfig, load_config
from site_drift.diff import DiffResult
from site_drift.engine import check_drift, take_snapshot
from site_drift.errors import SnapshotError
from site_drift.logger import DEFAULT_FORMAT, init_logging, logger
from site_drift.report.html_report import render_html
from site_drift.report.json_report import render_json
from site_drift.snapshot import SnapshotStore
from site_drift.utils import url_id

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
RENDERERS = click.Choice(["browser", "http"])


def print_error(message: str, usage: Optional[str] = None) -> NoReturn:
    if usage:
        click.echo(usage, err=True)
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _config(ctx: click.Context, **overrides: Any) -> CrawlConfig:
    try:
        return load_config(ctx.obj['config_path'], **overrides)
    except (OSError, ValueError) as e:
        print_error(f'Failed to load configuration: {e}')


def _print_result(result: DiffResult) -> None:
    click.echo(f'Checked pages: {result.checked}')
    click.echo(f'Missing pages ({len(result.missing_pages)}):')
    for url in sorted(result.missing_pages):
        click.echo(f'  {url}')
    click.echo(f'Retitled pages ({len(result.retitled_pages)}):')
    for url in sorted(result.retitled_pages):
        change = result.title_changes.get(url)
        if change is None:
            click.echo(f'  {url}')
        else:
            click.echo(f'  {url}: "{change.recorded}" -> "{change.live}"')


def _check_revision(ctx, param, value):
    # "-" separates the url id from the revision in snapshot names
    if value is not None and "-" in value:
        raise click.BadParameter('must not contain "-"')
    return value


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteDrift, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file (stderr only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SiteDrift: snapshot a documentation site and detect structural drift."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('snapshot', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-u', 'url', envvar='BASE_URL', default=None, help='Site to crawl [env: BASE_URL]')
@click.option(
    '--rate-limit-delay', 'rate_limit_delay',
    envvar='RATE_LIMIT_DELAY', type=click.IntRange(min=0), default=None,
    help='Minimum delay before each fetch, ms [env: RATE_LIMIT_DELAY, default: 50]'
)
@click.option(
    '--max-depth', 'max_depth',
    envvar='MAX_DEPTH', type=click.IntRange(min=0), default=None,
    help='Maximum crawl depth [env: MAX_DEPTH, default: 5]'
)
@click.option(
    '--out-dir', '-o', 'out_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Snapshot directory [default: snapshots]'
)
@click.option('--revision', default=None, callback=_check_revision,
              help='Revision marker of the snapshot name, without "-" (default: git short hash)')
@click.option('--renderer', type=RENDERERS, default=None, help='Page fetcher [default: browser]')
@click.option('--timeout', 'fetch_timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Timeout of a single fetch, seconds')
@click.pass_context
def snapshot(ctx, url, rate_limit_delay, max_depth, out_dir, revision, renderer, fetch_timeout):
    """Crawl the site and save its tree as a JSON snapshot."""
    cfg = _config(
        ctx,
        base_url=url,
        rate_limit_delay=rate_limit_delay,
        max_depth=max_depth,
        snapshots_dir=out_dir,
        renderer=renderer,
        fetch_timeout=fetch_timeout,
    )
    click.echo(f'Crawling {cfg.base_url} (max depth {cfg.max_depth})', err=True)
    try:
        run = asyncio.run(take_snapshot(cfg, revision=revision))
    except Exception as e:
        logger.debug('Snapshot failed', exc_info=True)
        print_error(f'Snapshot failed: {e}')

    click.echo(
        f'Pages: {run.stats.pages_fetched} fetched, {run.stats.pages_failed} failed, '
        f'{run.stats.pages_skipped} beyond max depth',
        err=True,
    )
    click.echo(str(run.path))


@cli.command('diff', context_settings=CONTEXT_SETTINGS)
@click.option('--path', '-p', 'snapshot_path', default=None, type=click.Path(dir_okay=False, path_type=Path),
              help='Snapshot file to compare [default: newest snapshot of --url]')
@click.option('--snapshots-dir', '-d', 'snapshots_dir', default=None,
              type=click.Path(file_okay=False, path_type=Path),
              help='Directory searched when --path is omitted [default: snapshots]')
@click.option('--url', '-u', 'url', default=None, help='Base URL of the live site')
@click.option('--json', '-j', 'json_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Save a JSON drift report')
@click.option('--html', 'html_output', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Save an HTML drift report')
@click.option('--template', '-t', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Directory with a custom drift_report.html.j2')
@click.option('--rate-limit-delay', 'rate_limit_delay', envvar='RATE_LIMIT_DELAY',
              type=click.IntRange(min=0), default=None, help='Minimum delay before each fetch, ms')
@click.option('--renderer', type=RENDERERS, default=None, help='Page fetcher [default: browser]')
@click.option('--fail-on-drift', is_flag=True, help='Exit with status 1 when drift is found')
@click.pass_context
def diff(ctx, snapshot_path, snapshots_dir, url, json_output, html_output, template_dir,
         rate_limit_delay, renderer, fail_on_drift):
    """Compare a stored snapshot with the live site."""
    if not url:
        print_error('--url is required', usage=ctx.get_usage())

    cfg = _config(ctx, rate_limit_delay=rate_limit_delay, renderer=renderer, snapshots_dir=snapshots_dir)
    if snapshot_path is None:
        snapshot_path = SnapshotStore(cfg.snapshots_dir).latest(url_id(url))
        if snapshot_path is None:
            print_error(f'No snapshot of {url} in {cfg.snapshots_dir}; pass --path', usage=ctx.get_usage())
        click.echo(f'Using snapshot {snapshot_path}', err=True)
    try:
        result = asyncio.run(check_drift(snapshot_path, url, cfg))
    except SnapshotError as e:
        print_error(f'Cannot read snapshot: {e}')
    except Exception as e:
        logger.debug('Diff failed', exc_info=True)
        print_error(f'Diff failed: {e}')

    _print_result(result)

    if json_output:
        try:
            saved_json = render_json(result, json_output, snapshot=str(snapshot_path), base_url=url)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(result, html_output, template_dir, snapshot=str(snapshot_path), base_url=url)
            click.echo(f'HTML report: {saved_html}')
        except (OSError, TemplateError) as e:
            print_error(f'Failed to save HTML report: {e}')

    if fail_on_drift and result.has_drift:
        ctx.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the effective configuration as JSON."""
    cfg = _config(ctx)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

"""site_drift.report: JSON and HTML drift reports used by the CLI."""

from site_drift.report.html_report import render_html
from site_drift.report.json_report import render_json

__all__ = ["render_json", "render_html"]

"""site_drift.report.html_report: HTML drift report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, PackageLoader, select_autoescape

from site_drift.diff import DiffResult

TEMPLATE_NAME = "drift_report.html.j2"


def _environment(template_dir: Union[Path, str, None]) -> Environment:
    if template_dir is None:
        loader = PackageLoader("site_drift.report", "templates")
    else:
        loader = FileSystemLoader(str(template_dir))
    return Environment(loader=loader, autoescape=select_autoescape(["html", "xml", "j2"]))


def render_html(
    result: DiffResult,
    output_path: Union[Path, str],
    template_dir: Union[Path, str, None] = None,
    *,
    snapshot: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Path:
    """Render the drift report and save it at *output_path*.

    Args:
        result: DiffResult of a diff run.
        output_path: path of the resulting HTML file.
        template_dir: directory holding ``drift_report.html.j2``; the bundled
            template is used when omitted.

    Returns:
        Path of the saved HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    template = _environment(template_dir).get_template(TEMPLATE_NAME)
    context: dict[str, Any] = {
        "snapshot": snapshot,
        "base_url": base_url,
        "checked": result.checked,
        "missing_pages": sorted(result.missing_pages),
        "title_changes": sorted(result.title_changes.items()),
        "has_drift": result.has_drift,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path

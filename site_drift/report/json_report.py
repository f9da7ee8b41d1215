# site_drift/report/json_report.py

"""
JSON drift report for SiteDrift.

Serialises a DiffResult to a file.
"""
import json
from pathlib import Path
from typing import Optional

from site_drift.diff import DiffResult


def render_json(
    result: DiffResult,
    output_path: Path | str,
    *,
    snapshot: Optional[str] = None,
    base_url: Optional[str] = None,
) -> Path:
    """
    Save *result* as JSON at *output_path*.

    :param result: DiffResult of a diff run
    :param output_path: path of the JSON file
    :param snapshot: snapshot file the result was computed from
    :param base_url: live site the snapshot was compared with
    :return: Path of the saved file

    Example:
    ```python
    from site_drift.report.json_report import render_json
    report_path = render_json(result, 'reports/drift.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = {"snapshot": snapshot, "base_url": base_url, **result.to_dict()}

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output

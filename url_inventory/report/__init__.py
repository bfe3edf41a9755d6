# File: url_inventory/report/__init__.py
"""url_inventory.report: экспорт результатов проверки (CSV, JSON, HTML) для CLI и тестов."""

from __future__ import annotations

from url_inventory.report.csv_report import render_csv
from url_inventory.report.html_report import render_html
from url_inventory.report.json_report import render_json

__all__ = ["render_csv", "render_json", "render_html"]

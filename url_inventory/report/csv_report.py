# url_inventory/report/csv_report.py

"""
Экспорт результатов проверки в CSV: строки ``URL,Status``.
"""
import csv
from pathlib import Path
from typing import Iterable

from url_inventory.prober import ProbeResult

CSV_HEADER = ("URL", "Status")


def render_csv(results: Iterable[ProbeResult], output_path: Path | str) -> Path:
    """
    Сохраняет результаты проверки в CSV по указанному пути.

    Статус — HTTP-код, либо ``Error`` для сетевых ошибок.
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows(result.as_row() for result in results)

    return output

# File: url_inventory/report/html_report.py
"""url_inventory.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from url_inventory.prober import ProbeResult

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    results: Iterable[ProbeResult],
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        results: результаты проверки статусов.
        output_path: путь к итоговому HTML-файлу.
        template_dir: директория с шаблоном ``report.html.j2``;
            по умолчанию используется встроенный шаблон пакета.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    rows = [result.to_dict() for result in results]
    context: dict[str, Any] = {
        "rows": rows,
        "summary": Counter(row["outcome"] for row in rows),
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path

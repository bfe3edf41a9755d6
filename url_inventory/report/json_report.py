# url_inventory/report/json_report.py

"""
Генерация JSON-отчёта для URL Inventory.

Сериализация списка ProbeResult в файл.
"""
import json
from pathlib import Path
from typing import Iterable

from url_inventory.prober import ProbeResult


def render_json(results: Iterable[ProbeResult], output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет результаты в формате JSON по указанному пути.

    :param results: результаты проверки статусов
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 пробела
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [result.to_dict() for result in results]

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output

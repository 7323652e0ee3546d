# cache_warmer/report/json_report.py

"""
Генерация JSON-отчёта для проекта cache_warmer.

Сериализация объекта WarmReport в файл.
"""
import json
from pathlib import Path

from cache_warmer.aggregator import WarmReport


def render_json(report: WarmReport, output_path: Path | str, *, include_resources: bool = False) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект WarmReport с итогами прогона
    :param output_path: путь к JSON-файлу
    :param include_resources: добавить список всех обработанных URI
    :return: Path сохранённого файла

    Пример:
    ```python
    from cache_warmer.report.json_report import render_json
    report_path = render_json(report, 'reports/warm.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report.as_dict()
    if include_resources:
        data["resources"] = [
            {
                "uri": r.uri,
                "cache_status": r.cache_status.value,
                "http_status": r.http_status,
                "captcha_found": r.captcha_found,
                "error": r.error,
            }
            for r in report.resources or []
        ]

    # Запись в файл с отступами и Unicode
    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output

from __future__ import annotations

import json
from typing import Any


def dumps(obj: Any, *, indent: int | None = None) -> str:
    """
    Минимальный JSON-дампер для ответов CLI.
    ensure_ascii=False; завершающий перевод строки добавляет сам CLI.
    """
    return json.dumps(obj, ensure_ascii=False, indent=indent)

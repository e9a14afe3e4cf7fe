from __future__ import annotations

JSON_TYPE = dict[str, "JSON_TYPE"] | list["JSON_TYPE"] | str | int | float | bool | None
JSON_DICT_TYPE = dict[str, JSON_TYPE]

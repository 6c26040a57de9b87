"""Reference list of train lines and their stations.

Stations are offered per line when a visit is registered against a station;
anything else is entered as free text.
"""

from __future__ import annotations

# fmt: off
TRAIN_LINES: dict[str, tuple[str, ...]] = {
    "山手線": (
        "東京", "神田", "秋葉原", "御徒町", "上野", "鶯谷", "日暮里", "西日暮里", "田端",
        "駒込", "巣鴨", "大塚", "池袋", "目白", "高田馬場", "新大久保", "新宿", "代々木",
        "原宿", "渋谷", "恵比寿", "目黒", "五反田", "大崎", "品川", "田町", "浜松町",
        "新橋", "有楽町",
    ),
    "中央線": (
        "東京", "神田", "御茶ノ水", "四ツ谷", "新宿", "中野", "高円寺", "阿佐ヶ谷", "荻窪",
        "西荻窪", "吉祥寺", "三鷹", "武蔵境", "東小金井", "武蔵小金井", "国分寺",
        "西国分寺", "国立", "立川", "日野", "豊田", "八王子",
    ),
    "京浜東北線": (
        "大宮", "さいたま新都心", "与野", "北浦和", "浦和", "南浦和", "蕨", "西川口",
        "川口", "赤羽", "東十条", "王子", "上中里", "田端", "西日暮里", "日暮里", "鶯谷",
        "上野", "御徒町", "秋葉原", "神田", "東京", "有楽町", "新橋", "浜松町", "田町",
        "高輪ゲートウェイ", "品川", "大井町", "大森", "蒲田",
    ),
}
# fmt: on


def line_names() -> list[str]:
    """Line names in sorted order."""
    return sorted(TRAIN_LINES)


def default_line() -> str:
    """First line in sorted order, used as the initial selection."""
    return line_names()[0]


def stations_for(line: str) -> list[str]:
    """Stations on `line`, empty for an unknown line."""
    return list(TRAIN_LINES.get(line, ()))


def lines_for_station(station: str) -> list[str]:
    """Sorted names of every line serving `station`."""
    return [name for name in line_names() if station in TRAIN_LINES[name]]


def resolve_station(
    line: str | None, station: str | None, custom: str | None = None
) -> tuple[str | None, str | None]:
    """Return `(station_name, station_line)` for a form selection.

    A non-blank `custom` entry wins and carries no line. Otherwise the
    registered `station` is used with its `line`; a station that is not on
    that line raises ValueError.
    """
    custom_name = (custom or "").strip()
    if custom_name:
        return custom_name, None
    if not station:
        return None, None
    if line is None or station not in TRAIN_LINES.get(line, ()):
        raise ValueError(f"Station {station!r} is not on line {line!r}")
    return station, line

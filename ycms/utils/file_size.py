"""日志文件大小解析

LoggingSettings.file_max_bytes 使用 "10MB" 这类写法，这里换算成字节数。

使用示例:
    from ycms.utils import parse_file_size

    parse_file_size("10MB")   # 10485760
    parse_file_size("512k")   # 524288
"""

import re
from typing import Union

SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?)B?\s*$", re.IGNORECASE)

UNIT_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4}


def parse_file_size(value: Union[str, int, float]) -> int:
    """把 "数值 + 可选单位" 换算为字节数，单位为 B/K/KB/M/MB/G/GB/T/TB，不区分大小写

    Raises:
        ValueError: 为空、缺少数值或单位无法识别
    """
    if isinstance(value, (int, float)):
        return int(value)

    match = SIZE_PATTERN.match(value)
    if match is None:
        raise ValueError(f"无法解析日志文件大小: {value!r}")
    number, unit = match.groups()
    return int(float(number) * UNIT_MULTIPLIERS[unit.upper()])

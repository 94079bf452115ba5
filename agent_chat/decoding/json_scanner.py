"""增量提取自定界 JSON 对象。

JSON 分帧流（如 n8n 的 chunked 输出）由首尾相接的 `{...}` 对象组成，
没有外层包裹也没有长度前缀。调用方每读到一批新文本就把累积缓冲区
交给本模块扫描一次，拿回已完整的对象和尚未消费的剩余部分。

扫描是一个显式状态机（normal / in_string / in_string_escaped）加一个
花括号深度计数器：字符串字面量里的花括号和转义引号都不会影响深度。
函数本身不保存任何状态，同一个缓冲区反复调用得到相同结果。
"""

import json
from dataclasses import dataclass
from typing import Any, List, Literal, Tuple

_NORMAL = 0
_IN_STRING = 1
_IN_STRING_ESCAPED = 2


@dataclass
class JsonSegment:
    """扫描结果中的一段：已解析的对象，或对象之外的原始文本。"""

    kind: Literal["object", "text"]
    value: Any


def scan_json_segments(buffer: str) -> Tuple[List[JsonSegment], str]:
    """按出现顺序返回对象与对象间文本，以及未消费的剩余缓冲区。

    - 候选对象解析失败时立即停止：该候选及其后所有内容作为剩余部分返回，
      等待下一次读到更多数据后重试。
    - 扫描结束时仍有未闭合的对象，则剩余部分从该对象起始处开始。
    - 字符串状态只在对象内部 (depth > 0) 跟踪：对象之外的引号不会进入字符串模式，
      对象之外多余的 `}` 也不会让深度变为负数，二者都按普通文本处理。
      因此含有奇数个引号的普通文本不会吞掉其后的 JSON 对象。
    """

    segments: List[JsonSegment] = []
    state = _NORMAL
    depth = 0
    start = -1
    text_start = 0

    for i, ch in enumerate(buffer):
        if state == _IN_STRING_ESCAPED:
            state = _IN_STRING
            continue
        if state == _IN_STRING:
            if ch == "\\":
                state = _IN_STRING_ESCAPED
            elif ch == '"':
                state = _NORMAL
            continue

        if ch == '"' and depth > 0:
            state = _IN_STRING
        elif ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                try:
                    obj = json.loads(buffer[start:i + 1])
                except json.JSONDecodeError:
                    if start > text_start:
                        segments.append(JsonSegment("text", buffer[text_start:start]))
                    return segments, buffer[start:]
                if start > text_start:
                    segments.append(JsonSegment("text", buffer[text_start:start]))
                segments.append(JsonSegment("object", obj))
                text_start = i + 1
                start = -1

    if depth > 0:
        if start > text_start:
            segments.append(JsonSegment("text", buffer[text_start:start]))
        return segments, buffer[start:]
    if text_start < len(buffer):
        segments.append(JsonSegment("text", buffer[text_start:]))
    return segments, ""


def extract_json_objects(buffer: str) -> Tuple[List[Any], str]:
    """从缓冲区提取所有完整的顶层 JSON 对象。

    Returns:
        (objects, rest)：按顺序解析出的对象列表，以及需要保留到下一次读取的剩余文本。
        整个缓冲区扫描完且深度回到 0 时 rest 为空字符串。
    """

    segments, rest = scan_json_segments(buffer)
    return [seg.value for seg in segments if seg.kind == "object"], rest

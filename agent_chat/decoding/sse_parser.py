"""SSE (Server-Sent Events) 行解析。

只处理已经解码成文本的缓冲区：以空行 ("\n\n") 切分事件，
从每个事件中取出 `data:` 字段的值。`[DONE]` 是结束标记，不是内容。
"""

from typing import List, Tuple

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"
EVENT_SEPARATOR = "\n\n"


def parse_sse_buffer(buffer: str) -> Tuple[List[str], str]:
    """解析缓冲区中所有完整的 SSE 事件。

    Returns:
        (payloads, rest)：按顺序排列的非空 data 值，以及尚未遇到空行分隔的尾部。
    """

    # CRLF 分帧的流统一成 LF；孤立的尾部 "\r" 留给下一次读取拼接
    buffer = buffer.replace("\r\n", "\n")
    payloads: List[str] = []
    while True:
        idx = buffer.find(EVENT_SEPARATOR)
        if idx == -1:
            break
        event, buffer = buffer[:idx], buffer[idx + len(EVENT_SEPARATOR):]
        payloads.extend(_event_payloads(event))
    return payloads, buffer


def _event_payloads(event: str) -> List[str]:
    out: List[str] = []
    for line in event.split("\n"):
        trimmed = line.strip()
        if not trimmed.startswith(DATA_PREFIX):
            continue
        value = trimmed[len(DATA_PREFIX):].strip()
        if not value or value == DONE_SENTINEL:
            continue
        out.append(value)
    return out

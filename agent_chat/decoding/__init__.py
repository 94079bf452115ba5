"""响应解码管线。

该包下的模块负责：
- json_scanner: 从累积缓冲区中增量提取完整的 JSON 对象。
- sse_parser: 按空行切分 SSE 事件并提取 data 字段。
- router: 根据 content-type 与流式模式选择解码策略。
- stream_loop: 读取字节流、增量解码并产出 ContentDelta。
- non_streaming: 一次性响应的回复提取。
"""

from agent_chat.decoding.json_scanner import extract_json_objects, scan_json_segments
from agent_chat.decoding.non_streaming import NO_REPLY_TEXT, decode_non_streaming
from agent_chat.decoding.router import select_stream_format
from agent_chat.decoding.sse_parser import parse_sse_buffer
from agent_chat.decoding.stream_loop import StreamDecodeLoop, decode_stream

__all__ = [
    "extract_json_objects",
    "scan_json_segments",
    "parse_sse_buffer",
    "select_stream_format",
    "StreamDecodeLoop",
    "decode_stream",
    "decode_non_streaming",
    "NO_REPLY_TEXT",
]

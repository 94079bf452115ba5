"""流式解码循环。

驱动字节读取：每读到一块字节就用有状态的增量 UTF-8 解码器转成文本
（跨块切开的多字节字符不会被破坏），追加到缓冲区，交给选定格式的解析器，
再用解析器返回的剩余部分替换缓冲区。每个解析出的单元产出一个 ContentDelta。

解码循环只负责产出增量，不直接修改消息；增量的应用由唯一的消费者
（ChatSession）按到达顺序完成。
"""

import codecs
from typing import Any, Iterable, Iterator, List

from agent_chat.decoding.json_scanner import scan_json_segments
from agent_chat.decoding.sse_parser import parse_sse_buffer
from agent_chat.domain.models import ContentDelta, StreamFormat
from agent_chat.infrastructure.logging.logger import logger

ITEM_TYPE = "item"


def item_content(obj: Any) -> str:
    """JSON 分帧对象中只有 {"type": "item", "content": str} 形状的对象贡献文本。"""

    if isinstance(obj, dict) and obj.get("type") == ITEM_TYPE and isinstance(obj.get("content"), str):
        return obj["content"]
    return ""


class StreamDecodeLoop:
    """单个响应的解码循环，实例只使用一次。

    Attributes:
        fmt: 本次响应选定的 StreamFormat。
        target_message_id: 增量要追加到的 assistant 消息 id。
        delta_count: 已产出的增量数。
        discarded: 流结束时被丢弃的未完成尾部（JSON 片段或未终止的 SSE 事件）。
    """

    def __init__(self, fmt: StreamFormat, target_message_id: str, encoding: str = "utf-8"):
        self.fmt = fmt
        self.target_message_id = target_message_id
        self.delta_count = 0
        self.discarded = ""
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""
        # JSON 分帧模式下对象之间的原始文本状态
        self._run_has_text = False
        self._pending_ws = ""

    def run(self, chunks: Iterable[bytes]) -> Iterator[ContentDelta]:
        for chunk in chunks:
            if not chunk:
                continue
            yield from self._feed(self._decoder.decode(chunk, final=False))
        yield from self._feed(self._decoder.decode(b"", final=True))
        self._finish()

    def _feed(self, text: str) -> Iterator[ContentDelta]:
        if not text:
            return
        if self.fmt is StreamFormat.PLAIN_TEXT:
            pieces = [text]
        elif self.fmt is StreamFormat.SSE:
            pieces, self._buffer = parse_sse_buffer(self._buffer + text)
        else:
            pieces = self._json_framed(self._buffer + text)
        for piece in pieces:
            if piece:
                self.delta_count += 1
                yield ContentDelta(target_message_id=self.target_message_id, text=piece)

    def _json_framed(self, buffer: str) -> List[str]:
        """对象按 item 形状取文本，对象之外的文本按原样透传。

        例外：两个对象之间（或流首尾）只含空白的文本视为分帧而丢弃，
        整个响应体只有空白时也不会产出增量；文本段开头的空白会暂存，
        直到确认该段含有非空白字符，保证结果与读取分块方式无关。
        """

        segments, self._buffer = scan_json_segments(buffer)
        pieces: List[str] = []
        for seg in segments:
            if seg.kind == "object":
                # 对象之间只有空白时视为分帧，丢弃
                self._run_has_text = False
                self._pending_ws = ""
                pieces.append(item_content(seg.value))
            elif self._run_has_text:
                pieces.append(seg.value)
            elif seg.value.strip():
                pieces.append(self._pending_ws + seg.value)
                self._pending_ws = ""
                self._run_has_text = True
            else:
                self._pending_ws += seg.value
        return pieces

    def _finish(self) -> None:
        if self._buffer:
            self.discarded = self._buffer
            logger.debug(
                "Discarding incomplete trailing unit",
                extra={"extra": {"format": self.fmt.value, "pending_chars": len(self._buffer)}},
            )
        self._buffer = ""
        self._pending_ws = ""


def decode_stream(
    chunks: Iterable[bytes],
    fmt: StreamFormat,
    target_message_id: str,
) -> Iterator[ContentDelta]:
    """便捷入口：用新的 StreamDecodeLoop 解码一个字节块序列。"""

    return StreamDecodeLoop(fmt, target_message_id).run(chunks)

"""UCI engine package: wire protocol, process channel and analysis session."""

from chesslens.engine.channel import EngineChannel, LineBuffer, ProcessChannel
from chesslens.engine.protocol import InfoRecord, Score, ScoreKind, parse_info_line
from chesslens.engine.session import (
    AnalysisLine,
    AnalysisUpdate,
    ProtocolSession,
    SessionOptions,
    SessionState,
)

__all__ = [
    "AnalysisLine",
    "AnalysisUpdate",
    "EngineChannel",
    "InfoRecord",
    "LineBuffer",
    "ProcessChannel",
    "ProtocolSession",
    "Score",
    "ScoreKind",
    "SessionOptions",
    "SessionState",
    "parse_info_line",
]

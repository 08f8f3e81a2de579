"""
G-code front end for cncview

Main components:
- tokenizer.py: comment stripping and word scanning
- state.py: modal state threaded through the parse
- commands.py: typed commands emitted per line
- parser.py: modal parser applying the word ignore rules
- utils.py: arc centre and sweep geometry
"""

from .commands import ArcCommand, Command, IgnoredCommand, MoveCommand
from .parser import ModalParser
from .state import DistanceMode, ModalState, MotionMode
from .tokenizer import GcodeToken, LineTokens, scan_line, scan_program

__all__ = [
    "ArcCommand",
    "Command",
    "IgnoredCommand",
    "MoveCommand",
    "ModalParser",
    "ModalState",
    "MotionMode",
    "DistanceMode",
    "GcodeToken",
    "LineTokens",
    "scan_line",
    "scan_program",
]

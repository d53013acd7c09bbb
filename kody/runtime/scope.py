"""
Variable scopes for the evaluator.

A ``ScopeStack`` is a list of frames, outermost (global) first. Blocks push
and pop frames; a function call gets a new stack that shares only the
global frame with its caller.
"""

from typing import Dict, List, Optional

from ..objects import Value

Frame = Dict[str, Value]


class ScopeStack:
    """Ordered variable frames of one evaluation."""

    def __init__(self, global_frame: Optional[Frame] = None):
        self.frames: List[Frame] = [global_frame if global_frame is not None else {}]

    @property
    def global_frame(self) -> Frame:
        return self.frames[0]

    @property
    def depth(self) -> int:
        return len(self.frames)

    def push(self, frame: Optional[Frame] = None) -> None:
        self.frames.append(frame if frame is not None else {})

    def pop(self) -> Frame:
        if len(self.frames) == 1:
            raise IndexError("Cannot pop the global frame")
        return self.frames.pop()

    def lookup(self, name: str) -> Optional[Value]:
        """Innermost binding of ``name``, or None."""
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        return None

    def assign(self, name: str, value: Value) -> None:
        """Overwrite the innermost existing binding, else bind in the innermost frame."""
        for frame in reversed(self.frames):
            if name in frame:
                frame[name] = value
                return
        self.frames[-1][name] = value

    def for_call(self, parameters: Frame) -> "ScopeStack":
        """Fresh stack for a function call: the global frame plus the parameters."""
        stack = ScopeStack(self.global_frame)
        stack.push(parameters)
        return stack

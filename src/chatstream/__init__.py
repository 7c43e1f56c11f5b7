"""chatstream - event processing core for assistant chat clients.

This package turns the line-delimited stream-json output of a command-line
AI assistant into display text, token and cost accounting, correlated tool
calls and results, and file-system operations for undo/redo.

Main modules:
    - runner: Stream processor, event decoding, result formatting
    - operations: Operation extraction and the in-memory operation store
    - context: Token accounting and context window tracking
    - cli: Command-line interface (chatstream command)
"""

__version__ = "0.1.0"

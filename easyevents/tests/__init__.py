"""
Test suite for the event dispatch engine.

Focus areas:
- Dispatch order (append -> handle -> process) and depth-first nesting
- Handler contract validation
- Stream processor state
- Replay without persistence
- Durable stores and hash chain integrity
"""

"""
easyevents CLI

Commands:
- easyevents log tail/inspect/verify/stats - JSONL event log operations
- easyevents version
"""

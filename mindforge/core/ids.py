import uuid

def new_id(prefix: str, size: int = 16) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:size]}"

"""
ID generation utilities & it provides:
- Run IDs (run_*), one per analyze-goal request, used to tag every log line
- Trace event IDs (tr_*)

The main purpose:
Correlate the log lines and trace events of one run.
"""

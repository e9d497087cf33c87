from typing import Any, Awaitable, Callable

# Tool executors are keyed by the pipeline step they serve
Tool = Callable[..., Awaitable[Any]]

TOOLS: dict[str, Tool] = {}

def register(step: str):
    def deco(fn: Tool):
        if step in TOOLS and TOOLS[step] is not fn:
            raise ValueError(f"Step {step} already has a tool: {TOOLS[step].__name__}")
        TOOLS[step] = fn
        return fn
    return deco

def get_tool(step: str) -> Tool:
    if step not in TOOLS:
        raise KeyError(f"Unknown tool: {step}. Known: {list(TOOLS.keys())}")
    return TOOLS[step]

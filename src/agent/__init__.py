"""
agent - Tool-dispatch agent layer.

Contains tools, the tool registry, the completion invoker, and the executor
that runs decide → dispatch → finalize. Depends on domain/ and application/.
Never imports from infrastructure/.
"""

"""
domain - Value objects, events, ports and the exception taxonomy.

No LangChain, no HTTP, no framework imports.
"""

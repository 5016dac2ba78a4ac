"""
infrastructure - Vendor-specific code: configuration, chat model
construction, logging setup. Never imported by application/ or agent/.
"""

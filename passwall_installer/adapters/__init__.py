"""
Adapters — thin wrappers around the router's external tools.

Each adapter runs commands through ``CommandRunner`` and hands back
receipts or parsed values. Nothing above this layer calls subprocess.
"""

"""
Per-domain modules. Each one owns its models, service functions and JSON blueprint.
"""

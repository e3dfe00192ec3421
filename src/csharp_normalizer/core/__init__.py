"""
Engine, run results and tracing.
"""

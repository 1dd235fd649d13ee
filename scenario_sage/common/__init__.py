"""
Package marker for shared settings and logging helpers in `scenario_sage.common`.
"""

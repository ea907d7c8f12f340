"""
Core modules: storage, layout, statistics, localization and runtime state
"""

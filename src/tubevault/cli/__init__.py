"""
TubeVault command line interface.
"""

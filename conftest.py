"""
Root pytest configuration: registers the gas_snapshot fixtures.
"""

pytest_plugins = ["gas_snapshot.plugin"]

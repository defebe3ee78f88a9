"""erpdeploy CLI commands"""

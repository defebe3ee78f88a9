"""erpdeploy - single-host ERPNext provisioning"""

__version__ = "1.0.0"

"""ops-tools: personal DevOps toolbox with a git secret scanning orchestrator."""

__version__ = "0.1.0"
